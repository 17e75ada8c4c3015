"""
音频片段存储 - 从目录树中列出和加载 DCA 片段

目录结构:
    <root_dir>/Songs/*.dca
    <root_dir>/Stories/*.dca
    <root_dir>/Transitions/*.dca
"""

import logging
import os
from typing import Dict, List, Optional

from vegasbot.core.errors import LoadError
from vegasbot.core.interfaces import Clip, ClipCategory, IClipStore
from .dca_codec import decode_frames


DEFAULT_CATEGORY_DIRS: Dict[ClipCategory, str] = {
    ClipCategory.SONG: "Songs",
    ClipCategory.STORY: "Stories",
    ClipCategory.TRANSITION: "Transitions",
}


class DirectoryClipStore(IClipStore):
    """
    基于目录的片段存储实现

    每个分类对应根目录下的一个子目录，片段名称即文件名。
    """

    def __init__(self, root_dir: str, category_dirs: Optional[Dict[ClipCategory, str]] = None):
        """
        初始化片段存储

        Args:
            root_dir: 音频根目录
            category_dirs: 分类到子目录名的映射
        """
        self.logger = logging.getLogger("vegasbot.clips.store")
        self.root_dir = root_dir
        self.category_dirs = dict(DEFAULT_CATEGORY_DIRS)
        if category_dirs:
            self.category_dirs.update(category_dirs)

    def _category_path(self, category: ClipCategory) -> str:
        return os.path.join(self.root_dir, self.category_dirs[category])

    def list_clips(self, category: ClipCategory) -> List[str]:
        """
        列出分类下的所有片段名称

        Args:
            category: 片段分类

        Returns:
            按名称排序的文件名列表

        Raises:
            LoadError: 分类目录不存在
        """
        path = self._category_path(category)
        if not os.path.isdir(path):
            raise LoadError(f"片段目录不存在: {path}")

        names = sorted(
            entry for entry in os.listdir(path)
            if os.path.isfile(os.path.join(path, entry))
        )
        self.logger.debug(f"分类 {category.value} 中找到 {len(names)} 个片段")
        return names

    def load_clip(self, category: ClipCategory, name: str) -> Clip:
        """
        加载并解码一个片段

        Args:
            category: 片段分类
            name: 片段文件名

        Returns:
            解码后的片段

        Raises:
            LoadError: 文件缺失、无法读取或格式错误
        """
        file_path = os.path.join(self._category_path(category), name)

        try:
            with open(file_path, "rb") as clip_file:
                data = clip_file.read()
        except OSError as e:
            raise LoadError(f"无法读取片段 {file_path}: {e}", clip_name=name) from e

        frames = decode_frames(data, clip_name=name)
        self.logger.debug(f"加载片段 {name}: {len(frames)} 帧")
        return Clip(name=name, frames=tuple(frames))

"""
片段库 - 启动时加载的只读音频上下文

持有歌曲、故事、过渡三个分类以及唯一的开场片段，
构建后注入播放引擎和命令层，不作为模块级全局变量存在。
"""

import logging
from typing import Dict, List, Optional

from vegasbot.core.errors import LoadError
from vegasbot.core.interfaces import Clip, ClipCategory, IClipStore


DEFAULT_OPENING_CLIP = "Opening.dca"


class ClipLibrary:
    """
    只读片段库

    开场片段不属于任何分类，每个会话只在索引 0 播放一次。
    """

    def __init__(
        self,
        songs: List[Clip],
        stories: List[Clip],
        transitions: List[Clip],
        opening: Clip
    ):
        """
        初始化片段库

        Args:
            songs: 歌曲片段
            stories: 故事片段
            transitions: 过渡片段（不含开场片段）
            opening: 开场片段

        Raises:
            LoadError: 任一分类为空
        """
        self.logger = logging.getLogger("vegasbot.clips.library")

        for category, clips in (
            (ClipCategory.SONG, songs),
            (ClipCategory.STORY, stories),
            (ClipCategory.TRANSITION, transitions),
        ):
            if not clips:
                raise LoadError(f"分类 {category.value} 中没有任何片段")

        self._clips: Dict[ClipCategory, List[Clip]] = {
            ClipCategory.SONG: list(songs),
            ClipCategory.STORY: list(stories),
            ClipCategory.TRANSITION: list(transitions),
        }
        self._songs_by_name = {clip.name: clip for clip in songs}
        self._transition_names = {clip.name for clip in transitions}
        self.opening = opening

    @classmethod
    def load(cls, store: IClipStore, opening_name: str = DEFAULT_OPENING_CLIP) -> "ClipLibrary":
        """
        从片段存储加载完整的片段库

        开场片段放在过渡目录中，加载后从过渡分类里移除。

        Args:
            store: 片段存储
            opening_name: 开场片段文件名

        Returns:
            加载完成的片段库

        Raises:
            LoadError: 任一片段无法加载、开场片段缺失或分类为空
        """
        logger = logging.getLogger("vegasbot.clips.library")
        logger.info("🎞️ 开始加载音频片段...")

        songs = [store.load_clip(ClipCategory.SONG, name) for name in store.list_clips(ClipCategory.SONG)]
        stories = [store.load_clip(ClipCategory.STORY, name) for name in store.list_clips(ClipCategory.STORY)]

        opening: Optional[Clip] = None
        transitions: List[Clip] = []
        for name in store.list_clips(ClipCategory.TRANSITION):
            clip = store.load_clip(ClipCategory.TRANSITION, name)
            if name == opening_name:
                opening = clip
            else:
                transitions.append(clip)

        if opening is None:
            raise LoadError(f"开场片段不存在: {opening_name}", clip_name=opening_name)

        library = cls(songs, stories, transitions, opening)
        logger.info(
            f"✅ 音频片段加载完成 - 歌曲: {len(songs)}, 故事: {len(stories)}, "
            f"过渡: {len(transitions)}"
        )
        return library

    def clips(self, category: ClipCategory) -> List[Clip]:
        """获取分类下的全部片段"""
        return self._clips[category]

    def get_song(self, name: str) -> Clip:
        """按名称获取歌曲，不存在时抛出 KeyError"""
        return self._songs_by_name[name]

    def has_song(self, name: str) -> bool:
        return name in self._songs_by_name

    def has_transition(self, name: str) -> bool:
        return name in self._transition_names

    @property
    def songs(self) -> List[Clip]:
        return self._clips[ClipCategory.SONG]

    @property
    def stories(self) -> List[Clip]:
        return self._clips[ClipCategory.STORY]

    @property
    def transitions(self) -> List[Clip]:
        return self._clips[ClipCategory.TRANSITION]

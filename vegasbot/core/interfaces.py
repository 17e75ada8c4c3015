"""
核心接口定义 - 定义系统各模块间的抽象接口

提供依赖倒置的基础，播放引擎只依赖这里的抽象，
不直接接触 Discord 语音连接或磁盘上的音频文件。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class ClipCategory(Enum):
    """音频片段分类"""
    SONG = "song"
    STORY = "story"
    TRANSITION = "transition"


@dataclass(frozen=True)
class Clip:
    """
    音频片段数据类

    加载后不可变，frames 按播放顺序排列，每一帧都是预编码的 Opus 数据。
    """
    name: str
    frames: Tuple[bytes, ...]

    @property
    def frame_count(self) -> int:
        return len(self.frames)


class IClipStore(ABC):
    """音频片段存储接口 - 按分类列出和加载片段"""

    @abstractmethod
    def list_clips(self, category: ClipCategory) -> List[str]:
        """列出分类下的所有片段名称"""
        pass

    @abstractmethod
    def load_clip(self, category: ClipCategory, name: str) -> Clip:
        """加载指定片段，失败时抛出 LoadError"""
        pass


class ITransport(ABC):
    """语音传输接口 - 一个会话独占的语音连接"""

    guild_id: int
    channel_id: int

    @abstractmethod
    async def set_speaking(self, speaking: bool) -> None:
        """设置说话指示状态"""
        pass

    @abstractmethod
    async def send_frame(self, frame: bytes) -> None:
        """发送一帧音频，可能因节流而阻塞，失败时抛出 TransportError"""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """断开语音连接"""
        pass

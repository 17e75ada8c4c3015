"""
片段模块 - 音频片段的存储、解码和关联表

该模块负责启动时把磁盘上的 DCA 文件加载为只读的片段库。
"""

from .dca_codec import decode_frames, encode_frames
from .clip_store import DirectoryClipStore
from .clip_library import ClipLibrary, DEFAULT_OPENING_CLIP
from .link_table import TransitionLinkTable, DEFAULT_TRANSITION_LINKS

__all__ = [
    "decode_frames",
    "encode_frames",
    "DirectoryClipStore",
    "ClipLibrary",
    "DEFAULT_OPENING_CLIP",
    "TransitionLinkTable",
    "DEFAULT_TRANSITION_LINKS"
]

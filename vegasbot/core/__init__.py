"""
核心模块 - 接口、异常和事件处理
"""

from .errors import VegasBotError, LoadError, JoinError, UserNotPresentError, TransportError
from .interfaces import Clip, ClipCategory, IClipStore, ITransport

__all__ = [
    "VegasBotError",
    "LoadError",
    "JoinError",
    "UserNotPresentError",
    "TransportError",
    "Clip",
    "ClipCategory",
    "IClipStore",
    "ITransport"
]

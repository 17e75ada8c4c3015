"""
播放模块 - 处理播放编排、共享状态和语音传输

该模块负责电台播放的核心逻辑，包括片段选择、帧推送和语音连接管理。
"""

from .playback_state import PlaybackState
from .sequencer import PlaylistSequencer, category_for_index
from .playback_engine import PlaybackEngine
from .voice_manager import VoiceManager, DiscordVoiceTransport

__all__ = [
    "PlaybackState",
    "PlaylistSequencer",
    "category_for_index",
    "PlaybackEngine",
    "VoiceManager",
    "DiscordVoiceTransport"
]

"""
播放状态 - 播放引擎与命令处理器共享的控制标志

引擎任务和命令协程运行在同一个事件循环上，所有读写都发生在
await 点之间，因此无需加锁。状态变化通过 asyncio.Event 通知等待方。
"""

import asyncio
import logging
from typing import Optional


class PlaybackState:
    """
    播放状态

    包含 playing、paused 两个标志和一个待播放的指定歌曲槽位。
    paused 为 True 时 playing 也应为 True，这一点由命令层保证。
    """

    def __init__(self):
        self.logger = logging.getLogger("vegasbot.playback.state")
        self._playing = False
        self._paused = False
        self._forced_next_song: Optional[str] = None
        self._changed = asyncio.Event()

    @property
    def playing(self) -> bool:
        return self._playing

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def forced_next_song(self) -> Optional[str]:
        return self._forced_next_song

    @property
    def is_idle(self) -> bool:
        """既未播放也未暂停"""
        return not self._playing and not self._paused

    def reset(self) -> None:
        """会话开始时恢复初始状态"""
        self._playing = False
        self._paused = False
        self._forced_next_song = None
        self._notify()

    def start(self) -> None:
        self._playing = True
        self._notify()

    def stop(self) -> None:
        self._playing = False
        self._paused = False
        self._notify()

    def pause(self) -> None:
        self._paused = True
        self._notify()

    def resume(self) -> None:
        self._paused = False
        self._notify()

    def force_next_song(self, song_name: str) -> None:
        """设置下一个歌曲槽位必须播放的歌曲"""
        self._forced_next_song = song_name
        self.logger.debug(f"🔗 指定下一首歌曲: {song_name}")

    def take_forced_song(self) -> Optional[str]:
        """取出并清空指定歌曲槽位"""
        song_name = self._forced_next_song
        self._forced_next_song = None
        return song_name

    async def wait_while_paused(self, tick: float) -> bool:
        """
        暂停期间挂起，直到恢复播放或停止

        Args:
            tick: 单次等待的上限（秒）

        Returns:
            仍在播放返回 True，已停止返回 False
        """
        while self._playing and self._paused:
            self._changed.clear()
            try:
                await asyncio.wait_for(self._changed.wait(), timeout=tick)
            except asyncio.TimeoutError:
                pass

        return self._playing

    def _notify(self) -> None:
        self._changed.set()

    def snapshot(self) -> dict:
        return {
            'playing': self._playing,
            'paused': self._paused,
            'forced_next_song': self._forced_next_song
        }

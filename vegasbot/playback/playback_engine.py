"""
播放引擎 - 电台播放的核心控制器

生成无限延伸的播放列表，并按实时节奏把每个片段的帧推送到语音连接。
引擎在每一帧发送前检查共享播放状态，保证暂停、恢复和停止的响应延迟有界。
"""

import asyncio
import logging
import random
from typing import Optional

from vegasbot.clips.clip_library import ClipLibrary
from vegasbot.clips.link_table import TransitionLinkTable
from vegasbot.core.errors import TransportError
from vegasbot.core.interfaces import Clip, ITransport
from .playback_state import PlaybackState
from .sequencer import PlaylistSequencer


DEFAULT_TICK_INTERVAL = 0.25


class PlaybackEngine:
    """
    播放引擎实现

    状态机: Idle → Speaking → Idle。暂停只是 Speaking 内部观察到的标志，
    引擎唯一的退出方式是完全停止。
    """

    def __init__(
        self,
        library: ClipLibrary,
        link_table: TransitionLinkTable,
        state: Optional[PlaybackState] = None,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        rng: Optional[random.Random] = None,
        reseed_each_iteration: bool = True
    ):
        """
        初始化播放引擎

        Args:
            library: 只读片段库
            link_table: 过渡-歌曲关联表
            state: 共享播放状态
            tick_interval: 片段间隔及暂停轮询间隔（秒）
            rng: 随机源
            reseed_each_iteration: 每次选择前是否重新播种
        """
        self.logger = logging.getLogger("vegasbot.playback.engine")
        self.library = library
        self.link_table = link_table
        self.state = state or PlaybackState()
        self.tick_interval = tick_interval
        self.sequencer = PlaylistSequencer(
            library,
            link_table,
            self.state,
            rng=rng,
            reseed_each_iteration=reseed_each_iteration
        )

        self._session_task: Optional[asyncio.Task] = None
        self._transport: Optional[ITransport] = None
        self.session_lock = asyncio.Lock()

        self.logger.info("📻 播放引擎初始化完成")

    @property
    def is_active(self) -> bool:
        """是否有正在运行的会话"""
        return self._session_task is not None and not self._session_task.done()

    @property
    def transport(self) -> Optional[ITransport]:
        return self._transport

    async def start_session(self, transport: ITransport) -> asyncio.Task:
        """
        开始一个播放会话 (Idle → Speaking)

        Args:
            transport: 已连接的语音传输

        Returns:
            运行主循环的后台任务

        Raises:
            RuntimeError: 已有会话在运行
        """
        if self.is_active:
            raise RuntimeError("已有播放会话在运行")

        self.state.reset()
        self._transport = transport

        # 握手期间到达的 stop 由主循环的第一个间隔观察到
        self.state.start()
        try:
            await transport.set_speaking(True)
        except TransportError as e:
            self.logger.error(f"设置说话状态失败: {e}")
            await self._teardown(transport)
            raise

        self.logger.info(f"🎙️ 开始播放 - 服务器 {transport.guild_id}, 频道 {transport.channel_id}")

        self._session_task = asyncio.create_task(self._run_session(transport))
        return self._session_task

    async def wait_closed(self) -> None:
        """等待当前会话结束"""
        if self._session_task is not None:
            await asyncio.shield(self._session_task)

    async def shutdown(self) -> None:
        """停止当前会话并等待拆除完成"""
        if not self.is_active:
            return
        self.state.stop()
        await self.wait_closed()

    async def _run_session(self, transport: ITransport) -> None:
        """会话主循环，退出时总会执行拆除"""
        try:
            await self._main_loop(transport)
        except asyncio.CancelledError:
            self.logger.info("播放会话被取消")
            raise
        except Exception as e:
            self.logger.error(f"播放循环出错 - 服务器 {transport.guild_id}: {e}", exc_info=True)
        finally:
            await self._teardown(transport)

    async def _main_loop(self, transport: ITransport) -> None:
        index = 0
        while True:
            await asyncio.sleep(self.tick_interval)
            if not self.state.playing:
                break

            clip = self.sequencer.select(index)
            aborted = await self.stream_clip(transport, clip)
            if aborted:
                break

            index += 1

        self.logger.debug(f"主循环结束，共播放 {index} 个片段")

    async def stream_clip(self, transport: ITransport, clip: Clip) -> bool:
        """
        按顺序发送片段的所有帧

        Args:
            transport: 语音传输
            clip: 要播放的片段

        Returns:
            被停止（或发送失败）返回 True，正常播完返回 False
        """
        self.logger.debug(f"▶️ 播放片段: {clip.name} ({clip.frame_count} 帧)")

        for frame in clip.frames:
            if not self.state.playing:
                return True
            if self.state.paused:
                if not await self.state.wait_while_paused(self.tick_interval):
                    return True

            try:
                await transport.send_frame(frame)
            except TransportError as e:
                self.logger.error(f"发送音频帧失败 - {clip.name}: {e}")
                return True

        return False

    async def _teardown(self, transport: ITransport) -> None:
        """Speaking → Idle: 关闭说话状态并断开连接"""
        self.state.stop()

        try:
            await transport.set_speaking(False)
        except TransportError as e:
            self.logger.warning(f"关闭说话状态失败: {e}")

        try:
            await transport.disconnect()
        except TransportError as e:
            self.logger.warning(f"断开语音连接失败: {e}")

        if self._transport is transport:
            self._transport = None

        self.logger.info(f"🔇 停止播放 - 服务器 {transport.guild_id}")

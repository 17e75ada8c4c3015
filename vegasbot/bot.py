"""VegasBot 电台机器人主实现"""
import asyncio
import logging
import random
from typing import Optional
import discord
from discord.ext import commands

from vegasbot.clips.clip_library import ClipLibrary
from vegasbot.clips.clip_store import DirectoryClipStore
from vegasbot.clips.link_table import TransitionLinkTable
from vegasbot.commands.radio_commands import RadioCommands
from vegasbot.core.event_handler import EventHandler
from vegasbot.core.interfaces import ClipCategory, IClipStore
from vegasbot.playback.playback_engine import PlaybackEngine
from vegasbot.playback.playback_state import PlaybackState
from vegasbot.playback.voice_manager import VoiceManager
from vegasbot.utils.config_manager import ConfigManager


def build_clip_store(config: ConfigManager) -> DirectoryClipStore:
    """根据配置创建目录片段存储"""
    category_dirs = {
        ClipCategory(category): directory
        for category, directory in config.get_audio_category_dirs().items()
    }
    return DirectoryClipStore(config.get_audio_root_dir(), category_dirs)


class VegasBot:
    """
    VegasBot 电台机器人主实现类。

    启动时一次性加载片段库和关联表，构建播放引擎和命令层，
    并通过构造参数把它们注入各个组件。
    """

    def __init__(
        self,
        config: ConfigManager,
        clip_store: Optional[IClipStore] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the Discord bot and the radio components.

        Args:
            config: Configuration manager
            clip_store: Clip store override (defaults to the configured directory)
            rng: Random source override

        Raises:
            LoadError: If the clip library or the link table is incomplete
        """
        self.logger = logging.getLogger("vegasbot.bot")
        self.config = config

        intents = discord.Intents.default()
        intents.message_content = True
        intents.voice_states = True

        self.bot = commands.Bot(
            command_prefix=config.get_command_prefix(),
            intents=intents,
            help_command=None
        )

        self._init_core_modules(clip_store or build_clip_store(config), rng)

        self.event_handler = EventHandler(bot=self.bot, command_name=config.get_radio_command_name())
        self.radio_commands.register_commands(self.bot)

        self.logger.info("📻 电台机器人初始化成功")

    def _init_core_modules(self, clip_store: IClipStore, rng: Optional[random.Random]) -> None:
        """加载片段库并构建播放引擎、语音管理器和命令层"""
        self.library = ClipLibrary.load(clip_store, self.config.get_opening_clip_name())

        self.link_table = TransitionLinkTable(self.config.get_transition_links())
        self.link_table.validate(self.library)

        self.playback_state = PlaybackState()
        self.engine = PlaybackEngine(
            library=self.library,
            link_table=self.link_table,
            state=self.playback_state,
            tick_interval=self.config.get_tick_interval(),
            rng=rng,
            reseed_each_iteration=self.config.should_reseed_each_iteration()
        )
        self.voice_manager = VoiceManager(self.bot, frame_duration=self.config.get_frame_duration())
        self.radio_commands = RadioCommands(self.config, self.engine, self.voice_manager)

        self.logger.info("✅ 核心模块初始化完成")

    async def close(self) -> None:
        """停止播放会话并关闭 Discord 机器人。"""
        try:
            self.logger.info("🛑 正在关闭电台机器人...")
            await self.engine.shutdown()
            await self.bot.close()
            self.logger.info("✅ 电台机器人关闭成功")
        except Exception as e:
            self.logger.error(f"关闭过程中发生错误: {e}", exc_info=True)

    async def start(self, token: str) -> None:
        """
        Start the Discord bot and run until it disconnects.

        The playback session is always torn down on the way out, including
        on Ctrl+C and login failures.

        Args:
            token: Discord bot token
        """
        try:
            async with self.bot:
                try:
                    await self.bot.start(token)
                finally:
                    # 先拆除播放会话，再关闭客户端
                    await self.close()
        except Exception as e:
            self.logger.error(f"启动机器人失败: {e}", exc_info=True)
            raise

    def run(self, token: str) -> None:
        """
        运行 Discord 机器人（阻塞式）。

        Args:
            token: Discord 机器人令牌
        """
        try:
            asyncio.run(self.start(token))
        except KeyboardInterrupt:
            self.logger.info("用户停止了机器人")

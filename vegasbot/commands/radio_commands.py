"""VegasBot 电台命令模块"""

import logging
from typing import Optional
import discord
from discord.ext import commands

from vegasbot.core.errors import JoinError, TransportError, UserNotPresentError
from vegasbot.playback.playback_engine import PlaybackEngine
from vegasbot.playback.voice_manager import VoiceManager
from vegasbot.utils.config_manager import ConfigManager


HELP_MESSAGE = (
    "Available Commands:\n"
    "Help - Displays this help message\n"
    "Join - Joins the voice channel\n"
    "Stop - Leaves voice channel\n"
    "Pause - Pauses playback\n"
    "Play - Resumes playback"
)


class RadioCommands:
    """
    Radio command handlers for VegasBot.

    All subcommands live under one top-level command (``!vegas join`` etc.)
    and are dispatched case-insensitively; anything unknown shows the help text.
    """

    def __init__(self, config: ConfigManager, engine: PlaybackEngine, voice_manager: VoiceManager):
        """
        初始化电台命令模块

        Args:
            config: 配置管理器
            engine: 播放引擎
            voice_manager: 语音管理器
        """
        self.logger = logging.getLogger("vegasbot.commands.radio")
        self.config = config
        self.engine = engine
        self.voice_manager = voice_manager
        self.command_name = config.get_radio_command_name()
        self._stop_requested = False

        self._handlers = {
            "join": self.join_command,
            "stop": self.stop_command,
            "pause": self.pause_command,
            "play": self.resume_command,
        }

        self.logger.debug("Radio commands initialized")

    @property
    def state(self):
        return self.engine.state

    def register_commands(self, bot: commands.Bot) -> None:
        """
        Register the radio command with the bot.

        Args:
            bot: Discord bot instance
        """
        async def radio(ctx: commands.Context, subcommand: Optional[str] = None) -> None:
            await self.radio_command(ctx, subcommand)

        bot.add_command(commands.Command(
            radio,
            name=self.command_name,
            help="Radio playback: join, stop, pause, play"
        ))
        self.logger.debug(f"Radio command registered: {self.command_name}")

    async def radio_command(self, ctx: commands.Context, subcommand: Optional[str] = None) -> None:
        """
        Dispatch ``!vegas <subcommand>``.
        """
        handler = self._handlers.get(subcommand.lower()) if subcommand else None
        if handler is None:
            await self.help_command(ctx)
            return
        await handler(ctx)

    async def help_command(self, ctx: commands.Context) -> None:
        await ctx.reply(HELP_MESSAGE)

    async def join_command(self, ctx: commands.Context) -> None:
        """
        加入调用者所在的语音频道并开始播放

        已在播放或暂停时不做任何操作。
        """
        channel = await self._require_voice_channel(ctx)
        if channel is None:
            return

        async with self.engine.session_lock:
            if not self.state.is_idle or self.engine.is_active:
                self.logger.debug("已有播放会话，忽略 join")
                return

            self._stop_requested = False
            try:
                transport = await self.voice_manager.join_destination(ctx.guild.id, channel.id)
            except JoinError as e:
                self.logger.warning(f"无法加入语音频道 {channel.id}: {e}")
                await ctx.reply(e.user_message)
                return

            if self._stop_requested:
                # 连接期间收到了 stop
                self._stop_requested = False
                self.logger.info("连接期间收到停止请求，放弃播放")
                try:
                    await transport.disconnect()
                except TransportError as e:
                    self.logger.warning(f"断开语音连接失败: {e}")
                return

            try:
                await self.engine.start_session(transport)
            except TransportError as e:
                self.logger.error(f"播放会话启动失败: {e}")
                await ctx.reply(e.user_message)
                return

        self.logger.info(f"🎙️ {ctx.author} 在频道 {channel.name} 开始了电台播放")

    async def stop_command(self, ctx: commands.Context) -> None:
        """停止播放，引擎会在一个间隔内断开连接"""
        if await self._require_voice_channel(ctx) is None:
            return
        if not self.state.playing:
            if self.engine.session_lock.locked():
                self._stop_requested = True
                self.logger.info(f"⏹️ {ctx.author} 在连接期间请求停止")
            return

        self.state.stop()
        self.logger.info(f"⏹️ {ctx.author} 停止了播放")

    async def pause_command(self, ctx: commands.Context) -> None:
        if await self._require_voice_channel(ctx) is None:
            return
        if not self.state.playing or self.state.paused:
            return

        self.state.pause()
        self.logger.info(f"⏸️ {ctx.author} 暂停了播放")

    async def resume_command(self, ctx: commands.Context) -> None:
        if await self._require_voice_channel(ctx) is None:
            return
        if not self.state.paused:
            return

        self.state.resume()
        self.logger.info(f"▶️ {ctx.author} 恢复了播放")

    async def _require_voice_channel(self, ctx: commands.Context) -> Optional[discord.VoiceChannel]:
        """
        校验调用者在语音频道中，不在时回复提示

        有会话在运行时，调用者必须在会话所在的频道中。

        Args:
            ctx: Discord 命令上下文

        Returns:
            调用者所在的语音频道，校验失败返回 None
        """
        try:
            return self._resolve_voice_channel(ctx)
        except UserNotPresentError as e:
            self.logger.debug(f"用户 {ctx.author} 不在语音频道: {e}")
            await ctx.reply(e.user_message)
            return None

    def _resolve_voice_channel(self, ctx: commands.Context) -> discord.VoiceChannel:
        if ctx.guild is None:
            raise UserNotPresentError("命令不是在服务器中发出的")

        voice = getattr(ctx.author, "voice", None)
        if voice is None or voice.channel is None:
            raise UserNotPresentError()

        transport = self.engine.transport
        if transport is not None and voice.channel.id != transport.channel_id:
            raise UserNotPresentError(f"用户不在播放频道 {transport.channel_id} 中")

        return voice.channel

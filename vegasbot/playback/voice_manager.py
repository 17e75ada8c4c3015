"""
语音管理器 - 管理 Discord 语音连接和音频帧发送

负责加入语音频道并把预编码的 Opus 帧按实时节奏发送出去。
提供统一的语音传输接口，隔离 Discord API 的复杂性。
"""

import asyncio
import logging
from typing import Optional

import discord
from discord.enums import SpeakingState
from discord.ext import commands

from vegasbot.core.errors import JoinError, TransportError
from vegasbot.core.interfaces import ITransport


DEFAULT_FRAME_DURATION = 0.02


class DiscordVoiceTransport(ITransport):
    """
    基于 discord.VoiceClient 的语音传输

    帧不经过重新编码直接发送，每帧之后等待到下一个发送时刻，
    长时间中断（如暂停）后重新对齐时钟。
    """

    def __init__(self, voice_client: discord.VoiceClient, frame_duration: float = DEFAULT_FRAME_DURATION):
        """
        初始化语音传输

        Args:
            voice_client: 已连接的语音客户端
            frame_duration: 每帧时长（秒）
        """
        self.logger = logging.getLogger("vegasbot.playback.transport")
        self.voice_client = voice_client
        self.frame_duration = frame_duration
        self.guild_id = voice_client.guild.id
        self.channel_id = voice_client.channel.id
        self._next_send_at: Optional[float] = None
        self._resync_threshold = frame_duration * 5

    async def set_speaking(self, speaking: bool) -> None:
        state = SpeakingState.voice if speaking else SpeakingState.none
        try:
            await self.voice_client.ws.speak(state)
        except Exception as e:
            raise TransportError(f"设置说话状态失败: {e}") from e
        self.logger.debug(f"说话状态: {speaking} - 服务器 {self.guild_id}")

    async def send_frame(self, frame: bytes) -> None:
        loop = asyncio.get_running_loop()
        now = loop.time()
        if self._next_send_at is None or now - self._next_send_at > self._resync_threshold:
            self._next_send_at = now

        if not self.voice_client.is_connected():
            raise TransportError(f"语音连接已断开 - 服务器 {self.guild_id}")

        try:
            self.voice_client.send_audio_packet(frame, encode=False)
        except Exception as e:
            raise TransportError(f"发送音频帧失败: {e}") from e

        self._next_send_at += self.frame_duration
        await asyncio.sleep(max(0.0, self._next_send_at - loop.time()))

    async def disconnect(self) -> None:
        try:
            await self.voice_client.disconnect()
        except Exception as e:
            raise TransportError(f"断开语音连接失败: {e}") from e
        self.logger.info(f"已断开语音连接 - 服务器 {self.guild_id}")


class VoiceManager:
    """
    语音管理器实现

    根据服务器和频道 ID 加入语音频道，返回会话独占的语音传输。
    """

    def __init__(self, bot: commands.Bot, frame_duration: float = DEFAULT_FRAME_DURATION):
        """
        初始化语音管理器

        Args:
            bot: Discord机器人实例
            frame_duration: 每帧时长（秒）
        """
        self.bot = bot
        self.frame_duration = frame_duration
        self.logger = logging.getLogger("vegasbot.playback.voice_manager")

        self.logger.debug("语音管理器初始化完成")

    async def join_destination(self, guild_id: int, channel_id: int) -> DiscordVoiceTransport:
        """
        加入语音频道

        Args:
            guild_id: 服务器ID
            channel_id: 语音频道ID

        Returns:
            已连接的语音传输

        Raises:
            JoinError: 服务器或频道不存在、频道已满或连接失败
        """
        guild = self.bot.get_guild(guild_id)
        if guild is None:
            raise JoinError(f"找不到服务器: {guild_id}")

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel):
            raise JoinError(f"找不到语音频道: {channel_id}")

        if guild.voice_client is not None:
            # 残留连接会让 connect() 抛出 ClientException
            await guild.voice_client.disconnect(force=True)

        try:
            voice_client = await channel.connect(self_deaf=True)
        except (discord.DiscordException, asyncio.TimeoutError) as e:
            self.logger.error(f"连接语音频道失败: {channel.name} - {e}")
            raise JoinError(f"连接语音频道失败: {e}", channel_id=channel_id) from e

        self.logger.info(f"成功连接到语音频道: {channel.name} (服务器: {guild.name})")
        return DiscordVoiceTransport(voice_client, frame_duration=self.frame_duration)

"""
语音管理器与 Discord 语音传输测试
"""

import unittest
from unittest.mock import Mock, AsyncMock, patch
import discord
from discord.enums import SpeakingState
from discord.ext import commands

from vegasbot.core.errors import JoinError, TransportError
from vegasbot.playback.voice_manager import DiscordVoiceTransport, VoiceManager


def make_voice_client(guild_id=12345, channel_id=555):
    voice_client = Mock(spec=discord.VoiceClient)
    voice_client.guild = Mock()
    voice_client.guild.id = guild_id
    voice_client.channel = Mock()
    voice_client.channel.id = channel_id
    voice_client.is_connected.return_value = True
    voice_client.ws = Mock()
    voice_client.ws.speak = AsyncMock()
    voice_client.disconnect = AsyncMock()
    return voice_client


class TestDiscordVoiceTransport(unittest.IsolatedAsyncioTestCase):
    """测试 Discord 语音传输"""

    def setUp(self):
        self.voice_client = make_voice_client()
        self.transport = DiscordVoiceTransport(self.voice_client, frame_duration=0.0)

    def test_ids_from_voice_client(self):
        self.assertEqual(self.transport.guild_id, 12345)
        self.assertEqual(self.transport.channel_id, 555)

    async def test_send_frame_skips_encoding(self):
        await self.transport.send_frame(b"\xf8\xff\xfe")
        await self.transport.send_frame(b"opus")

        self.assertEqual(
            [call.args for call in self.voice_client.send_audio_packet.call_args_list],
            [(b"\xf8\xff\xfe",), (b"opus",)]
        )
        for call in self.voice_client.send_audio_packet.call_args_list:
            self.assertEqual(call.kwargs, {"encode": False})

    async def test_send_frame_when_disconnected_raises(self):
        self.voice_client.is_connected.return_value = False
        with self.assertRaises(TransportError):
            await self.transport.send_frame(b"opus")
        self.voice_client.send_audio_packet.assert_not_called()

    async def test_send_failure_raises_transport_error(self):
        self.voice_client.send_audio_packet.side_effect = OSError("socket closed")
        with self.assertRaises(TransportError):
            await self.transport.send_frame(b"opus")

    async def test_set_speaking(self):
        await self.transport.set_speaking(True)
        await self.transport.set_speaking(False)

        self.assertEqual(
            [call.args[0] for call in self.voice_client.ws.speak.call_args_list],
            [SpeakingState.voice, SpeakingState.none]
        )

    async def test_disconnect(self):
        await self.transport.disconnect()
        self.voice_client.disconnect.assert_called_once()

    async def test_disconnect_failure_raises_transport_error(self):
        self.voice_client.disconnect.side_effect = discord.ClientException("gone")
        with self.assertRaises(TransportError):
            await self.transport.disconnect()


class TestFramePacing(unittest.IsolatedAsyncioTestCase):
    """测试按实时节奏发送帧"""

    def setUp(self):
        self.now = 100.0
        self.sleeps = []

        fake_loop = Mock()
        fake_loop.time = lambda: self.now

        async def fake_sleep(delay):
            self.sleeps.append(delay)
            self.now += delay

        self.fake_asyncio = Mock()
        self.fake_asyncio.get_running_loop.return_value = fake_loop
        self.fake_asyncio.sleep = fake_sleep

        self.voice_client = make_voice_client()
        self.transport = DiscordVoiceTransport(self.voice_client, frame_duration=0.02)

    async def send(self, count):
        with patch("vegasbot.playback.voice_manager.asyncio", self.fake_asyncio):
            for _ in range(count):
                await self.transport.send_frame(b"opus")

    def assertSleeps(self, expected):
        self.assertEqual(len(self.sleeps), len(expected))
        for actual, wanted in zip(self.sleeps, expected):
            self.assertAlmostEqual(actual, wanted, places=6)

    async def test_one_frame_per_interval(self):
        await self.send(3)

        self.assertSleeps([0.02, 0.02, 0.02])
        self.assertAlmostEqual(self.now, 100.06, places=6)

    async def test_small_delay_is_caught_up(self):
        """落后不足5帧时缩短等待追上时钟"""
        await self.send(1)
        self.now += 0.05

        await self.send(3)

        self.assertSleeps([0.02, 0.0, 0.0, 0.01])

    async def test_long_gap_resyncs_clock(self):
        """长时间中断（如暂停）后重新对齐，不会突发发送"""
        await self.send(2)
        self.now += 1.0

        await self.send(2)

        self.assertSleeps([0.02, 0.02, 0.02, 0.02])
        self.assertEqual(self.voice_client.send_audio_packet.call_count, 4)


class TestVoiceManager(unittest.IsolatedAsyncioTestCase):
    """测试加入语音频道"""

    def setUp(self):
        self.mock_bot = Mock(spec=commands.Bot)
        self.mock_guild = Mock()
        self.mock_guild.id = 12345
        self.mock_guild.voice_client = None
        self.mock_bot.get_guild.return_value = self.mock_guild

        self.mock_channel = Mock(spec=discord.VoiceChannel)
        self.mock_channel.id = 555
        self.mock_channel.name = "Radio"
        self.mock_channel.connect = AsyncMock(return_value=make_voice_client())
        self.mock_guild.get_channel.return_value = self.mock_channel

        self.voice_manager = VoiceManager(self.mock_bot, frame_duration=0.02)

    async def test_join_returns_transport(self):
        transport = await self.voice_manager.join_destination(12345, 555)

        self.assertIsInstance(transport, DiscordVoiceTransport)
        self.assertEqual(transport.channel_id, 555)
        self.assertEqual(transport.frame_duration, 0.02)
        self.mock_channel.connect.assert_called_once_with(self_deaf=True)

    async def test_unknown_guild_raises(self):
        self.mock_bot.get_guild.return_value = None
        with self.assertRaises(JoinError):
            await self.voice_manager.join_destination(1, 555)

    async def test_non_voice_channel_raises(self):
        self.mock_guild.get_channel.return_value = Mock(spec=discord.TextChannel)
        with self.assertRaises(JoinError):
            await self.voice_manager.join_destination(12345, 555)

    async def test_connect_failure_raises_join_error(self):
        self.mock_channel.connect.side_effect = discord.ClientException("full")

        with self.assertRaises(JoinError) as cm:
            await self.voice_manager.join_destination(12345, 555)

        self.assertEqual(cm.exception.user_message, "Could not join the channel...is it full?")

    async def test_stale_voice_client_is_dropped(self):
        stale = Mock()
        stale.disconnect = AsyncMock()
        self.mock_guild.voice_client = stale

        await self.voice_manager.join_destination(12345, 555)

        stale.disconnect.assert_called_once_with(force=True)


if __name__ == '__main__':
    unittest.main()

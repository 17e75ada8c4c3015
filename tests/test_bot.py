"""
机器人初始化与入口测试

验证启动时片段库加载、关联表校验和命令注册、退出时的会话拆除，以及命令行解析。
"""

import unittest
from unittest.mock import Mock, MagicMock, AsyncMock
import discord

from vegasbot.bot import VegasBot
from vegasbot.core.errors import LoadError
from vegasbot.core.interfaces import Clip, ClipCategory, IClipStore
from vegasbot.utils.config_manager import ConfigManager
from main import parse_args


class MemoryClipStore(IClipStore):
    """内存中的片段存储"""

    def __init__(self, clips):
        self.clips = clips

    def list_clips(self, category):
        return sorted(self.clips.get(category, {}))

    def load_clip(self, category, name):
        return Clip(name, self.clips[category][name])


def build_store():
    return MemoryClipStore({
        ClipCategory.SONG: {"BlueMoon.dca": (b"s",)},
        ClipCategory.STORY: {"Story.dca": (b"st",)},
        ClipCategory.TRANSITION: {
            "Opening.dca": (b"op",),
            "BlueMoonTransition.dca": (b"t",),
        },
    })


def make_config():
    config = Mock(spec=ConfigManager)
    config.get_command_prefix.return_value = "!"
    config.get_radio_command_name.return_value = "vegas"
    config.get_opening_clip_name.return_value = "Opening.dca"
    config.get_transition_links.return_value = {"BlueMoonTransition.dca": "BlueMoon.dca"}
    config.get_tick_interval.return_value = 0.25
    config.get_frame_duration.return_value = 0.02
    config.should_reseed_each_iteration.return_value = True
    return config


class TestBotInitialization(unittest.TestCase):
    """测试机器人初始化"""

    def setUp(self):
        self.mock_config = make_config()

    def test_components_wired(self):
        bot = VegasBot(self.mock_config, clip_store=build_store())

        self.assertEqual(bot.library.opening.name, "Opening.dca")
        self.assertEqual([clip.name for clip in bot.library.transitions], ["BlueMoonTransition.dca"])
        self.assertIs(bot.engine.state, bot.playback_state)
        self.assertIs(bot.radio_commands.engine, bot.engine)
        self.assertIsNotNone(bot.bot.get_command("vegas"))

    def test_unknown_link_target_fails_startup(self):
        self.mock_config.get_transition_links.return_value = {"BlueMoonTransition.dca": "Missing.dca"}

        with self.assertRaises(LoadError) as cm:
            VegasBot(self.mock_config, clip_store=build_store())

        self.assertEqual(cm.exception.clip_name, "Missing.dca")

    def test_missing_opening_fails_startup(self):
        self.mock_config.get_opening_clip_name.return_value = "Intro.dca"

        with self.assertRaises(LoadError):
            VegasBot(self.mock_config, clip_store=build_store())


class TestBotShutdown(unittest.IsolatedAsyncioTestCase):
    """测试退出时拆除播放会话"""

    def setUp(self):
        self.vegas_bot = VegasBot(make_config(), clip_store=build_store())

        self.calls = []
        self.vegas_bot.engine.shutdown = AsyncMock(side_effect=lambda: self.calls.append("engine"))

        self.mock_client = MagicMock()
        self.mock_client.__aenter__ = AsyncMock(return_value=self.mock_client)
        self.mock_client.__aexit__ = AsyncMock(return_value=False)
        self.mock_client.close = AsyncMock(side_effect=lambda: self.calls.append("client"))
        self.vegas_bot.bot = self.mock_client

    async def test_close_stops_engine_before_client(self):
        await self.vegas_bot.close()
        self.assertEqual(self.calls, ["engine", "client"])

    async def test_start_closes_when_client_returns(self):
        self.mock_client.start = AsyncMock()

        await self.vegas_bot.start("token")

        self.mock_client.start.assert_called_once_with("token")
        self.assertEqual(self.calls, ["engine", "client"])

    async def test_start_closes_on_login_failure(self):
        self.mock_client.start = AsyncMock(side_effect=discord.LoginFailure("bad token"))

        with self.assertRaises(discord.LoginFailure):
            await self.vegas_bot.start("token")

        self.assertEqual(self.calls, ["engine", "client"])


class TestParseArgs(unittest.TestCase):
    """测试命令行解析"""

    def test_defaults(self):
        args = parse_args([])
        self.assertEqual(args.config, "config/config.yaml")
        self.assertIsNone(args.token)

    def test_token_flag(self):
        self.assertEqual(parse_args(["-t", "abc"]).token, "abc")
        self.assertEqual(parse_args(["--token", "abc", "--config", "x.yaml"]).config, "x.yaml")


if __name__ == '__main__':
    unittest.main()

#!/usr/bin/env python3
"""
VegasBot 电台机器人 - 在语音频道中循环播放歌曲、故事和过渡片段的 Discord 机器人

主程序入口点，负责命令行解析、配置加载、音频片段加载和机器人启动。
"""
import argparse
import logging
import sys
from typing import List, Optional

from vegasbot.bot import VegasBot
from vegasbot.core.errors import LoadError
from vegasbot.utils.config_manager import ConfigManager
from vegasbot.utils.logger import setup_logger


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """解析命令行参数"""
    parser = argparse.ArgumentParser(description="VegasBot 电台机器人")
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="配置文件路径 (默认: config/config.yaml)"
    )
    parser.add_argument(
        "-t", "--token",
        default=None,
        help="Discord 机器人令牌，覆盖配置文件中的 discord.token"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    VegasBot 主入口函数。

    Returns:
        int: 退出代码（0表示成功，1表示错误）
    """
    args = parse_args(argv)

    try:
        config = ConfigManager(args.config)
    except FileNotFoundError as e:
        print(f"❌ 配置文件错误: {e}", file=sys.stderr)
        return 1

    if args.token:
        config.set_discord_token(args.token)

    setup_logger(
        log_level=config.get_log_level(),
        log_file=config.get_log_file(),
        max_size=config.get_log_max_size(),
        backup_count=config.get_log_backup_count()
    )
    logger = logging.getLogger("vegasbot")

    logger.info("=" * 60)
    logger.info("📻 VegasBot 电台机器人启动中...")
    logger.info("=" * 60)

    try:
        try:
            discord_token = config.get_discord_token()
        except ValueError as e:
            logger.error(f"❌ Discord 令牌配置错误: {e}")
            logger.error(f"请在 {args.config} 中设置 discord.token，或使用 -t <bot token> 启动")
            return 1

        logger.info("正在加载音频片段并初始化机器人...")
        bot = VegasBot(config)

        _log_bot_configuration(logger, config)

        logger.info("🚀 启动电台机器人...")
        logger.info("按 Ctrl+C 停止机器人")
        bot.run(discord_token)

    except LoadError as e:
        logger.error(f"❌ 音频片段加载失败: {e}")
        logger.error(f"请检查音频目录: {config.get_audio_root_dir()}")
        return 1
    except KeyboardInterrupt:
        logger.info("🛑 用户停止了机器人 (Ctrl+C)")
        return 0
    except Exception as e:
        logger.error(f"❌ 启动电台机器人时发生意外错误: {e}", exc_info=True)
        return 1

    return 0


def _log_bot_configuration(logger: logging.Logger, config: ConfigManager) -> None:
    """
    记录机器人配置摘要，用于调试和监控。

    Args:
        logger: 日志记录器实例
        config: 配置管理器
    """
    logger.info("📋 机器人配置摘要:")
    logger.info(f"   命令: {config.get_command_prefix()}{config.get_radio_command_name()}")
    logger.info(f"   音频目录: {config.get_audio_root_dir()}")
    logger.info(f"   开场片段: {config.get_opening_clip_name()}")
    logger.info(f"   间隔: {config.get_tick_interval()} 秒")
    logger.info(f"   每次重新播种: {'是' if config.should_reseed_each_iteration() else '否'}")
    logger.info("=" * 60)


if __name__ == "__main__":
    sys.exit(main())

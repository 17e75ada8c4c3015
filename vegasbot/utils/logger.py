"""Logging setup for VegasBot."""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_size: int = 10485760,
    backup_count: int = 5
) -> logging.Logger:
    """
    设置 vegasbot 日志系统。

    Args:
        log_level: 日志级别名称
        log_file: 日志文件路径，为 None 时只输出到控制台
        max_size: 单个日志文件的最大字节数
        backup_count: 保留的备份文件数量

    Returns:
        配置好的 vegasbot 根日志记录器
    """
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    logger = logging.getLogger("vegasbot")
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # discord.py 的日志默认过于详细
    logging.getLogger("discord").setLevel(max(level, logging.INFO))

    return logger

"""
命令模块 - 电台的用户命令入口
"""

from .radio_commands import RadioCommands, HELP_MESSAGE

__all__ = [
    "RadioCommands",
    "HELP_MESSAGE"
]

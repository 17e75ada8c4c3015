"""VegasBot - 自动播放主题电台的 Discord 语音机器人"""

__version__ = "1.0.0"

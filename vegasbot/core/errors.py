"""
错误定义 - 电台机器人的异常体系

所有异常都携带一条面向用户的消息，命令层捕获后直接回复给用户。
"""

from typing import Optional


class VegasBotError(Exception):
    """电台机器人异常基类"""

    def __init__(self, message: str, user_message: Optional[str] = None, **context):
        """
        初始化异常

        Args:
            message: 错误消息（用于日志）
            user_message: 用户友好的错误消息
            **context: 额外的上下文信息
        """
        super().__init__(message)
        self.user_message = user_message or message
        self.context = context


class LoadError(VegasBotError):
    """音频片段缺失或格式错误，启动阶段的致命错误"""

    def __init__(self, message: str, clip_name: Optional[str] = None, **context):
        super().__init__(message, clip_name=clip_name, **context)
        self.clip_name = clip_name


class JoinError(VegasBotError):
    """无法加入语音频道（不可达或已满）"""

    def __init__(self, message: str, **context):
        super().__init__(
            message,
            user_message="Could not join the channel...is it full?",
            **context
        )


class UserNotPresentError(VegasBotError):
    """命令调用者不在目标语音频道中"""

    def __init__(self, message: str = "用户不在语音频道中", **context):
        super().__init__(
            message,
            user_message="You must be in a voice channel to run this command",
            **context
        )


class TransportError(VegasBotError):
    """音频帧发送失败，引擎视同停止信号"""

    def __init__(self, message: str, **context):
        super().__init__(
            message,
            user_message="Lost the voice connection, please try again",
            **context
        )

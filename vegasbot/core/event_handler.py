"""VegasBot 电台机器人事件处理器。"""
import logging
import discord
from discord.ext import commands


class EventHandler:
    """
    VegasBot 电台机器人事件处理器。

    管理机器人生命周期事件和命令错误。
    """

    def __init__(self, bot: commands.Bot, command_name: str = "vegas"):
        """
        初始化事件处理器。

        Args:
            bot: Discord 机器人实例
            command_name: 电台命令名称（用于状态显示）
        """
        self.logger = logging.getLogger("vegasbot.events")
        self.bot = bot
        self.command_name = command_name

        # 注册事件处理器
        self._register_events()

    def _register_events(self) -> None:
        """注册 Discord 事件处理器。"""
        @self.bot.event
        async def on_ready():
            await self._on_ready()

        @self.bot.event
        async def on_message(message):
            await self._on_message(message)

        @self.bot.event
        async def on_command_error(ctx, error):
            await self._on_command_error(ctx, error)

        self.logger.debug("事件处理器注册完成")

    async def _on_ready(self) -> None:
        """处理机器人就绪事件。"""
        if self.bot.user is None:
            self.logger.error("机器人用户在 on_ready 事件中为 None")
            return

        self.logger.info(f"📻 电台机器人已就绪。登录为 {self.bot.user.name} ({self.bot.user.id})")

        activity = discord.Activity(
            type=discord.ActivityType.listening,
            name=f"📻 {self.bot.command_prefix}{self.command_name} help"
        )
        await self.bot.change_presence(activity=activity)

    async def _on_message(self, message: discord.Message) -> None:
        """
        处理传入消息。

        Args:
            message: Discord 消息
        """
        # 忽略机器人自己的消息
        if message.author == self.bot.user:
            return

        await self.bot.process_commands(message)

    async def _on_command_error(self, ctx: commands.Context, error: Exception) -> None:
        """
        处理命令错误。

        Args:
            ctx: 命令上下文
            error: 发生的异常
        """
        if isinstance(error, commands.CommandNotFound):
            # 静默忽略未知命令
            return

        elif isinstance(error, commands.NoPrivateMessage):
            await ctx.reply("❌ 此命令不能在私信中使用。")

        else:
            self.logger.error(
                f"命令 {ctx.command} 中的意外错误: {error}",
                exc_info=error
            )

"""Queue chat commands: !join, !leave, !pos

Public:
    !join [message]     Join the queue (message may be required by settings)
    !leave              Leave the queue
    !pos, !position     Show own position and wait time
"""

import logging
from typing import TYPE_CHECKING, Any

from twitchio.ext import commands

from queuebot.shared.commands import CommandKind, QueueCommand

if TYPE_CHECKING:
    from queuebot.twitch.bot import QueueBot

LOGGER = logging.getLogger("QueueCommands")


def chatter_name(ctx: Any) -> str:
    return ctx.chatter.display_name or ctx.chatter.name


async def send_response(ctx: Any, response: str) -> bool:
    """Reply in chat if there is anything to say.

    Sending is fire-and-forget: a failed send is logged and the queue change
    that produced the response stays.
    """
    if not response:
        return False
    try:
        await ctx.reply(response)
        return True
    except Exception as e:
        LOGGER.warning(f"Failed to send queue response: {type(e).__name__}: {e}")
        return False


class QueueCommands(commands.Component):
    def __init__(self, bot: commands.Bot) -> None:
        self.bot: QueueBot = bot  # type: ignore[assignment]
        LOGGER.info("Queue commands component initialized")

    async def _run(self, ctx: commands.Context, kind: CommandKind, message: str | None = None) -> None:
        command = QueueCommand(kind=kind.value, username=chatter_name(ctx), message=message)
        response = self.bot.queue_service.process_command(command)
        await send_response(ctx, response)

    @commands.command(name="join")
    async def join(self, ctx: commands.Context["QueueBot"], *, message: str | None = None) -> None:
        """Join the queue.

        Usage: !join [message]
        """
        await self._run(ctx, CommandKind.JOIN, message)

    @commands.command(name="leave")
    async def leave(self, ctx: commands.Context["QueueBot"]) -> None:
        """Leave the queue.

        Usage: !leave
        """
        await self._run(ctx, CommandKind.LEAVE)

    @commands.command(name="pos", aliases=["position"])
    async def pos(self, ctx: commands.Context["QueueBot"]) -> None:
        """Show queue position.

        Usage: !pos, !position
        """
        await self._run(ctx, CommandKind.POS)


async def setup(bot: commands.Bot) -> None:
    await bot.add_component(QueueCommands(bot))
    LOGGER.info("Queue commands component loaded")


async def teardown(bot: commands.Bot) -> None:
    LOGGER.info("Queue commands component unloaded")

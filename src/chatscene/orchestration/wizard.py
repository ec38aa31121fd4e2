"""Wizard scene: runs an ordered list of step functions over a step cursor."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from chatscene.config.models import WizardConfig
from chatscene.domain.session import DataT
from chatscene.observability.logging import get_logger
from chatscene.orchestration.context import Context
from chatscene.orchestration.scene import BaseScene

# A step returns True to advance to the next step; errors are raised.
WizardStep = Callable[[Context[Any]], Awaitable[bool]]

FINISHED_STEP = -1

logger = get_logger(__name__)


class Wizard(BaseScene[DataT]):
    """
    Built-in scene that walks through steps in order.

    Cursor values: 0..len(steps)-1 is the pending step, -1 means finished.
    Sending the cancel command at any step replies with the cancel text and
    leaves the scene.
    """

    def __init__(
        self,
        name: str,
        *steps: WizardStep,
        data_type: Any = None,
        cancel_command: str = "/cancel",
        cancel_reply: str = "Cancelled.",
    ) -> None:
        super().__init__(name, data_type)
        self.steps: tuple[WizardStep, ...] = tuple(steps)
        self.cancel_command = cancel_command
        self.cancel_reply = cancel_reply

    @classmethod
    def from_config(
        cls,
        name: str,
        steps: Sequence[WizardStep],
        config: WizardConfig,
        data_type: Any = None,
    ) -> Wizard[Any]:
        return cls(
            name,
            *steps,
            data_type=data_type,
            cancel_command=config.cancel_command,
            cancel_reply=config.cancel_reply,
        )

    def __len__(self) -> int:
        return len(self.steps)

    def is_cancel(self, text: str | None) -> bool:
        return text is not None and text.strip().casefold() == self.cancel_command.casefold()

    async def enter(self, ctx: Context[Any]) -> None:
        self.typed(ctx).step = 0

    async def on_update(self, ctx: Context[Any]) -> None:
        ctx = self.typed(ctx)
        idx = ctx.step
        if idx < 0 or idx >= len(self.steps):
            await ctx.leave()
            return

        if self.is_cancel(ctx.text):
            logger.debug("wizard cancelled", scene=self.name, chat_id=ctx.chat_id, user_id=ctx.user_id, step=idx)
            await ctx.reply(self.cancel_reply)
            await ctx.leave()
            return

        advance = await self.steps[idx](ctx)
        if not advance:
            return

        idx += 1
        if idx >= len(self.steps):
            await ctx.leave()
            return
        ctx.step = idx

    async def leave(self, ctx: Context[Any]) -> None:
        self.typed(ctx).step = FINISHED_STEP

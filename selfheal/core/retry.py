from __future__ import annotations

from selfheal.core.locator import Locator, encode
from selfheal.core.metadata import CommandContext


class RetryController:
    """Rewrites a failed lookup with a healed locator and flags it for re-dispatch."""

    def apply_healing(self, context: CommandContext, healed_locator: Locator) -> None:
        context.parameters.update(encode(healed_locator))
        context.retry_requested = True

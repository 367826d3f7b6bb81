from __future__ import annotations

import logging

from selfheal.core.engine import DriverView, HealingEngine
from selfheal.core.exceptions import ResolutionFault
from selfheal.core.locator import Locator, decode
from selfheal.core.metadata import CommandContext, HealingCandidate, HealingContext, PageLocatorKey

log = logging.getLogger(__name__)


class HealingResolver:
    """Proposes a replacement locator for a failed lookup from recorded history."""

    def __init__(self, driver: DriverView, engine: HealingEngine) -> None:
        self.driver = driver
        self.engine = engine

    def resolve(self, context: CommandContext) -> Locator | None:
        candidate = self.resolve_with_candidate(context)
        return candidate.healed_locator if candidate is not None else None

    def resolve_with_candidate(self, context: CommandContext) -> HealingCandidate | None:
        """Returns the top-ranked candidate, or ``None`` when no healing is available.

        Never raises: every failure along the way is logged and reported as ``None``.
        """

        if not context.is_lookup or not context.has_locator:
            return None
        try:
            return self._resolve(context)
        except ResolutionFault as exc:
            log.debug("No healing available for %s: %s", context.parameters, exc)
        except Exception as exc:  # noqa: BLE001 - healing is best effort.
            log.debug("Healing failed for %s: %s: %s", context.parameters, type(exc).__name__, exc)
        return None

    def _resolve(self, context: CommandContext) -> HealingCandidate | None:
        locator = decode(context.parameters["using"], context.parameters["value"])
        key = PageLocatorKey(self.driver.title, locator)
        destination = self.engine.parse_tree(self.driver.page_source)

        current_url = self.driver.current_url
        last_healing_data = self.engine.get_last_healing_data(key.locator, current_url)
        if last_healing_data is None or not last_healing_data.paths:
            log.debug("No history for %s on %s", locator, current_url)
            return None

        healing_context = HealingContext()
        self.engine.find_new_locations(last_healing_data.paths[0], destination, healing_context)
        if not healing_context.healing_results or not healing_context.healing_results[0].candidates:
            raise ResolutionFault(f"engine produced no candidates for {locator} on page {key.page_identity!r}")
        return healing_context.healing_results[0].candidates[0]

from __future__ import annotations

import logging
from time import monotonic
from typing import Any

from selfheal.config.schema import HealingSettings
from selfheal.core.engine import DriverView, HealingEngine
from selfheal.core.exceptions import CaptureFault, UnsupportedStrategy
from selfheal.core.locator import Locator, decode
from selfheal.core.metadata import CapturedElementSet, CommandContext, HealAttempt, PageLocatorKey

log = logging.getLogger(__name__)


class ElementCaptureRecorder:
    """Forwards every successful lookup to the healing engine for persistence."""

    def __init__(
        self,
        driver: DriverView,
        engine: HealingEngine,
        settings: HealingSettings,
        audit_logger=None,
    ) -> None:
        self.driver = driver
        self.engine = engine
        self.settings = settings
        self.audit_logger = audit_logger

    def on_success(self, context: CommandContext) -> None:
        """Submits the lookup's element handles to the engine, keyed by page title and locator.

        Only non-empty results are submitted: a ``findElements`` call that matched
        nothing carries no DOM context worth recording.
        """

        if not context.is_lookup or not context.has_locator:
            return
        try:
            locator = decode(context.parameters["using"], context.parameters["value"])
        except UnsupportedStrategy as exc:
            log.debug("Skipping capture: %s", exc)
            return
        elements = self._as_elements(context.response_value)
        if not elements:
            log.debug("Lookup %s returned no elements; nothing to capture", locator)
            return

        started = monotonic()
        try:
            self._capture(locator, elements)
        except CaptureFault as fault:
            self._on_fault(context, locator, fault, started)

    def _capture(self, locator: Locator, elements: tuple[Any, ...]) -> CapturedElementSet:
        page_identity = ""
        try:
            page_identity = self.driver.title
            captured = CapturedElementSet(PageLocatorKey(page_identity, locator), elements)
            self.engine.save_elements(captured.key, captured.elements)
        except Exception as exc:  # noqa: BLE001 - a capture must never fail the lookup itself.
            raise CaptureFault(str(exc), page_identity) from exc
        return captured

    def _on_fault(self, context: CommandContext, locator: Locator, fault: CaptureFault, started: float) -> None:
        log.warning("Could not capture %s on page %r: %s", locator, fault.page_identity, fault)
        if self.settings.capture_fault_policy == "retry":
            context.retry_requested = True
        if self.audit_logger is None:
            return
        self.audit_logger.write(
            HealAttempt(
                command=context.command_name,
                page_identity=fault.page_identity,
                old_locator=str(locator),
                outcome="capture_fault",
                duration_ms=round((monotonic() - started) * 1000, 3),
                failure_type=type(fault.__cause__).__name__,
            )
        )

    @staticmethod
    def _as_elements(response_value: Any) -> tuple[Any, ...]:
        if response_value is None:
            return ()
        if isinstance(response_value, (list, tuple)):
            return tuple(response_value)
        return (response_value,)

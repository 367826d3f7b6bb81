from __future__ import annotations

import logging
from time import monotonic
from typing import Any, Callable

from selfheal.config.schema import HealingSettings
from selfheal.core.engine import DriverView, HealingEngine
from selfheal.core.metadata import CommandContext, HealAttempt
from selfheal.core.recorder import ElementCaptureRecorder
from selfheal.core.resolver import HealingResolver
from selfheal.core.retry import RetryController

log = logging.getLogger(__name__)

Dispatch = Callable[[CommandContext], Any]

HEALED = "healed"
UNHEALED = "unhealed"
RETRY_FAILED = "retry_failed"


class HealingCommandPipeline:
    """Runs one driver command through capture, healing, and a single retry.

    ``dispatch`` performs the real command with ``context.parameters``, stores the
    command's response value on ``context.response_value`` and returns the raw
    driver response, which is handed back to the caller unchanged.
    """

    def __init__(
        self,
        driver: DriverView,
        engine: HealingEngine,
        settings: HealingSettings,
        audit_logger=None,
    ) -> None:
        self.settings = settings
        self.audit_logger = audit_logger
        self.recorder = ElementCaptureRecorder(driver, engine, settings, audit_logger)
        self.resolver = HealingResolver(driver, engine)
        self.retry_controller = RetryController()
        self.driver = driver

    def execute(self, context: CommandContext, dispatch: Dispatch) -> Any:
        if not self.settings.heal_enabled:
            return dispatch(context)
        try:
            response = dispatch(context)
        except Exception as failure:
            if not context.is_lookup or not context.has_locator:
                raise
            attempt = self._heal(context, failure)
            if attempt.outcome == UNHEALED:
                self._audit(attempt)
                raise
        else:
            return self._after_success(context, dispatch, response)
        return self._retry(context, dispatch, attempt)

    def _heal(self, context: CommandContext, failure: Exception) -> HealAttempt:
        started = monotonic()
        old_locator = f"{context.parameters['using']}={context.parameters['value']}"
        candidate = self.resolver.resolve_with_candidate(context)
        attempt = HealAttempt(
            command=context.command_name,
            page_identity=self._page_identity(),
            old_locator=old_locator,
            outcome=UNHEALED,
            failure_type=type(failure).__name__,
        )
        if candidate is not None:
            self.retry_controller.apply_healing(context, candidate.healed_locator)
            attempt.outcome = HEALED
            attempt.new_locator = str(candidate.healed_locator)
            attempt.score = candidate.score
            log.info("Healed %s -> %s (score %s)", old_locator, candidate.healed_locator, candidate.score)
        attempt.duration_ms = round((monotonic() - started) * 1000, 3)
        return attempt

    def _retry(self, context: CommandContext, dispatch: Dispatch, attempt: HealAttempt) -> Any:
        try:
            return dispatch(context)
        except Exception as exc:
            attempt.outcome = RETRY_FAILED
            attempt.failure_type = type(exc).__name__
            log.info("Healed locator %s did not match either", attempt.new_locator)
            raise
        finally:
            self._audit(attempt)

    def _after_success(self, context: CommandContext, dispatch: Dispatch, response: Any) -> Any:
        self.recorder.on_success(context)
        if not context.retry_requested:
            return response
        log.debug("Re-dispatching %s after a capture fault", context.command_name)
        try:
            return dispatch(context)
        except Exception as exc:  # noqa: BLE001 - the first dispatch already succeeded.
            log.warning("Re-dispatch of %s failed, keeping first response: %s", context.command_name, exc)
            return response

    def _page_identity(self) -> str:
        try:
            return self.driver.title
        except Exception:  # noqa: BLE001 - only used for the audit record.
            return ""

    def _audit(self, attempt: HealAttempt) -> None:
        if self.audit_logger is not None:
            self.audit_logger.write(attempt)

from __future__ import annotations

from typing import Any

from selfheal.config.schema import HealingSettings
from selfheal.core.engine import HealingEngine
from selfheal.core.metadata import CommandContext
from selfheal.core.pipeline import HealingCommandPipeline
from selfheal.logging.audit import HealingAuditLogger


class SelfHealingDriver:
    """Routes every command of a Selenium WebDriver through the healing pipeline.

    The driver's ``execute`` is replaced on the instance, so lookups issued from
    ``WebElement.find_element`` (which call ``parent.execute``) are covered too.
    Commands issued while a command is already being handled, such as the title
    and page source reads done during healing, go straight to the driver.
    """

    def __init__(
        self,
        webdriver,
        engine: HealingEngine,
        settings: HealingSettings,
        audit_logger: HealingAuditLogger | None = None,
    ) -> None:
        if audit_logger is None and settings.heal_enabled and settings.audit_root:
            audit_logger = HealingAuditLogger(settings.audit_root)
        self.webdriver = webdriver
        self.engine = engine
        self.settings = settings
        self.audit_logger = audit_logger
        self.pipeline = HealingCommandPipeline(webdriver, engine, settings, audit_logger)
        self._original_execute = None
        self._in_command = False

    @classmethod
    def attach(
        cls,
        webdriver,
        engine: HealingEngine,
        settings: HealingSettings,
        audit_logger: HealingAuditLogger | None = None,
    ) -> "SelfHealingDriver":
        healing = cls(webdriver, engine, settings, audit_logger)
        healing._original_execute = webdriver.execute
        webdriver.execute = healing.execute
        return healing

    def detach(self) -> None:
        if self._original_execute is None:
            return
        self.webdriver.execute = self._original_execute
        self._original_execute = None

    @property
    def attached(self) -> bool:
        return self._original_execute is not None

    def execute(self, driver_command: str, params: dict | None = None) -> Any:
        if self._original_execute is None:
            raise RuntimeError("SelfHealingDriver is not attached to a webdriver")
        if self._in_command:
            return self._original_execute(driver_command, params)
        context = CommandContext(driver_command, params if params is not None else {})
        self._in_command = True
        try:
            return self.pipeline.execute(context, self._dispatch)
        finally:
            self._in_command = False

    def _dispatch(self, context: CommandContext) -> Any:
        response = self._original_execute(context.command_name, context.parameters)
        context.response_value = response.get("value") if isinstance(response, dict) else response
        return response

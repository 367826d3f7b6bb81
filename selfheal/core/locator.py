from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from selenium.webdriver.common.by import By

from selfheal.core.exceptions import UnsupportedStrategy


class Strategy(str, Enum):
    """Closed set of lookup strategies understood by the healing layer."""

    CSS_SELECTOR = "css_selector"
    CLASS_NAME = "class_name"
    XPATH = "xpath"
    PARTIAL_LINK_TEXT = "partial_link_text"
    ID = "id"
    LINK_TEXT = "link_text"
    NAME = "name"


_WIRE_NAMES: dict[Strategy, str] = {
    Strategy.CSS_SELECTOR: By.CSS_SELECTOR,
    Strategy.CLASS_NAME: By.CLASS_NAME,
    Strategy.XPATH: By.XPATH,
    Strategy.PARTIAL_LINK_TEXT: By.PARTIAL_LINK_TEXT,
    Strategy.ID: By.ID,
    Strategy.LINK_TEXT: By.LINK_TEXT,
    Strategy.NAME: By.NAME,
}
_STRATEGIES: dict[str, Strategy] = {wire: strategy for strategy, wire in _WIRE_NAMES.items()}


@dataclass(frozen=True, slots=True)
class Locator:
    strategy: Strategy
    value: str

    @property
    def using(self) -> str:
        return _WIRE_NAMES[self.strategy]

    def as_by(self) -> tuple[str, str]:
        """Returns the ``(by, value)`` pair accepted by ``driver.find_element``."""

        return self.using, self.value

    def __str__(self) -> str:
        return f"{self.using}={self.value}"


def decode(using: object, value: object) -> Locator:
    """Parses wire-level lookup parameters into a strategy-typed locator."""

    strategy = _STRATEGIES.get(using) if isinstance(using, str) else None
    if strategy is None:
        raise UnsupportedStrategy(using)
    return Locator(strategy, str(value))


def encode(locator: Locator) -> dict[str, str]:
    return {"using": _WIRE_NAMES[locator.strategy], "value": locator.value}


def supported_wire_names() -> tuple[str, ...]:
    return tuple(_STRATEGIES)

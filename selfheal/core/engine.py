from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Protocol, Sequence

from selfheal.core.locator import Locator
from selfheal.core.metadata import HealingContext, LastHealingData, PageLocatorKey


class DriverView(Protocol):
    """The slice of a browser driver the healing core reads from."""

    @property
    def title(self) -> str: ...

    @property
    def page_source(self) -> str: ...

    @property
    def current_url(self) -> str: ...


class HealingEngine(ABC):
    """Engine-neutral interface for DOM capture, history lookup, and candidate scoring."""

    engine_name = "unknown"

    @abstractmethod
    def save_elements(self, key: PageLocatorKey, elements: Sequence[Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def parse_tree(self, page_source: str) -> Any:
        raise NotImplementedError

    @abstractmethod
    def get_last_healing_data(self, locator: Locator, current_url: str) -> LastHealingData | None:
        raise NotImplementedError

    @abstractmethod
    def find_new_locations(self, paths: Sequence[Any], destination: Any, context: HealingContext) -> None:
        raise NotImplementedError

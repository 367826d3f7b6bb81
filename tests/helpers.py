from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from selenium.common.exceptions import NoSuchElementException
from selenium.webdriver.remote.command import Command

from selfheal.core.engine import HealingEngine
from selfheal.core.locator import Locator
from selfheal.core.metadata import (
    HealingCandidate,
    HealingContext,
    HealingResult,
    LastHealingData,
    PageLocatorKey,
)


@dataclass(frozen=True, slots=True)
class FakeElement:
    element_id: str


@dataclass(slots=True)
class FakeDriverView:
    title: str = "Login"
    page_source: str = "<html><body><button data-id='submit'>Go</button></body></html>"
    current_url: str = "http://localhost:8000/login"


class FakeHealingEngine(HealingEngine):
    """In-memory engine that records calls and serves canned history and candidates."""

    engine_name = "fake"

    def __init__(
        self,
        history: dict[tuple[Locator, str], LastHealingData] | None = None,
        results: list[list[HealingCandidate]] | None = None,
        save_error: Exception | None = None,
        parse_error: Exception | None = None,
    ) -> None:
        self.history = history or {}
        self.results = results or []
        self.save_error = save_error
        self.parse_error = parse_error
        self.saved: list[tuple[PageLocatorKey, tuple[Any, ...]]] = []
        self.history_queries: list[tuple[Locator, str]] = []
        self.compared: list[tuple[Sequence[Any], Any]] = []

    def save_elements(self, key: PageLocatorKey, elements: Sequence[Any]) -> None:
        if self.save_error is not None:
            raise self.save_error
        self.saved.append((key, tuple(elements)))

    def parse_tree(self, page_source: str) -> Any:
        if self.parse_error is not None:
            raise self.parse_error
        return {"tree": page_source}

    def get_last_healing_data(self, locator: Locator, current_url: str) -> LastHealingData | None:
        self.history_queries.append((locator, current_url))
        return self.history.get((locator, current_url))

    def find_new_locations(self, paths: Sequence[Any], destination: Any, context: HealingContext) -> None:
        self.compared.append((paths, destination))
        context.healing_results = [HealingResult(list(candidates)) for candidates in self.results]


@dataclass
class FakeWebDriver:
    """Stands in for a Selenium WebDriver: every command goes through ``execute``."""

    elements: dict[tuple[str, str], list[FakeElement]] = field(default_factory=dict)
    page_title: str = "Login"
    url: str = "http://localhost:8000/login"
    commands: list[tuple[str, dict]] = field(default_factory=list)

    def execute(self, driver_command: str, params: dict | None = None) -> dict:
        params = params or {}
        self.commands.append((driver_command, dict(params)))
        if driver_command == Command.GET_TITLE:
            return {"value": self.page_title}
        if driver_command == Command.GET_PAGE_SOURCE:
            return {"value": "<html></html>"}
        if driver_command == Command.GET_CURRENT_URL:
            return {"value": self.url}
        if driver_command in (Command.FIND_ELEMENT, Command.FIND_CHILD_ELEMENT):
            matches = self.elements.get((params["using"], params["value"]), [])
            if not matches:
                raise NoSuchElementException(f"no element for {params['using']}={params['value']}")
            return {"value": matches[0]}
        if driver_command in (Command.FIND_ELEMENTS, Command.FIND_CHILD_ELEMENTS):
            return {"value": list(self.elements.get((params["using"], params["value"]), []))}
        return {"value": None}

    @property
    def title(self) -> str:
        return self.execute(Command.GET_TITLE)["value"]

    @property
    def page_source(self) -> str:
        return self.execute(Command.GET_PAGE_SOURCE)["value"]

    @property
    def current_url(self) -> str:
        return self.execute(Command.GET_CURRENT_URL)["value"]

    def find_element(self, by: str, value: str) -> FakeElement:
        return self.execute(Command.FIND_ELEMENT, {"using": by, "value": value})["value"]

    def lookup_count(self) -> int:
        return sum(1 for name, _ in self.commands if name == Command.FIND_ELEMENT)


def candidate(locator: Locator, score: float) -> HealingCandidate:
    return HealingCandidate(healed_locator=locator, score=score)

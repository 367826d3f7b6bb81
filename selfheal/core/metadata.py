from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from selenium.webdriver.remote.command import Command

from selfheal.core.locator import Locator

LOOKUP_COMMANDS = frozenset(
    name.lower()
    for name in (
        Command.FIND_ELEMENT,
        Command.FIND_ELEMENTS,
        Command.FIND_CHILD_ELEMENT,
        Command.FIND_CHILD_ELEMENTS,
    )
)


@dataclass(slots=True)
class CommandContext:
    """One in-flight driver command, owned by the command pipeline."""

    command_name: str
    parameters: dict[str, Any] = field(default_factory=dict)
    response_value: Any = None
    retry_requested: bool = False

    @property
    def is_lookup(self) -> bool:
        return isinstance(self.command_name, str) and self.command_name.lower() in LOOKUP_COMMANDS

    @property
    def has_locator(self) -> bool:
        return self.parameters is not None and "using" in self.parameters and "value" in self.parameters


@dataclass(frozen=True, slots=True)
class PageLocatorKey:
    page_identity: str
    locator: Locator


@dataclass(frozen=True, slots=True)
class CapturedElementSet:
    key: PageLocatorKey
    elements: tuple[Any, ...]


@dataclass(frozen=True, slots=True)
class HealingCandidate:
    healed_locator: Locator
    score: float


@dataclass(slots=True)
class HealingResult:
    candidates: list[HealingCandidate] = field(default_factory=list)


@dataclass(slots=True)
class HealingContext:
    """Filled in by the engine's ``find_new_locations`` with ranked attempts."""

    healing_results: list[HealingResult] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class LastHealingData:
    paths: Sequence[Sequence[Any]] = ()


@dataclass(slots=True)
class HealAttempt:
    command: str
    page_identity: str
    old_locator: str
    outcome: str
    new_locator: str = ""
    score: float | None = None
    duration_ms: float = 0.0
    failure_type: str = ""

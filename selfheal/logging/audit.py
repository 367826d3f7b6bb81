from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from selfheal.core.metadata import HealAttempt

log = logging.getLogger(__name__)


@dataclass(slots=True)
class HealingStats:
    total: int = 0
    healed: int = 0
    unhealed: int = 0
    retry_failed: int = 0
    capture_faults: int = 0
    avg_duration_ms: float = 0.0
    by_outcome: dict[str, int] = field(default_factory=dict)


class HealingAuditLogger:
    """Persists healing attempts and the latest healed locator per original locator.

    The audit directory is created on the first write. Write failures are logged
    and dropped: auditing must never change the outcome of a driver command.
    """

    def __init__(self, root: str | Path = "artifacts") -> None:
        self.root = Path(root)
        self.healed_locators_path = self.root / "healed_locators.jsonl"
        self.locator_overrides_path = self.root / "locator_overrides.json"

    def write(self, attempt: HealAttempt) -> None:
        try:
            self._write(attempt)
        except (OSError, ValueError) as exc:
            log.warning("Could not write healing audit: %s", exc)

    def _write(self, attempt: HealAttempt) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        payload = asdict(attempt)
        payload["timestamp"] = datetime.now(UTC).isoformat()
        with self.healed_locators_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload) + "\n")

        if attempt.outcome == "healed" and attempt.new_locator:
            overrides = self.read_overrides()
            overrides[attempt.old_locator] = attempt.new_locator
            self.locator_overrides_path.write_text(
                json.dumps(overrides, indent=2, sort_keys=True),
                encoding="utf-8",
            )

    def read_overrides(self) -> dict[str, str]:
        if not self.locator_overrides_path.exists():
            return {}
        return json.loads(self.locator_overrides_path.read_text(encoding="utf-8"))

    def read_attempts(self) -> list[dict]:
        if not self.healed_locators_path.exists():
            return []
        attempts = []
        with self.healed_locators_path.open("r", encoding="utf-8") as handle:
            for line in handle:
                if line.strip():
                    attempts.append(json.loads(line))
        return attempts

    def summary(self) -> HealingStats:
        attempts = self.read_attempts()
        stats = HealingStats(total=len(attempts))
        if not attempts:
            return stats
        for attempt in attempts:
            outcome = attempt.get("outcome", "")
            stats.by_outcome[outcome] = stats.by_outcome.get(outcome, 0) + 1
        stats.healed = stats.by_outcome.get("healed", 0)
        stats.unhealed = stats.by_outcome.get("unhealed", 0)
        stats.retry_failed = stats.by_outcome.get("retry_failed", 0)
        stats.capture_faults = stats.by_outcome.get("capture_fault", 0)
        total_duration = sum(float(attempt.get("duration_ms", 0.0)) for attempt in attempts)
        stats.avg_duration_ms = round(total_duration / len(attempts), 3)
        return stats

    def render_report(self) -> str:
        stats = self.summary()
        rate = (stats.healed / stats.total * 100) if stats.total else 0.0
        lines = [
            "=" * 70,
            "SELF-HEALING REPORT".center(70),
            "=" * 70,
            f"Generated: {datetime.now(UTC).isoformat()}",
            "",
            f"Total attempts:   {stats.total}",
            f"Healed:           {stats.healed} ({rate:.1f}%)",
            f"Unhealed:         {stats.unhealed}",
            f"Retry failed:     {stats.retry_failed}",
            f"Capture faults:   {stats.capture_faults}",
            f"Average duration: {stats.avg_duration_ms:.0f}ms",
            "",
            "-" * 70,
        ]
        for attempt in self.read_attempts():
            lines.append(f"  Page:      {attempt.get('page_identity', '')}")
            lines.append(f"  Command:   {attempt.get('command', '')}")
            lines.append(f"  Outcome:   {attempt.get('outcome', '').upper()}")
            lines.append(f"  Original:  {attempt.get('old_locator', '')}")
            lines.append(f"  Healed to: {attempt.get('new_locator') or '-'}")
            lines.append("  " + "-" * 66)
        lines.append("=" * 70)
        return "\n".join(lines)

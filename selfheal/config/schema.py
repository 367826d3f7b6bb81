from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HealingSettings(BaseModel):
    """Settings threaded into the healing pipeline at construction time."""

    model_config = ConfigDict(populate_by_name=True)

    heal_enabled: bool = Field(default=False, alias="heal-enabled")
    capture_fault_policy: str = "log"
    audit_root: str | None = "artifacts"
    browser: str = "chrome"
    headless: bool = False
    page_load_timeout_seconds: int = 30

    @classmethod
    def from_json_file(cls, path: str | Path) -> "HealingSettings":
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))

    @field_validator("capture_fault_policy")
    @classmethod
    def validate_capture_fault_policy(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in {"log", "retry"}:
            raise ValueError("capture_fault_policy must be 'log' or 'retry'")
        return normalized

    @field_validator("browser")
    @classmethod
    def validate_browser(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in {"chrome", "firefox"}:
            raise ValueError(f"Unsupported browser: {value}")
        return normalized

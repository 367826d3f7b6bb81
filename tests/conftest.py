from __future__ import annotations

import pytest

from selfheal.config.schema import HealingSettings
from selfheal.logging.audit import HealingAuditLogger
from tests.helpers import FakeDriverView, FakeHealingEngine


@pytest.fixture()
def settings(tmp_path):
    return HealingSettings(heal_enabled=True, audit_root=str(tmp_path / "artifacts"))


@pytest.fixture()
def driver_view():
    return FakeDriverView()


@pytest.fixture()
def engine():
    return FakeHealingEngine()


@pytest.fixture()
def audit_logger(tmp_path):
    return HealingAuditLogger(tmp_path / "artifacts")

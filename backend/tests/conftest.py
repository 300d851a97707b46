from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from approval_engine.config import reset_settings
from approval_engine.services.balance import InMemoryBalanceService, set_balance_service
from approval_engine.services.holiday import InMemoryHolidayService, set_holiday_service
from approval_engine.services.store import (
    InMemoryRequestStore,
    InMemoryRuleStore,
    set_request_store,
    set_rule_store,
)

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from the process environment and cached settings."""
    for name in ("ALLOW_REQUESTER_PENDING_CANCEL", "STALE_PENDING_WORKING_DAYS", "SWEEP_INTERVAL_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def request_store() -> Iterator[InMemoryRequestStore]:
    """Install a fresh in-memory request store."""
    store = InMemoryRequestStore()
    set_request_store(store)
    yield store
    set_request_store(InMemoryRequestStore())


@pytest.fixture
def rule_store() -> Iterator[InMemoryRuleStore]:
    """Install a fresh in-memory rule store."""
    store = InMemoryRuleStore()
    set_rule_store(store)
    yield store
    set_rule_store(InMemoryRuleStore())


@pytest.fixture
def holiday_service() -> Iterator[InMemoryHolidayService]:
    """Install a fresh in-memory holiday service."""
    svc = InMemoryHolidayService()
    set_holiday_service(svc)
    yield svc
    set_holiday_service(InMemoryHolidayService())


@pytest.fixture
def balance_service() -> Iterator[InMemoryBalanceService]:
    """Install a fresh in-memory leave balance service."""
    svc = InMemoryBalanceService()
    set_balance_service(svc)
    yield svc
    set_balance_service(InMemoryBalanceService())

"""Request and rule stores consumed by the sweep worker.

The hosting service owns persistence; these protocols describe what the
worker needs from it. The in-memory implementations back development and
tests.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from approval_engine.exceptions import AppError
from approval_engine.models.enums import RequestStatus, RequestType
from approval_engine.services.resolver import apply_outcome

if TYPE_CHECKING:
    from approval_engine.schemas.decision import DecisionOutcome
    from approval_engine.schemas.request import Request
    from approval_engine.schemas.rule import Rule

logger = logging.getLogger(__name__)


@runtime_checkable
class RequestStore(Protocol):
    """Interface for request storage."""

    async def get_request(self, request_id: int) -> Request | None:
        """Fetch a request. Returns None if not found."""
        ...

    async def list_pending(self, request_type: RequestType) -> list[Request]:
        """List pending requests of one type, oldest first."""
        ...

    async def add_request(self, request: Request) -> Request:
        """Store a new request. Raises AppError(409) if the id is taken."""
        ...

    async def save_outcome(self, outcome: DecisionOutcome) -> Request | None:
        """Persist an engine decision.

        Returns the stored request, or None when the request already left
        the outcome's ``previous_status`` (someone else decided it first).
        """
        ...

    async def save_request(self, request: Request, expected_status: RequestStatus) -> Request | None:
        """Replace a stored request if its status is still ``expected_status``.

        Returns None when the stored status moved on.
        """
        ...


@runtime_checkable
class RuleStore(Protocol):
    """Interface for rule storage."""

    async def list_active_rules(self, request_type: RequestType) -> list[Rule]:
        """List active rules for one request type."""
        ...


class InMemoryRequestStore:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._requests: dict[int, Request] = {}
        self._lock = asyncio.Lock()

    def seed(self, request: Request) -> None:
        """Seed a request for testing."""
        self._requests[request.id] = request

    async def get_request(self, request_id: int) -> Request | None:
        """Fetch a request. Returns None if not found."""
        return self._requests.get(request_id)

    async def list_pending(self, request_type: RequestType) -> list[Request]:
        """List pending requests of one type, oldest first."""
        pending = [
            r
            for r in self._requests.values()
            if r.request_type == request_type and r.status == RequestStatus.PENDING
        ]
        return sorted(pending, key=lambda r: (r.created_at, r.id))

    async def add_request(self, request: Request) -> Request:
        """Store a new request. Raises AppError(409) if the id is taken."""
        async with self._lock:
            if request.id in self._requests:
                raise AppError("Request already exists", status_code=409)
            self._requests[request.id] = request
            return request

    async def save_outcome(self, outcome: DecisionOutcome) -> Request | None:
        """Persist an engine decision with compare-and-set on the status."""
        async with self._lock:
            current = self._requests.get(outcome.request_id)
            if current is None:
                raise AppError("Request not found", status_code=404)
            if not outcome.applied:
                return current
            if current.status != outcome.previous_status:
                logger.info(
                    "Request %s is already %s; dropping decision %s",
                    current.id,
                    current.status,
                    outcome.new_status,
                )
                return None
            updated = apply_outcome(current, outcome)
            self._requests[current.id] = updated
            return updated

    async def save_request(self, request: Request, expected_status: RequestStatus) -> Request | None:
        """Replace a stored request with compare-and-set on the status."""
        async with self._lock:
            current = self._requests.get(request.id)
            if current is None:
                raise AppError("Request not found", status_code=404)
            if current.status != expected_status:
                logger.info("Request %s is already %s; dropping update", current.id, current.status)
                return None
            self._requests[request.id] = request
            return request


class InMemoryRuleStore:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._rules: dict[int, Rule] = {}

    def seed(self, rule: Rule) -> None:
        """Seed a rule for testing."""
        self._rules[rule.id] = rule

    async def list_active_rules(self, request_type: RequestType) -> list[Rule]:
        """List active rules for one request type."""
        return [r for r in self._rules.values() if r.request_type == request_type and r.is_active]


_request_store: RequestStore = InMemoryRequestStore()
_rule_store: RuleStore = InMemoryRuleStore()


def get_request_store() -> RequestStore:
    """Return the configured request store."""
    return _request_store


def set_request_store(store: RequestStore) -> None:
    """Override the store (for testing or production wiring)."""
    global _request_store
    _request_store = store


def get_rule_store() -> RuleStore:
    """Return the configured rule store."""
    return _rule_store


def set_rule_store(store: RuleStore) -> None:
    """Override the store (for testing or production wiring)."""
    global _rule_store
    _rule_store = store

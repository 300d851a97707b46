"""Leave balance: remaining leave days per employee.

Approved and auto-approved leaves consume balance. Cancelling one gives
the days back.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from approval_engine.exceptions import AppError
from approval_engine.models.enums import RequestStatus
from approval_engine.schemas.request import LeaveRequest

if TYPE_CHECKING:
    from approval_engine.schemas.request import Request

logger = logging.getLogger(__name__)

_CONSUMING_STATUSES = frozenset({RequestStatus.APPROVED, RequestStatus.AUTO_APPROVED})


@runtime_checkable
class BalanceService(Protocol):
    """Interface for the Leave Balance Service."""

    async def get_remaining_days(self, employee_id: int) -> int:
        """Return the employee's remaining leave days."""
        ...

    async def deduct_days(self, employee_id: int, days: int) -> int:
        """Consume leave days. Returns the new remaining balance."""
        ...

    async def restore_days(self, employee_id: int, days: int) -> int:
        """Give leave days back. Returns the new remaining balance."""
        ...


class InMemoryBalanceService:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._balances: dict[int, int] = {}

    def seed(self, employee_id: int, days: int) -> None:
        """Seed an employee's balance for testing."""
        self._balances[employee_id] = days

    async def get_remaining_days(self, employee_id: int) -> int:
        if employee_id not in self._balances:
            raise AppError("Leave balance not found", status_code=404)
        return self._balances[employee_id]

    async def deduct_days(self, employee_id: int, days: int) -> int:
        remaining = await self.get_remaining_days(employee_id)
        if days > remaining:
            raise AppError("Leave balance exceeded", status_code=400)
        self._balances[employee_id] = remaining - days
        return self._balances[employee_id]

    async def restore_days(self, employee_id: int, days: int) -> int:
        remaining = await self.get_remaining_days(employee_id)
        self._balances[employee_id] = remaining + days
        return self._balances[employee_id]


_balance_service: BalanceService = InMemoryBalanceService()


def get_balance_service() -> BalanceService:
    """Return the configured Balance Service."""
    return _balance_service


def set_balance_service(service: BalanceService) -> None:
    """Override the service (for testing or production wiring)."""
    global _balance_service
    _balance_service = service


# ---------------------------------------------------------------------------
# Balance checks and settlement
# ---------------------------------------------------------------------------


async def ensure_leave_balance(request: Request) -> None:
    """Raise AppError(400) when a leave request asks for more days than remain.

    Non-leave requests are not checked.
    """
    if not isinstance(request, LeaveRequest):
        return
    remaining = await get_balance_service().get_remaining_days(request.requester_id)
    if request.days > remaining:
        logger.info(
            "Leave request %s needs %d days, employee %s has %d",
            request.id,
            request.days,
            request.requester_id,
            remaining,
        )
        raise AppError("Leave balance exceeded", status_code=400)


async def settle_leave_balance(before: Request, after: Request) -> int:
    """Deduct or restore leave days for a status change.

    Returns the signed change applied to the balance: negative when the
    leave became approved, positive when an approved leave left that state.
    """
    if not isinstance(after, LeaveRequest):
        return 0
    was_consuming = before.status in _CONSUMING_STATUSES
    is_consuming = after.status in _CONSUMING_STATUSES
    service = get_balance_service()

    if is_consuming and not was_consuming:
        await service.deduct_days(after.requester_id, after.days)
        logger.info("Deducted %d leave days for request %s", after.days, after.id)
        return -after.days
    if was_consuming and not is_consuming:
        await service.restore_days(after.requester_id, after.days)
        logger.info("Restored %d leave days for request %s", after.days, after.id)
        return after.days
    return 0

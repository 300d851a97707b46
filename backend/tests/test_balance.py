"""Tests for the leave balance service and balance settlement."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from approval_engine.exceptions import AppError
from approval_engine.models.enums import RequestStatus
from approval_engine.schemas.request import ExpenseRequest, LeaveRequest
from approval_engine.services.balance import (
    BalanceService,
    InMemoryBalanceService,
    ensure_leave_balance,
    settle_leave_balance,
)

EMPLOYEE_ID = 5


def _leave(days: int, status: RequestStatus = RequestStatus.PENDING) -> LeaveRequest:
    start = date(2025, 2, 3)
    return LeaveRequest(
        id=1,
        requester_id=EMPLOYEE_ID,
        requester_grade_id=1,
        reason="Family visit",
        leave_type="CASUAL",
        from_date=start,
        to_date=date.fromordinal(start.toordinal() + days - 1),
        status=status,
    )


def test_stub_satisfies_protocol() -> None:
    assert isinstance(InMemoryBalanceService(), BalanceService)


# ---------------------------------------------------------------------------
# InMemoryBalanceService
# ---------------------------------------------------------------------------


async def test_deduct_and_restore() -> None:
    svc = InMemoryBalanceService()
    svc.seed(EMPLOYEE_ID, 12)

    assert await svc.deduct_days(EMPLOYEE_ID, 5) == 7
    assert await svc.restore_days(EMPLOYEE_ID, 2) == 9
    assert await svc.get_remaining_days(EMPLOYEE_ID) == 9


async def test_deduct_beyond_balance_raises() -> None:
    svc = InMemoryBalanceService()
    svc.seed(EMPLOYEE_ID, 3)

    with pytest.raises(AppError, match="Leave balance exceeded") as exc_info:
        await svc.deduct_days(EMPLOYEE_ID, 4)
    assert exc_info.value.status_code == 400
    assert await svc.get_remaining_days(EMPLOYEE_ID) == 3


async def test_unknown_employee_raises_not_found() -> None:
    with pytest.raises(AppError) as exc_info:
        await InMemoryBalanceService().get_remaining_days(99)
    assert exc_info.value.status_code == 404


# ---------------------------------------------------------------------------
# ensure_leave_balance
# ---------------------------------------------------------------------------


async def test_leave_within_balance_passes(balance_service: InMemoryBalanceService) -> None:
    balance_service.seed(EMPLOYEE_ID, 3)
    await ensure_leave_balance(_leave(3))


async def test_leave_over_balance_is_refused(balance_service: InMemoryBalanceService) -> None:
    balance_service.seed(EMPLOYEE_ID, 3)
    with pytest.raises(AppError, match="Leave balance exceeded"):
        await ensure_leave_balance(_leave(4))


@pytest.mark.usefixtures("balance_service")
async def test_non_leave_requests_are_not_checked() -> None:
    expense = ExpenseRequest(id=2, requester_id=EMPLOYEE_ID, requester_grade_id=1, reason="Taxi", amount=Decimal(30))
    await ensure_leave_balance(expense)


# ---------------------------------------------------------------------------
# settle_leave_balance
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("approved", [RequestStatus.APPROVED, RequestStatus.AUTO_APPROVED])
async def test_approval_deducts(balance_service: InMemoryBalanceService, approved: RequestStatus) -> None:
    balance_service.seed(EMPLOYEE_ID, 10)
    pending = _leave(4)

    change = await settle_leave_balance(pending, pending.model_copy(update={"status": approved}))

    assert change == -4
    assert await balance_service.get_remaining_days(EMPLOYEE_ID) == 6


@pytest.mark.parametrize("approved", [RequestStatus.APPROVED, RequestStatus.AUTO_APPROVED])
async def test_cancelling_approved_leave_restores(
    balance_service: InMemoryBalanceService, approved: RequestStatus
) -> None:
    balance_service.seed(EMPLOYEE_ID, 6)
    leave = _leave(4, status=approved)

    change = await settle_leave_balance(leave, leave.model_copy(update={"status": RequestStatus.CANCELLED}))

    assert change == 4
    assert await balance_service.get_remaining_days(EMPLOYEE_ID) == 10


@pytest.mark.parametrize(
    ("before", "after"),
    [
        (RequestStatus.PENDING, RequestStatus.REJECTED),
        (RequestStatus.PENDING, RequestStatus.AUTO_REJECTED),
        (RequestStatus.PENDING, RequestStatus.CANCELLED),
        (RequestStatus.PENDING, RequestStatus.PENDING),
    ],
)
async def test_other_changes_leave_balance_alone(
    balance_service: InMemoryBalanceService, before: RequestStatus, after: RequestStatus
) -> None:
    balance_service.seed(EMPLOYEE_ID, 6)
    leave = _leave(4, status=before)

    assert await settle_leave_balance(leave, leave.model_copy(update={"status": after})) == 0
    assert await balance_service.get_remaining_days(EMPLOYEE_ID) == 6

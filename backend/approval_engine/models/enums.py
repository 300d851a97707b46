from __future__ import annotations

import enum


class RequestType(enum.StrEnum):
    """Kind of request submitted by an employee."""

    LEAVE = "leave"
    EXPENSE = "expense"
    DISCOUNT = "discount"


class RequestStatus(enum.StrEnum):
    """State machine for submitted requests."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    AUTO_APPROVED = "auto_approved"
    AUTO_REJECTED = "auto_rejected"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition out of this status is ever legal."""
        return self in _TERMINAL_STATUSES


_TERMINAL_STATUSES = frozenset(
    {
        RequestStatus.REJECTED,
        RequestStatus.AUTO_APPROVED,
        RequestStatus.AUTO_REJECTED,
        RequestStatus.CANCELLED,
    }
)


class RuleAction(enum.StrEnum):
    """What a matching rule does with a request."""

    AUTO_APPROVE = "auto_approve"
    AUTO_REJECT = "auto_reject"
    ASSIGN_APPROVER = "assign_approver"


class Role(enum.StrEnum):
    """Actor role used for transition authorization."""

    EMPLOYEE = "employee"
    MANAGER = "manager"
    ADMIN = "admin"


class ConditionKind(enum.StrEnum):
    """Recognized rule condition keys, in evaluation precedence order."""

    MAX_AMOUNT = "max_amount"
    MIN_AMOUNT = "min_amount"
    MAX_DAYS = "max_days"
    MIN_DAYS = "min_days"
    LEAVE_TYPE = "leave_type"
    DISCOUNT_PERCENTAGE = "discount_percentage"

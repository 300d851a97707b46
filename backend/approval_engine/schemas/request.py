# ruff: noqa: TC003
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Literal, Self

from pydantic import Field, TypeAdapter, computed_field, model_validator

from approval_engine.models.base import TimestampMixin
from approval_engine.models.enums import RequestStatus

# ---------------------------------------------------------------------------
# Shared fields
# ---------------------------------------------------------------------------


class RequestBase(TimestampMixin):
    """Fields common to every request type."""

    id: int
    requester_id: int
    requester_grade_id: int
    status: RequestStatus = RequestStatus.PENDING
    reason: str = Field(min_length=1)
    decided_by_rule_id: int | None = None
    decided_by: int | None = None
    decided_at: datetime | None = None
    decision_note: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def _validate_reason(self) -> Self:
        if not self.reason.strip():
            msg = "reason must not be blank"
            raise ValueError(msg)
        return self


# ---------------------------------------------------------------------------
# Per-type requests (discriminated union)
# ---------------------------------------------------------------------------


class LeaveRequest(RequestBase):
    """A leave request spanning whole calendar days."""

    request_type: Literal["leave"] = "leave"
    leave_type: str = Field(min_length=1, max_length=50)
    from_date: date
    to_date: date

    @computed_field  # type: ignore[prop-decorator]
    @property
    def days(self) -> int:
        """Inclusive number of calendar days covered by the request."""
        return (self.to_date - self.from_date).days + 1

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.to_date < self.from_date:
            msg = "to_date must not be before from_date"
            raise ValueError(msg)
        return self


class ExpenseRequest(RequestBase):
    """A reimbursement request for an amount in currency units."""

    request_type: Literal["expense"] = "expense"
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    category: str | None = Field(default=None, max_length=100)


class DiscountRequest(RequestBase):
    """A request to grant a customer discount."""

    request_type: Literal["discount"] = "discount"
    discount_percentage: Decimal = Field(ge=0, le=100)


Request = Annotated[
    LeaveRequest | ExpenseRequest | DiscountRequest,
    Field(discriminator="request_type"),
]

_request_adapter: TypeAdapter[Request] = TypeAdapter(Request)


def parse_request(data: Any) -> Request:
    """Validate a raw mapping into the matching request variant.

    Raises ``pydantic.ValidationError`` for malformed records.
    """
    return _request_adapter.validate_python(data)

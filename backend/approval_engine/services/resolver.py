"""Decision resolver: maps a matched rule's action onto a request status."""

from __future__ import annotations

from typing import TYPE_CHECKING

from approval_engine.exceptions import AppError
from approval_engine.models.base import now_utc
from approval_engine.models.enums import RequestStatus, RequestType, RuleAction
from approval_engine.schemas.decision import DecisionOutcome

if TYPE_CHECKING:
    from datetime import datetime

    from approval_engine.schemas.request import Request
    from approval_engine.schemas.rule import Rule

_ACTION_STATUS: dict[RuleAction, RequestStatus] = {
    RuleAction.AUTO_APPROVE: RequestStatus.AUTO_APPROVED,
    RuleAction.AUTO_REJECT: RequestStatus.AUTO_REJECTED,
}


def resolve_decision(request: Request, rule: Rule | None) -> DecisionOutcome:
    """Translate the selected rule (or no rule) into a decision outcome.

    Only ``auto_approve`` and ``auto_reject`` change the status; an
    ``assign_approver`` match leaves the request pending with a routing hint.
    Requests that are no longer pending are never changed.
    """
    request_type = RequestType(request.request_type)
    current = RequestStatus(request.status)

    if current != RequestStatus.PENDING:
        return DecisionOutcome(
            request_id=request.id,
            request_type=request_type,
            previous_status=current,
            new_status=current,
            message=f"{request_type} request already {current}",
        )

    if rule is None:
        return DecisionOutcome(
            request_id=request.id,
            request_type=request_type,
            previous_status=current,
            new_status=current,
            message=f"{request_type} request submitted for approval",
        )

    action = RuleAction(rule.action)
    new_status = _ACTION_STATUS.get(action)
    if new_status is None:
        return DecisionOutcome(
            request_id=request.id,
            request_type=request_type,
            previous_status=current,
            new_status=current,
            rule_id=rule.id,
            action=action,
            assign_approver=True,
            message=f"{request_type} request routed to an approver",
        )

    verb = "approved" if new_status == RequestStatus.AUTO_APPROVED else "rejected"
    return DecisionOutcome(
        request_id=request.id,
        request_type=request_type,
        previous_status=current,
        new_status=new_status,
        rule_id=rule.id,
        action=action,
        decided_by_rule_id=rule.id,
        message=f"{request_type} request {verb} by system",
    )


def apply_outcome(request: Request, outcome: DecisionOutcome, now: datetime | None = None) -> Request:
    """Return a copy of ``request`` with the outcome's status applied.

    Outcomes that change nothing return the request untouched.
    """
    if outcome.request_id != request.id:
        raise AppError("Decision outcome belongs to a different request", status_code=400)
    if not outcome.applied:
        return request
    if request.status != outcome.previous_status:
        raise AppError(
            f"Request is {request.status}, expected {outcome.previous_status}",
            status_code=409,
        )
    return request.model_copy(
        update={
            "status": outcome.new_status,
            "decided_by_rule_id": outcome.decided_by_rule_id,
            "updated_at": now or now_utc(),
        }
    )

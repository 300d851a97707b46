"""Lifecycle guard: legal status transitions and who may trigger them.

State machine::

    pending --approve/reject--> approved | rejected   (manager/admin, not own request)
    pending --cancel--------->  cancelled             (manager/admin)
    approved --cancel-------->  cancelled             (anyone)

``rejected``, ``cancelled``, ``auto_approved`` and ``auto_rejected`` are
terminal. Automatic decisions never go through this guard; they are made
by the rule engine only.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from approval_engine.config import get_settings
from approval_engine.exceptions import AppError
from approval_engine.models.base import now_utc
from approval_engine.models.enums import RequestStatus, Role

if TYPE_CHECKING:
    from datetime import datetime

    from approval_engine.schemas.auth import ActorContext
    from approval_engine.schemas.request import Request

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED, RequestStatus.CANCELLED}),
    RequestStatus.APPROVED: frozenset({RequestStatus.CANCELLED}),
}
_DECISION_TARGETS = frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED})
_DECIDER_ROLES = frozenset({Role.MANAGER, Role.ADMIN})

_VERBS: dict[RequestStatus, str] = {
    RequestStatus.APPROVED: "approve",
    RequestStatus.REJECTED: "reject",
    RequestStatus.CANCELLED: "cancel",
}


def _coerce_status(value: RequestStatus | str) -> RequestStatus | None:
    try:
        return RequestStatus(value)
    except ValueError:
        return None


def _coerce_role(value: Role | str) -> Role | None:
    try:
        return Role(value)
    except ValueError:
        return None


def is_known_transition(current: RequestStatus | str, target: RequestStatus | str) -> bool:
    """Whether the state machine has an edge from ``current`` to ``target`` for some actor."""
    current_status = _coerce_status(current)
    target_status = _coerce_status(target)
    if current_status is None or target_status is None:
        return False
    return target_status in _TRANSITIONS.get(current_status, frozenset())


def can_transition(
    current: RequestStatus | str,
    target: RequestStatus | str,
    actor_role: Role | str,
    is_own_request: bool,
    *,
    allow_requester_pending_cancel: bool = False,
) -> bool:
    """Return True when an actor with ``actor_role`` may move a request from ``current`` to ``target``.

    Never raises: unknown statuses or roles are simply not allowed.
    """
    if not is_known_transition(current, target):
        return False

    current_status = RequestStatus(current)
    target_status = RequestStatus(target)
    role = _coerce_role(actor_role)

    if current_status == RequestStatus.APPROVED:
        return True

    if target_status in _DECISION_TARGETS:
        return role in _DECIDER_ROLES and not is_own_request

    # pending -> cancelled
    if role in _DECIDER_ROLES:
        return True
    return allow_requester_pending_cancel and is_own_request


def authorize_transition(
    current: RequestStatus | str,
    target: RequestStatus | str,
    actor_role: Role | str,
    actor_id: int | None,
    requester_id: int | None,
    *,
    allow_requester_pending_cancel: bool | None = None,
) -> bool:
    """Decide whether ``actor_id`` may change the status of ``requester_id``'s request.

    Approve and reject need both ids; either one missing is a denial.
    """
    if (actor_id is None or requester_id is None) and _coerce_status(target) in _DECISION_TARGETS:
        return False
    if allow_requester_pending_cancel is None:
        allow_requester_pending_cancel = get_settings().allow_requester_pending_cancel
    is_own_request = actor_id is not None and actor_id == requester_id
    return can_transition(
        current,
        target,
        actor_role,
        is_own_request,
        allow_requester_pending_cancel=allow_requester_pending_cancel,
    )


def allowed_targets(
    current: RequestStatus | str,
    actor_role: Role | str,
    is_own_request: bool,
    *,
    allow_requester_pending_cancel: bool = False,
) -> list[RequestStatus]:
    """List the statuses this actor may move the request to, in declaration order."""
    current_status = _coerce_status(current)
    if current_status is None or current_status.is_terminal:
        return []
    return [
        target
        for target in RequestStatus
        if can_transition(
            current,
            target,
            actor_role,
            is_own_request,
            allow_requester_pending_cancel=allow_requester_pending_cancel,
        )
    ]


# ---------------------------------------------------------------------------
# Manual transitions
# ---------------------------------------------------------------------------


def transition_request(
    request: Request,
    target: RequestStatus | str,
    actor: ActorContext,
    note: str | None = None,
    *,
    now: datetime | None = None,
) -> Request:
    """Apply a manual status change, returning the updated request.

    Raises AppError with 400 when the state machine has no such edge and 403
    when the actor is not allowed to take it.
    """
    current = RequestStatus(request.status)
    target_status = _coerce_status(target)
    if target_status is None or not is_known_transition(current, target_status):
        raise AppError(f"Cannot move a {current} request to {target}", status_code=400)

    if not authorize_transition(current, target_status, actor.role, actor.user_id, request.requester_id):
        logger.warning(
            "Denied %s -> %s on request %s for user %s (%s)",
            current,
            target_status,
            request.id,
            actor.user_id,
            actor.role,
        )
        verb = _VERBS[target_status]
        if target_status in _DECISION_TARGETS and actor.user_id == request.requester_id:
            raise AppError(f"Cannot {verb} your own request", status_code=403)
        raise AppError(f"Not authorized to {verb} this request", status_code=403)

    timestamp = now or now_utc()
    updated = request.model_copy(
        update={
            "status": target_status,
            "decided_by": actor.user_id,
            "decided_at": timestamp,
            "decision_note": note,
            "updated_at": timestamp,
        }
    )
    logger.info("Request %s moved %s -> %s by user %s", request.id, current, target_status, actor.user_id)
    return updated


def approve_request(request: Request, actor: ActorContext, note: str | None = None) -> Request:
    """Approve a pending request."""
    return transition_request(request, RequestStatus.APPROVED, actor, note)


def reject_request(request: Request, actor: ActorContext, note: str | None = None) -> Request:
    """Reject a pending request."""
    return transition_request(request, RequestStatus.REJECTED, actor, note)


def cancel_request(request: Request, actor: ActorContext, note: str | None = None) -> Request:
    """Cancel a pending or approved request."""
    return transition_request(request, RequestStatus.CANCELLED, actor, note)

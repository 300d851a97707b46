"""Request flows that combine the rule engine, the lifecycle guard and storage.

``submit_request`` checks the leave balance, runs the rule engine and
stores the request. ``change_request_status`` applies a manual approve,
reject or cancel. Both keep the leave balance in step with the status.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from approval_engine.exceptions import AppError
from approval_engine.models.enums import RequestStatus, RequestType
from approval_engine.services.balance import ensure_leave_balance, settle_leave_balance
from approval_engine.services.lifecycle import transition_request
from approval_engine.services.resolver import apply_outcome
from approval_engine.services.runner import decide
from approval_engine.services.store import get_request_store, get_rule_store

if TYPE_CHECKING:
    from approval_engine.schemas.auth import ActorContext
    from approval_engine.schemas.decision import DecisionOutcome
    from approval_engine.schemas.request import Request

logger = logging.getLogger(__name__)


async def submit_request(request: Request) -> tuple[Request, DecisionOutcome]:
    """Decide a newly created request and store it.

    Leave requests asking for more days than the requester has left are
    refused with AppError(400) before any rule runs.
    """
    if request.status != RequestStatus.PENDING:
        raise AppError("New requests must be pending", status_code=400)
    store = get_request_store()
    if await store.get_request(request.id) is not None:
        raise AppError("Request already exists", status_code=409)

    await ensure_leave_balance(request)
    rules = await get_rule_store().list_active_rules(RequestType(request.request_type))
    outcome = decide(request, rules)
    decided = apply_outcome(request, outcome)

    await settle_leave_balance(request, decided)
    stored = await store.add_request(decided)
    logger.info("Request %s submitted as %s", stored.id, stored.status)
    return stored, outcome


async def change_request_status(
    request_id: int,
    target: RequestStatus | str,
    actor: ActorContext,
    note: str | None = None,
) -> Request:
    """Apply a manual status change to a stored request.

    Raises AppError with 404 for an unknown request, 400/403 from the
    lifecycle guard and 409 when the request changed underneath us.
    """
    store = get_request_store()
    current = await store.get_request(request_id)
    if current is None:
        raise AppError("Request not found", status_code=404)

    updated = transition_request(current, target, actor, note)
    if updated.status == RequestStatus.APPROVED:
        await ensure_leave_balance(updated)

    saved = await store.save_request(updated, expected_status=current.status)
    if saved is None:
        raise AppError("Request was changed by someone else", status_code=409)
    await settle_leave_balance(current, saved)
    return saved

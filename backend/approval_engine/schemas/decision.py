from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from approval_engine.models.enums import RequestStatus, RequestType, RuleAction


class DecisionOutcome(BaseModel):
    """Result of running the rule engine against one request."""

    model_config = ConfigDict(frozen=True)

    request_id: int
    request_type: RequestType
    previous_status: RequestStatus
    new_status: RequestStatus
    rule_id: int | None = None
    action: RuleAction | None = None
    decided_by_rule_id: int | None = None
    assign_approver: bool = False
    message: str

    @property
    def applied(self) -> bool:
        """Whether the outcome changes the request's status."""
        return self.new_status != self.previous_status

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from approval_engine.models.enums import RequestType, RuleAction
from approval_engine.schemas.condition import Condition, condition_from_mapping


class Rule(BaseModel):
    """A configured condition/action pair used to auto-decide requests.

    Lower ``priority`` values are evaluated first. A rule without
    ``grade_id`` applies to every grade.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    request_type: RequestType
    condition: Condition | None = None
    action: RuleAction
    priority: int
    grade_id: int | None = None
    is_active: bool = True
    name: str | None = Field(default=None, max_length=255)

    @field_validator("condition", mode="before")
    @classmethod
    def _parse_condition(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return condition_from_mapping(value)
        return value

"""Pydantic schemas for notification requests."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NotificationIn(BaseModel):
    execution_data: dict[str, Any] = Field(
        default_factory=dict,
        alias="executionData",
        description="Job execution data as sent by the orchestration host",
    )
    config: dict[str, Any] = Field(
        default_factory=dict,
        description="Job notification configuration, passed through to the message template",
    )

    model_config = ConfigDict(populate_by_name=True)


class NotificationResult(BaseModel):
    delivered: bool
    trigger: str
    channel: str

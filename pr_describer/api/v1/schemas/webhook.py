"""Webhook API 스키마."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class WebhookResponse(BaseModel):
    """Webhook 수신 응답."""

    model_config = ConfigDict(populate_by_name=True)

    status: Literal["accepted", "ignored"]
    run_id: str | None = Field(default=None, alias="runId")
    reason: str | None = None

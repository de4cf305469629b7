"""Validation lifecycle events published on the event bus."""

from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel

from formvalidation.models.results import ValidationRecord, ValidatorDescriptor


class BaseEvent(BaseModel):
    """Base model for all validation events."""

    type: str
    target: str
    timestamp: Optional[datetime] = None

    def model_post_init(self, __context):
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc)

    def model_dump(self, **kwargs):
        """Serialize enums and datetimes as JSON-safe values by default."""
        kwargs.setdefault("mode", "json")
        return super().model_dump(**kwargs)


class ValidationStartedEvent(BaseEvent):
    """Emitted before the first validator of a target runs."""

    type: Literal["validation_started"] = "validation_started"
    sync_validators: int
    async_validators: int


class ValidationProgressEvent(BaseEvent):
    """Emitted when a validator reports progress through its callback."""

    type: Literal["validation_progress"] = "validation_progress"
    validator: ValidatorDescriptor
    detail: Any = None


class ValidationCompletedEvent(BaseEvent):
    """Emitted when all phases of a target have finished."""

    type: Literal["validation_completed"] = "validation_completed"
    records: list[ValidationRecord]
    passed: bool
    sync_broken: bool
    duration_ms: float


class ValidationFailedEvent(BaseEvent):
    """Emitted when an evaluation function raised."""

    type: Literal["validation_failed"] = "validation_failed"
    error: str
    error_type: str

"""Validation outcome and record models.

An outcome is what a rule's evaluation function returns. A record is what
the manager hands back to callers: the outcome plus the validated value
and a snapshot of the validator that produced it.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ResultType(str, Enum):
    """Domain result of a single rule. Never raised, always recorded."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class ValidatorType(str, Enum):
    """Execution phase a validator belongs to."""

    SYNC = "sync"
    ASYNC = "async"


class ValidationOutcome(BaseModel):
    """Result returned by an evaluation function."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    result_type: ResultType = Field(alias="resultType")
    code: Optional[int] = None
    message: Optional[str] = None


class ValidatorDescriptor(BaseModel):
    """Snapshot of the validator that produced a record."""

    model_config = ConfigDict(frozen=True)

    target_name: str
    validator_type: ValidatorType
    precedence: int = 0


class ValidationRecord(BaseModel):
    """One executed validator's outcome for one target."""

    model_config = ConfigDict(frozen=True)

    result: ResultType
    code: Optional[int] = None
    message: Optional[str] = None
    value: str
    validator: ValidatorDescriptor

    @property
    def passed(self) -> bool:
        return self.result != ResultType.ERROR

    @property
    def target_name(self) -> str:
        return self.validator.target_name

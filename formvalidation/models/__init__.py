"""Data models: input states, validation outcomes/records, lifecycle events."""

from formvalidation.models.inputs import InputState, freeze_input_states
from formvalidation.models.results import (
    ResultType,
    ValidatorType,
    ValidationOutcome,
    ValidatorDescriptor,
    ValidationRecord,
)

__all__ = [
    "InputState",
    "freeze_input_states",
    "ResultType",
    "ValidatorType",
    "ValidationOutcome",
    "ValidatorDescriptor",
    "ValidationRecord",
]

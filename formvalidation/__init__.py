"""formvalidation: sync/async validation orchestration for form inputs."""

from formvalidation.config import Settings, get_settings
from formvalidation.errors import (
    FormValidationError,
    InvalidOutcomeError,
    InvalidValidatorError,
    MissingInputStateError,
)
from formvalidation.logging import configure_logging
from formvalidation.models import (
    InputState,
    ResultType,
    ValidationOutcome,
    ValidationRecord,
    ValidatorDescriptor,
    ValidatorType,
)
from formvalidation.services import EventBus
from formvalidation.validators import (
    AsyncValidator,
    BaseValidator,
    SyncValidator,
    ValidationManager,
)

__version__ = "1.0.0"

__all__ = [
    "AsyncValidator",
    "BaseValidator",
    "EventBus",
    "FormValidationError",
    "InputState",
    "InvalidOutcomeError",
    "InvalidValidatorError",
    "MissingInputStateError",
    "ResultType",
    "Settings",
    "SyncValidator",
    "ValidationManager",
    "ValidationOutcome",
    "ValidationRecord",
    "ValidatorDescriptor",
    "ValidatorType",
    "configure_logging",
    "get_settings",
]

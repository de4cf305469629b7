"""Field validators and the manager that orchestrates them.

Usage:
    from formvalidation.validators import ValidationManager, SyncValidator

    manager = ValidationManager()
    manager.add_validator(SyncValidator("username", not_empty))
    records = await manager.validate_all(input_states)
"""

from formvalidation.validators.async_validator import AsyncValidator
from formvalidation.validators.base import BaseValidator
from formvalidation.validators.manager import ValidationManager
from formvalidation.validators.sync_validator import SyncValidator

__all__ = [
    "AsyncValidator",
    "BaseValidator",
    "SyncValidator",
    "ValidationManager",
]

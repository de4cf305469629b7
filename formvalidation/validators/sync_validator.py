"""Synchronous validator: rules that return their outcome immediately."""

from typing import Any

from formvalidation.models.results import ValidatorType
from formvalidation.validators.base import BaseValidator


class SyncValidator(BaseValidator):
    """Cheap rule (format checks, required fields, cross-field equality).

    Runs in the synchronous phase and never suspends mid-evaluation.
    """

    __slots__ = ()

    @property
    def type(self) -> ValidatorType:
        return ValidatorType.SYNC

    async def _evaluate(self, args: tuple) -> Any:
        return self._fn(*args)

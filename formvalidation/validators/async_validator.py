"""Asynchronous validator: rules whose outcome arrives later (remote checks)."""

from typing import Any

from formvalidation.models.results import ValidatorType
from formvalidation.validators.base import BaseValidator


class AsyncValidator(BaseValidator):
    """Expensive rule, e.g. a uniqueness check against a remote service.

    The evaluation function may be an ``async def`` or any callable returning
    an awaitable. Runs concurrently with the other async rules of its target,
    only when the synchronous phase did not break.
    """

    __slots__ = ()

    @property
    def type(self) -> ValidatorType:
        return ValidatorType.ASYNC

    async def _evaluate(self, args: tuple) -> Any:
        return await self._fn(*args)

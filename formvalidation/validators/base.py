"""Base validator: shared contract for sync and async rules.

Each validator is bound to one target name and carries a precedence used
to order rules of the same phase. Both variants expose the same coroutine
`validate()` so the manager treats them identically; the variant is carried
explicitly in `type` and in every record's descriptor.
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, Optional, Union

from formvalidation.errors import InvalidOutcomeError, InvalidValidatorError
from formvalidation.models.inputs import InputState
from formvalidation.models.results import (
    ValidationOutcome,
    ValidationRecord,
    ValidatorDescriptor,
    ValidatorType,
)

ProgressCallback = Callable[..., None]

MAX_EVALUATION_ARGS = 3


def _noop_progress(*args, **kwargs) -> None:
    return None


def _positional_arity(fn: Callable) -> int:
    """How many of (state, all_states, progress) the function accepts."""
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return MAX_EVALUATION_ARGS

    count = 0
    for param in params:
        if param.kind == param.VAR_POSITIONAL:
            return MAX_EVALUATION_ARGS
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            count += 1
    return min(count, MAX_EVALUATION_ARGS)


class BaseValidator(ABC):
    """Abstract base for all field validators.

    Contract:
        - immutable after construction
        - validate() returns exactly one ValidationRecord
        - exceptions raised by the evaluation function propagate unchanged
    """

    __slots__ = ("_target_name", "_fn", "_precedence", "_arity")

    def __init__(self, target_name: str, fn: Callable, precedence: int = 0):
        if not isinstance(target_name, str) or not target_name:
            raise InvalidValidatorError("target_name must be a non-empty string")
        if isinstance(precedence, bool) or not isinstance(precedence, int):
            raise InvalidValidatorError(f"precedence must be an int, got {precedence!r}")
        if not callable(fn):
            raise InvalidValidatorError("evaluation function must be callable")

        self._target_name = target_name
        self._fn = fn
        self._precedence = precedence
        self._arity = _positional_arity(fn)

    @property
    def target_name(self) -> str:
        return self._target_name

    @property
    def precedence(self) -> int:
        return self._precedence

    @property
    @abstractmethod
    def type(self) -> ValidatorType:
        """Which phase this validator runs in."""
        ...

    @property
    def descriptor(self) -> ValidatorDescriptor:
        return ValidatorDescriptor(
            target_name=self._target_name,
            validator_type=self.type,
            precedence=self._precedence,
        )

    @abstractmethod
    async def _evaluate(self, args: tuple) -> Any:
        """Run the evaluation function and return its raw outcome."""
        ...

    async def validate(
        self,
        input_state: InputState,
        all_input_states: Mapping[str, InputState],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> ValidationRecord:
        """Evaluate the rule against the target's current state.

        Args:
            input_state: State of this validator's target
            all_input_states: Every known input state, for cross-field rules
            progress_callback: Called by rules that report progress

        Returns:
            ValidationRecord carrying the outcome, the target's value and
            this validator's descriptor
        """
        args = (input_state, all_input_states, progress_callback or _noop_progress)
        outcome = self._coerce(await self._evaluate(args[: self._arity]))

        return ValidationRecord(
            result=outcome.result_type,
            code=outcome.code,
            message=outcome.message,
            value=input_state.value,
            validator=self.descriptor,
        )

    def _coerce(self, raw: Union[ValidationOutcome, Mapping, Any]) -> ValidationOutcome:
        if isinstance(raw, ValidationOutcome):
            return raw
        if isinstance(raw, Mapping):
            try:
                return ValidationOutcome.model_validate(raw)
            except ValueError as e:
                raise InvalidOutcomeError(self._target_name, raw) from e
        raise InvalidOutcomeError(self._target_name, raw)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(target_name={self._target_name!r}, "
            f"precedence={self._precedence})"
        )

"""
formvalidation test configuration and fixtures.

Provides an isolated Settings object (no environment or .env lookup) and
helpers that build the rule set used across the manager tests: error
detectors flag "invalid", warning detectors flag "warn", async variants
flag the same values suffixed with "_async".
"""

import pytest

from formvalidation.config import Settings
from formvalidation.models import InputState, ResultType, ValidationOutcome
from formvalidation.services import EventBus
from formvalidation.validators import AsyncValidator, SyncValidator, ValidationManager


def detect(value: str, kind: ResultType, suffix: str = "") -> ResultType:
    """Result a detector of `kind` produces for `value`."""
    if kind == ResultType.ERROR:
        return ResultType.ERROR if value == f"invalid{suffix}" else ResultType.SUCCESS
    if kind == ResultType.WARNING:
        return ResultType.WARNING if value == f"warn{suffix}" else ResultType.SUCCESS
    return ResultType.SUCCESS


def _sync_detector(target: str, kind: ResultType, precedence: int = 0) -> SyncValidator:
    return SyncValidator(
        target,
        lambda state: ValidationOutcome(result_type=detect(state.value, kind)),
        precedence,
    )


def _async_detector(target: str, kind: ResultType, precedence: int = 0) -> AsyncValidator:
    async def evaluate(state):
        return ValidationOutcome(result_type=detect(state.value, kind, "_async"))

    return AsyncValidator(target, evaluate, precedence)


def _input_states(value1: str, value2: str = "valid") -> dict[str, InputState]:
    return {
        "input1": InputState(value=value1),
        "input2": InputState(value=value2),
    }


def _count_results(records) -> dict[ResultType, int]:
    counts = {kind: 0 for kind in ResultType}
    for record in records:
        counts[record.result] += 1
    return counts


@pytest.fixture
def settings():
    """Default settings, without reading a .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def event_bus(settings):
    return EventBus(max_history=settings.EVENT_HISTORY_SIZE)


@pytest.fixture
def manager(event_bus, settings):
    return ValidationManager(event_bus=event_bus, settings=settings)


@pytest.fixture
def sync_detector():
    """Factory for sync rules: sync_detector(target, kind, precedence=0)."""
    return _sync_detector


@pytest.fixture
def async_detector():
    """Factory for async rules flagging the "_async" suffixed values."""
    return _async_detector


@pytest.fixture
def input_states():
    """Builder for the two-field state map: input_states(value1, value2="valid")."""
    return _input_states


@pytest.fixture
def count_results():
    """Counter of records per ResultType."""
    return _count_results

"""Validation manager: runs a target's rules in two phases and aggregates records.

Usage:
    manager = ValidationManager()
    manager.add_validator(SyncValidator("email", check_format))
    manager.add_validator(AsyncValidator("email", check_unique))
    records = await manager.validate_target("email", input_states)
    if not ValidationManager.is_valid(records):
        # Show the ERROR records next to the field

Per call and per target:
    1. Select the target's validators from a snapshot of the collection and
       stable-sort each phase by precedence.
    2. Run sync validators in order. A record whose result is in
       break_on_sync_error marks the phase as broken.
    3. If the sync phase did not break, run every async validator
       concurrently and wait for all of them.
    4. Return sync records followed by async records.
"""

import asyncio
import time
from typing import Awaitable, Iterable, Mapping, Optional, Sequence, TypeVar, Union

import structlog

from formvalidation.config import Settings, get_settings
from formvalidation.errors import MissingInputStateError
from formvalidation.models.events import (
    ValidationCompletedEvent,
    ValidationFailedEvent,
    ValidationProgressEvent,
    ValidationStartedEvent,
)
from formvalidation.models.inputs import InputState, freeze_input_states
from formvalidation.models.results import ResultType, ValidationRecord, ValidatorType
from formvalidation.services.event_bus import EventBus
from formvalidation.validators.base import BaseValidator, ProgressCallback

T = TypeVar("T")

logger = structlog.get_logger()


async def _gather_settled(aws: Iterable[Awaitable[T]]) -> list[T]:
    """Run awaitables concurrently, wait for all, then raise the first failure.

    Results keep submission order. No task is left running when this raises.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


class ValidationManager:
    """Owns an ordered collection of validators and executes them per target.

    Design principles:
        - Selection happens once per call: mutating the collection while a
          call is in flight does not affect that call
        - Breaks are per target: one field's ERROR never skips another
          field's async rules
        - Evaluation defects propagate: a broken rule fails the call instead
          of being silently dropped
    """

    def __init__(
        self,
        event_bus: Optional[EventBus] = None,
        break_on_sync_error: Optional[Iterable[Union[ResultType, str]]] = None,
        halt_sync_phase_on_break: Optional[bool] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize an empty manager.

        Args:
            event_bus: Notifier for lifecycle events. A private bus is created if None.
            break_on_sync_error: Result kinds that skip the async phase. Defaults to settings.
            halt_sync_phase_on_break: Also stop the sync phase at the first
                breaking record. Defaults to settings.
            settings: Settings override, mainly for tests.
        """
        settings = settings or get_settings()
        self.event_bus = event_bus or EventBus(max_history=settings.EVENT_HISTORY_SIZE)
        self._validators: list[BaseValidator] = []
        self._in_flight = 0
        self.break_on_sync_error = (
            settings.BREAK_ON_SYNC_ERROR if break_on_sync_error is None else break_on_sync_error
        )
        self.halt_sync_phase_on_break = (
            settings.HALT_SYNC_PHASE_ON_BREAK
            if halt_sync_phase_on_break is None
            else halt_sync_phase_on_break
        )

    # ── Collection ──

    @property
    def validators(self) -> tuple[BaseValidator, ...]:
        """Registered validators in registration order (read-only snapshot)."""
        return tuple(self._validators)

    @property
    def target_names(self) -> list[str]:
        """Distinct target names in order of first registration."""
        return list(dict.fromkeys(v.target_name for v in self._validators))

    def add_validator(self, validator: BaseValidator) -> None:
        """Append a validator. Several validators may share a target name."""
        self._validators.append(validator)

    def remove_validator(self, target_name: str) -> None:
        """Remove every validator bound to target_name. No-op when none match."""
        self._validators = [v for v in self._validators if v.target_name != target_name]

    def clear_validators(self) -> None:
        self._validators = []

    # ── Configuration ──

    @property
    def break_on_sync_error(self) -> frozenset[ResultType]:
        return self._break_on_sync_error

    @break_on_sync_error.setter
    def break_on_sync_error(self, kinds: Iterable[Union[ResultType, str]]) -> None:
        self._break_on_sync_error = frozenset(ResultType(kind) for kind in kinds)

    @property
    def is_validating(self) -> bool:
        """True while at least one validate call on this manager is in flight."""
        return self._in_flight > 0

    # ── Execution ──

    async def validate_target(
        self,
        target_name: str,
        input_states: Mapping[str, Union[InputState, Mapping]],
    ) -> list[ValidationRecord]:
        """Run every validator bound to target_name.

        Args:
            target_name: Input whose validators should run
            input_states: Current state of every known input

        Returns:
            Sync-phase records followed by async-phase records. Empty when
            no validator is bound to target_name.
        """
        return await self._run_target(target_name, tuple(self._validators), input_states)

    async def validate_all(
        self,
        input_states: Mapping[str, Union[InputState, Mapping]],
    ) -> list[ValidationRecord]:
        """Validate every registered target concurrently and concatenate the records.

        Records of one target keep their internal order. If any target's
        validation fails, the whole call fails.
        """
        snapshot = tuple(self._validators)
        target_names = list(dict.fromkeys(v.target_name for v in snapshot))
        frozen = freeze_input_states(input_states)

        self._in_flight += 1
        try:
            per_target = await _gather_settled(
                self._run_target(name, snapshot, frozen) for name in target_names
            )
        finally:
            self._in_flight -= 1

        records = [record for target_records in per_target for record in target_records]
        logger.info(
            "validate_all_complete",
            targets=len(target_names),
            total_records=len(records),
            errors=sum(1 for r in records if r.result == ResultType.ERROR),
        )
        return records

    @staticmethod
    def is_valid(records: Iterable[ValidationRecord]) -> bool:
        """True when none of the records is an ERROR."""
        return all(record.result != ResultType.ERROR for record in records)

    # ── Internals ──

    async def _run_target(
        self,
        target_name: str,
        snapshot: Sequence[BaseValidator],
        input_states: Mapping[str, Union[InputState, Mapping]],
    ) -> list[ValidationRecord]:
        selected = [v for v in snapshot if v.target_name == target_name]
        if not selected:
            logger.debug("validate_target_no_validators", target=target_name)
            return []

        # sorted() is stable, so equal precedence keeps registration order
        sync_validators = sorted(
            (v for v in selected if v.type == ValidatorType.SYNC), key=lambda v: v.precedence
        )
        async_validators = sorted(
            (v for v in selected if v.type == ValidatorType.ASYNC), key=lambda v: v.precedence
        )
        break_on = self._break_on_sync_error
        halt_sync = self.halt_sync_phase_on_break

        states = freeze_input_states(input_states)
        if target_name not in states:
            raise MissingInputStateError(target_name)
        state = states[target_name]

        self._in_flight += 1
        start_time = time.perf_counter()
        try:
            await self.event_bus.publish(
                target_name,
                ValidationStartedEvent(
                    target=target_name,
                    sync_validators=len(sync_validators),
                    async_validators=len(async_validators),
                ).model_dump(),
            )

            sync_records: list[ValidationRecord] = []
            broken = False
            for validator in sync_validators:
                record = await validator.validate(
                    state, states, self._progress_callback(target_name, validator)
                )
                sync_records.append(record)
                if record.result in break_on:
                    broken = True
                    if halt_sync:
                        break

            async_records: list[ValidationRecord] = []
            if not broken and async_validators:
                async_records = await _gather_settled(
                    v.validate(state, states, self._progress_callback(target_name, v))
                    for v in async_validators
                )

            records = sync_records + async_records
            await self.event_bus.flush()
        except Exception as e:
            logger.error(
                "validate_target_failed",
                target=target_name,
                error=str(e),
                error_type=type(e).__name__,
            )
            await self.event_bus.flush()
            await self.event_bus.publish(
                target_name,
                ValidationFailedEvent(
                    target=target_name,
                    error=str(e),
                    error_type=type(e).__name__,
                ).model_dump(),
            )
            raise
        finally:
            self._in_flight -= 1

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        await self.event_bus.publish(
            target_name,
            ValidationCompletedEvent(
                target=target_name,
                records=records,
                passed=self.is_valid(records),
                sync_broken=broken,
                duration_ms=duration_ms,
            ).model_dump(),
        )

        logger.info(
            "validate_target_complete",
            target=target_name,
            sync_executed=len(sync_records),
            sync_total=len(sync_validators),
            async_executed=len(async_records),
            async_total=len(async_validators),
            sync_broken=broken,
            duration_ms=duration_ms,
        )
        return records

    def _progress_callback(self, target_name: str, validator: BaseValidator) -> ProgressCallback:
        descriptor = validator.descriptor
        # Rules may report from executor threads, so bind the loop here
        loop = asyncio.get_running_loop()

        def report_progress(detail=None) -> None:
            self.event_bus.publish_nowait(
                target_name,
                ValidationProgressEvent(
                    target=target_name,
                    validator=descriptor,
                    detail=detail,
                ).model_dump(),
                loop=loop,
            )

        return report_progress

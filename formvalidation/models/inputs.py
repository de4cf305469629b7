"""Input state records supplied by the form layer on every validation call."""

from types import MappingProxyType
from typing import Mapping, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class InputState(BaseModel):
    """Current value and interaction flags of one form input.

    Owned by the caller. Accepts camelCase keys (isPristine, isTouched,
    isValid) when built from a mapping.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    value: str = ""
    is_pristine: bool = True
    is_touched: bool = False
    is_valid: bool = False


InputStates = Mapping[str, InputState]


def freeze_input_states(states: Mapping[str, Union[InputState, Mapping]]) -> InputStates:
    """Return a read-only snapshot of the caller's input states.

    Plain mappings are coerced into InputState so every validator sees the
    same immutable objects for the duration of a call.
    """
    frozen = {
        name: state if isinstance(state, InputState) else InputState.model_validate(state)
        for name, state in states.items()
    }
    return MappingProxyType(frozen)

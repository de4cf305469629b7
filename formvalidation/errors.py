"""Exception types raised by formvalidation.

Rule outcomes (SUCCESS / WARNING / ERROR) are never raised. These cover
misconfiguration and defects in caller-supplied evaluation functions.
"""


class FormValidationError(Exception):
    """Base class for all formvalidation errors."""


class InvalidValidatorError(FormValidationError, ValueError):
    """A validator was constructed with a bad target name or precedence."""


class InvalidOutcomeError(FormValidationError, TypeError):
    """An evaluation function returned something that is not an outcome."""

    def __init__(self, target_name: str, returned: object):
        self.target_name = target_name
        self.returned = returned
        super().__init__(
            f"Validator for '{target_name}' returned {type(returned).__name__}, "
            f"expected a ValidationOutcome or mapping"
        )


class MissingInputStateError(FormValidationError, KeyError):
    """No input state was supplied for a target that has validators."""

    def __init__(self, target_name: str):
        self.target_name = target_name
        super().__init__(target_name)

    def __str__(self) -> str:
        return f"No input state supplied for target '{self.target_name}'"

"""Project-wide exception types."""


class OptionsRiskError(Exception):
    """Base exception for all engine errors."""


class InputValidationError(OptionsRiskError):
    """Raised when an evaluation request fails input validation.

    Carries the full list of field-tagged ``ValidationError`` records.
    """

    def __init__(self, errors) -> None:
        self.errors = list(errors)
        fields = ", ".join(error.field for error in self.errors)
        super().__init__(f"{len(self.errors)} invalid input(s): {fields}")


class DegenerateInputError(OptionsRiskError):
    """Raised when a metric is not computable for otherwise valid input."""


class ConfigurationError(OptionsRiskError):
    """Raised for unknown variants or legs that do not fit a variant's shape."""

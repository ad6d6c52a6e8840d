"""Error taxonomy shared by services and the API layer."""


class MealCoachError(Exception):
    """Base error carrying a machine-readable code."""

    code = "error"

    def __init__(self, code: str | None = None, message: str | None = None) -> None:
        if code:
            self.code = code
        super().__init__(message or self.code)


class ValidationError(MealCoachError):
    """Missing or malformed required input. No state was mutated."""

    code = "invalid_request"


class ParseError(ValidationError):
    """Malformed HH:MM clock value."""

    code = "invalid_time"


class ConfigurationMissing(MealCoachError):
    """A required credential is not configured."""

    code = "not_configured"


class TransportError(MealCoachError):
    """Push delivery to a single subscriber failed."""

    code = "push_failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        gone: bool = False,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message)
        self.gone = gone
        self.status_code = status_code


class AnalysisError(MealCoachError):
    """Vision analysis failed or returned an unusable result."""

    code = "analysis_failed"

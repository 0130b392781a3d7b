"""Structured error taxonomy for a check run."""

from enum import StrEnum


class ErrorKind(StrEnum):
    RETRIEVAL_FAILURE = "RETRIEVAL_FAILURE"
    INVALID_NUMERIC_INPUT = "INVALID_NUMERIC_INPUT"
    CONFIGURATION_MISSING = "CONFIGURATION_MISSING"


class ColdFrontError(Exception):
    """Base error carrying a kind so callers can match on it."""

    kind: ErrorKind

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class RetrievalFailure(ColdFrontError):
    """Forecast could not be fetched or parsed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(ErrorKind.RETRIEVAL_FAILURE, message)
        self.status_code = status_code


class InvalidNumericInput(ColdFrontError):
    """A value that must be numeric was not."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.INVALID_NUMERIC_INPUT):
        super().__init__(kind, message)


class ConfigurationMissing(InvalidNumericInput):
    """A required state/config key is absent."""

    def __init__(self, key: str):
        super().__init__(
            f"required key {key!r} is not set",
            kind=ErrorKind.CONFIGURATION_MISSING,
        )
        self.key = key

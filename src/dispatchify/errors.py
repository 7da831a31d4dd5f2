from __future__ import annotations


class DispatchifyError(Exception):
    """Base class for all errors raised by dispatchify."""


class SpecError(DispatchifyError):
    """The OpenAPI document is malformed or cannot be loaded."""


class ClassificationError(DispatchifyError):
    """An operation's responses cannot be reduced to response type definitions.

    This is fatal for the operation it was raised for: no dispatch code is
    generated for that operation. Other operations are unaffected.
    """

    def __init__(self, message: str, operation: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message

"""Exceptions raised by the question builder."""
from __future__ import annotations


class BuilderError(Exception):
    """Base class for builder failures."""


class ValidationError(BuilderError):
    """One or more rule violations; always recoverable."""

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class UnknownTypeError(BuilderError, LookupError):
    """Lookup of a question type that is not in the catalog."""

    def __init__(self, type_id: object):
        self.type_id = type_id
        super().__init__(f"unknown question type: {type_id!r}")


class PersistenceError(BuilderError):
    """The remote question API rejected or never received a request."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class WizardStateError(BuilderError):
    """Operation not allowed in the wizard's current state."""


class SaveInProgressError(WizardStateError):
    """A save for the same session is already running."""


class InvalidEditError(BuilderError, ValueError):
    """An edit addressed a field or index that does not exist."""

from __future__ import annotations

from typing import Mapping, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or a required selection is missing."""


class BusinessRuleError(DomainError):
    """Raised when a write would break a rule such as one overnight leave per month."""


class AuthorizationError(DomainError):
    """Raised when a role lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when the targeted row does not exist (or was already deleted)."""


class DataAccessError(Exception):
    """A failed backend call, carrying the driver error as ``cause``."""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class RecapUnavailableError(Exception):
    """One or more fetches feeding a recap failed; nothing may be rendered."""

    def __init__(self, failures: Mapping[str, DataAccessError]):
        self.failures = dict(failures)
        names = ", ".join(sorted(self.failures))
        super().__init__(f"Data unavailable: failed to load {names}")

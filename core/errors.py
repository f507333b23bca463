"""
core/errors.py -- Domain exception hierarchy for CarManager.

Services and the access guard raise these; api/main.py owns the mapping from
exception type to HTTP status and error envelope. Nothing below knows about
HTTP.

  ValidationFailed -> 400 (full message list)
  InvalidArgument  -> 400
  Unauthenticated  -> 401 (empty body)
  NotFound         -> 404
  Conflict         -> 409

Layer rule: core/ is the kernel. No imports from api/, auth/, or fleet/.
"""

from __future__ import annotations


class CarManagerError(Exception):
    """Base exception for CarManager."""


class ValidationFailed(CarManagerError):
    """One or more field-level validation messages. Never partially applied."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class InvalidArgument(CarManagerError, ValueError):
    """A service was called with a missing or unusable record."""


class Unauthenticated(CarManagerError):
    """Missing, invalid, or expired credentials or token.

    Carries no detail: callers must not be able to tell an
    unknown account from a wrong password or a bad signature from an expired one.
    """


class NotFound(CarManagerError):
    """A referenced record does not exist."""


class Conflict(CarManagerError):
    """A write would violate a uniqueness invariant."""


class DuplicateKey(Conflict):
    """An administrator with the same email already exists."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("Email already registered.")

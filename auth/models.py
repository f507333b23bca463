"""
auth/models.py -- Domain types for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in fleet/models.py -- dataclasses own domain shape; stores and services do
the work. Role.parse is the one exception: the lookup table belongs next to
the enum it resolves to.

Layer rule: no imports from api/ or fleet/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Closed set of administrator roles.

    NONE is the parse result for blank or unrecognized text. It is never a
    valid persisted role -- AdministratorService.add() rejects it.
    """

    NONE = "None"
    ADM = "Adm"
    EDITOR = "Editor"

    @classmethod
    def parse(cls, text: str | None) -> Role:
        """Case-insensitive lookup. Unknown or empty text maps to Role.NONE."""
        if text is None:
            return cls.NONE
        return _ROLE_LOOKUP.get(text.strip().casefold(), cls.NONE)


_ROLE_LOOKUP: dict[str, Role] = {
    "none": Role.NONE,
    "adm": Role.ADM,
    "editor": Role.EDITOR,
}


@dataclass
class Administrator:
    """An identity allowed to log in and manage the fleet.

    password is stored and compared as plaintext. This reproduces the existing
    data layout; it must be replaced by a salted hash before production use.

    id is None before the record is written to the database.
    """

    email: str
    password: str
    role: Role
    id: int | None = None


@dataclass(frozen=True)
class SessionClaims:
    """Claims carried by a verified bearer token.

    role is informational only -- the access guard does not restrict routes
    by role.
    """

    email: str
    role: str
    issued_at: datetime
    expires_at: datetime

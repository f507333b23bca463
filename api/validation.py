"""
api/validation.py -- Field rules for administrator and vehicle request bodies.

Every rule runs; all failing messages are collected and raised together as a
single ValidationFailed, so a client fixes a form in one round trip and nothing
is partially applied.
"""

from __future__ import annotations

from api.models import AdministratorCreate, VehicleBody
from auth.models import Role
from core.errors import ValidationFailed

MIN_VEHICLE_YEAR = 1900

_ASSIGNABLE_ROLES = (Role.ADM, Role.EDITOR)


def administrator_errors(body: AdministratorCreate) -> list[str]:
    messages: list[str] = []
    if not body.email:
        messages.append("E-mail is required")
    if not body.password:
        messages.append("Password is required")
    role = Role.parse(body.role)
    if role not in _ASSIGNABLE_ROLES:
        if not body.role or body.role.strip().casefold() in ("", Role.NONE.value.casefold()):
            messages.append("Role is required")
        else:
            messages.append("Role must be one of: " + ", ".join(r.value for r in _ASSIGNABLE_ROLES))
    return messages


def vehicle_errors(body: VehicleBody) -> list[str]:
    messages: list[str] = []
    if not body.name:
        messages.append("Name is required")
    if not body.brand:
        messages.append("Brand is required")
    if body.year < MIN_VEHICLE_YEAR:
        messages.append(f"Vehicle year must be greater than or equal to {MIN_VEHICLE_YEAR}")
    return messages


def validate_administrator(body: AdministratorCreate) -> Role:
    """Raise ValidationFailed on any rule violation; return the parsed role otherwise."""
    messages = administrator_errors(body)
    if messages:
        raise ValidationFailed(messages)
    return Role.parse(body.role)


def validate_vehicle(body: VehicleBody) -> None:
    messages = vehicle_errors(body)
    if messages:
        raise ValidationFailed(messages)

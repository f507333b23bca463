"""
API request and response models for CarManager REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
fleet/models.py, which own the internal domain representation. Route handlers
map between the two.

Request models only pin down JSON shape and types. Field rules (required
values, role names, minimum year) live in api/validation.py so every failing
field is reported in one 400 response with the exact messages clients expect.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from auth.models import Administrator
from fleet.models import Vehicle

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request body for POST /administrators/login."""

    email: str
    password: str


class AdministratorCreate(BaseModel):
    """Request body for POST /administrators.

    role is free text here; api/validation.py resolves it with Role.parse.
    """

    email: str = ""
    password: str = ""
    role: Optional[str] = None


class VehicleBody(BaseModel):
    """Request body for POST /vehicles and PUT /vehicles/{id}."""

    name: str = ""
    brand: str = ""
    year: int = 0


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class LoginResponse(BaseModel):
    """Response for a successful login. token is "" when no signing key is configured."""

    model_config = ConfigDict(frozen=True)

    email: str
    role: str
    token: str


class AdministratorResponse(BaseModel):
    """Public view of an administrator. The password is never returned."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    role: str

    @classmethod
    def from_domain(cls, administrator: Administrator) -> "AdministratorResponse":
        return cls(id=administrator.id, email=administrator.email, role=administrator.role.value)


class VehicleResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    brand: str
    year: int

    @classmethod
    def from_domain(cls, vehicle: Vehicle) -> "VehicleResponse":
        return cls(id=vehicle.id, name=vehicle.name, brand=vehicle.brand, year=vehicle.year)


class ErrorDetail(BaseModel):
    """Machine-readable error payload.

    messages carries the full list of field-level validation messages on 400s.
    detail names the conflicting value on 409s (the duplicate email).
    """

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None
    messages: Optional[list[str]] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses (except 401)."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str

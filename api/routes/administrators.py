"""
api/routes/administrators.py -- Login and administrator management endpoints.

Routes:
  POST /administrators/login   -- email/password login; returns a bearer token
  POST /administrators         -- create administrator (requires auth)
  GET  /administrators         -- list administrators, 5 per page (requires auth)
  GET  /administrators/{id}    -- administrator detail (requires auth)

Security:
  Login failures answer a bare 401 whether the email is unknown or the
  password is wrong. Login responses carry Cache-Control: no-store.
  Passwords are never echoed back in any response.
  require_session authenticates only -- any valid token may create
  administrators regardless of its role claim.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from api.models import AdministratorCreate, AdministratorResponse, LoginRequest, LoginResponse
from api.validation import validate_administrator
from auth.dependencies import require_session
from auth.models import Administrator, SessionClaims
from auth.service import AdministratorService
from auth.tokens import create_access_token
from core.errors import NotFound, Unauthenticated
from core.query import DEFAULT_PAGE_SIZE

logger = logging.getLogger("carmanager.api")

# Auth policy:
# - POST /administrators/login:  public -- login endpoint must be unauthenticated
# - POST /administrators:        requires auth (require_session)
# - GET  /administrators:        requires auth (require_session)
# - GET  /administrators/{id}:   requires auth (require_session)
router = APIRouter()


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/administrators/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; return a one-hour bearer token.

    An empty token in a 200 response means the credentials were accepted but
    the server has no SECRET_KEY configured, so no usable session exists.
    """
    service: AdministratorService = request.app.state.administrator_service
    administrator = service.login(body.email, body.password)
    if administrator is None:
        raise Unauthenticated()

    token = create_access_token(administrator)
    if not token:
        logger.warning("Login for %s succeeded but no usable session was created", administrator.email)
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            email=administrator.email,
            role=administrator.role.value,
            token=token,
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.post("/administrators", response_model=AdministratorResponse, status_code=201)
def create_administrator(
    request: Request,
    response: Response,
    body: AdministratorCreate,
    claims: SessionClaims = Depends(require_session),
) -> AdministratorResponse:
    """Create an administrator. 400 on validation failure, 409 on duplicate email."""
    service: AdministratorService = request.app.state.administrator_service
    role = validate_administrator(body)
    created = service.add(Administrator(email=body.email, password=body.password, role=role))
    logger.info("Administrator %d created by %s", created.id, claims.email)
    response.headers["Location"] = f"/administrators/{created.id}"
    return AdministratorResponse.from_domain(created)


@router.get("/administrators", response_model=list[AdministratorResponse])
def list_administrators(
    request: Request,
    page: Optional[int] = None,
    claims: SessionClaims = Depends(require_session),
) -> list[AdministratorResponse]:
    """List administrators in id order. Without ?page the full list is returned."""
    service: AdministratorService = request.app.state.administrator_service
    administrators = service.get_all(page, DEFAULT_PAGE_SIZE)
    return [AdministratorResponse.from_domain(a) for a in administrators]


@router.get("/administrators/{administrator_id}", response_model=AdministratorResponse)
def get_administrator(
    request: Request,
    administrator_id: int,
    claims: SessionClaims = Depends(require_session),
) -> AdministratorResponse:
    service: AdministratorService = request.app.state.administrator_service
    administrator = service.get_by_id(administrator_id)
    if administrator is None:
        raise NotFound("Administrator not found")
    return AdministratorResponse.from_domain(administrator)

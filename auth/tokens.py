"""
auth/tokens.py -- Session token issue and verification.

Security design decisions:
  JWT: python-jose with HS256 (HMAC-SHA-256 over header+claims). Tokens are
       signed with SECRET_KEY and carry email, role, iat, and exp. The
       lifetime is fixed at one hour; callers cannot choose it.

  Verification returns None on any failure -- bad signature, malformed token,
       missing claims, or expiry. The access guard turns None into a bare 401.
       Issuer and audience are not checked.

  Expiry is checked here rather than by python-jose: jose accepts a token
       during the second that equals exp, and the contract is that a token is
       dead once the clock reaches exp.

  Empty SECRET_KEY: create_access_token() returns "" instead of raising, and
       decode_access_token() rejects everything. See core/config.py for how
       this degraded mode is reported at startup.

  No revocation: a token stays valid until exp regardless of what happens to
       the administrator record.

Layer rule: no imports from api/ or fleet/. Import from core/ is allowed --
core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from jose import JWTError, jwt

from auth.models import SessionClaims
from core.config import get_settings

if TYPE_CHECKING:
    from auth.models import Administrator

logger = logging.getLogger("carmanager.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(hours=1)

# Signature only. exp is checked by hand below; iss/aud are not checked.
_DECODE_OPTIONS = {
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
    "verify_aud": False,
    "verify_iss": False,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(
    administrator: Administrator,
    *,
    secret_key: str | None = None,
    now: datetime | None = None,
) -> str:
    """Encode a signed JWT for an authenticated administrator.

    Args:
        administrator: The administrator returned by a successful login.
        secret_key:    Signing key. Defaults to Settings.secret_key.
        now:           Issuance instant. Defaults to the current UTC time.

    Returns "" when no signing key is configured. Callers must treat that as
    "authenticated, but no usable session was created".
    """
    key = _settings.secret_key if secret_key is None else secret_key
    if not key:
        logger.warning("No SECRET_KEY configured; issuing empty token for %s", administrator.email)
        return ""
    issued_at = now or _utcnow()
    payload = {
        "email": administrator.email,
        "role": administrator.role.value,
        "iat": issued_at,
        "exp": issued_at + TOKEN_LIFETIME,
    }
    return jwt.encode(payload, key, algorithm=_ALGORITHM)


def decode_access_token(
    token: str,
    *,
    secret_key: str | None = None,
    now: datetime | None = None,
) -> SessionClaims | None:
    """Verify a JWT and return its claims, or None on any failure.

    Rejects when the signature does not match the key, the token cannot be
    parsed, email/role/exp are missing, or now >= exp.
    """
    key = _settings.secret_key if secret_key is None else secret_key
    if not key or not token:
        return None
    try:
        payload = jwt.decode(token, key, algorithms=[_ALGORITHM], options=_DECODE_OPTIONS)
    except JWTError:
        return None

    exp = payload.get("exp")
    if "email" not in payload or "role" not in payload or not isinstance(exp, (int, float)):
        return None
    expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
    if (now or _utcnow()) >= expires_at:
        return None

    iat = payload.get("iat")
    if isinstance(iat, (int, float)):
        issued_at = datetime.fromtimestamp(iat, tz=timezone.utc)
    else:
        issued_at = expires_at - TOKEN_LIFETIME
    return SessionClaims(
        email=payload["email"],
        role=payload["role"],
        issued_at=issued_at,
        expires_at=expires_at,
    )

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi.security import HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from runi.core.config import settings

# Owner tokens are optional on every route: a staff caller sends none.
bearer_scheme = HTTPBearer(auto_error=False)

# Staff passwords: salted PBKDF2-SHA256, verified in constant time.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

SESSION_TOKEN_BYTES = 32


def _normalize_token(token: Optional[str]) -> str:
    """
    Make token decoding resilient to common Swagger / copy-paste issues:
    - Leading/trailing whitespace/newlines
    - Surrounding quotes
    - Accidentally including the 'Bearer ' prefix in the token field
    """
    if token is None:
        return ""

    t = token.strip()

    # remove surrounding quotes if present
    if (t.startswith('"') and t.endswith('"')) or (t.startswith("'") and t.endswith("'")):
        t = t[1:-1].strip()

    # remove accidental bearer prefix
    if t.lower().startswith("bearer "):
        t = t[7:].strip()

    return t


# ---------------------------------------------------------
# Owner JWTs
# ---------------------------------------------------------
def create_access_token(subject: str, expires_minutes: Optional[int] = None) -> str:
    expire_dt = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )

    # Use numeric timestamps for maximum compatibility
    to_encode: dict[str, Any] = {
        "sub": str(subject),
        "exp": int(expire_dt.timestamp()),
        "iat": int(datetime.now(timezone.utc).timestamp()),
    }

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: Optional[str]) -> Optional[str]:
    """
    Returns the token subject, or None for a missing, malformed, expired or
    wrongly signed token.
    """
    token = _normalize_token(token)
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require_sub": True, "require_exp": True},
        )
    except JWTError:
        return None

    sub = payload.get("sub")
    return str(sub) if sub else None


# ---------------------------------------------------------
# Staff credentials
# ---------------------------------------------------------
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password or not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # unrecognized hash format
        return False


def new_session_token() -> str:
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)


def normalize_session_token(token: Optional[str]) -> str:
    return _normalize_token(token)

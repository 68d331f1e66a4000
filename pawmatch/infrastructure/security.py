"""Helpers for verifying identity provider access tokens."""

from datetime import datetime, timedelta

from jose import JWTError, jwt

from pawmatch.config import get_settings

ADMIN_ROLE = "admin"

# ---- JWT ----
settings = get_settings()


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Sign ``data`` the way the identity provider does (used by scripts and tests)."""

    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=60))
    return jwt.encode(
        {**data, "exp": expire}, settings.secret_key, algorithm=settings.token_algorithm
    )


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.token_algorithm])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def has_admin_role(claims: dict) -> bool:
    role = claims.get("role")
    if isinstance(role, str):
        return role.lower() == ADMIN_ROLE
    roles = claims.get("roles")
    if isinstance(roles, list):
        return any(isinstance(item, str) and item.lower() == ADMIN_ROLE for item in roles)
    return False

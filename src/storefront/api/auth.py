"""FastAPI dependencies that resolve the caller through the identity adapter."""

from fastapi import Header, HTTPException

from storefront.identity import get_identity_provider
from storefront.identity.port import Principal, UserIdentity


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None
    return token


def _authenticate(authorization: str | None) -> Principal:
    token = _bearer_token(authorization)
    if token is None:
        raise HTTPException(status_code=401, detail="Access denied. No token provided.")

    principal = get_identity_provider().authenticate(token)
    if principal is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    return principal


def require_admin(authorization: str | None = Header(default=None)) -> Principal:
    principal = _authenticate(authorization)
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Access denied. Admin privileges required.")
    return principal


def require_user(authorization: str | None = Header(default=None)) -> UserIdentity:
    principal = _authenticate(authorization)
    if not principal.email:
        raise HTTPException(status_code=401, detail="Invalid token")
    return UserIdentity(email=principal.email.strip().lower())

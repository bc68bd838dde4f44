"""Identity port: resolves bearer tokens to callers.

Token issuance and verification live in the identity service; the storefront
only needs to know who a token belongs to.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Principal:
    """An authenticated caller."""

    id: str
    role: str
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


@dataclass(frozen=True)
class UserIdentity:
    """A verified shopper. Order queries are scoped to this email."""

    email: str


class IdentityPort(ABC):
    @abstractmethod
    def authenticate(self, token: str) -> Principal | None:
        """Return the principal the token belongs to, or None for an unknown token."""
        ...

    def identify_user(self, token: str) -> UserIdentity | None:
        principal = self.authenticate(token)
        if principal is None or not principal.email:
            return None
        return UserIdentity(email=principal.email.strip().lower())

"""Fake identity adapter: a static token table for tests and development.

Tokens come from the environment:

    STOREFRONT_ADMIN_TOKENS="token-a,token-b"
    STOREFRONT_USER_TOKENS="token-c=ann@example.com,token-d=bo@example.com"
"""

import os

from storefront.identity.port import ADMIN_ROLE, IdentityPort, Principal


class FakeIdentityProvider(IdentityPort):
    def __init__(self):
        self._principals: dict[str, Principal] = {}

    @classmethod
    def from_env(cls) -> "FakeIdentityProvider":
        provider = cls()
        for index, token in enumerate(filter(None, os.environ.get("STOREFRONT_ADMIN_TOKENS", "").split(","))):
            provider.register_admin(token.strip(), principal_id=f"admin-{index + 1}")
        for entry in filter(None, os.environ.get("STOREFRONT_USER_TOKENS", "").split(",")):
            token, _, email = entry.partition("=")
            provider.register_user(token.strip(), email.strip())
        return provider

    def register_admin(self, token: str, principal_id: str = "admin", email: str | None = None) -> Principal:
        principal = Principal(id=principal_id, role=ADMIN_ROLE, email=email)
        self._principals[token] = principal
        return principal

    def register_user(self, token: str, email: str, principal_id: str | None = None) -> Principal:
        principal = Principal(id=principal_id or email, role="user", email=email)
        self._principals[token] = principal
        return principal

    def clear(self):
        self._principals.clear()

    def authenticate(self, token: str) -> Principal | None:
        return self._principals.get(token)

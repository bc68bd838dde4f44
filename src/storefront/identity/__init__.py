"""Identity adapter abstraction: who is calling, and are they an admin."""

import os

_identity_instance = None


def get_identity_provider():
    """Return the configured identity adapter (singleton).

    Uses FakeIdentityProvider by default. Select another adapter with the
    IDENTITY_ADAPTER environment variable.
    """
    global _identity_instance
    if _identity_instance is None:
        adapter = os.environ.get("IDENTITY_ADAPTER", "fake")
        if adapter == "fake":
            from storefront.identity.fake_adapter import FakeIdentityProvider

            _identity_instance = FakeIdentityProvider.from_env()
        else:
            raise ValueError(f"Unknown identity adapter: {adapter}")
    return _identity_instance


def reset_identity_provider():
    """Reset the identity singleton (useful for testing)."""
    global _identity_instance
    _identity_instance = None

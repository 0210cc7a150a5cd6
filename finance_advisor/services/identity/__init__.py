"""Identity provider package."""

from finance_advisor.services.identity.anonymous import (
    AnonymousIdentityProvider,
    IdentityError,
    IdentityProviderInterface,
)

__all__ = [
    "AnonymousIdentityProvider",
    "IdentityError",
    "IdentityProviderInterface",
]

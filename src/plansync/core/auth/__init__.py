"""Auth and identity exports."""

from plansync.core.auth.base import IdentityProvider, TokenResolver
from plansync.core.auth.factory import create_identity_provider, create_token_resolver, require_privileged
from plansync.core.auth.resolvers import (
    TOKEN_ENV_VAR,
    EnvTokenResolver,
    NoTokenResolver,
    StaticIdentityProvider,
    StaticTokenResolver,
)

__all__ = [
    "TOKEN_ENV_VAR",
    "EnvTokenResolver",
    "IdentityProvider",
    "NoTokenResolver",
    "StaticIdentityProvider",
    "StaticTokenResolver",
    "TokenResolver",
    "create_identity_provider",
    "create_token_resolver",
    "require_privileged",
]

"""Resolver factories."""

from __future__ import annotations

from plansync.core.auth.base import IdentityProvider, TokenResolver
from plansync.core.auth.resolvers import EnvTokenResolver, NoTokenResolver, StaticIdentityProvider, StaticTokenResolver
from plansync.core.contracts.config import PlanSyncConfig
from plansync.core.contracts.exceptions import ConfigError, PermissionDeniedError
from plansync.core.contracts.identity import Identity


def create_token_resolver(config: PlanSyncConfig) -> TokenResolver:
    if config.auth == "none":
        return NoTokenResolver()
    if config.auth == "env":
        return EnvTokenResolver()
    if config.auth == "token":
        return StaticTokenResolver(token=config.token or "")
    raise ConfigError(f"Unknown auth mode: {config.auth}")


def create_identity_provider(config: PlanSyncConfig) -> IdentityProvider:
    return StaticIdentityProvider(Identity(user_id=config.user_id, is_privileged=config.is_privileged))


def require_privileged(identity: Identity) -> Identity:
    """Raise unless *identity* may run sync operations."""
    if not identity.is_privileged:
        raise PermissionDeniedError(f"User '{identity.user_id}' is not allowed to manage study plans")
    return identity

"""Token and identity resolvers."""

from __future__ import annotations

import os

from plansync.core.auth.base import IdentityProvider, TokenResolver
from plansync.core.contracts.exceptions import AuthenticationError
from plansync.core.contracts.identity import Identity

TOKEN_ENV_VAR = "PLANSYNC_TOKEN"


class NoTokenResolver(TokenResolver):
    async def resolve(self) -> str | None:
        return None


class EnvTokenResolver(TokenResolver):
    def __init__(self, env_var: str = TOKEN_ENV_VAR) -> None:
        self._env_var = env_var

    async def resolve(self) -> str:
        token = (os.getenv(self._env_var) or "").strip()
        if not token:
            raise AuthenticationError(f"{self._env_var} is not set or empty")
        return token


class StaticTokenResolver(TokenResolver):
    def __init__(self, *, token: str) -> None:
        self._token = token

    async def resolve(self) -> str:
        token = self._token.strip()
        if not token:
            raise AuthenticationError("Static token is empty")
        return token


class StaticIdentityProvider(IdentityProvider):
    def __init__(self, identity: Identity) -> None:
        self._identity = identity

    async def resolve(self) -> Identity:
        return self._identity

"""Auth resolver interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod

from plansync.core.contracts.identity import Identity


class TokenResolver(ABC):
    @abstractmethod
    async def resolve(self) -> str | None:
        """Resolve and return an authentication token, or ``None`` for anonymous access."""


class IdentityProvider(ABC):
    @abstractmethod
    async def resolve(self) -> Identity:
        """Return the identity the sync tool is acting for."""

"""Remote store factory."""

from __future__ import annotations

from plansync.core.contracts.config import RemoteConfig
from plansync.core.contracts.remote import RemoteStore
from plansync.core.remote.http import HttpRemoteStore
from plansync.core.remote.memory import InMemoryRemoteStore


def create_remote_store(config: RemoteConfig, *, collection: str, token: str | None = None) -> RemoteStore:
    if config.kind == "memory":
        return InMemoryRemoteStore()
    if config.kind == "http":
        if not config.base_url:
            raise ValueError("remote.base_url is required for the http remote")
        return HttpRemoteStore(
            base_url=config.base_url,
            collection=collection,
            token=token,
            timeout_seconds=config.timeout_seconds,
            max_retries=config.max_retries,
        )
    raise ValueError(f"Unknown remote kind: {config.kind}")

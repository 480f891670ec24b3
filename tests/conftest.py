"""Shared test fixtures for plansync tests."""

from __future__ import annotations

import pytest

from plansync.core.contracts.identity import Identity
from plansync.core.records.store import RecordStore
from plansync.core.storage.memory import InMemoryKeyValueStore
from plansync.sdk import PlanSync
from tests.fakes.clock import FakeClock
from tests.fakes.remote import SpyRemoteStore


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def store(storage: InMemoryKeyValueStore, clock: FakeClock) -> RecordStore:
    return RecordStore(storage, clock=clock)


@pytest.fixture
def remote(clock: FakeClock) -> SpyRemoteStore:
    return SpyRemoteStore(clock=clock)


@pytest.fixture
def admin() -> Identity:
    return Identity(user_id="admin", is_privileged=True)


@pytest.fixture
def sdk(storage: InMemoryKeyValueStore, remote: SpyRemoteStore, admin: Identity, clock: FakeClock) -> PlanSync:
    progress_remote = SpyRemoteStore(clock=clock)
    return PlanSync(storage=storage, remote=remote, progress_remote=progress_remote, identity=admin, clock=clock)

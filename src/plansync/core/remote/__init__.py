"""Remote store implementations and factory."""

from plansync.core.remote.factory import create_remote_store
from plansync.core.remote.http import HttpRemoteStore
from plansync.core.remote.memory import InMemoryRemoteStore, RemoteOperation

__all__ = ["HttpRemoteStore", "InMemoryRemoteStore", "RemoteOperation", "create_remote_store"]

from plansync.core.contracts.config import RemoteConfig
from plansync.core.remote.factory import create_remote_store
from plansync.core.remote.http import HttpRemoteStore
from plansync.core.remote.memory import InMemoryRemoteStore


def test_memory_kind_builds_in_memory_store() -> None:
    assert isinstance(create_remote_store(RemoteConfig(kind="memory"), collection="study_plans"), InMemoryRemoteStore)


def test_http_kind_builds_http_store_for_requested_collection() -> None:
    config = RemoteConfig(kind="http", base_url="https://api.example.test")

    store = create_remote_store(config, collection="user_progress", token="tok")

    assert isinstance(store, HttpRemoteStore)
    assert store.collection == "user_progress"

"""
Unit tests for the Jenkins client cache.
"""

import threading
import time

import pytest
from jenkins_broker.adapters import MemoryStorageAdapter, MemoryJenkinsAdapter
from jenkins_broker.core.client_cache import ClientCache
from jenkins_broker.core.config_store import CONFIG_KEY
from jenkins_broker.domain.config import JenkinsConfig
from jenkins_broker.exceptions import ConfigurationMissingError


class CountingFactory:
    """Builds MemoryJenkinsAdapters, optionally slowly, counting each build."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.count = 0
        self._lock = threading.Lock()

    def __call__(self, config):
        time.sleep(self.delay)
        with self._lock:
            self.count += 1
        return MemoryJenkinsAdapter(config)


def _store_config(storage, url="http://localhost:8080", **overrides):
    config = JenkinsConfig(username="admin", password="admin", url=url)
    record = config.to_dict()
    record.update(overrides)
    storage.put(CONFIG_KEY, record)


@pytest.fixture
def storage():
    storage = MemoryStorageAdapter()
    _store_config(storage)
    return storage


def test_get_returns_same_client_until_invalidated(storage):
    """Test repeated get() calls reuse one client."""
    factory = CountingFactory()
    cache = ClientCache(storage, factory)

    first = cache.get()
    second = cache.get()

    assert first is second
    assert factory.count == 1


def test_concurrent_first_access_builds_once(storage):
    """Test racing first callers all observe the identical client."""
    factory = CountingFactory(delay=0.05)
    cache = ClientCache(storage, factory)
    start = threading.Barrier(8)
    results = []
    results_lock = threading.Lock()

    def worker():
        start.wait()
        client = cache.get()
        with results_lock:
            results.append(client)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert len(results) == 8
    assert all(client is results[0] for client in results)
    assert factory.count == 1


def test_invalidate_rebuilds_from_new_config(storage):
    """Test get() after invalidation builds from the config now in storage."""
    factory = CountingFactory()
    cache = ClientCache(storage, factory)

    old = cache.get()
    assert old.config.url == "http://localhost:8080"

    _store_config(storage, url="http://jenkins.internal:8080")
    cache.invalidate()

    new = cache.get()
    assert new is not old
    assert new.config.url == "http://jenkins.internal:8080"
    assert factory.count == 2


def test_invalidating_block_drops_client_even_on_error(storage):
    """Test a failed config mutation still drops the cached client."""
    cache = ClientCache(storage, CountingFactory())
    old = cache.get()

    with pytest.raises(RuntimeError):
        with cache.invalidating():
            raise RuntimeError("storage exploded")

    assert cache.cached is None
    assert cache.get() is not old


def test_missing_config_raises():
    """Test get() with nothing configured fails with ConfigurationMissingError."""
    cache = ClientCache(MemoryStorageAdapter(), CountingFactory())

    with pytest.raises(ConfigurationMissingError):
        cache.get()

    assert cache.cached is None


@pytest.mark.parametrize("field", ["username", "password", "url"])
def test_incomplete_config_raises(field):
    """Test each required field is checked before building."""
    storage = MemoryStorageAdapter()
    _store_config(storage, **{field: ""})
    factory = CountingFactory()
    cache = ClientCache(storage, factory)

    with pytest.raises(ConfigurationMissingError) as exc_info:
        cache.get()

    assert field.lower() in str(exc_info.value).lower()
    assert factory.count == 0


def test_factory_error_is_not_cached(storage):
    """Test a failing factory surfaces its error and a later get() retries."""
    calls = []

    def flaky_factory(config):
        calls.append(config)
        if len(calls) == 1:
            raise ValueError("bad url")
        return MemoryJenkinsAdapter(config)

    cache = ClientCache(storage, flaky_factory)

    with pytest.raises(ValueError):
        cache.get()

    assert cache.get() is not None
    assert len(calls) == 2

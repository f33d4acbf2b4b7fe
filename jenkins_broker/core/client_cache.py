"""
Client Cache - Lazily built, invalidation-aware Jenkins client.

One cache per backend instance. Reuse takes the shared side of a
reader/writer lock; construction and invalidation take the exclusive side,
so concurrent first callers build exactly one client and no caller sees a
client from before the latest config write.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Optional

from jenkins_broker.core.config_store import load_config
from jenkins_broker.core.rwlock import ReadWriteLock
from jenkins_broker.domain.config import JenkinsConfig
from jenkins_broker.ports.jenkins_port import JenkinsPort
from jenkins_broker.ports.storage_port import StoragePort

logger = logging.getLogger(__name__)

ClientFactory = Callable[[JenkinsConfig], JenkinsPort]


class ClientCache:
    """
    Memoized Jenkins client for the configuration currently in storage.

    get() and invalidate() are the only mutators of the cache slot.
    """

    def __init__(self, storage: StoragePort, client_factory: ClientFactory):
        """
        Args:
            storage: Storage holding the "config" record
            client_factory: Builds a client from a complete JenkinsConfig;
                must not perform network I/O
        """
        self._storage = storage
        self._factory = client_factory
        self._client: Optional[JenkinsPort] = None
        self._lock = ReadWriteLock()

    def get(self) -> JenkinsPort:
        """
        Return the cached client, building it on first use after an invalidation.

        Raises:
            ConfigurationMissingError: No config stored, or a required field is empty
            StorageError: Config could not be read
        """
        with self._lock.read():
            if self._client is not None:
                return self._client

        with self._lock.write():
            # Another caller may have built it while we waited for the write side
            if self._client is not None:
                return self._client

            config = load_config(self._storage) or JenkinsConfig()
            config.require_complete()

            self._client = self._factory(config)
            logger.info("Built Jenkins client for %s as %s", config.url, config.username)
            return self._client

    def invalidate(self):
        """Drop the cached client; the next get() rebuilds from storage."""
        with self._lock.write():
            self._clear()

    @contextmanager
    def invalidating(self):
        """
        Run a config mutation under the exclusive lock, then drop the client.

        No get() can observe the old client once the block has started.
        The client is dropped even if the mutation raises.
        """
        with self._lock.write():
            try:
                yield
            finally:
                self._clear()

    @property
    def cached(self) -> Optional[JenkinsPort]:
        """Currently cached client, without building one."""
        with self._lock.read():
            return self._client

    def _clear(self):
        if self._client is not None:
            logger.info("Invalidated cached Jenkins client")
        self._client = None

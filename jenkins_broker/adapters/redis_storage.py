"""
Redis Storage Adapter - Backend records as JSON strings in Redis.
"""

import json
from typing import Optional, Dict, Any

from jenkins_broker.exceptions import StorageError
from jenkins_broker.ports.storage_port import StoragePort


class RedisStorageAdapter(StoragePort):
    """
    Redis-backed storage.

    Records are stored as JSON without expiration; lease expiry is the
    host's job, not the storage layer's.
    Supports distributed deployments.
    """

    def __init__(
        self,
        redis_client=None,
        url: str = "redis://localhost:6379/0",
        prefix: str = "jenkins-broker:",
    ):
        """
        Initialize Redis storage adapter.

        Args:
            redis_client: Redis client instance (redis.Redis)
            url: Redis URL used when no client is given
            prefix: Key prefix for records
        """
        try:
            import redis
        except ImportError:
            raise ImportError("redis package required: pip install redis")

        self._redis_module = redis
        self._redis_error = redis.exceptions.RedisError
        self._redis = redis_client
        self._url = url
        self._prefix = prefix

    def _get_redis(self):
        """Lazy load Redis client."""
        if self._redis is None:
            self._redis = self._redis_module.Redis.from_url(self._url, decode_responses=True)
        return self._redis

    def _key(self, key: str) -> str:
        """Generate Redis key for a record."""
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Read a record from Redis."""
        try:
            raw = self._get_redis().get(self._key(key))
        except self._redis_error as e:
            raise StorageError("read", key, str(e)) from e

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageError("decode", key, str(e)) from e

    def put(self, key: str, value: Dict[str, Any]) -> None:
        """Write a record to Redis."""
        try:
            self._get_redis().set(self._key(key), json.dumps(value))
        except self._redis_error as e:
            raise StorageError("write", key, str(e)) from e

    def delete(self, key: str) -> None:
        """Delete a record from Redis."""
        try:
            self._get_redis().delete(self._key(key))
        except self._redis_error as e:
            raise StorageError("delete", key, str(e)) from e

    def list(self, prefix: str) -> list[str]:
        """List immediate children under prefix."""
        full_prefix = self._key(prefix)
        try:
            keys = list(self._get_redis().scan_iter(match=f"{full_prefix}*"))
        except self._redis_error as e:
            raise StorageError("list", prefix, str(e)) from e

        children = set()
        for key in keys:
            if isinstance(key, bytes):
                key = key.decode()
            rest = key[len(full_prefix):]
            if not rest:
                continue
            head, sep, _ = rest.partition("/")
            children.add(head + sep)

        return sorted(children)

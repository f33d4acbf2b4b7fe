"""
Memory Storage Adapter - In-memory record storage (testing only).
"""

import json
import threading
from typing import Optional, Dict, Any

from jenkins_broker.ports.storage_port import StoragePort


class MemoryStorageAdapter(StoragePort):
    """
    In-memory storage.

    WARNING: Only for testing. Records are lost on restart.
    Not suitable for production or distributed deployments.
    """

    def __init__(self):
        """Initialize in-memory storage."""
        # Format: {key: json_string}
        self._records: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get a record from memory."""
        with self._lock:
            raw = self._records.get(key)

        if raw is None:
            return None
        return json.loads(raw)

    def put(self, key: str, value: Dict[str, Any]) -> None:
        """Store a record in memory (serialized, so callers can't alias it)."""
        raw = json.dumps(value)
        with self._lock:
            self._records[key] = raw

    def delete(self, key: str) -> None:
        """Delete a record from memory."""
        with self._lock:
            self._records.pop(key, None)

    def list(self, prefix: str) -> list[str]:
        """List immediate children under prefix."""
        with self._lock:
            keys = list(self._records)

        children = []
        for key in keys:
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix):]
            if not rest:
                continue
            head, sep, _ = rest.partition("/")
            child = head + sep
            if child not in children:
                children.append(child)

        return sorted(children)

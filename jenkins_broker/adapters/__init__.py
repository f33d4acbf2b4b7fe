"""
Adapters - Implementations of ports.

Host Storage:
- MemoryStorageAdapter: In-memory storage (testing)
- VaultStorageAdapter: HashiCorp Vault KV v2
- RedisStorageAdapter: Redis

Downstream Jenkins:
- JenkinsClient: Jenkins HTTP API
- MemoryJenkinsAdapter: In-memory Jenkins (testing)
"""

# Host Storage
from jenkins_broker.adapters.memory_storage import MemoryStorageAdapter
from jenkins_broker.adapters.vault_storage import VaultStorageAdapter
from jenkins_broker.adapters.redis_storage import RedisStorageAdapter

# Downstream Jenkins
from jenkins_broker.adapters.jenkins_client import JenkinsClient
from jenkins_broker.adapters.memory_jenkins import MemoryJenkinsAdapter

__all__ = [
    # Host Storage
    "MemoryStorageAdapter",
    "VaultStorageAdapter",
    "RedisStorageAdapter",
    # Downstream Jenkins
    "JenkinsClient",
    "MemoryJenkinsAdapter",
]

"""
Backend Settings - Process-level settings read from the environment.

Jenkins connection details are not here; they live in the "config" record
and are managed through the config path.
"""

import os
from dataclasses import dataclass
from typing import Optional, Mapping

from jenkins_broker.domain.lease import LeaseDefaults
from jenkins_broker.ports.storage_port import StoragePort

ENV_PREFIX = "JENKINS_BROKER_"

STORAGE_BACKENDS = ("memory", "vault", "redis")


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid integer value for {name}: {value}")


def _env_float(env: Mapping[str, str], name: str) -> Optional[float]:
    value = env.get(name)
    if value is None or value == "":
        return None
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Invalid number for {name}: {value}")


@dataclass
class BackendSettings:
    """
    Settings for one backend instance.

    default_lease_ttl/max_lease_ttl are the host defaults applied to any
    lease whose credential asked for a TTL of 0.
    """
    default_lease_ttl: int = 86400
    max_lease_ttl: int = 172800
    request_timeout: Optional[float] = None  # None = no timeout on Jenkins calls

    storage_backend: str = "memory"
    vault_url: str = "http://localhost:8200"
    vault_token: Optional[str] = None
    vault_mount: str = "secret"
    vault_path_prefix: str = "jenkins-broker"
    redis_url: str = "redis://localhost:6379/0"
    redis_prefix: str = "jenkins-broker:"

    def __post_init__(self):
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unsupported storage backend: {self.storage_backend} "
                f"(expected one of {', '.join(STORAGE_BACKENDS)})"
            )
        if self.default_lease_ttl <= 0 or self.max_lease_ttl <= 0:
            raise ValueError("Lease TTL defaults must be positive")

    @property
    def lease_defaults(self) -> LeaseDefaults:
        return LeaseDefaults(
            default_ttl=min(self.default_lease_ttl, self.max_lease_ttl),
            max_ttl=self.max_lease_ttl,
        )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "BackendSettings":
        """
        Load settings from environment variables.

        Args:
            env: Mapping to read instead of os.environ (tests)

        Raises:
            ValueError: A numeric variable does not parse, or storage backend unknown
        """
        env = os.environ if env is None else env

        return cls(
            default_lease_ttl=_env_int(env, f"{ENV_PREFIX}DEFAULT_LEASE_TTL", 86400),
            max_lease_ttl=_env_int(env, f"{ENV_PREFIX}MAX_LEASE_TTL", 172800),
            request_timeout=_env_float(env, f"{ENV_PREFIX}REQUEST_TIMEOUT"),
            storage_backend=env.get(f"{ENV_PREFIX}STORAGE", "memory"),
            vault_url=env.get("VAULT_ADDR", "http://localhost:8200"),
            vault_token=env.get("VAULT_TOKEN"),
            vault_mount=env.get(f"{ENV_PREFIX}VAULT_MOUNT", "secret"),
            vault_path_prefix=env.get(f"{ENV_PREFIX}VAULT_PREFIX", "jenkins-broker"),
            redis_url=env.get(f"{ENV_PREFIX}REDIS_URL", "redis://localhost:6379/0"),
            redis_prefix=env.get(f"{ENV_PREFIX}REDIS_PREFIX", "jenkins-broker:"),
        )


def build_storage(settings: BackendSettings) -> StoragePort:
    """Build the storage adapter named by settings.storage_backend."""
    if settings.storage_backend == "vault":
        from jenkins_broker.adapters.vault_storage import VaultStorageAdapter
        return VaultStorageAdapter(
            url=settings.vault_url,
            token=settings.vault_token,
            mount_point=settings.vault_mount,
            path_prefix=settings.vault_path_prefix,
        )

    if settings.storage_backend == "redis":
        from jenkins_broker.adapters.redis_storage import RedisStorageAdapter
        return RedisStorageAdapter(url=settings.redis_url, prefix=settings.redis_prefix)

    from jenkins_broker.adapters.memory_storage import MemoryStorageAdapter
    return MemoryStorageAdapter()

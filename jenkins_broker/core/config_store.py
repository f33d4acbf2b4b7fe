"""
Config Store - Persists the Jenkins connection configuration.

Every write or delete runs under the client cache's exclusive lock and
drops the cached client. A failed validation probe never rolls back the
write: the record stays persisted and the probe failure is raised on its own.
"""

import logging
from typing import TYPE_CHECKING, Dict, Any, Optional

from jenkins_broker.domain.config import JenkinsConfig
from jenkins_broker.exceptions import (
    ConfigurationMissingError,
    ConfigValidationError,
    InvalidRequestError,
    NotFoundError,
    StorageError,
)
from jenkins_broker.ports.jenkins_port import JenkinsAPIError
from jenkins_broker.ports.storage_port import StoragePort

if TYPE_CHECKING:
    from jenkins_broker.core.client_cache import ClientCache

logger = logging.getLogger(__name__)

CONFIG_KEY = "config"
REQUIRED_FIELDS = ("username", "url", "password")


def load_config(storage: StoragePort) -> Optional[JenkinsConfig]:
    """
    Read the stored configuration.

    Returns:
        JenkinsConfig, or None when nothing has been configured
    """
    record = storage.get(CONFIG_KEY)
    if record is None:
        return None

    if not isinstance(record, dict):
        raise StorageError("decode", CONFIG_KEY, "error reading root configuration")
    return JenkinsConfig.from_dict(record)


def _parse_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "1", "yes"):
        return True
    if isinstance(value, str) and value.lower() in ("false", "0", "no"):
        return False
    raise InvalidRequestError(f"invalid {field_name}: {value!r}")


class ConfigStore:
    """Read/write/delete of the single "config" record."""

    def __init__(self, storage: StoragePort, cache: "ClientCache"):
        self._storage = storage
        self._cache = cache

    def exists(self) -> bool:
        """Existence check used to route a write to create or update."""
        return self._storage.get(CONFIG_KEY) is not None

    def read(self) -> Optional[Dict[str, Any]]:
        """
        Read the configuration without the password.

        Returns:
            {"username", "url"}, or None when unconfigured
        """
        config = load_config(self._storage)
        if config is None:
            return None
        return config.to_response_data()

    def write(self, data: Dict[str, Any], create: bool) -> JenkinsConfig:
        """
        Create or update the configuration.

        Args:
            data: username, password, url, and optional validate (default True)
            create: True requires all three connection fields; False merges
                whatever is given onto the existing record

        Returns:
            The configuration now persisted

        Raises:
            NotFoundError: Update with no existing configuration
            ConfigurationMissingError: Create without username, url or password
            StorageError: Record could not be written
            ConfigValidationError: Record persisted, but Jenkins rejected the probe
        """
        config = load_config(self._storage)

        if config is None:
            if not create:
                raise NotFoundError("config not found during update operation")
            config = JenkinsConfig()

        if create:
            for field_name in REQUIRED_FIELDS:
                if not data.get(field_name):
                    raise ConfigurationMissingError(f"missing {field_name} in configuration")

        config = config.merge(data)
        config.validate = _parse_bool(data.get("validate", True), "validate")

        with self._cache.invalidating():
            self._storage.put(CONFIG_KEY, config.to_dict())

        logger.info("Wrote Jenkins configuration for %s as %s", config.url, config.username)

        if config.validate:
            self._validate()

        return config

    def delete(self):
        """Delete the configuration; the cached client is dropped regardless."""
        with self._cache.invalidating():
            self._storage.delete(CONFIG_KEY)

        logger.info("Deleted Jenkins configuration")

    def _validate(self):
        """Probe Jenkins with a client built from the configuration just written."""
        try:
            client = self._cache.get()
            client.init()
        except (JenkinsAPIError, ConfigurationMissingError) as e:
            # Next request must rebuild rather than reuse the client that failed
            self._cache.invalidate()
            logger.warning("Jenkins configuration failed validation: %s", e)
            raise ConfigValidationError(str(e), persisted=True) from e

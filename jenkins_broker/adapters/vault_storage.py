"""
HashiCorp Vault Storage Adapter - Backend records in Vault KV v2.
"""

import logging
from typing import Optional, Dict, Any

from jenkins_broker.exceptions import StorageError
from jenkins_broker.ports.storage_port import StoragePort

logger = logging.getLogger(__name__)


class VaultStorageAdapter(StoragePort):
    """
    HashiCorp Vault storage adapter.

    Uses KV Secrets Engine v2. Each record is one secret under
    <mount_point>/<path_prefix>/<key>.
    Requires: pip install hvac
    """

    def __init__(
        self,
        url: str = "http://localhost:8200",
        token: Optional[str] = None,
        mount_point: str = "secret",
        path_prefix: str = "jenkins-broker",
        client=None,
    ):
        """
        Initialize Vault adapter.

        Args:
            url: Vault server URL
            token: Vault token (or use VAULT_TOKEN env var)
            mount_point: KV mount point (default: secret)
            path_prefix: Path prefix for records (default: jenkins-broker)
            client: Pre-built hvac.Client (skips authentication check)
        """
        try:
            import hvac
        except ImportError:
            raise ImportError("hvac package required: pip install hvac")

        self._invalid_path = hvac.exceptions.InvalidPath
        self._vault_error = hvac.exceptions.VaultError
        self._mount_point = mount_point
        self._path_prefix = path_prefix.strip("/")

        if client is not None:
            self._client = client
            return

        self._client = hvac.Client(url=url, token=token)

        if not self._client.is_authenticated():
            raise ValueError("Vault authentication failed")

    def _get_path(self, key: str) -> str:
        """Get full Vault path for a key."""
        key = key.strip("/")
        if not key:
            return self._path_prefix
        return f"{self._path_prefix}/{key}"

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Read a record from Vault."""
        try:
            response = self._client.secrets.kv.v2.read_secret_version(
                path=self._get_path(key),
                mount_point=self._mount_point,
                raise_on_deleted_version=True,
            )
        except self._invalid_path:
            return None
        except self._vault_error as e:
            raise StorageError("read", key, str(e)) from e

        return response["data"]["data"]

    def put(self, key: str, value: Dict[str, Any]) -> None:
        """Write a record to Vault."""
        try:
            self._client.secrets.kv.v2.create_or_update_secret(
                path=self._get_path(key),
                secret=value,
                mount_point=self._mount_point,
            )
        except self._vault_error as e:
            raise StorageError("write", key, str(e)) from e

    def delete(self, key: str) -> None:
        """Delete a record and all its versions from Vault."""
        try:
            self._client.secrets.kv.v2.delete_metadata_and_all_versions(
                path=self._get_path(key),
                mount_point=self._mount_point,
            )
        except self._invalid_path:
            logger.debug("Vault record %s already absent", key)
        except self._vault_error as e:
            raise StorageError("delete", key, str(e)) from e

    def list(self, prefix: str) -> list[str]:
        """List immediate children under prefix."""
        try:
            response = self._client.secrets.kv.v2.list_secrets(
                path=self._get_path(prefix),
                mount_point=self._mount_point,
            )
        except self._invalid_path:
            return []
        except self._vault_error as e:
            raise StorageError("list", prefix, str(e)) from e

        return response["data"]["keys"]

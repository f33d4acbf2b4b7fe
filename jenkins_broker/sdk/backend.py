"""
Jenkins Backend - High-level entry point the host dispatches requests to.

Wires storage, the client cache, the config store and both credential
lifecycles together, and maps (operation, path) pairs onto them.
"""

import logging
import re
from typing import Optional, Dict, Any

from jenkins_broker.adapters.jenkins_client import JenkinsClient
from jenkins_broker.core.client_cache import ClientCache, ClientFactory
from jenkins_broker.core.config_store import ConfigStore, CONFIG_KEY
from jenkins_broker.core.leases import LeaseCoordinator
from jenkins_broker.core.tokens import TokenManager, TOKENS_PREFIX
from jenkins_broker.core.users import UserManager, USERS_PREFIX
from jenkins_broker.domain.lease import parse_ttl
from jenkins_broker.domain.request import Operation, Request, Response
from jenkins_broker.exceptions import AlreadyExistsError, InvalidRequestError
from jenkins_broker.ports.storage_port import StoragePort
from jenkins_broker.settings import BackendSettings, build_storage

logger = logging.getLogger(__name__)

_NAME = r"(?P<name>\w(([\w\-.@]+)?\w)?)"
USER_PATH = re.compile(rf"^{USERS_PREFIX}/{_NAME}$")
USER_LIST_PATH = re.compile(rf"^{USERS_PREFIX}/?$")
TOKEN_PATH = re.compile(rf"^{TOKENS_PREFIX}/{_NAME}$")

WRITE_OPERATIONS = (Operation.CREATE, Operation.UPDATE)


class JenkinsBackend:
    """
    Jenkins secrets backend.

    Example:
        from jenkins_broker import JenkinsBackend, Operation, Request
        from jenkins_broker.adapters import MemoryStorageAdapter

        backend = JenkinsBackend(storage=MemoryStorageAdapter())

        backend.handle_request(Request(
            operation=Operation.CREATE,
            path="config",
            data={"username": "admin", "password": "admin", "url": "http://localhost:8080"},
        ))

        # Issue a token; response.secret is the lease the host keeps
        response = backend.handle_request(Request(Operation.READ, "tokens/ci"))

        # Later, the host revokes the lease
        backend.handle_request(Request(Operation.REVOKE, "tokens/ci", secret=response.secret))
    """

    def __init__(
        self,
        storage: StoragePort,
        settings: Optional[BackendSettings] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        """
        Initialize backend with adapters.

        Args:
            storage: Host storage view for this mount (required)
            settings: Lease defaults and timeouts (default: BackendSettings())
            client_factory: Builds the Jenkins client from config
                (default: JenkinsClient.from_config)
        """
        self._settings = settings or BackendSettings()

        if client_factory is None:
            timeout = self._settings.request_timeout

            def client_factory(config):
                return JenkinsClient.from_config(config, timeout=timeout)

        lease_defaults = self._settings.lease_defaults

        self.cache = ClientCache(storage, client_factory)
        self.config = ConfigStore(storage, self.cache)
        self.users = UserManager(storage, self.cache, lease_defaults)
        self.tokens = TokenManager(self.cache, lease_defaults)
        self.leases = LeaseCoordinator(self.users, self.tokens)

    @classmethod
    def factory(cls, settings: Optional[BackendSettings] = None) -> "JenkinsBackend":
        """
        Build a backend from settings (default: read from the environment).

        Storage is chosen by settings.storage_backend.
        """
        settings = settings or BackendSettings.from_env()
        return cls(storage=build_storage(settings), settings=settings)

    def invalidate(self, key: str):
        """Host notification that a storage key changed outside this instance."""
        if key == CONFIG_KEY:
            self.cache.invalidate()

    def close(self):
        """Drop and close the cached Jenkins client."""
        client = self.cache.cached
        self.cache.invalidate()
        if client is not None:
            client.close()

    def handle_request(self, request: Request) -> Optional[Response]:
        """
        Dispatch one host request.

        Returns:
            Response, or None for operations with nothing to return
            (deletes, config writes, reads of missing records)

        Raises:
            InvalidRequestError: Unknown path, or verb not supported on the path
            BrokerError: Any failure from the component handling the request
        """
        logger.debug("Handling %s %s", request.operation.value, request.path)

        if request.operation in (Operation.RENEW, Operation.REVOKE):
            return self._handle_lease(request)

        path = request.path.strip()

        if path == CONFIG_KEY:
            return self._handle_config(request)

        if USER_LIST_PATH.match(path):
            if request.operation != Operation.LIST:
                raise _unsupported(request)
            return Response.list_response(self.users.list())

        match = USER_PATH.match(path)
        if match:
            return self._handle_user(request, match.group("name"))

        match = TOKEN_PATH.match(path)
        if match:
            return self._handle_token(request, match.group("name"))

        raise InvalidRequestError(f"unsupported path: {request.path}")

    def _handle_config(self, request: Request) -> Optional[Response]:
        operation = request.operation

        if operation == Operation.READ:
            data = self.config.read()
            return Response(data=data) if data is not None else None

        if operation in WRITE_OPERATIONS:
            create = not self.config.exists()
            self.config.write(request.data, create=create)
            return None

        if operation == Operation.DELETE:
            self.config.delete()
            return None

        raise _unsupported(request)

    def _handle_user(self, request: Request, username: str) -> Optional[Response]:
        operation = request.operation

        if operation == Operation.READ:
            user = self.users.read(username)
            return Response(data=user.to_response_data()) if user is not None else None

        if operation in WRITE_OPERATIONS:
            # Users are ephemeral: a write to an existing name is an update, and updates are refused
            if self.users.exists(username):
                raise AlreadyExistsError(f"user {username} already exists")

            data = request.data
            return self.users.create(
                username=username,
                password=_required(data, "password"),
                fullname=_required(data, "fullname"),
                email=_required(data, "email"),
                ttl=parse_ttl(data.get("ttl"), "ttl"),
                max_ttl=parse_ttl(data.get("max_ttl"), "max_ttl"),
            )

        if operation == Operation.DELETE:
            self.users.delete(username)
            return None

        raise _unsupported(request)

    def _handle_token(self, request: Request, name: str) -> Response:
        # Read and update both mint a new token; nothing here is idempotent
        if request.operation not in (Operation.READ, Operation.UPDATE, Operation.CREATE):
            raise _unsupported(request)

        data = request.data
        return self.tokens.create(
            name=name,
            ttl=parse_ttl(data.get("ttl"), "ttl"),
            max_ttl=parse_ttl(data.get("max_ttl"), "max_ttl"),
        )

    def _handle_lease(self, request: Request) -> Optional[Response]:
        if request.secret is None:
            raise InvalidRequestError(f"{request.operation.value} requires a lease")

        if request.operation == Operation.RENEW:
            return Response(secret=self.leases.renew(request.secret))

        self.leases.revoke(request.secret)
        return None


def _required(data: Dict[str, Any], field_name: str) -> str:
    value = data.get(field_name)
    if not isinstance(value, str) or not value:
        raise InvalidRequestError(f"missing {field_name}")
    return value


def _unsupported(request: Request) -> InvalidRequestError:
    return InvalidRequestError(f"unsupported operation {request.operation.value} on {request.path}")

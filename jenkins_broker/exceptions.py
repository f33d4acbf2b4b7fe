"""
Broker Errors - Failure taxonomy for config, credential and lease operations.

Downstream and storage failures are wrapped with the operation that failed
and the credential it was acting on, then propagated to the host unchanged.
Nothing here is retried.
"""

from typing import Optional


class BrokerError(Exception):
    """Base class for every error raised by the broker."""


class InvalidRequestError(BrokerError):
    """Malformed path, missing required field, or unsupported verb."""


class ConfigurationMissingError(BrokerError):
    """Jenkins configuration is absent or missing a required field."""


class ConfigValidationError(BrokerError):
    """
    Connectivity probe failed after a config write.

    The configuration was still persisted; `persisted` records that so the
    caller can tell the write apart from the probe.
    """

    def __init__(self, message: str, persisted: bool = True):
        super().__init__(message)
        self.persisted = persisted


class AlreadyExistsError(BrokerError):
    """Create attempted against a credential key that already exists."""


class NotFoundError(BrokerError):
    """Update attempted against a record that does not exist."""


class StorageError(BrokerError):
    """Host storage call failed."""

    def __init__(self, operation: str, key: str, reason: Optional[str] = None):
        message = f"storage {operation} failed for '{key}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.operation = operation
        self.key = key


class DownstreamError(BrokerError):
    """Jenkins capability call failed."""

    def __init__(self, operation: str, credential: str, reason: Optional[str] = None):
        message = f"error {operation} '{credential}' in Jenkins"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.operation = operation
        self.credential = credential


class LeaseDataError(BrokerError):
    """Lease internal data violates its contract."""


class MissingLeaseMetadataError(LeaseDataError):
    """Lease internal data lacks ttl or max_ttl."""


class MalformedInternalDataError(LeaseDataError):
    """Identifying field in lease internal data is missing or mistyped."""

"""
Lease Domain Model - TTL envelope and typed internal data for issued credentials.

Internal data is attached to a lease by the create operation and handed back
by the host at renew/revoke time. It is invisible to the credential consumer.
Each credential kind has its own record so that renew/revoke read fields with
explicit checks instead of trusting an untyped map.
"""

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional, Union

from jenkins_broker.exceptions import (
    InvalidRequestError,
    MalformedInternalDataError,
    MissingLeaseMetadataError,
)

USER_SECRET_TYPE = "jenkins_user"
TOKEN_SECRET_TYPE = "jenkins_token"

_DURATION_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400}
_DURATION_RE = re.compile(r"^(\d+)([smhd]?)$")

# Shape the host router accepts for a {name} path segment
NAME_PATTERN = re.compile(r"^\w(([\w\-.@]+)?\w)?$")


def parse_ttl(value: Union[int, float, str, None], field_name: str = "ttl") -> int:
    """
    Parse a TTL given as seconds or a duration string.

    Args:
        value: 300, "300", "90s", "15m", "2h", "1d", or None
        field_name: Used in the error message

    Returns:
        Seconds (0 when value is None or empty)

    Raises:
        InvalidRequestError: Negative or unparseable value
    """
    if value is None or value == "":
        return 0

    if isinstance(value, bool):
        raise InvalidRequestError(f"invalid {field_name}: {value!r}")

    if isinstance(value, (int, float)):
        seconds = int(value)
    else:
        match = _DURATION_RE.match(str(value).strip())
        if not match:
            raise InvalidRequestError(f"invalid {field_name}: {value!r}")
        amount, unit = match.groups()
        seconds = int(amount) * _DURATION_UNITS[unit or "s"]

    if seconds < 0:
        raise InvalidRequestError(f"{field_name} cannot be negative")
    return seconds


def _seconds(data: Dict[str, Any], key: str) -> int:
    """Read a seconds value that may have round-tripped through JSON as a float."""
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedInternalDataError(f"invalid value for {key} in secret internal data")
    return int(value)


def _identifier(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise MalformedInternalDataError(f"invalid value for {key} in secret internal data")
    return value


@dataclass(frozen=True)
class LeaseTTL:
    """ttl/max_ttl pair carried in every lease's internal data."""
    ttl: int = 0
    max_ttl: int = 0

    @classmethod
    def from_internal_data(cls, data: Dict[str, Any]) -> "LeaseTTL":
        """
        Read ttl and max_ttl for renewal.

        Raises:
            MissingLeaseMetadataError: Either key absent
            MalformedInternalDataError: Either value not a number
        """
        if "ttl" not in data:
            raise MissingLeaseMetadataError("secret is missing ttl internal data")
        if "max_ttl" not in data:
            raise MissingLeaseMetadataError("secret is missing max_ttl internal data")
        return cls(ttl=_seconds(data, "ttl"), max_ttl=_seconds(data, "max_ttl"))


@dataclass(frozen=True)
class UserInternalData:
    """Internal data for a jenkins_user lease. Never carries the password."""
    username: str
    fullname: str = ""
    email: str = ""
    ttl: int = 0
    max_ttl: int = 0

    secret_type = USER_SECRET_TYPE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "fullname": self.fullname,
            "email": self.email,
            "ttl": self.ttl,
            "max_ttl": self.max_ttl,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserInternalData":
        """
        Deserialize for revocation.

        Raises:
            MalformedInternalDataError: username missing, not a string, or not a valid user name
        """
        username = _identifier(data, "username")
        if not NAME_PATTERN.match(username):
            raise MalformedInternalDataError("invalid value for username in secret internal data")

        return cls(
            username=username,
            fullname=data.get("fullname") or "",
            email=data.get("email") or "",
            ttl=_seconds(data, "ttl") if "ttl" in data else 0,
            max_ttl=_seconds(data, "max_ttl") if "max_ttl" in data else 0,
        )


@dataclass(frozen=True)
class TokenInternalData:
    """Internal data for a jenkins_token lease. Never carries the token value."""
    token_id: str
    token_name: str = ""
    ttl: int = 0
    max_ttl: int = 0

    secret_type = TOKEN_SECRET_TYPE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token_id": self.token_id,
            "token_name": self.token_name,
            "ttl": self.ttl,
            "max_ttl": self.max_ttl,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenInternalData":
        """
        Deserialize for revocation.

        Raises:
            MalformedInternalDataError: token_id missing, empty or not a string
        """
        return cls(
            token_id=_identifier(data, "token_id"),
            token_name=data.get("token_name") or "",
            ttl=_seconds(data, "ttl") if "ttl" in data else 0,
            max_ttl=_seconds(data, "max_ttl") if "max_ttl" in data else 0,
        )


InternalData = Union[UserInternalData, TokenInternalData]


@dataclass(frozen=True)
class LeaseDefaults:
    """Host-configured lease durations used when a credential asks for 0."""
    default_ttl: int = 86400
    max_ttl: int = 172800


@dataclass
class Lease:
    """
    Lease entity - TTL envelope around an issued credential.

    Domain rules:
    - ttl and max_ttl are seconds, always positive once issued
    - ttl never exceeds max_ttl
    - renewal returns a new Lease; an existing one is never mutated
    """
    secret_type: str
    internal_data: Dict[str, Any]
    ttl: int
    max_ttl: int
    lease_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    renewable: bool = True
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def issue(cls, internal: InternalData, defaults: LeaseDefaults) -> "Lease":
        """
        Issue a lease for a freshly created credential.

        The credential's own ttl/max_ttl apply only when greater than zero;
        otherwise the host defaults stay in effect.
        """
        max_ttl = internal.max_ttl if internal.max_ttl > 0 else defaults.max_ttl
        ttl = internal.ttl if internal.ttl > 0 else defaults.default_ttl
        return cls(
            secret_type=internal.secret_type,
            internal_data=internal.to_dict(),
            ttl=min(ttl, max_ttl),
            max_ttl=max_ttl,
        )

    def renewed(self, lease_ttl: LeaseTTL) -> "Lease":
        """Return a copy with lease_ttl reapplied where each value is positive."""
        max_ttl = lease_ttl.max_ttl if lease_ttl.max_ttl > 0 else self.max_ttl
        ttl = lease_ttl.ttl if lease_ttl.ttl > 0 else self.ttl
        return replace(
            self,
            internal_data=dict(self.internal_data),
            ttl=min(ttl, max_ttl),
            max_ttl=max_ttl,
        )

    def expires_at(self) -> datetime:
        return self.issued_at + timedelta(seconds=self.ttl)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize for the host's lease store.

        Internal data never includes a password or token value.
        """
        return {
            "lease_id": self.lease_id,
            "secret_type": self.secret_type,
            "internal_data": dict(self.internal_data),
            "ttl": self.ttl,
            "max_ttl": self.max_ttl,
            "renewable": self.renewable,
            "issued_at": self.issued_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Lease":
        """Deserialize from the host's lease store."""
        issued_at: Optional[str] = data.get("issued_at")
        return cls(
            secret_type=data["secret_type"],
            internal_data=dict(data.get("internal_data") or {}),
            ttl=int(data.get("ttl", 0)),
            max_ttl=int(data.get("max_ttl", 0)),
            lease_id=data.get("lease_id") or str(uuid.uuid4()),
            renewable=data.get("renewable", True),
            issued_at=datetime.fromisoformat(issued_at) if issued_at else datetime.now(timezone.utc),
        )

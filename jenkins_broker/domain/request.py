"""
Request/Response envelope exchanged with the host's request router.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional

from jenkins_broker.domain.lease import Lease


class Operation(Enum):
    """Verbs the host can dispatch to the backend."""
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"
    RENEW = "renew"
    REVOKE = "revoke"


@dataclass
class Request:
    """
    A single host request.

    `secret` is set only for RENEW and REVOKE, which act on an existing lease.
    """
    operation: Operation
    path: str
    data: Dict[str, Any] = field(default_factory=dict)
    secret: Optional[Lease] = None


@dataclass
class Response:
    """
    Backend reply.

    `data` is what the consumer sees. `secret` is set when the reply issues
    or renews a lease; its internal data is for the host only.
    """
    data: Dict[str, Any] = field(default_factory=dict)
    secret: Optional[Lease] = None
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def list_response(cls, keys: List[str]) -> "Response":
        return cls(data={"keys": list(keys)})

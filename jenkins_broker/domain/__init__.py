"""
Domain Models - Pure business entities.

No infrastructure dependencies. Domain logic only.
"""

from jenkins_broker.domain.config import JenkinsConfig
from jenkins_broker.domain.user import JenkinsUser
from jenkins_broker.domain.token import JenkinsToken
from jenkins_broker.domain.lease import (
    Lease,
    LeaseDefaults,
    LeaseTTL,
    UserInternalData,
    TokenInternalData,
    USER_SECRET_TYPE,
    TOKEN_SECRET_TYPE,
    parse_ttl,
)
from jenkins_broker.domain.request import Operation, Request, Response

__all__ = [
    "JenkinsConfig",
    "JenkinsUser",
    "JenkinsToken",
    "Lease",
    "LeaseDefaults",
    "LeaseTTL",
    "UserInternalData",
    "TokenInternalData",
    "USER_SECRET_TYPE",
    "TOKEN_SECRET_TYPE",
    "parse_ttl",
    "Operation",
    "Request",
    "Response",
]

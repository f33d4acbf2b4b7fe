"""
Jenkins User Domain Model - Ephemeral Jenkins account issued as a secret.
"""

from dataclasses import dataclass
from typing import Dict, Any

from jenkins_broker.domain.lease import UserInternalData


@dataclass
class JenkinsUser:
    """
    Jenkins user entity.

    Domain rules:
    - username is unique per mount
    - password exists only on the instance returned at creation time;
      to_response_data() and to_record() never include it
    - No update transition: a user is created once, then deleted
    """
    username: str
    fullname: str = ""
    email: str = ""
    password: str = ""
    ttl: int = 0
    max_ttl: int = 0

    def to_response_data(self) -> Dict[str, Any]:
        """Public projection returned to the consumer."""
        return {
            "username": self.username,
            "fullname": self.fullname,
            "email": self.email,
        }

    def to_internal_data(self) -> UserInternalData:
        return UserInternalData(
            username=self.username,
            fullname=self.fullname,
            email=self.email,
            ttl=self.ttl,
            max_ttl=self.max_ttl,
        )

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the users/<name> inventory record (no password)."""
        return self.to_internal_data().to_dict()

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "JenkinsUser":
        """Deserialize from the users/<name> inventory record."""
        return cls(
            username=data.get("username", ""),
            fullname=data.get("fullname", ""),
            email=data.get("email", ""),
            ttl=int(data.get("ttl", 0)),
            max_ttl=int(data.get("max_ttl", 0)),
        )

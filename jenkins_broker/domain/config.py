"""
Jenkins Config Domain Model - Connection settings for the downstream Jenkins.
"""

from dataclasses import dataclass
from typing import Dict, Any

from jenkins_broker.exceptions import ConfigurationMissingError


@dataclass
class JenkinsConfig:
    """
    Jenkins connection configuration.

    Domain rules:
    - One instance per backend mount
    - password is never returned by to_response_data()
    - username, password and url are all required before a client is built
    """
    username: str = ""
    password: str = ""
    url: str = ""
    validate: bool = True

    def require_complete(self):
        """
        Ensure every field needed to build a client is set.

        Raises:
            ConfigurationMissingError: First missing field, in declaration order
        """
        if not self.username:
            raise ConfigurationMissingError("jenkins username was not defined in /config")
        if not self.password:
            raise ConfigurationMissingError("jenkins password was not defined in /config")
        if not self.url:
            raise ConfigurationMissingError("jenkins URL was not defined in /config")

    def merge(self, data: Dict[str, Any]) -> "JenkinsConfig":
        """Return a copy with any username/password/url present in data applied."""
        return JenkinsConfig(
            username=data.get("username", self.username),
            password=data.get("password", self.password),
            url=data.get("url", self.url),
            validate=self.validate,
        )

    def to_response_data(self) -> Dict[str, Any]:
        """Public projection (password withheld)."""
        return {
            "username": self.username,
            "url": self.url,
        }

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the storage record.

        WARNING: Contains the Jenkins password. Never log this.
        """
        return {
            "username": self.username,
            "password": self.password,
            "url": self.url,
            "validate": self.validate,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JenkinsConfig":
        """Deserialize from the storage record."""
        return cls(
            username=data.get("username", ""),
            password=data.get("password", ""),
            url=data.get("url", ""),
            validate=data.get("validate", True),
        )

"""
Jenkins Token Domain Model - Single-shot Jenkins API token.
"""

from dataclasses import dataclass
from typing import Dict, Any

from jenkins_broker.domain.lease import TokenInternalData


@dataclass
class JenkinsToken:
    """
    Jenkins API token entity.

    Domain rules:
    - value is visible exactly once, in the creation response
    - Never persisted; only token_id and name travel in lease internal data
    """
    token_id: str
    name: str
    value: str = ""
    ttl: int = 0
    max_ttl: int = 0

    def to_response_data(self) -> Dict[str, Any]:
        """
        Public projection returned at creation.

        WARNING: Contains the token value. Never log this.
        """
        return {
            "token": self.value,
            "token_name": self.name,
            "token_id": self.token_id,
        }

    def to_internal_data(self) -> TokenInternalData:
        return TokenInternalData(
            token_id=self.token_id,
            token_name=self.name,
            ttl=self.ttl,
            max_ttl=self.max_ttl,
        )

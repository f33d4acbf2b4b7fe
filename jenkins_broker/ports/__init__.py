"""
Ports - Interfaces for host storage and the downstream Jenkins.

Hexagonal architecture: These define WHAT we need, not HOW.
Adapters provide the HOW.
"""

from jenkins_broker.ports.storage_port import StoragePort
from jenkins_broker.ports.jenkins_port import (
    JenkinsPort,
    JenkinsAPIError,
    JenkinsNotFoundError,
    JenkinsUserRecord,
    JenkinsAPIToken,
)

__all__ = [
    # Host storage
    "StoragePort",
    # Downstream Jenkins
    "JenkinsPort",
    "JenkinsAPIError",
    "JenkinsNotFoundError",
    "JenkinsUserRecord",
    "JenkinsAPIToken",
]

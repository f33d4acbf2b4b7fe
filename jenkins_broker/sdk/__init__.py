"""
SDK - High-level backend entry point.
"""

from jenkins_broker.sdk.backend import JenkinsBackend

__all__ = ["JenkinsBackend"]

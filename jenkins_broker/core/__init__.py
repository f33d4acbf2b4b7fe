"""
Core - Client cache, config store and credential lifecycles.
"""

from jenkins_broker.core.rwlock import ReadWriteLock
from jenkins_broker.core.config_store import ConfigStore, CONFIG_KEY, load_config
from jenkins_broker.core.client_cache import ClientCache
from jenkins_broker.core.users import UserManager, USERS_PREFIX
from jenkins_broker.core.tokens import TokenManager, TOKENS_PREFIX
from jenkins_broker.core.leases import LeaseCoordinator

__all__ = [
    "ReadWriteLock",
    "ConfigStore",
    "CONFIG_KEY",
    "load_config",
    "ClientCache",
    "UserManager",
    "USERS_PREFIX",
    "TokenManager",
    "TOKENS_PREFIX",
    "LeaseCoordinator",
]

"""wekan-client

An asyncio client for the Wekan REST API that logs in on its own and keeps
its bearer token fresh in the background.
"""

from .broker import TokenBroker
from .client import WekanClient
from .clock import SystemClock
from .config import Config, get_config, setup_logging
from .consts import PACKAGE_VERSION
from .exceptions import (
    ClosedError,
    ConfigError,
    LoginError,
    NotFoundError,
    WekanError,
)
from .login import WekanLogin
from .models import Session
from .session import SessionManager

__version__ = PACKAGE_VERSION

__all__ = [
    "__version__",
    "get_config",
    "setup_logging",
    "Config",
    "Session",
    "SessionManager",
    "SystemClock",
    "TokenBroker",
    "WekanClient",
    "WekanLogin",
    "WekanError",
    "ConfigError",
    "LoginError",
    "ClosedError",
    "NotFoundError",
]

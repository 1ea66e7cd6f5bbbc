"""
Configuration from command-line flags and environment variables.
"""

from .loader import ConfigError, ConfigLoader
from .schema import CollectorToggle, Config, GitHubConfig, LoggingConfig, WebConfig

__all__ = [
    "CollectorToggle",
    "Config",
    "ConfigError",
    "ConfigLoader",
    "GitHubConfig",
    "LoggingConfig",
    "WebConfig",
]

"""
Configuration bootstrap for the corgi snippet manager.

:mod:`corgi.config` locates the config home, creates the default files on first
run and persists the settings as JSON. :mod:`corgi.cli` exposes the same through
the ``corgi`` command.
"""

from .config import Config, ConfigManager, load
from .env import Environment
from .errors import ConfigError, EditorNotFoundError, MissingDefaultFilterCmdError

__all__ = [
    "Config",
    "ConfigError",
    "ConfigManager",
    "EditorNotFoundError",
    "Environment",
    "MissingDefaultFilterCmdError",
    "load",
]

"""Core types: settings, exit codes and the Result type."""

from .config import BotIdentities, ConfigError, ProjectSettings, Settings, load_settings
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "BotIdentities",
    "ConfigError",
    "ProjectSettings",
    "Settings",
    "load_settings",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]

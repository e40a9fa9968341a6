"""
meson_ext
Find a system Meson installation and drive it from a build script
"""

__version__ = "0.1.0"

from typing import Optional

from .config import MesonConfig, ConfigLoader
from .environment import Environment
from .errors import (
    MesonError,
    ProcessLaunchError,
    DirectoryCreationError,
    ToolExitedUnsuccessfully,
    ConfigureUnsuccessful,
    BuildUnsuccessful,
    InstallUnsuccessful,
    ToolExitedBySignal,
    ConfigureExitedBySignal,
    BuildExitedBySignal,
    InstallExitedBySignal,
    InvalidUtf8,
    VersionParseError,
    ConfigConsumedError,
    OutDirNotSetError,
    ConfigFileError,
)
from .utils import Logger
from .version import SemanticVersion


def find_meson(env: Optional[Environment] = None,
               logger: Optional[Logger] = None) -> MesonConfig:
    """
    Find the system-wide Meson installation

    Looks at MESON_<TARGET>, then MESON, then falls back to ``meson`` on
    PATH, and queries its version once.
    """
    return MesonConfig.find_system_meson(env, logger)


__all__ = [
    "__version__",
    "find_meson",
    "MesonConfig",
    "ConfigLoader",
    "SemanticVersion",
    "Logger",
    "MesonError",
    "ProcessLaunchError",
    "DirectoryCreationError",
    "ToolExitedUnsuccessfully",
    "ConfigureUnsuccessful",
    "BuildUnsuccessful",
    "InstallUnsuccessful",
    "ToolExitedBySignal",
    "ConfigureExitedBySignal",
    "BuildExitedBySignal",
    "InstallExitedBySignal",
    "InvalidUtf8",
    "VersionParseError",
    "ConfigConsumedError",
    "OutDirNotSetError",
    "ConfigFileError",
]

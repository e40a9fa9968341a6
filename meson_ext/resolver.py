"""
Locate the Meson executable and query its version
"""

import subprocess
from pathlib import Path
from typing import Optional, Union

from .environment import (
    Environment,
    MESON_VAR,
    TARGET_VAR,
    lookup,
    target_specific_variable,
)
from .errors import InvalidUtf8, ProcessLaunchError, check_exit_status
from .utils import Logger, get_logger
from .version import SemanticVersion

DEFAULT_MESON = "meson"


def _find_target_specific(env: Optional[Environment]) -> Optional[str]:
    target = lookup(env, TARGET_VAR)
    if target is None:
        return None
    return lookup(env, target_specific_variable(target))


def find_meson_executable(env: Optional[Environment] = None,
                          logger: Optional[Logger] = None) -> str:
    """
    Resolve the Meson executable from the environment

    MESON_<TARGET> wins over MESON, which wins over plain ``meson``.
    Resolution never fails; a missing tool only shows up when it is run.

    Args:
        env: Environment lookup (defaults to os.environ)
        logger: Logger instance

    Returns:
        Path or command name of the Meson executable
    """
    logger = logger or get_logger()

    meson = _find_target_specific(env)
    if meson is not None:
        logger.debug(f"Using target-specific Meson: {meson}")
        return meson

    meson = lookup(env, MESON_VAR)
    if meson is not None:
        logger.debug(f"Using Meson from {MESON_VAR}: {meson}")
        return meson

    return DEFAULT_MESON


def get_meson_version(meson_path: Union[str, Path],
                      logger: Optional[Logger] = None) -> SemanticVersion:
    """
    Run ``meson --version`` and parse its output

    Raises:
        ProcessLaunchError: the executable could not be started
        ToolExitedUnsuccessfully: non-zero exit code
        ToolExitedBySignal: the process was killed by a signal
        InvalidUtf8: the output is not UTF-8
        VersionParseError: the output is not a semantic version
    """
    logger = logger or get_logger()
    cmd = [str(meson_path), "--version"]
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, capture_output=True, check=False)
    except OSError as e:
        raise ProcessLaunchError(str(meson_path), "version", e) from e

    check_exit_status(result.returncode, "version")

    try:
        version_raw = result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8(e) from e

    version = SemanticVersion.parse(version_raw)
    logger.debug(f"Meson version: {version}")
    return version


__all__ = ["DEFAULT_MESON", "find_meson_executable", "get_meson_version"]

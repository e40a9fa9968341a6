"""
Exceptions raised by meson_ext

Every failure of the Meson tool derives from MesonError so callers can
catch a single type and still inspect the failing step and exit code.
"""

from typing import Optional


class MesonError(Exception):
    """Base class for all Meson tool failures"""

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.step = step


class ProcessLaunchError(MesonError):
    """Raised when the Meson executable cannot be spawned"""

    def __init__(self, executable: str, step: str, cause: OSError):
        super().__init__(f"Failed to launch '{executable}' ({step}): {cause}", step)
        self.executable = executable
        self.cause = cause


class DirectoryCreationError(MesonError):
    """Raised when a build or install directory cannot be created"""

    def __init__(self, path, step: str, cause: OSError):
        super().__init__(f"Failed to create directory {path} ({step}): {cause}", step)
        self.path = path
        self.cause = cause


class ToolExitedUnsuccessfully(MesonError):
    """Raised when Meson exits normally with a non-zero code"""

    def __init__(self, code: int, step: str = "version"):
        super().__init__(f"meson {step} exited with code {code}", step)
        self.code = code


class ConfigureUnsuccessful(ToolExitedUnsuccessfully):
    """meson setup returned a non-zero code"""

    def __init__(self, code: int):
        super().__init__(code, "configure")


class BuildUnsuccessful(ToolExitedUnsuccessfully):
    """meson build returned a non-zero code"""

    def __init__(self, code: int):
        super().__init__(code, "build")


class InstallUnsuccessful(ToolExitedUnsuccessfully):
    """meson install returned a non-zero code"""

    def __init__(self, code: int):
        super().__init__(code, "install")


class ToolExitedBySignal(MesonError):
    """Raised when Meson is terminated by a signal (no exit code)"""

    code = None

    def __init__(self, step: str = "version", signal: Optional[int] = None):
        detail = f" (signal {signal})" if signal is not None else ""
        super().__init__(f"meson {step} was terminated by a signal{detail}", step)
        self.signal = signal


class ConfigureExitedBySignal(ToolExitedBySignal):
    def __init__(self, signal: Optional[int] = None):
        super().__init__("configure", signal)


class BuildExitedBySignal(ToolExitedBySignal):
    def __init__(self, signal: Optional[int] = None):
        super().__init__("build", signal)


class InstallExitedBySignal(ToolExitedBySignal):
    def __init__(self, signal: Optional[int] = None):
        super().__init__("install", signal)


class InvalidUtf8(MesonError):
    """Raised when `meson --version` prints something that is not UTF-8"""

    def __init__(self, cause: UnicodeDecodeError):
        super().__init__(f"meson --version output is not valid UTF-8: {cause}", "version")
        self.cause = cause


class VersionParseError(MesonError):
    """Raised when a version string is not a valid semantic version"""

    def __init__(self, text: str):
        super().__init__(f"Not a valid semantic version: '{text}'", "version")
        self.text = text


_UNSUCCESSFUL = {
    "configure": ConfigureUnsuccessful,
    "build": BuildUnsuccessful,
    "install": InstallUnsuccessful,
}

_BY_SIGNAL = {
    "configure": ConfigureExitedBySignal,
    "build": BuildExitedBySignal,
    "install": InstallExitedBySignal,
}


def check_exit_status(returncode: int, step: str) -> None:
    """
    Raise the step-specific error for a failed Meson process

    Args:
        returncode: Return code as reported by subprocess (negative when
            the process was killed by a signal)
        step: One of version, configure, build, install
    """
    if returncode == 0:
        return
    if returncode < 0:
        if step in _BY_SIGNAL:
            raise _BY_SIGNAL[step](-returncode)
        raise ToolExitedBySignal(step, -returncode)
    if step in _UNSUCCESSFUL:
        raise _UNSUCCESSFUL[step](returncode)
    raise ToolExitedUnsuccessfully(returncode, step)


class ConfigConsumedError(RuntimeError):
    """Raised when a MesonConfig is used after build() was called"""


class OutDirNotSetError(RuntimeError):
    """Raised when no output directory was set and OUT_DIR is missing"""


class ConfigFileError(ValueError):
    """Raised when a YAML configuration file is malformed"""


__all__ = [
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
    "check_exit_status",
]

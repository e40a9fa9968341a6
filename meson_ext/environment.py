"""
Environment lookup used to locate and configure Meson

All environment reads go through an object with a ``get(key)`` method so
callers (and tests) can supply a plain dict instead of ``os.environ``.
"""

import os
from typing import Mapping, Optional

# Target triple set by the enclosing build script
TARGET_VAR = "TARGET"
# Generic override for the Meson executable
MESON_VAR = "MESON"
# Prefix of the per-target override, e.g. MESON_X86_64_UNKNOWN_LINUX_GNU
MESON_TARGET_PREFIX = "MESON_"
# Output directory assigned by the enclosing build script
OUT_DIR_VAR = "OUT_DIR"
# Build profile of the enclosing build script
PROFILE_VAR = "PROFILE"

Environment = Mapping[str, str]


def default_environment() -> Environment:
    """Return the process environment"""
    return os.environ


def target_specific_variable(target: str) -> str:
    """
    Derive the per-target override variable name for a target triple

    Args:
        target: Target triple (e.g. x86_64-unknown-linux-gnu)

    Returns:
        Variable name (e.g. MESON_X86_64_UNKNOWN_LINUX_GNU)
    """
    return MESON_TARGET_PREFIX + target.upper().replace("-", "_")


def lookup(env: Optional[Environment], key: str) -> Optional[str]:
    """Read a variable from env, falling back to the process environment"""
    if env is None:
        env = default_environment()
    return env.get(key)


__all__ = [
    "Environment",
    "TARGET_VAR",
    "MESON_VAR",
    "MESON_TARGET_PREFIX",
    "OUT_DIR_VAR",
    "PROFILE_VAR",
    "default_environment",
    "target_specific_variable",
    "lookup",
]

"""
Builder components
"""

from .base_builder import BaseBuilder, BuildState
from .meson_builder import MesonBuilder, SENTINEL_FILE

__all__ = [
    "BaseBuilder",
    "BuildState",
    "MesonBuilder",
    "SENTINEL_FILE",
]

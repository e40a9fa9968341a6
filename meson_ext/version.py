"""
Semantic version parsing for `meson --version` output
"""

import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Tuple, Union

from .errors import VersionParseError

# Grammar from semver.org (2.0.0)
_SEMVER_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


def _identifier_key(identifier: str) -> Tuple[int, Union[int, str]]:
    # Numeric identifiers sort below alphanumeric ones
    if identifier.isdigit():
        return (0, int(identifier))
    return (1, identifier)


@total_ordering
@dataclass(frozen=True)
class SemanticVersion:
    """major.minor.patch with optional pre-release and build metadata"""

    major: int
    minor: int
    patch: int
    prerelease: Tuple[str, ...] = field(default=())
    build: Tuple[str, ...] = field(default=(), compare=False)

    @classmethod
    def parse(cls, text: str) -> "SemanticVersion":
        """
        Parse a semantic version string

        Args:
            text: Version text, surrounding whitespace is ignored

        Returns:
            The parsed version

        Raises:
            VersionParseError: if the text does not follow the semver grammar
        """
        match = _SEMVER_RE.match(text.strip())
        if match is None:
            raise VersionParseError(text)

        prerelease = match.group("prerelease")
        build = match.group("build")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(prerelease.split(".")) if prerelease else (),
            build=tuple(build.split(".")) if build else (),
        )

    def _precedence_key(self):
        # A release sorts above any of its pre-releases
        if not self.prerelease:
            pre = (1, ())
        else:
            pre = (0, tuple(_identifier_key(i) for i in self.prerelease))
        return (self.major, self.minor, self.patch, pre)

    def __lt__(self, other):
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence_key() < other._precedence_key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


__all__ = ["SemanticVersion"]

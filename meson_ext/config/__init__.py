"""
Build configuration for a Meson project
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..builders import MesonBuilder
from ..environment import Environment, OUT_DIR_VAR, PROFILE_VAR, lookup
from ..errors import ConfigConsumedError, ConfigFileError, OutDirNotSetError
from ..resolver import find_meson_executable, get_meson_version
from ..utils import Diagnostics, Logger, get_logger
from ..version import SemanticVersion

PathLike = Union[str, Path]

KNOWN_PROFILES = ("debug", "release")
DEFAULT_PROFILE = "release"


class MesonConfig:
    """
    Meson executable to run and the options to pass to it

    Settings are changed through the set_* methods; build() runs the whole
    configure/build/install sequence once and consumes the config.
    """

    def __init__(self,
                 meson_path: PathLike,
                 meson_version: SemanticVersion,
                 env: Optional[Environment] = None,
                 logger: Optional[Logger] = None):
        self._meson_path = str(meson_path)
        self._meson_version = meson_version
        self._env = env
        self.logger = logger or get_logger()
        self.diagnostics = Diagnostics(self.logger)

        self.native_file: Optional[Path] = None
        self.cross_file: Optional[Path] = None
        self._out_path: Optional[Path] = None
        self.options: Dict[str, str] = {}
        # See --buildtype in the Meson documentation
        self._profile: Optional[str] = None
        self.extra_env: Dict[str, str] = {}
        self.dry_run = False

        self._consumed = False

    @classmethod
    def find_system_meson(cls, env: Optional[Environment] = None,
                          logger: Optional[Logger] = None) -> "MesonConfig":
        """Find the system-wide Meson installation and query its version"""
        logger = logger or get_logger()
        meson = find_meson_executable(env, logger)
        version = get_meson_version(meson, logger)
        return cls(meson, version, env=env, logger=logger)

    @classmethod
    def from_yaml(cls, path: PathLike, env: Optional[Environment] = None,
                  logger: Optional[Logger] = None) -> "MesonConfig":
        """Find the system Meson and apply settings from a YAML file"""
        settings = ConfigLoader(path).load()
        config = cls.find_system_meson(env, logger)
        return config.apply(settings)

    @property
    def meson_path(self) -> str:
        return self._meson_path

    def meson_version(self) -> str:
        """Get the Meson version as text"""
        return str(self._meson_version)

    @property
    def version(self) -> SemanticVersion:
        return self._meson_version

    def _check_usable(self):
        if self._consumed:
            raise ConfigConsumedError("MesonConfig was already used by build()")

    def set_native_file(self, file: PathLike) -> "MesonConfig":
        self._check_usable()
        self.native_file = Path(file)
        return self

    def set_cross_file(self, file: PathLike) -> "MesonConfig":
        self._check_usable()
        self.cross_file = Path(file)
        return self

    def set_out_path(self, path: PathLike) -> "MesonConfig":
        """Set the output path; build/ and install/ are created inside it"""
        self._check_usable()
        self._out_path = Path(path)
        return self

    def set_option(self, key: str, value: str) -> "MesonConfig":
        """Set a Meson build option, overwriting any previous value"""
        self._check_usable()
        self.options[key] = value
        return self

    def set_options(self, options: Mapping[str, str]) -> "MesonConfig":
        for key, value in options.items():
            self.set_option(key, value)
        return self

    def set_profile(self, profile: str) -> "MesonConfig":
        """Set the profile passed through --buildtype"""
        self._check_usable()
        self._profile = profile
        return self

    def set_env(self, key: str, value: str) -> "MesonConfig":
        """Add an environment variable for every Meson process"""
        self._check_usable()
        self.extra_env[key] = value
        return self

    def set_dry_run(self, dry_run: bool = True) -> "MesonConfig":
        self._check_usable()
        self.dry_run = dry_run
        return self

    def apply(self, settings: Dict[str, Any]) -> "MesonConfig":
        """Apply settings loaded by ConfigLoader"""
        if "native_file" in settings:
            self.set_native_file(settings["native_file"])
        if "cross_file" in settings:
            self.set_cross_file(settings["cross_file"])
        if "out_path" in settings:
            self.set_out_path(settings["out_path"])
        if "profile" in settings:
            self.set_profile(settings["profile"])
        self.set_options(settings.get("options", {}))
        for key, value in settings.get("env", {}).items():
            self.set_env(key, value)
        return self

    def out_path(self) -> Path:
        """
        Output directory: the explicit path, else OUT_DIR

        Raises:
            OutDirNotSetError: neither is available, which means we are
                running outside of a build script
        """
        if self._out_path is not None:
            return self._out_path

        out_dir = lookup(self._env, OUT_DIR_VAR)
        if out_dir is None:
            raise OutDirNotSetError(
                f"{OUT_DIR_VAR} is not set. Are you running outside of a build script? "
                "Use set_out_path to choose an output directory."
            )
        return Path(out_dir)

    def build_dir(self) -> Path:
        return self.out_path() / "build"

    def install_dir(self) -> Path:
        return self.out_path() / "install"

    def profile(self) -> str:
        """Profile set with set_profile, else derived from PROFILE"""
        if self._profile is not None:
            return self._profile

        profile = lookup(self._env, PROFILE_VAR)
        if profile is None:
            self.logger.debug(f"{PROFILE_VAR} is not set, using {DEFAULT_PROFILE}")
            return DEFAULT_PROFILE
        if profile in KNOWN_PROFILES:
            return profile

        self.diagnostics.warning(
            f"{PROFILE_VAR} '{profile}' is unknown. Using {DEFAULT_PROFILE} as default. "
            "Please override profile using set_profile"
        )
        return DEFAULT_PROFILE

    def builder(self, source_dir: PathLike) -> MesonBuilder:
        """Create the builder that runs this configuration"""
        # Meson runs inside source_dir, so every path it receives must be absolute
        out_path = self.out_path().resolve()
        return MesonBuilder(
            self._meson_path,
            Path(source_dir).resolve(),
            extra_env=self.extra_env,
            logger=self.logger,
            dry_run=self.dry_run,
            build_dir=out_path / "build",
            install_dir=out_path / "install",
            profile=self.profile,
            options=self.options,
            native_file=self.native_file.resolve() if self.native_file else None,
            cross_file=self.cross_file.resolve() if self.cross_file else None,
            diagnostics=self.diagnostics,
        )

    def build(self, source_dir: PathLike) -> MesonBuilder:
        """
        Configure, build and install the Meson project in source_dir

        The config cannot be used again afterwards.

        Returns:
            The builder, in the INSTALLED state
        """
        self._check_usable()
        self._consumed = True
        builder = self.builder(source_dir)
        builder.execute()
        return builder


class ConfigLoader:
    """Loads MesonConfig settings from a YAML file"""

    PATH_KEYS = ("native_file", "cross_file", "out_path")
    STRING_KEYS = ("profile",)
    MAPPING_KEYS = ("options", "env")

    def __init__(self, config_file: PathLike):
        self.config_file = Path(config_file)

    def load(self) -> Dict[str, Any]:
        """
        Read and validate the file

        Returns:
            Settings with paths resolved against the file's directory
        """
        if not self.config_file.exists():
            raise FileNotFoundError(f"Meson config not found: {self.config_file}")

        with open(self.config_file, 'r') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigFileError(f"Invalid YAML in {self.config_file}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigFileError(f"{self.config_file} must contain a mapping")

        known = self.PATH_KEYS + self.STRING_KEYS + self.MAPPING_KEYS
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigFileError(
                f"Unknown keys in {self.config_file}: {', '.join(map(str, unknown))}")

        settings: Dict[str, Any] = {}
        base_dir = self.config_file.resolve().parent

        for key in self.PATH_KEYS:
            if data.get(key) is not None:
                settings[key] = base_dir / str(data[key])

        for key in self.STRING_KEYS:
            if data.get(key) is not None:
                settings[key] = str(data[key])

        for key in self.MAPPING_KEYS:
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, dict):
                raise ConfigFileError(f"'{key}' in {self.config_file} must be a mapping")
            settings[key] = {str(k): self._scalar(v) for k, v in value.items()}

        return settings

    @staticmethod
    def _scalar(value: Any) -> str:
        # YAML booleans become Meson's true/false
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


__all__ = ["MesonConfig", "ConfigLoader", "KNOWN_PROFILES", "DEFAULT_PROFILE"]

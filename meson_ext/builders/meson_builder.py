"""
Meson builder implementation
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from .base_builder import BaseBuilder
from ..utils import Diagnostics

# Written by meson setup once configuration succeeds
SENTINEL_FILE = "build.ninja"


class MesonBuilder(BaseBuilder):
    """Builder for Meson projects"""

    def __init__(self, *args,
                 build_dir: Path,
                 install_dir: Path,
                 profile: Union[str, Callable[[], str]] = "",
                 options: Optional[Dict[str, str]] = None,
                 native_file: Optional[Path] = None,
                 cross_file: Optional[Path] = None,
                 diagnostics: Optional[Diagnostics] = None,
                 **kwargs):
        super().__init__(*args, **kwargs)

        self.build_dir = Path(build_dir)
        self.install_dir = Path(install_dir)
        self.profile = profile
        self.options = dict(options or {})
        self.native_file = native_file
        self.cross_file = cross_file
        self.diagnostics = diagnostics or Diagnostics(self.logger)

    def is_configured(self) -> bool:
        return (self.build_dir / SENTINEL_FILE).exists()

    def setup_args(self) -> List[str]:
        """Arguments for ``meson setup``"""
        args = ["setup"]

        # Resolved here so a skipped configure never evaluates it
        profile = self.profile() if callable(self.profile) else self.profile
        if profile:
            args.extend(["--buildtype", profile])
        else:
            self.diagnostics.info("profile is empty, ignoring profile option.")

        args.extend(f"-D{key}={value}" for key, value in self.options.items())

        if self.native_file is not None:
            args.extend(["--native-file", str(self.native_file)])

        if self.cross_file is not None:
            args.extend(["--cross-file", str(self.cross_file)])

        args.extend(["--prefix", str(self.install_dir)])

        # Source directory goes last
        args.append(str(self.source_dir))
        return args

    def configure(self):
        """Configure using meson setup"""
        self.check_state("configure")
        self.make_dirs("configure", self.build_dir)
        self.run_command(self.setup_args(), "configure")
        self.advance("configure")

    def build(self):
        """Build using meson build"""
        self.check_state("build")
        # configure may have been skipped
        self.make_dirs("build", self.build_dir, self.install_dir)
        self.run_command(["build", "-C", str(self.build_dir)], "build")
        self.advance("build")

    def install(self):
        """Install using meson install"""
        self.check_state("install")
        self.run_command(["install", "-C", str(self.build_dir)], "install")
        self.advance("install")

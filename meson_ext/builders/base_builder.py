"""
Base builder class that the Meson builder inherits from
"""

import os
import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..errors import DirectoryCreationError, ProcessLaunchError, check_exit_status
from ..utils import Logger, get_logger


class BuildState(Enum):
    """Progress of a build through its steps"""
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    BUILT = "built"
    INSTALLED = "installed"


# step name -> (required state, resulting state)
TRANSITIONS = {
    "configure": (BuildState.UNCONFIGURED, BuildState.CONFIGURED),
    "build": (BuildState.CONFIGURED, BuildState.BUILT),
    "install": (BuildState.BUILT, BuildState.INSTALLED),
}


class BaseBuilder(ABC):
    """Abstract base class for builders driving an external tool"""

    def __init__(self,
                 executable: Union[str, Path],
                 source_dir: Union[str, Path],
                 extra_env: Optional[Dict[str, str]] = None,
                 logger: Optional[Logger] = None,
                 dry_run: bool = False):
        """
        Initialize base builder

        Args:
            executable: Tool to run
            source_dir: Project source directory, used as the working directory
            extra_env: Variables added to the inherited environment
            logger: Logger instance
            dry_run: If True, don't actually run commands
        """
        self.executable = str(executable)
        self.source_dir = Path(source_dir)
        self.logger = logger or get_logger()
        self.dry_run = dry_run
        self.state = BuildState.UNCONFIGURED

        self.env = os.environ.copy()
        if extra_env:
            self.env.update(extra_env)

    def make_dirs(self, step: str, *paths: Path):
        """Create directories (with parents) before a step runs"""
        for path in paths:
            if self.dry_run:
                self.logger.info(f"[DRY RUN] Would create {path}")
                continue
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DirectoryCreationError(path, step, e) from e

    def run_command(self, args: List[str], step: str,
                    cwd: Optional[Path] = None) -> subprocess.CompletedProcess:
        """
        Run the tool with logging and check its exit status

        Args:
            args: Arguments passed after the executable
            step: Step name used to tag errors
            cwd: Working directory (defaults to the source directory)

        Returns:
            CompletedProcess instance
        """
        if cwd is None:
            cwd = self.source_dir

        cmd = [self.executable] + [str(a) for a in args]
        cmd_str = " ".join(cmd)
        self.logger.debug(f"Running: {cmd_str}")
        self.logger.debug(f"  in: {cwd}")

        if self.dry_run:
            self.logger.info(f"[DRY RUN] Would run: {cmd_str}")
            return subprocess.CompletedProcess(cmd, 0)

        try:
            result = subprocess.run(cmd, cwd=cwd, env=self.env, check=False)
        except OSError as e:
            raise ProcessLaunchError(self.executable, step, e) from e

        if result.returncode != 0:
            self.logger.error(f"Command failed: {cmd_str}")
        check_exit_status(result.returncode, step)
        return result

    def check_state(self, step: str):
        """Refuse to run a step out of order"""
        required, _ = TRANSITIONS[step]
        if self.state is not required:
            raise RuntimeError(
                f"Cannot {step} in state {self.state.value} (needs {required.value})")

    def advance(self, step: str):
        """Move to the state reached after a successful step"""
        self.check_state(step)
        self.state = TRANSITIONS[step][1]

    @abstractmethod
    def is_configured(self) -> bool:
        """Check whether a previous configure step already completed"""

    @abstractmethod
    def configure(self):
        """Configure the build"""

    @abstractmethod
    def build(self):
        """Build the project"""

    @abstractmethod
    def install(self):
        """Install the project"""

    def execute(self):
        """Execute configure, build and install, stopping at the first error"""
        self.logger.info(f"Building {self.source_dir}...")

        if self.is_configured():
            self.logger.info("Already configured, skipping configure")
            self.advance("configure")
        else:
            self.logger.info("Configuring...")
            self.configure()

        self.logger.info("Building...")
        self.build()

        self.logger.info("Installing...")
        self.install()

        self.logger.success(f"Successfully built {self.source_dir}")

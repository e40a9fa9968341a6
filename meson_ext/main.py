#!/usr/bin/env python3
"""
Command-line entry point for meson_ext
"""

import argparse
import sys
import traceback
from pathlib import Path
from typing import List, Optional, Tuple

from . import __version__
from .config import MesonConfig
from .environment import Environment
from .errors import ConfigFileError, MesonError, OutDirNotSetError
from .utils import Logger


def parse_option(text: str) -> Tuple[str, str]:
    """Parse a KEY=VALUE pair given with -D"""
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got '{text}'")
    return key, value


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meson-ext",
        description="Find the system Meson and configure, build and install a project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s find                                  # Show which Meson is used
  %(prog)s build . --out-dir out                 # Configure, build and install
  %(prog)s build . --out-dir out -D tests=false  # Pass a Meson option
  %(prog)s build . --config meson-ext.yaml       # Read settings from YAML
        """
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )
    parser.add_argument(
        "--log-file",
        help="Also write a debug log to this file"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("find", help="Locate Meson and print its version")

    build = subparsers.add_parser("build", help="Configure, build and install a project")
    build.add_argument("source_dir", type=Path, help="Meson project source directory")
    build.add_argument(
        "--out-dir",
        type=Path,
        help="Output directory (default: $OUT_DIR)"
    )
    build.add_argument("--profile", help="Value for --buildtype (default: from $PROFILE)")
    build.add_argument(
        "-D",
        dest="options",
        action="append",
        type=parse_option,
        default=[],
        metavar="KEY=VALUE",
        help="Meson option (can be used multiple times)"
    )
    build.add_argument("--native-file", type=Path, help="Meson native file")
    build.add_argument("--cross-file", type=Path, help="Meson cross file")
    build.add_argument("--config", type=Path, help="YAML file with build settings")
    build.add_argument(
        "--dry-run",
        action="store_true",
        help="Print commands without running them"
    )

    return parser


def run_build(args: argparse.Namespace, env: Optional[Environment], logger: Logger):
    if args.config:
        config = MesonConfig.from_yaml(args.config.resolve(), env=env, logger=logger)
    else:
        config = MesonConfig.find_system_meson(env=env, logger=logger)

    logger.info(f"Using {config.meson_path} {config.meson_version()}")

    # Command-line values override the config file
    if args.out_dir:
        config.set_out_path(args.out_dir.resolve())
    if args.profile is not None:
        config.set_profile(args.profile)
    if args.native_file:
        config.set_native_file(args.native_file.resolve())
    if args.cross_file:
        config.set_cross_file(args.cross_file.resolve())
    for key, value in args.options:
        config.set_option(key, value)
    config.set_dry_run(args.dry_run)

    config.build(args.source_dir.resolve())


def main(argv: Optional[List[str]] = None, env: Optional[Environment] = None):
    """Command-line interface"""
    parser = create_parser()
    args = parser.parse_args(argv)

    logger = Logger(verbose=args.verbose, log_file=args.log_file)

    try:
        if args.command == "find":
            config = MesonConfig.find_system_meson(env=env, logger=logger)
            print(f"Found meson: {config.meson_version()}")
            print(f"Path: {config.meson_path}")
        elif args.command == "build":
            run_build(args, env, logger)
    except KeyboardInterrupt:
        print("\nBuild interrupted by user", file=sys.stderr)
        sys.exit(130)
    except (MesonError, OutDirNotSetError, ConfigFileError, FileNotFoundError) as e:
        logger.error(str(e))
        if args.verbose:
            traceback.print_exc()
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()

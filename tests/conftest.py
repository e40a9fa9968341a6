import shlex
import stat
import sys
import textwrap
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

END_MARKER = "@@END@@"

# step name -> first argument meson receives for it
STEP_ARGS = {
    "version": "--version",
    "configure": "setup",
    "build": "build",
    "install": "install",
}


class FakeMeson:
    """Shell script standing in for meson that records every call"""

    def __init__(self, path: Path, log: Path):
        self.path = path
        self.log = log

    def calls(self) -> List[Tuple[Path, List[str]]]:
        """Return (cwd, argv) for every invocation, oldest first"""
        if not self.log.exists():
            return []
        calls = []
        record: List[str] = []
        for line in self.log.read_text().splitlines():
            if line == END_MARKER:
                calls.append((Path(record[0]), record[1:]))
                record = []
            else:
                record.append(line)
        return calls

    def argvs(self) -> List[List[str]]:
        return [argv for _, argv in self.calls()]

    def subcommands(self) -> List[str]:
        return [argv[0] for argv in self.argvs()]


def _write_fake_meson(directory: Path,
                      version: str,
                      exit_codes: Dict[str, int],
                      signals: Iterable[str],
                      invalid_utf8: bool) -> FakeMeson:
    directory.mkdir(parents=True, exist_ok=True)
    script = directory / "meson"
    log = directory / "calls.log"

    cases = []
    for step, code in exit_codes.items():
        cases.append(f"    {STEP_ARGS[step]}) exit {code} ;;")
    for step in signals:
        cases.append(f"    {STEP_ARGS[step]}) kill -9 $$ ;;")
    cases_text = "\n".join(cases) if cases else "    *) ;;"

    if invalid_utf8:
        version_output = r"printf '\377\376\n'"
    else:
        version_output = f"printf '%s\\n' {shlex.quote(version)}"

    script.write_text(textwrap.dedent("""\
        #!/bin/sh
        {{
            pwd -P
            for arg in "$@"; do
                printf '%s\\n' "$arg"
            done
            printf '%s\\n' '{end}'
        }} >> {log}

        if [ -n "$FAKE_MESON_ENV_LOG" ]; then
            printf '%s\\n' "$FAKE_MESON_MARKER" >> "$FAKE_MESON_ENV_LOG"
        fi

        case "$1" in
        {cases}
        esac

        if [ "$1" = "--version" ]; then
            {version_output}
            exit 0
        fi

        if [ "$1" = "setup" ]; then
            prefix=""
            while [ $# -gt 0 ]; do
                if [ "$1" = "--prefix" ]; then
                    prefix="$2"
                fi
                shift
            done
            touch "$(dirname "$prefix")/build/build.ninja"
        fi
        exit 0
        """).format(
            end=END_MARKER,
            log=shlex.quote(str(log)),
            cases=cases_text.strip(),
            version_output=version_output,
        ))
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return FakeMeson(script, log)


@pytest.fixture
def fake_meson(tmp_path):
    """Factory creating a fake meson executable in its own directory"""
    counter = {"n": 0}

    def factory(version: str = "1.4.0",
                exit_codes: Optional[Dict[str, int]] = None,
                signals: Iterable[str] = (),
                invalid_utf8: bool = False) -> FakeMeson:
        counter["n"] += 1
        directory = tmp_path / f"fake-meson-{counter['n']}"
        return _write_fake_meson(directory, version, exit_codes or {}, signals, invalid_utf8)

    return factory


@pytest.fixture
def source_dir(tmp_path):
    source = tmp_path / "project"
    source.mkdir()
    (source / "meson.build").write_text("project('demo', 'c')\n")
    return source


@pytest.fixture
def out_dir(tmp_path):
    return tmp_path / "out"

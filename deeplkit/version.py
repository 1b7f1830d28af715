"""The ``version`` command and the information it reports."""

from __future__ import annotations

import json
import platform
import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from .command import Command, FlagSet


@dataclass(frozen=True)
class VersionInfo:
    """Version details of the installed package."""

    version: str = ""
    revision: str = ""
    time: str = ""
    modified: bool = False
    python_version: str = ""


def _package_version() -> str:
    try:
        from . import __version__
    except ImportError:
        return ""
    return str(__version__)


def default_version_info() -> VersionInfo:
    """Report the package version and the running Python version."""
    return VersionInfo(
        version=_package_version(),
        python_version=platform.python_version(),
    )


class _VersionCommand:
    def __init__(self, info: VersionInfo, stdout: Optional[TextIO]) -> None:
        self.info = info
        self.stdout = stdout
        self.flags = FlagSet("version")
        self._register()

    def _register(self) -> None:
        flags = self.flags
        flags.add_bool("all", False, "print all information")
        flags.add_bool("a", False, "shorthand option for `--all`", dest="all")
        flags.add_bool("number", False, "print the version number")
        flags.add_bool("n", False, "shorthand option for `--number`", dest="number")
        flags.add_bool("revision", False, "print the commit revision identifier")
        flags.add_bool("r", False, "shorthand option for `--revision`", dest="revision")
        flags.add_bool("time", False, "print the commit revision modification time")
        flags.add_bool("t", False, "shorthand option for `--time`", dest="time")
        flags.add_bool("modified", False, "print whether the source tree was modified")
        flags.add_bool("m", False, "shorthand option for `--modified`", dest="modified")
        flags.add_bool("python-version", False, "print the Python version")
        flags.add_bool("p", False, "shorthand option for `--python-version`", dest="python_version")
        flags.add_bool("json", False, "print information in JSON")

    def _test(self, name: str) -> bool:
        for flag in self.flags.visit_all():
            if flag.name == name:
                return bool(self.flags.get(flag.dest))
        return False

    def _write(self, line: str) -> None:
        out = self.stdout if self.stdout is not None else sys.stdout
        try:
            print(line, file=out)
        except OSError as exc:
            raise OSError(f"error writing version information: {exc}") from exc

    def run(self, args: List[str]) -> None:
        if self._test("json"):
            self._write_json()
        else:
            self._write_text()

    def _write_text(self) -> None:
        info = self.info
        others = any(flag.name != "number" for flag in self.flags.visit())
        show_all = self._test("all")

        text = ""
        if not others or self._test("number") or show_all:
            text += info.version
        if self._test("revision") or show_all:
            text += f" {info.revision}"
        if self._test("time") or show_all:
            text += f" {info.time}"
        if self._test("python-version") or show_all:
            text += f" {info.python_version}"
        if (self._test("modified") or show_all) and info.modified:
            text += " (modified)"

        self._write(text.strip())

    def _write_json(self) -> None:
        info = self.info
        data = {
            "Version": info.version,
            "Revision": info.revision,
            "Time": info.time,
            "PythonVersion": info.python_version,
            "Modified": "true" if info.modified else "false",
        }
        self._write(json.dumps(data, sort_keys=True, separators=(",", ":")))


def default_version_command(stdout: Optional[TextIO] = None, info: Optional[VersionInfo] = None) -> Command:
    """Build the ``version`` command; it writes to ``stdout`` (default ``sys.stdout``)."""
    config = _VersionCommand(info if info is not None else default_version_info(), stdout)
    return Command(
        name="version",
        short_help="Show version information",
        flags=config.flags,
        action=config.run,
    )
"""Settings shared by every command, and the root command itself."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, NoReturn, Optional, TextIO, Tuple

from ..command import Command, FlagSet, HelpRequested
from ..translator import Translator


@dataclass
class RootConfig:
    """Output streams and the connection settings common to all commands."""

    stdout: TextIO
    stderr: TextIO
    flags: Optional[FlagSet] = field(default=None, repr=False)

    def register_flags(self, flags: FlagSet) -> None:
        """Define the common flags on ``flags`` and read values from it."""
        self.flags = flags
        flags.output = self.stderr
        flags.add_string("auth-key", "", "the authentication key as given in your DeepL account.")
        flags.add_string("server-url", "", "an alternative server URL.")
        flags.add_counter("v", "increase output verbosity", dest="verbosity")

    def _value(self, dest: str, fallback: Any) -> Any:
        if self.flags is None:
            return fallback
        return self.flags.get(dest)

    @property
    def auth_key(self) -> str:
        return self._value("auth_key", "")

    @property
    def server_url(self) -> str:
        return self._value("server_url", "")

    @property
    def verbosity(self) -> int:
        return self._value("verbosity", 0)

    def new_translator(self) -> Translator:
        """Create a translator from the configured key and server URL."""
        return Translator(self.auth_key, server_url=self.server_url or None)


def _new_config(stdout: TextIO, stderr: TextIO, name: str) -> Tuple[RootConfig, FlagSet]:
    flags = FlagSet(name)
    config = RootConfig(stdout, stderr)
    config.register_flags(flags)
    return config, flags


def _usage_error(config: RootConfig, message: str) -> NoReturn:
    """Report a usage mistake and ask for the command's help to be shown."""
    print(f"Error: {message}", file=config.stderr)
    raise HelpRequested()


def _dump_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _show_help(args: List[str]) -> NoReturn:
    """Action of commands that only group subcommands: always ask for help."""
    leftover = " ".join(args)
    reason = f"no action for arguments: {leftover}" if leftover else "help requested"
    raise HelpRequested(reason)


def new_root_command(stdout: TextIO, stderr: TextIO) -> Command:
    """Build the top-level ``deepl`` command, which only shows its help."""
    _, flags = _new_config(stdout, stderr, "deepl")
    return Command(
        name="deepl",
        short_help="deepl - DeepL language translation cli",
        short_usage="deepl [command] [option]...",
        flags=flags,
        action=_show_help,
    )
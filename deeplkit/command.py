"""A small command tree with flag parsing, environment defaults and usage text."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Literal, Mapping, NoReturn, Optional, Set, TextIO

FlagKind = Literal["string", "bool", "counter"]

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_PADDING = 2


class HelpRequested(Exception):
    """Raised when help was asked for or a command wants its usage shown."""


class FlagError(Exception):
    """A command line or environment value could not be applied to a flag."""


def _parse_bool(value: str) -> bool:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f'parsing "{value}": invalid syntax')


def _dest_for(name: str) -> str:
    return name.replace("-", "_").replace(".", "_")


@dataclass(frozen=True)
class Flag:
    """One named option; aliases share a ``dest``."""

    name: str
    kind: FlagKind
    dest: str
    default: str
    usage: str = ""


def _is_boolean(flag: Flag) -> bool:
    return flag.kind != "string"


def _unquote_usage(usage: str) -> str:
    """Drop the first pair of back quotes, keeping the text between them."""
    start = usage.find("`")
    if start < 0:
        return usage
    end = usage.find("`", start + 1)
    if end < 0:
        return usage
    return usage[:start] + usage[start + 1 : end] + usage[end + 1 :]


class FlagSet:
    """A set of flags parsed from a list of arguments."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.output: Optional[TextIO] = None
        self.usage: Callable[[], None] = self._default_usage
        self.parsed = False
        self.args: List[str] = []
        self._flags: Dict[str, Flag] = {}
        self._values: Dict[str, Any] = {}
        self._actual: Set[str] = set()

    @property
    def _stream(self) -> TextIO:
        return self.output if self.output is not None else sys.stderr

    def _define(self, flag: Flag, initial: Any) -> Flag:
        if flag.name in self._flags:
            raise ValueError(f"{self.name} flag redefined: {flag.name}")
        self._flags[flag.name] = flag
        self._values[flag.dest] = initial
        return flag

    def add_string(self, name: str, default: str = "", usage: str = "", dest: Optional[str] = None) -> Flag:
        """Define a flag taking a string value."""
        flag = Flag(name, "string", dest or _dest_for(name), default, usage)
        return self._define(flag, default)

    def add_bool(self, name: str, default: bool = False, usage: str = "", dest: Optional[str] = None) -> Flag:
        """Define a flag that is switched on by its presence."""
        flag = Flag(name, "bool", dest or _dest_for(name), "true" if default else "false", usage)
        return self._define(flag, default)

    def add_counter(self, name: str, usage: str = "", dest: Optional[str] = None) -> Flag:
        """Define a flag that counts how often it is given."""
        flag = Flag(name, "counter", dest or _dest_for(name), "0", usage)
        return self._define(flag, 0)

    def get(self, dest: str) -> Any:
        """Return the current value stored under ``dest``."""
        return self._values[dest]

    def set(self, name: str, value: str) -> None:
        """Apply a textual value to the named flag and mark it as set."""
        flag = self._flags.get(name)
        if flag is None:
            raise FlagError(f"no such flag -{name}")
        if flag.kind == "string":
            self._values[flag.dest] = value
        elif flag.kind == "bool":
            try:
                self._values[flag.dest] = _parse_bool(value)
            except ValueError as exc:
                raise FlagError(str(exc)) from None
        else:
            self._values[flag.dest] += 1
        self._actual.add(name)

    def _fail(self, message: str) -> NoReturn:
        print(message, file=self._stream)
        self.usage()
        raise FlagError(message)

    def parse(self, args: List[str]) -> None:
        """Parse leading flags; the remaining arguments end up in ``args``."""
        self.parsed = True
        remaining = list(args)
        while remaining:
            arg = remaining[0]
            if len(arg) < 2 or arg[0] != "-":
                break
            if arg == "--":
                remaining.pop(0)
                break
            minuses = 2 if arg[1] == "-" else 1
            name = arg[minuses:]
            if not name or name[0] in "-=":
                self._fail(f"bad flag syntax: {arg}")
            remaining.pop(0)

            name, sep, value = name.partition("=")
            has_value = bool(sep)

            flag = self._flags.get(name)
            if flag is None:
                if name in ("help", "h"):
                    self.usage()
                    raise HelpRequested()
                self._fail(f"flag provided but not defined: -{name}")

            if _is_boolean(flag):
                try:
                    self.set(name, value if has_value else "true")
                except FlagError as exc:
                    if has_value:
                        self._fail(f'invalid boolean value "{value}" for -{name}: {exc}')
                    self._fail(f"invalid boolean flag {name}: {exc}")
                continue

            if not has_value and remaining:
                value = remaining.pop(0)
                has_value = True
            if not has_value:
                self._fail(f"flag needs an argument: -{name}")
            try:
                self.set(name, value)
            except FlagError as exc:
                self._fail(f'invalid value "{value}" for flag -{name}: {exc}')
        self.args = remaining

    def visit(self) -> Iterator[Flag]:
        """Yield the flags that have been set, in name order."""
        for name in sorted(self._actual):
            yield self._flags[name]

    def visit_all(self) -> Iterator[Flag]:
        """Yield every flag, in name order."""
        for name in sorted(self._flags):
            yield self._flags[name]

    def is_set(self, name: str) -> bool:
        """Tell whether the named flag was given."""
        return name in self._actual

    def _default_usage(self) -> None:
        out = self._stream
        print(f"Usage of {self.name}:", file=out)
        for flag in self.visit_all():
            print(f"  -{flag.name}\n    \t{_unquote_usage(flag.usage)}", file=out)


def env_var_key(name: str, prefix: str = "") -> str:
    """Return the environment variable that supplies the named flag."""
    key = name.upper()
    for char in "-./":
        key = key.replace(char, "_")
    if prefix:
        key = prefix.upper() + "_" + key
    return key


def _parse_flags(
    flags: FlagSet,
    args: List[str],
    env_prefix: Optional[str],
    environ: Optional[Mapping[str, str]],
) -> None:
    try:
        flags.parse(args)
    except FlagError as exc:
        raise FlagError(f"parse args: {exc}") from exc

    if env_prefix is None:
        return
    if environ is None:
        environ = os.environ

    provided = {flag.name for flag in flags.visit()}
    error: Optional[FlagError] = None
    for flag in flags.visit_all():
        if flag.name in provided:
            continue
        value = environ.get(env_var_key(flag.name, env_prefix), "")
        if not value:
            continue
        try:
            flags.set(flag.name, value)
        except FlagError as exc:
            error = exc
    if error is not None:
        raise FlagError(f"parse env: {error}") from error


@dataclass(eq=False)
class Command:
    """A named command with flags, an action and subcommands."""

    name: str
    short_help: str = ""
    short_usage: str = ""
    long_help: str = ""
    flags: Optional[FlagSet] = None
    action: Optional[Callable[[List[str]], None]] = None
    subcommands: List["Command"] = field(default_factory=list)
    parent: Optional["Command"] = field(default=None, init=False, repr=False)
    selected: Optional["Command"] = field(default=None, init=False, repr=False)
    args: List[str] = field(default_factory=list, init=False, repr=False)

    def parse(
        self,
        args: List[str],
        env_prefix: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Parse arguments and select the command to run.

        With ``env_prefix`` set (``""`` for no prefix), flags not given on the
        command line are read from ``environ`` (default ``os.environ``).
        """
        if not self.name:
            raise ValueError("name is required")
        if self.flags is None:
            self.flags = FlagSet(self.name)
        flags = self.flags
        flags.usage = lambda: print(default_usage(self), file=flags._stream)

        try:
            _parse_flags(flags, args, env_prefix, environ)
        except FlagError as exc:
            raise FlagError(f"{self.name}: {exc}") from exc

        self.args = list(flags.args)
        if self.args:
            head = self.args[0].casefold()
            for sub in self.subcommands:
                if head == sub.name.casefold():
                    self.selected = sub
                    sub.parent = self
                    sub.parse(self.args[1:], env_prefix, environ)
                    return

        self.selected = self

    def run(self) -> None:
        """Run the selected command; a help request prints its usage."""
        if self.flags is None or not self.flags.parsed:
            raise RuntimeError("not parsed")
        if self.selected is None:
            raise RuntimeError("none selected")
        if self.selected is not self:
            self.selected.run()
            return
        if self.action is None:
            raise RuntimeError(f"{self.name}: no exec function")
        try:
            self.action(self.args)
        except HelpRequested:
            self.flags.usage()


def _table(rows: List[tuple]) -> str:
    width = max(len(cell) for cell, _ in rows) + _PADDING
    return "".join(f"{cell.ljust(width)}{text}\n" for cell, text in rows)


def _flag_list(command: Command) -> List[Flag]:
    return list(command.flags.visit_all()) if command.flags is not None else []


def default_usage(command: Command) -> str:
    """Return the help text of a command."""
    parts: List[str] = []
    if command.short_help:
        parts.append(f"{command.short_help}\n\n")

    parts.append("USAGE\n")
    parts.append(f"  {command.short_usage or default_short_usage(command)}\n\n")

    if command.long_help:
        parts.append(f"{command.long_help}\n\n")

    if command.subcommands:
        parts.append("COMMANDS\n")
        parts.append(_table([(f"  {sub.name}", sub.short_help) for sub in command.subcommands]))
        parts.append("\n")

    flags = _flag_list(command)
    if flags:
        parts.append("OPTIONS\n")
        rows = []
        for flag in flags:
            dashes = "-" if len(flag.name) == 1 else "--"
            rows.append((f"  {dashes}{flag.name}", _unquote_usage(flag.usage)))
        parts.append(_table(rows))
        parts.append("\n")

    return "".join(parts).strip() + "\n"


def default_short_usage(command: Command) -> str:
    """Return a one-line usage built from the command's position and contents."""
    names = [command.name]
    parent = command.parent
    while parent is not None:
        names.insert(0, parent.name)
        parent = parent.parent
    usage = " ".join(names)
    if command.subcommands:
        usage += " [command]"
    if _flag_list(command):
        usage += " [option]..."
    return usage + " [arg]..."
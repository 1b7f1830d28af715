"""The ``glossaries`` commands: language pairs, create, list, info, entries and delete."""

from __future__ import annotations

from typing import Any, Dict, List, TextIO

from ..command import Command, HelpRequested
from ..models import GlossaryEntry
from .common import _dump_json, _new_config, _show_help, _usage_error

_SEPARATORS = {"tsv": "\t", "csv": ","}


def new_glossaries_command(stdout: TextIO, stderr: TextIO) -> Command:
    """Build the ``glossaries`` command grouping the glossary subcommands."""
    _, flags = _new_config(stdout, stderr, "glossaries")
    return Command(
        name="glossaries",
        short_help="Manage glossaries",
        short_usage="glossaries [command] [option]... [args]...",
        flags=flags,
        action=_show_help,
        subcommands=[
            new_glossaries_language_pairs_command(stdout, stderr),
            new_glossaries_create_command(stdout, stderr),
            new_glossaries_list_command(stdout, stderr),
            new_glossaries_info_command(stdout, stderr),
            new_glossaries_entries_command(stdout, stderr),
            new_glossaries_delete_command(stdout, stderr),
        ],
    )


def new_glossaries_language_pairs_command(stdout: TextIO, stderr: TextIO) -> Command:
    """Build the command listing language pairs that glossaries support."""
    config, flags = _new_config(stdout, stderr, "glossaries language-pairs")

    def run(args: List[str]) -> None:
        if args:
            _usage_error(config, "glossary language-pairs: too many arguments")
        pairs = config.new_translator().get_glossary_language_pairs()
        print(_dump_json([pair.to_dict() for pair in pairs]), file=config.stdout)

    return Command(
        name="language-pairs",
        short_help="List language pairs supported by glossaries",
        short_usage="glossaries language-pairs",
        long_help="Retrieve the list of language pairs supported by the glossary feature.",
        flags=flags,
        action=run,
    )


def _parse_entry(config: Any, arg: str) -> GlossaryEntry:
    parts = arg.split("=")
    if len(parts) != 2:
        print(f"Error: glossary create: invalid argument: {arg}", end="", file=config.stderr)
        raise HelpRequested()
    return GlossaryEntry(source=parts[0], target=parts[1])


def new_glossaries_create_command(stdout: TextIO, stderr: TextIO) -> Command:
    """Build the command creating a glossary from ``SOURCE=TARGET`` arguments."""
    config, flags = _new_config(stdout, stderr, "glossaries create")
    flags.add_string("name", "", "the name to be associated with the glossary (required)")
    flags.add_string(
        "source-lang",
        "",
        "the language in which the source texts in the glossary are specified (required)",
    )
    flags.add_string("from", "", "alias option for `--source-lang`", dest="source_lang")
    flags.add_string(
        "target-lang",
        "",
        "the language in which the target texts in the glossary are specified (required)",
    )
    flags.add_string("to", "", "alias option for `--target-lang`", dest="target_lang")

    def run(args: List[str]) -> None:
        if not args:
            _usage_error(config, "glossary create: not enough arguments")
        name = flags.get("name")
        source_lang = flags.get("source_lang")
        target_lang = flags.get("target_lang")
        if not name or not source_lang or not target_lang:
            _usage_error(
                config,
                "glossary create: `--name`,`--source-lang` and `--target-lang` are required",
            )

        entries = [_parse_entry(config, arg) for arg in args]
        glossary = config.new_translator().create_glossary(name, source_lang, target_lang, entries)
        print(_dump_json(glossary.to_dict()), file=config.stdout)

    return Command(
        name="create",
        short_help="Create a glossary",
        short_usage="glossaries create [option]... ENTRY...",
        flags=flags,
        action=run,
    )


def new_glossaries_list_command(stdout: TextIO, stderr: TextIO) -> Command:
    """Build the command listing all glossaries."""
    config, flags = _new_config(stdout, stderr, "glossaries list")

    def run(args: List[str]) -> None:
        if args:
            _usage_error(config, "glossaries list: too many arguments")
        glossaries = config.new_translator().list_glossaries()
        print(_dump_json([glossary.to_dict() for glossary in glossaries]), file=config.stdout)

    return Command(
        name="list",
        short_help="List all glossaries",
        short_usage="glossaries list [option]...",
        flags=flags,
        action=run,
    )


def new_glossaries_info_command(stdout: TextIO, stderr: TextIO) -> Command:
    """Build the command printing the details of glossaries."""
    config, flags = _new_config(stdout, stderr, "glossaries info")

    def run(args: List[str]) -> None:
        if not args:
            _usage_error(config, "glossaries info: not enough arguments")
        translator = config.new_translator()

        infos: List[Dict[str, Any]] = []
        try:
            for glossary_id in args:
                infos.append(translator.get_glossary(glossary_id).to_dict())
        finally:
            print(_dump_json(infos or None), file=config.stdout)

    return Command(
        name="info",
        short_help="Retrieve glossary details",
        short_usage="glossaries info [option]... ID...",
        flags=flags,
        action=run,
    )


def new_glossaries_entries_command(stdout: TextIO, stderr: TextIO) -> Command:
    """Build the command printing the entries of one glossary."""
    config, flags = _new_config(stdout, stderr, "glossaries entries")
    flags.add_string("format", "tsv", "the requested format of the returned glossary entries")

    def run(args: List[str]) -> None:
        if not args:
            _usage_error(config, "glossaries entries: not enough arguments")
        if len(args) > 1:
            _usage_error(config, "glossaries entries: too many arguments")

        entries = config.new_translator().get_glossary_entries(args[0])

        entries_format = flags.get("format")
        separator = _SEPARATORS.get(entries_format)
        if separator is None:
            raise ValueError(
                f"glossaries entries: invalid value for option `format`: {entries_format}"
            )
        for entry in entries:
            print(f"{entry.source}{separator}{entry.target}", file=config.stdout)

    return Command(
        name="entries",
        short_help="Retrieve glossary entries",
        short_usage="glossaries entries [option]... ID",
        flags=flags,
        action=run,
    )


def new_glossaries_delete_command(stdout: TextIO, stderr: TextIO) -> Command:
    """Build the command deleting glossaries and printing the deleted ids."""
    config, flags = _new_config(stdout, stderr, "glossaries delete")

    def run(args: List[str]) -> None:
        if not args:
            _usage_error(config, "glossaries delete: not enough arguments")
        translator = config.new_translator()

        deleted: List[str] = []
        try:
            for glossary_id in args:
                translator.delete_glossary(glossary_id)
                deleted.append(glossary_id)
        finally:
            print("\n".join(deleted), file=config.stdout)

    return Command(
        name="delete",
        short_help="Delete glossaries",
        short_usage="glossaries delete [option]... ID...",
        flags=flags,
        action=run,
    )
"""The ``translate`` command."""

from __future__ import annotations

from typing import List, TextIO

from ..command import Command, FlagSet
from ..options import TranslateOptions
from .common import _dump_json, _new_config, _usage_error

_PLAIN_OPTIONS = (
    "source_lang",
    "split_sentences",
    "preserve_formatting",
    "formality",
    "glossary_id",
    "tag_handling",
    "outline_detection",
)
_TAG_OPTIONS = ("non_splitting_tags", "splitting_tags", "ignore_tags")


def _translate_options(flags: FlagSet) -> TranslateOptions:
    given = {flag.dest for flag in flags.visit()}
    values = {dest: flags.get(dest) for dest in _PLAIN_OPTIONS if dest in given}
    values.update({dest: flags.get(dest).split(",") for dest in _TAG_OPTIONS if dest in given})
    return TranslateOptions(**values)


def new_translate_command(stdout: TextIO, stderr: TextIO) -> Command:
    """Build the command translating texts given as arguments."""
    config, flags = _new_config(stdout, stderr, "translate")
    flags.add_string("target-lang", "", "the language into which the text should be translated (required)")
    flags.add_string("to", "", "alias option for `--target-lang`", dest="target_lang")
    flags.add_string("source-lang", "", "the language to be translated")
    flags.add_string("from", "", "alias option for `--source-lang`", dest="source_lang")
    flags.add_string("split-sentences", "0", "whether to split input into sentences")
    flags.add_bool("preserve-formatting", False, "whether the engine should respect original formatting")
    flags.add_string("formality", "default", "whether the engine should lean towards formal or informal language")
    flags.add_string("glossary_id", "", "the glossary to use for the translation")
    flags.add_string("tag-handling", "", "the kind of tags to handle")
    flags.add_bool("outline-detection", True, "whether to automatically detect XML structure")
    flags.add_string(
        "non-splitting-tags", "", "a comma-separated list of XML tags which never split sentences"
    )
    flags.add_string("splitting-tags", "", "a comma-separated list of XML tags which always split sentences")
    flags.add_string(
        "ignore-tags", "", "a comma-separated list of XML tags which indicate text not to be translated"
    )
    flags.add_bool("json", False, "print translation result in JSON", dest="format_json")

    def run(args: List[str]) -> None:
        if not args:
            _usage_error(config, "translate: not enough arguments")
        target_lang = flags.get("target_lang")
        if not target_lang:
            _usage_error(config, "translate: `--target-lang` is required")

        translator = config.new_translator()
        options = _translate_options(flags)
        translations = translator.translate_text(args, target_lang, options)

        if flags.get("format_json"):
            print(_dump_json([t.to_dict() for t in translations]), file=config.stdout)
            return
        for translation in translations:
            if config.verbosity > 0:
                print(
                    f"# Detected source language: {translation.detected_source_language}",
                    file=config.stdout,
                )
            print(translation.text, file=config.stdout)

    return Command(
        name="translate",
        short_help="Translate text(s) into a target language.",
        short_usage="deepl translate [option]... --target-lang=LANG TEXT...",
        flags=flags,
        action=run,
    )
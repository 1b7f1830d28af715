# deeplkit

A Python client for the DeepL translation API, plus the building blocks of
a command-line interface to it: a small command tree with flag parsing,
environment-variable defaults and generated help text.

## Installation

```
pip install deeplkit
```

## Library usage

```python
from deeplkit.translator import Translator
from deeplkit.options import TranslateOptions

translator = Translator("placeholder")

for translation in translator.translate_text(
    ["Hello, world!"], "DE", TranslateOptions(formality="more")
):
    print(translation.detected_source_language, translation.text)

print(translator.get_usage())
```

Auth keys ending in `:fx` are sent to the Free API server
(`SERVER_URL_FREE`); any other key goes to the Pro server
(`SERVER_URL_PRO`). Pass `server_url=` to use another server, and
`session=` to supply your own `requests.Session`.

Requests that come back with status 429 or 5xx are retried up to five times
with exponential backoff (`deeplkit.retry.Backoff`). Any other unexpected
status raises `HTTPError` from `deeplkit.errors`; status 456 is reported as
an exceeded quota. An invalid option value raises `InvalidOptionError` from
`deeplkit.options`.

`Translator` also offers:

- supported languages: `get_languages("source")` or `get_languages("target")`
- glossary language pairs: `get_glossary_language_pairs`
- glossaries: `create_glossary`, `list_glossaries`, `get_glossary`,
  `get_glossary_entries`, `delete_glossary`
- document translation: `translate_document_upload`,
  `translate_document_status`, and `translate_document_download`, which
  returns an iterator over the translated file's bytes

The records these return (`Translation`, `Usage`, `Language`,
`LanguagePair`, `GlossaryEntry`, `GlossaryInfo`, `DocumentInfo`,
`DocumentStatus`) live in `deeplkit.models`.

`deeplkit.retry.retry` can be used on its own to call any function with
retries and backoff.

## Commands

`deeplkit.command` provides `Command` and `FlagSet`. A command parses its
arguments with `parse`, choosing a subcommand by name, and then `run`s the
selected one. With `env_prefix` set, flags not given on the command line are
read from environment variables named by `env_var_key`, for example
`DEEPL_AUTH_KEY` for `--auth-key` with the prefix `DEEPL`.

Ready-made commands are built by:

- `deeplkit.cli.common.new_root_command`: the top-level command, which only
  shows its help
- `deeplkit.cli.translate.new_translate_command`: translates its arguments
- `deeplkit.cli.glossaries.new_glossaries_command`: the glossary
  subcommands `language-pairs`, `create`, `list`, `info`, `entries` and
  `delete`
- `deeplkit.version.default_version_command`: prints version information

Every one of these takes the output and error streams to write to:

```python
import sys
from deeplkit.cli.translate import new_translate_command

command = new_translate_command(sys.stdout, sys.stderr)
command.parse(["--target-lang=DE", "Hello, world!"], env_prefix="DEEPL")
command.run()
```

## What this package does not do

- It installs no `deepl` executable and has no entry point that gathers the
  commands above under one root and runs it from the shell; wiring the
  commands together is left to you.
- There are no ready-made commands for document translation, account usage or
  listing languages. Those features are available only through the
  `Translator` methods.
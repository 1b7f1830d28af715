"""Client for the DeepL translation API, with command-building helpers."""

__version__ = "0.1.0"
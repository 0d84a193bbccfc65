"""Custom exception hierarchy for Language Tops."""

from __future__ import annotations


class LanguageTopsError(Exception):
    """Base exception for Language Tops."""


class EmptyInputError(LanguageTopsError):
    """No source documents were supplied to the aggregator."""

    def __init__(self, message: str = "No source data available to aggregate"):
        super().__init__(message)


class ConfigError(LanguageTopsError):
    """Error with configuration."""


class SourceFetchError(LanguageTopsError):
    """Error downloading data for a ranking source."""

    def __init__(self, message: str, url: str = "", status_code: int = 0):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class SourceParseError(LanguageTopsError):
    """Downloaded source data could not be parsed."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")


class NotationError(LanguageTopsError):
    """A links-notation file could not be read back."""

    def __init__(self, message: str, line: int | None = None):
        super().__init__(message)
        self.line = line

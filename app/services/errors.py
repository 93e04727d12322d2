from __future__ import annotations


class FetchError(Exception):
    """Source page unreachable or answered with a non-success status."""


class ParseError(ValueError):
    """A scraped number or date could not be converted. Always absorbed to None."""


class PersistError(Exception):
    """The datastore rejected a write."""

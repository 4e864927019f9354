"""Exception hierarchy for the search subsystem.

None of these are fatal to the page hosting the search box: callers catch
them at the component seams and degrade to "no results".
"""

from __future__ import annotations


class IgnitiaSearchError(Exception):
    """Base class for all search exceptions."""


class ConfigError(IgnitiaSearchError):
    """Raised when configuration loading or validation fails."""


class LoadError(IgnitiaSearchError):
    """Raised when the search index cannot be fetched or deserialized."""


class ScoringInternalError(IgnitiaSearchError):
    """Raised for unexpected failures while tokenizing or scoring a query."""

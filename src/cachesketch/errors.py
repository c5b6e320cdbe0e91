"""Exceptions raised at the cachesketch call boundary."""
from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised when a constructor or operation receives an out-of-range argument.

    Subclasses ValueError so callers that already guard configuration
    with ``except ValueError`` keep working.
    """

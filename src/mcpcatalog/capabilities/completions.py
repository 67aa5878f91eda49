"""Cached, prefix-filterable completion providers.

A provider suggests values for one capability parameter. Subclasses only
implement fetch_values(); the first lookup caches the result for the life
of the instance.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import ClassVar


class CompletionProvider(ABC):
    """Base class for completion providers."""

    def __init__(self) -> None:
        self._cached_values: list[str] | None = None

    @abstractmethod
    def fetch_values(self) -> Sequence[str]:
        """Return every candidate value. Called once per cache lifetime."""

    def get_completions(self, current_value: str = "") -> list[str]:
        """Return candidates starting with current_value (case-insensitive), in cached order."""
        values = self._get_cached_values()
        if current_value == "":
            return list(values)

        needle = current_value.lower()
        return [value for value in values if value.lower().startswith(needle)]

    def clear_cache(self) -> None:
        """Drop the cached values so the next lookup fetches again."""
        self._cached_values = None

    def _get_cached_values(self) -> list[str]:
        if self._cached_values is None:
            self._cached_values = [str(value) for value in self.fetch_values()]
        return self._cached_values


class StaticCompletionProvider(CompletionProvider):
    """Provider over a fixed list declared on the subclass.

        class ColorProvider(StaticCompletionProvider):
            values = ("red", "green", "blue")
    """

    values: ClassVar[Sequence[str]] = ()

    def fetch_values(self) -> Sequence[str]:
        return self.values


__all__ = ["CompletionProvider", "StaticCompletionProvider"]

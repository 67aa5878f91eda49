"""Property-based tests for completion providers using Hypothesis.

These tests verify the prefix-filtering invariants:
- Results are always a subset of the provider's values, in the same order
- Matching is case-insensitive
- An empty prefix returns every value
- The value source is fetched once per cache lifetime
"""

from __future__ import annotations

from collections.abc import Sequence

from hypothesis import given, settings
from hypothesis import strategies as st

from mcpcatalog.capabilities.completions import CompletionProvider

# === Strategies ===

value_strategy = st.text(
    alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd"), whitelist_characters="-_"),
    min_size=0,
    max_size=12,
)

values_strategy = st.lists(value_strategy, max_size=30)

prefix_strategy = st.text(alphabet="abcABC-_01", max_size=4)


class ListProvider(CompletionProvider):
    def __init__(self, values: Sequence[str]) -> None:
        super().__init__()
        self._values = list(values)
        self.fetches = 0

    def fetch_values(self) -> Sequence[str]:
        self.fetches += 1
        return self._values


def _is_subsequence(candidate: list[str], values: list[str]) -> bool:
    remaining = iter(values)
    return all(any(item == value for value in remaining) for item in candidate)


@given(values=values_strategy, prefix=prefix_strategy)
@settings(max_examples=200)
def test_results_are_ordered_subset(values: list[str], prefix: str) -> None:
    result = ListProvider(values).get_completions(prefix)
    assert _is_subsequence(result, values)


@given(values=values_strategy, prefix=prefix_strategy)
@settings(max_examples=200)
def test_every_match_starts_with_prefix(values: list[str], prefix: str) -> None:
    result = ListProvider(values).get_completions(prefix)
    assert all(value.lower().startswith(prefix.lower()) for value in result)
    expected = [value for value in values if value.lower().startswith(prefix.lower())]
    assert result == expected


@given(values=values_strategy, prefix=prefix_strategy)
def test_case_of_prefix_is_irrelevant(values: list[str], prefix: str) -> None:
    provider = ListProvider(values)
    assert provider.get_completions(prefix.upper()) == provider.get_completions(prefix.lower())


@given(values=values_strategy)
def test_empty_prefix_returns_everything(values: list[str]) -> None:
    assert ListProvider(values).get_completions("") == values


@given(values=values_strategy, prefixes=st.lists(prefix_strategy, min_size=1, max_size=5))
def test_values_fetched_once_until_cleared(values: list[str], prefixes: list[str]) -> None:
    provider = ListProvider(values)
    for prefix in prefixes:
        provider.get_completions(prefix)
    assert provider.fetches == 1

    provider.clear_cache()
    provider.get_completions("")
    assert provider.fetches == 2

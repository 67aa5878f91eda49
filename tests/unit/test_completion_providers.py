from __future__ import annotations

from collections.abc import Sequence

import pytest

from catalog_fixtures.contributors import ColorProvider, CountingProvider
from mcpcatalog.capabilities.completions import CompletionProvider


@pytest.fixture(autouse=True)
def reset_counter() -> None:
    CountingProvider.fetches = 0


class TestCompletionProvider:
    """Prefix filtering and caching behavior."""

    def test_empty_prefix_returns_everything_in_order(self) -> None:
        assert ColorProvider().get_completions("") == ["Red", "green", "Blue", "grey"]

    def test_default_prefix_is_empty(self) -> None:
        assert ColorProvider().get_completions() == ["Red", "green", "Blue", "grey"]

    def test_prefix_match_is_case_insensitive(self) -> None:
        provider = ColorProvider()
        assert provider.get_completions("r") == ["Red"]
        assert provider.get_completions("GR") == ["green", "grey"]
        assert provider.get_completions("b") == ["Blue"]

    def test_no_match_returns_empty(self) -> None:
        assert ColorProvider().get_completions("purple") == []

    def test_prefix_is_not_substring_match(self) -> None:
        assert ColorProvider().get_completions("een") == []

    def test_values_fetched_once_per_instance(self) -> None:
        provider = CountingProvider()
        provider.get_completions("")
        provider.get_completions("al")
        provider.get_completions("b")
        assert CountingProvider.fetches == 1

    def test_clear_cache_refetches(self) -> None:
        provider = CountingProvider()
        assert provider.get_completions("al") == ["alpha", "Alphabet"]
        provider.clear_cache()
        provider.get_completions("al")
        assert CountingProvider.fetches == 2

    def test_separate_instances_have_separate_caches(self) -> None:
        CountingProvider().get_completions("")
        CountingProvider().get_completions("")
        assert CountingProvider.fetches == 2

    def test_non_string_values_are_stringified(self) -> None:
        class NumberProvider(CompletionProvider):
            def fetch_values(self) -> Sequence[str]:
                return [10, 11, 20]  # type: ignore[list-item]

        assert NumberProvider().get_completions("1") == ["10", "11"]

    def test_cannot_instantiate_without_fetch_values(self) -> None:
        with pytest.raises(TypeError):
            CompletionProvider()  # type: ignore[abstract]

"""Unit tests for HighlightEngine."""

import pytest

from notelens.core.highlight import HighlightEngine
from tests.conftest import FakeClock


@pytest.fixture
def engine(clock: FakeClock) -> HighlightEngine:
    return HighlightEngine(capacity=100, ttl_seconds=300, clock=clock)


class TestRender:
    """Tests for render() output."""

    def test_empty_query_returns_text_and_skips_cache(self, engine: HighlightEngine) -> None:
        assert engine.render("Hello world", "") == "Hello world"
        assert engine.render("Hello world", "   ") == "Hello world"
        assert len(engine) == 0

    def test_suppressed_returns_text_and_skips_cache(self, engine: HighlightEngine) -> None:
        assert engine.render("Hello world", "world", suppressed=True) == "Hello world"
        assert len(engine) == 0

    def test_wraps_literal_dollar_amount(self, engine: HighlightEngine) -> None:
        result = engine.render("Cost is $100 (dollars)", "$100")

        assert result == "Cost is <mark>$100</mark> (dollars)"

    def test_metacharacter_query_matches_only_literal(self, engine: HighlightEngine) -> None:
        result = engine.render("Match * and + symbols", "*")

        assert result == "Match <mark>*</mark> and + symbols"

    def test_matches_case_insensitively_and_keeps_case(self, engine: HighlightEngine) -> None:
        result = engine.render("World world WORLD", "world")

        assert result == "<mark>World</mark> <mark>world</mark> <mark>WORLD</mark>"

    def test_no_match_returns_text(self, engine: HighlightEngine) -> None:
        assert engine.render("Hello world", "xyz") == "Hello world"

    def test_css_class_is_added_to_marker(self, clock: FakeClock) -> None:
        engine = HighlightEngine(css_class="highlight", clock=clock)

        assert engine.render("a b", "b") == 'a <mark class="highlight">b</mark>'

    def test_query_whitespace_is_part_of_pattern(self, engine: HighlightEngine) -> None:
        assert engine.render("foo bar foobar", "foo ") == "<mark>foo </mark>bar foobar"


class TestCache:
    """Tests for cache bookkeeping."""

    def test_repeat_render_is_a_hit(self, engine: HighlightEngine) -> None:
        first = engine.render("Hello world", "world")
        second = engine.render("Hello world", "world")

        stats = engine.stats()
        assert first == second
        assert stats.hits == 1
        assert stats.misses == 1
        assert stats.size == 1

    def test_key_uses_bounded_prefix(self, engine: HighlightEngine) -> None:
        prefix = "x" * 100
        first = engine.render(prefix + " apple", "x")
        second = engine.render(prefix + " banana", "x")

        # Same 100-character prefix and query share one entry.
        assert second == first
        assert len(engine) == 1

    def test_capacity_evicts_exactly_one_least_accessed(
        self, engine: HighlightEngine, clock: FakeClock
    ) -> None:
        for i in range(100):
            clock.advance(1)
            engine.render(f"note {i} body", f"q{i}")
        for i in range(100):
            if i != 42:
                clock.advance(1)
                engine.render(f"note {i} body", f"q{i}")

        clock.advance(1)
        engine.render("note 100 body", "q100")

        assert len(engine) == 100
        assert engine.stats().evictions == 1
        assert engine.cache_key("note 42 body", "q42") not in engine
        assert engine.cache_key("note 100 body", "q100") in engine

    def test_ties_evict_oldest_touched(self, clock: FakeClock) -> None:
        small = HighlightEngine(capacity=2, clock=clock)
        small.render("first", "f")
        clock.advance(1)
        small.render("second", "s")
        clock.advance(1)
        small.render("third", "t")

        assert small.cache_key("first", "f") not in small
        assert small.cache_key("second", "s") in small

    def test_expired_entry_is_recomputed(self, engine: HighlightEngine, clock: FakeClock) -> None:
        engine.render("Hello world", "world")
        clock.advance(300 + 1)
        engine.render("Hello world", "world")

        stats = engine.stats()
        assert stats.hits == 0
        assert stats.misses == 2
        assert stats.expirations == 1

    def test_entry_within_ttl_is_served(self, engine: HighlightEngine, clock: FakeClock) -> None:
        engine.render("Hello world", "world")
        clock.advance(299)
        engine.render("Hello world", "world")

        assert engine.stats().hits == 1

    def test_insert_purges_expired_entries(self, engine: HighlightEngine, clock: FakeClock) -> None:
        engine.render("old note", "old")
        clock.advance(400)
        engine.render("new note", "new")

        assert engine.cache_key("old note", "old") not in engine
        assert len(engine) == 1

    def test_clear_empties_cache(self, engine: HighlightEngine) -> None:
        engine.render("Hello world", "world")
        engine.clear()

        assert len(engine) == 0

    def test_rejects_zero_capacity(self) -> None:
        with pytest.raises(ValueError):
            HighlightEngine(capacity=0)

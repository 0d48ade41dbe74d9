"""Tests for char_matcher module."""

from unittest.mock import Mock

import numpy as np
import pytest

from ascii_shade.char_matcher import (
    EmptyMatcherError,
    GlyphBrightnessCache,
    InvalidCharsetError,
    SubImgCharMatcher,
)
from conftest import coverage_with

# --- Fixtures ---

COUNTS = {
    " ": 0,
    ".": 32,
    ":": 64,
    "A": 128,
    "B": 128,
    "#": 192,
    "@": 256,
}

QUERIES = list(np.linspace(-0.2, 1.2, 57))


@pytest.fixture
def glyphs(fake_coverage):
    return GlyphBrightnessCache(fake_coverage(COUNTS))


@pytest.fixture
def make_matcher(glyphs):
    def make(chars):
        return SubImgCharMatcher(chars, glyph_cache=glyphs)

    return make


def answers(matcher):
    return [matcher.get_char_by_image_brightness(q) for q in QUERIES]


# --- Tests ---


class TestGlyphBrightnessCache:
    def test_brightness_is_fraction_of_on_cells(self, glyphs):
        assert glyphs.brightness(" ") == 0.0
        assert glyphs.brightness("A") == 0.5
        assert glyphs.brightness("@") == 1.0

    def test_coverage_computed_once_per_char(self):
        coverage = Mock(return_value=coverage_with(64))
        cache = GlyphBrightnessCache(coverage)

        for _ in range(3):
            assert cache.brightness("x") == 0.25
        cache.brightness("y")

        assert coverage.call_count == 2
        assert "x" in cache
        assert len(cache) == 2


class TestConstruction:
    def test_empty_charset_raises(self, make_matcher):
        with pytest.raises(InvalidCharsetError):
            make_matcher([])

    def test_duplicates_collapse(self, make_matcher):
        m = make_matcher("AAA@")
        assert m.charset == frozenset("A@")
        assert len(m) == 2

    def test_shares_glyph_cache(self, glyphs, make_matcher):
        make_matcher(" @")
        make_matcher(" @A")
        assert len(glyphs) == 3


class TestQuery:
    def test_exact_key(self, make_matcher):
        m = make_matcher(" :@")
        assert m.get_char_by_image_brightness(0.0) == " "
        assert m.get_char_by_image_brightness(0.25) == ":"
        assert m.get_char_by_image_brightness(1.0) == "@"

    def test_shared_brightness_returns_smallest_ordinal(self, make_matcher):
        m = make_matcher(" AB@")
        assert m.get_char_by_image_brightness(0.5) == "A"

    def test_below_and_above_range(self, make_matcher):
        m = make_matcher(" :@")
        assert m.get_char_by_image_brightness(-3.0) == " "
        assert m.get_char_by_image_brightness(7.0) == "@"

    def test_equidistant_prefers_darker(self, make_matcher):
        # keys 0, 0.25, 1 -> 0.125 sits midway between the first two
        m = make_matcher(" :@")
        assert m.get_char_by_image_brightness(0.125) == " "
        assert m.get_char_by_image_brightness(0.126) == ":"

    def test_nearest_neighbour(self, make_matcher):
        m = make_matcher(" :@")
        assert m.get_char_by_image_brightness(0.6) == ":"
        assert m.get_char_by_image_brightness(0.7) == "@"

    def test_single_char_answers_everything(self, make_matcher):
        m = make_matcher("#")
        assert set(answers(m)) == {"#"}

    def test_same_raw_brightness_collapses_to_zero(self, make_matcher):
        m = make_matcher("AB")
        assert set(answers(m)) == {"A"}

    def test_deterministic(self, make_matcher):
        m = make_matcher(" .:A#@")
        assert answers(m) == answers(m)


class TestAdd:
    def test_add_existing_is_noop(self, make_matcher):
        m = make_matcher(" :@")
        before = answers(m)
        m.add_char(":")
        assert answers(m) == before
        assert len(m) == 3

    def test_add_extending_range_renormalizes(self, make_matcher):
        m = make_matcher(" A")
        assert m.get_char_by_image_brightness(1.0) == "A"

        m.add_char("@")
        assert m.get_char_by_image_brightness(0.5) == "A"
        assert m.get_char_by_image_brightness(1.0) == "@"

    def test_add_inside_range(self, make_matcher):
        m = make_matcher(" @")
        m.add_char("A")
        assert m.get_char_by_image_brightness(0.5) == "A"
        assert m.get_char_by_image_brightness(0.3) == "A"
        assert m.get_char_by_image_brightness(0.2) == " "

    def test_add_tied_with_max(self, make_matcher):
        m = make_matcher(" B")
        m.add_char("A")
        assert m.get_char_by_image_brightness(1.0) == "A"
        assert m.get_char_by_image_brightness(0.0) == " "

    def test_incremental_matches_fresh_build(self, make_matcher):
        m = make_matcher(" @")
        for c in ".:AB#":
            m.add_char(c)
        assert answers(m) == answers(make_matcher(" .:AB#@"))


class TestRemove:
    def test_remove_absent_is_noop(self, make_matcher):
        m = make_matcher(" :@")
        before = answers(m)
        m.remove_char("x")
        assert answers(m) == before

    def test_remove_inside_range(self, make_matcher):
        m = make_matcher(" :A@")
        m.remove_char(":")
        assert ":" not in m
        assert m.get_char_by_image_brightness(0.25) == " "
        assert answers(m) == answers(make_matcher(" A@"))

    def test_remove_shared_bucket_member(self, make_matcher):
        m = make_matcher(" AB@")
        m.remove_char("A")
        assert m.get_char_by_image_brightness(0.5) == "B"

    def test_remove_extremal_renormalizes(self, make_matcher):
        m = make_matcher(" A@")
        m.remove_char("@")
        assert m.get_char_by_image_brightness(1.0) == "A"
        assert answers(m) == answers(make_matcher(" A"))

    def test_remove_all_then_query_raises(self, make_matcher):
        m = make_matcher(" @")
        m.remove_char(" ")
        m.remove_char("@")
        assert len(m) == 0
        with pytest.raises(EmptyMatcherError):
            m.get_char_by_image_brightness(0.5)

    def test_add_after_emptying(self, make_matcher):
        m = make_matcher("@")
        m.remove_char("@")
        m.add_char(":")
        assert set(answers(m)) == {":"}
        m.add_char("@")
        assert m.get_char_by_image_brightness(1.0) == "@"
        assert m.get_char_by_image_brightness(0.0) == ":"


class TestRoundTrip:
    @pytest.mark.parametrize("c", [" ", ".", "A", "B", "@", "#"])
    def test_add_then_remove_restores_answers(self, make_matcher, c):
        m = make_matcher(".:A#") if c not in ".:A#" else make_matcher(" :@")
        before = answers(m)
        m.add_char(c)
        m.remove_char(c)
        assert answers(m) == before

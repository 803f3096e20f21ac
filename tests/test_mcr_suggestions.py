"""
Tests for MCR fan suggestions
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjong_core.tiles import parse_tiles, man, EAST, NORTH
from mahjong_core.melds import triplet
from mahjong_core.locale import Locale
from mahjong_core.suggestion import FanSuggestion, rank_suggestions
from mcr_mahjong.suggestions import analyze_mcr, EXCLUSIVE_GROUPS


def _by_key(suggestions):
    return {s.key: s for s in suggestions}


class TestSuggestionRules:
    """Test ordering, bounds and deduplication"""

    def test_sorted_by_fan_then_probability(self):
        """Highest fan first, then highest probability"""
        suggestions = analyze_mcr(parse_tiles("1112345678999m"))
        keys = [(s.fan, s.probability) for s in suggestions]
        assert keys == sorted(keys, reverse=True)

    def test_bounds(self):
        """Probabilities stay in 0-100 and missing tiles are capped"""
        for notation in ["1112345678999m", "147m 258p 369s 1234z", "1133m 5577p 99s 11z 3z"]:
            for s in analyze_mcr(parse_tiles(notation)):
                assert 0 <= s.probability <= 100
                assert len(s.missing_tiles) <= 4
                assert s.fan >= s.base_fan

    def test_one_per_key(self):
        """Each pattern appears once"""
        suggestions = analyze_mcr(parse_tiles("111222333m 456p 7s"))
        keys = [s.key for s in suggestions]
        assert len(keys) == len(set(keys))

    def test_exclusive_groups(self):
        """Two readings of the same tiles are never both suggested"""
        keys = {s.key for s in analyze_mcr(parse_tiles("111222333m 456p 7s"))}
        for group in EXCLUSIVE_GROUPS:
            assert len(keys & set(group)) <= 1

    def test_empty_hand(self):
        """Nothing to suggest for an empty hand"""
        assert analyze_mcr([]) == []

    def test_locale_changes_labels_only(self):
        """Locale never changes numbers"""
        hand = parse_tiles("1133m 5577p 99s 11z 3z")
        english = analyze_mcr(hand, locale=Locale.EN)
        chinese = analyze_mcr(hand, locale=Locale.ZH)
        assert [(s.key, s.fan, s.probability) for s in english] == \
            [(s.key, s.fan, s.probability) for s in chinese]
        assert _by_key(chinese)["seven_pairs"].name == "七对"


class TestSuggestionPatterns:
    """Test individual heuristics"""

    def test_full_flush_achieved(self):
        """A one-suit hand is an achieved full flush"""
        flush = _by_key(analyze_mcr(parse_tiles("1112345678999m")))["full_flush"]
        assert flush.probability == 95
        assert flush.fan == 24
        assert "Achieved" in flush.breakdown

    def test_seven_pairs(self):
        """Six pairs need the last single paired"""
        pairs = _by_key(analyze_mcr(parse_tiles("1133m 5577p 99s 11z 3z")))["seven_pairs"]
        assert pairs.probability == 82
        assert list(pairs.missing_tiles) == parse_tiles("3z")

    def test_all_types(self):
        """All five types with three runs is one group away"""
        all_types = _by_key(analyze_mcr(parse_tiles("123m 456p 789s 11z 55z")))["all_types"]
        assert all_types.probability == 50

    def test_four_concealed_pungs_one_short(self):
        """Three concealed pungs and a pair"""
        hand = parse_tiles("111m 222p 333s 44z 6z")
        pungs = _by_key(analyze_mcr(hand))["four_concealed_pungs"]
        assert pungs.probability == 60
        assert list(pungs.missing_tiles) == [NORTH]

    def test_exposed_pung_blocks_concealed_pungs(self):
        """An exposed pung rules out Four Concealed Pungs"""
        keys = _by_key(analyze_mcr(parse_tiles("111m 222p 333s 4z"), [triplet(EAST)]))
        assert "four_concealed_pungs" not in keys
        assert "all_pungs" in keys

    def test_last_tile_hint(self):
        """Last-tile hint appears only near the end of the wall"""
        hand = parse_tiles("123m 456p 789s 11z 55z")
        assert _by_key(analyze_mcr(hand, wall_count=1))["last_tile_draw"].probability == 90
        assert _by_key(analyze_mcr(hand, wall_count=3))["last_tile_draw"].probability == 30
        assert "last_tile_draw" not in _by_key(analyze_mcr(hand, wall_count=10))
        assert "last_tile_draw" not in _by_key(analyze_mcr(hand))


class TestRanking:
    """Test the shared ranking helper"""

    def test_best_per_key(self):
        """Higher fan wins, then higher probability"""
        ranked = rank_suggestions([
            FanSuggestion("a", "A", 8, 8, 40),
            FanSuggestion("a", "A", 8, 8, 70),
            FanSuggestion("b", "B", 6, 12, 10),
        ])
        assert [(s.key, s.probability) for s in ranked] == [("b", 10), ("a", 70)]

    def test_group_keeps_best(self):
        """Only the best member of a group survives"""
        ranked = rank_suggestions(
            [FanSuggestion("a", "A", 8, 8, 40), FanSuggestion("b", "B", 6, 6, 90)],
            exclusive_groups=[("a", "b")],
        )
        assert [s.key for s in ranked] == ["a"]

    def test_probability_clamped(self):
        """Probabilities are clamped to 0-100"""
        assert FanSuggestion("a", "A", 1, 1, 140).probability == 100
        assert FanSuggestion("a", "A", 1, 1, -5).probability == 0

"""
Tests for MCR pattern registry and scoring
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjong_core.tiles import parse_tiles, man, pin, sou, EAST, GREEN_DRAGON
from mahjong_core.melds import run, triplet, kong
from mcr_mahjong.patterns import (
    PATTERNS, ScoringPattern, VALID_POINTS, build_registry, pattern_name,
)
from mcr_mahjong.scoring import (
    MCRScorer, PatternMatch, calculate_total_fan, recognize_mcr_patterns,
    calculate_mcr_total_fan, score_completed_hand, SEVEN_PAIRS, PARTIAL,
)


def _match(key: str, count: int = 1) -> PatternMatch:
    return PatternMatch.of(PATTERNS[key], count)


def _pattern(key, points=1, excludes=(), includes=()) -> ScoringPattern:
    return ScoringPattern(key, key.title(), key, points, "", tuple(excludes), tuple(includes))


class TestRegistry:
    """Test the pattern registry"""

    def test_registry_size(self):
        """All 81 patterns are registered"""
        assert len(PATTERNS) == 81

    def test_points_valid(self):
        """Every pattern uses an official point value"""
        assert all(p.points in VALID_POINTS for p in PATTERNS.values())

    def test_registry_read_only(self):
        """The registry cannot be modified"""
        with pytest.raises(TypeError):
            PATTERNS["made_up"] = _pattern("made_up")

    def test_unknown_reference_rejected(self):
        """A dangling exclude fails at construction"""
        with pytest.raises(ValueError):
            build_registry([_pattern("a", excludes=["missing"])])

    def test_duplicate_rejected(self):
        """Duplicate keys fail at construction"""
        with pytest.raises(ValueError):
            build_registry([_pattern("a"), _pattern("a")])

    def test_invalid_points_rejected(self):
        """Unofficial point values fail at construction"""
        with pytest.raises(ValueError):
            build_registry([_pattern("a", points=3)])

    def test_exclude_include_overlap_rejected(self):
        """A pattern cannot both exclude and include the same pattern"""
        with pytest.raises(ValueError):
            build_registry([_pattern("a", excludes=["b"], includes=["b"]), _pattern("b")])

    def test_scorer_requires_checks(self):
        """Every registered pattern needs a check method"""
        with pytest.raises(ValueError):
            MCRScorer({"made_up": _pattern("made_up")})

    def test_names(self):
        """English and Chinese names"""
        assert pattern_name("all_green") == "All Green"
        assert pattern_name("all_green", chinese=True) == "绿一色"


class TestExclusion:
    """Test the exclusion principle"""

    def test_excluded_pattern_dropped(self):
        """Big Four Winds folds in All Pungs"""
        total = calculate_total_fan([_match("big_four_winds"), _match("all_pungs")])
        assert total.total == 88
        assert [m.key for m in total.counted] == ["big_four_winds"]
        assert total.excluded == ["all_pungs"]

    def test_included_pattern_readmitted(self):
        """A surviving pattern re-admits what another excluded"""
        registry = build_registry([
            _pattern("major", points=8, excludes=["minor"]),
            _pattern("keeper", points=6, includes=["minor"]),
            _pattern("minor", points=2),
        ])
        matches = [PatternMatch.of(registry[key]) for key in ("minor", "major", "keeper")]
        total = calculate_total_fan(matches, registry)
        assert total.total == 16
        assert {m.key for m in total.counted} == {"major", "keeper", "minor"}

        without_keeper = calculate_total_fan(matches[:2], registry)
        assert without_keeper.total == 8

    def test_exclusion_without_includer(self):
        """Without the including pattern the exclusion stands"""
        total = calculate_total_fan([_match("dragon_pung"), _match("big_three_dragons")])
        assert total.total == 88

    def test_multiplicity(self):
        """Repeated patterns count once per occurrence"""
        total = calculate_total_fan([_match("pung_of_terminals_or_honors", 3)])
        assert total.total == 3

    def test_counted_sorted_by_points(self):
        """Counted patterns are ordered by points"""
        total = calculate_total_fan([_match("no_honors"), _match("full_flush"), _match("all_pungs")])
        points = [m.points for m in total.counted]
        assert points == sorted(points, reverse=True)


class TestScoring:
    """Test scoring of hands"""

    def test_all_green(self):
        """All Green with pungs scores 88, not 88 + All Pungs"""
        melds = [triplet(sou(2)), triplet(sou(4)), triplet(sou(6)), triplet(sou(8))]
        score = calculate_mcr_total_fan(parse_tiles("33s"), melds)
        assert score.is_complete
        assert score.total_fan == 88
        assert "all_pungs" in [m.key for m in score.patterns]
        assert "all_pungs" not in [m.key for m in score.breakdown]

    def test_all_green_with_green_dragon(self):
        """A green dragon pung adds nothing on top of All Green"""
        melds = [triplet(sou(2)), triplet(sou(4)), triplet(sou(6)), triplet(GREEN_DRAGON)]
        score = calculate_mcr_total_fan(parse_tiles("88s"), melds)
        assert score.is_complete
        assert score.total_fan == 88
        assert [m.key for m in score.breakdown] == ["all_green"]

    def test_four_shifted_pungs_hand(self):
        """111-222-333-444m with 55m pair"""
        hand = parse_tiles("111222333444m 55m")
        score = calculate_mcr_total_fan(hand)
        assert score.is_complete
        assert score.total_fan == 137
        assert {m.key for m in score.breakdown} == {
            "four_concealed_pungs", "four_pure_shifted_pungs", "full_flush",
            "pung_of_terminals_or_honors",
        }

        recognized = [m.key for m in recognize_mcr_patterns(hand)]
        assert "all_pungs" in recognized
        assert "all_simples" not in recognized

    def test_minimum_score(self):
        """A plain hand falls short of eight points"""
        score = calculate_mcr_total_fan(parse_tiles("123m 234m 345p 678s 99p"))
        assert score.is_complete
        assert score.total_fan < 8
        assert not score.meets_minimum

    def test_seven_pairs(self):
        """Seven pairs scores its 24 points"""
        score = calculate_mcr_total_fan(parse_tiles("1133m 5577p 99s 1155z"))
        assert score.shape == SEVEN_PAIRS
        assert "seven_pairs" in [m.key for m in score.breakdown]
        assert score.meets_minimum

    def test_thirteen_orphans(self):
        """Thirteen orphans scores 88"""
        score = calculate_mcr_total_fan(parse_tiles("19m 19p 19s 12345677z"))
        assert score.breakdown[0].key == "thirteen_orphans"
        assert score.total_fan >= 88

    def test_self_drawn_needs_context(self):
        """Win-context patterns only match when the context is known"""
        hand = parse_tiles("123m 456m 789m 123p 55s")
        unknown = [m.key for m in recognize_mcr_patterns(hand)]
        drawn = [m.key for m in recognize_mcr_patterns(hand, is_zimo=True)]
        assert "self_drawn" not in unknown
        assert "self_drawn" in drawn

    def test_melded_hand_needs_discard_win(self):
        """Melded Hand requires a known discard win"""
        melds = [triplet(sou(2)), triplet(sou(4)), triplet(sou(6)), triplet(sou(8))]
        unknown = [m.key for m in recognize_mcr_patterns(parse_tiles("33s"), melds)]
        claimed = [m.key for m in recognize_mcr_patterns(parse_tiles("33s"), melds, is_zimo=False)]
        assert "melded_hand" not in unknown
        assert "melded_hand" in claimed

    def test_concealed_kong(self):
        """Concealed and melded kongs are told apart"""
        hand = parse_tiles("123m 456p 789s 55z")
        concealed = [m.key for m in recognize_mcr_patterns(hand, [kong(EAST, concealed=True)])]
        melded = [m.key for m in recognize_mcr_patterns(hand, [kong(EAST)])]
        assert "concealed_kong" in concealed
        assert "melded_kong" in melded
        assert "concealed_kong" not in melded

    def test_partial_hand(self):
        """Incomplete hands are scored on a partial reading"""
        score = calculate_mcr_total_fan(parse_tiles("123m 456m 78m"))
        assert not score.is_complete
        assert score.shape == PARTIAL
        assert "chicken_hand" not in [m.key for m in score.patterns]

    def test_score_completed_hand(self):
        """Declared win uses the same scoring"""
        hand = parse_tiles("111222333444m 55m")
        assert score_completed_hand(hand).total_fan == calculate_mcr_total_fan(hand).total_fan

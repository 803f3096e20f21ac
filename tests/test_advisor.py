"""
Tests for the per-turn analysis orchestrator
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjong_core.tiles import TileSuit, parse_tiles, man, pin, sou
from mahjong_core.melds import triplet, kong
from mahjong_advisor import (
    analyze, Locale, GameMode, GameState, HandStatus, AdvisorRules, get_rules,
)
from mahjong_advisor.analyzer import format_probability, classify_shanten


def mcr_state(notation, wall_count=40, melds=(), discards=()):
    return GameState(GameMode.MCR, wall_count, hand=parse_tiles(notation),
                     melds=melds, discards=discards)


def sichuan_state(notation, void_suit=TileSuit.BAMBOOS, wall_count=40, melds=()):
    return GameState(GameMode.SICHUAN, wall_count, void_suit=void_suit,
                     hand=parse_tiles(notation), melds=melds)


class TestGameState:
    """Test input validation"""

    def test_negative_wall_rejected(self):
        """Wall count cannot go below zero"""
        with pytest.raises(ValueError):
            GameState(GameMode.MCR, -1)

    def test_oversized_hand_rejected(self):
        """At most 14 concealed tiles"""
        with pytest.raises(ValueError):
            GameState(GameMode.MCR, 40, hand=parse_tiles("123456789m 123456p"))

    def test_too_many_melds_rejected(self):
        """At most four melds"""
        with pytest.raises(ValueError):
            GameState(GameMode.MCR, 40, melds=[triplet(man(v)) for v in range(1, 6)])

    def test_void_suit_must_be_numbered(self):
        """Honors cannot be the void suit"""
        with pytest.raises(ValueError):
            GameState(GameMode.SICHUAN, 40, void_suit=TileSuit.DRAGONS)

    def test_coercion(self):
        """Mode strings and lists are normalised"""
        state = GameState("sichuan", 10, hand=[man(1)], void_suit=2)
        assert state.mode == GameMode.SICHUAN
        assert state.void_suit == TileSuit.BAMBOOS
        assert isinstance(state.hand, tuple)


class TestClassification:
    """Test won / ready / not ready"""

    def test_classify_shanten(self):
        assert classify_shanten(-1) == HandStatus.WON
        assert classify_shanten(0) == HandStatus.READY
        assert classify_shanten(3) == HandStatus.NOT_READY

    def test_won_mcr(self):
        """Complete hand scores exactly"""
        result = analyze(mcr_state("111222333444m 55m"))
        assert result.status == HandStatus.WON
        assert result.shanten == -1
        assert result.is_won and result.is_ready
        assert result.score_estimate == 137
        assert result.best_discard is None
        assert len(result.suggestions) == 1
        assert result.suggestions[0].probability == 100
        assert not any("minimum" in w for w in result.warnings)

    def test_won_below_minimum(self):
        """A win under eight points is flagged"""
        result = analyze(mcr_state("123m 234m 345p 678s 99p"))
        assert result.status == HandStatus.WON
        assert result.score_estimate < 8
        assert any("8-fan minimum" in w for w in result.warnings)

    def test_minimum_follows_rules(self):
        """The minimum comes from the rule set"""
        rules = AdvisorRules(name="Friendly", min_fan_to_win=0)
        result = analyze(mcr_state("123m 234m 345p 678s 99p"), rules=rules)
        assert not any("minimum" in w for w in result.warnings)

    def test_ready_lists_waits(self):
        """Ready hand shows waits with live copies and draw chance"""
        result = analyze(mcr_state("123m 456m 789m 123p 5s"))
        assert result.status == HandStatus.READY
        assert result.is_ready and not result.is_won
        assert [w.tile for w in result.waiting_tiles] == [sou(5)]
        assert result.waiting_tiles[0].remaining == 3
        assert result.waiting_tiles[0].probability == "7.5%"
        assert result.best_discard is None

    def test_discards_reduce_remaining(self):
        """Seen copies are not counted as live"""
        result = analyze(mcr_state("123m 456m 789m 123p 5s", discards=[sou(5), sou(5)]))
        assert result.waiting_tiles[0].remaining == 1

    def test_not_ready(self):
        """Far hands get suggestions but no waits"""
        result = analyze(mcr_state("123m 456p 789s 1234z"))
        assert result.status == HandStatus.NOT_READY
        assert result.shanten == 2
        assert not result.is_ready
        assert result.waiting_tiles == ()

    def test_drawn_hand_gets_discard(self):
        """Fourteen tiles get a discard recommendation"""
        result = analyze(mcr_state("123456789m 11p 34p 9s"))
        assert result.best_discard.tile == sou(9)
        assert result.best_discard.waiting_tiles == (pin(2), pin(5))
        assert result.waiting_tiles == ()


class TestWall:
    """Test wall-related output"""

    def test_format_probability(self):
        assert format_probability(3, 40) == "7.5%"
        assert format_probability(4, 0) == "0%"

    def test_empty_wall(self):
        """Empty wall: 0% chance and a warning"""
        result = analyze(mcr_state("123m 456m 789m 123p 5s", wall_count=0))
        assert result.waiting_tiles[0].probability == "0%"
        assert "The wall is empty" in result.warnings

    def test_low_wall(self):
        """Low wall warning at or below the threshold"""
        result = analyze(mcr_state("123m 456p 789s 1234z", wall_count=5))
        assert "Only 5 tile(s) left in the wall" in result.warnings
        assert analyze(mcr_state("123m 456p 789s 1234z")).warnings == ()


class TestSichuanAnalysis:
    """Test Sichuan-specific behaviour"""

    def test_forced_void_discard(self):
        """A held void tile is always the discard"""
        result = analyze(sichuan_state("123m 456m 789p 11p 23p 5s"))
        assert result.best_discard.tile == sou(5)
        assert "void suit" in result.best_discard.reason

    def test_forced_void_discard_chooses_among_void(self):
        """With several void tiles one of them is chosen"""
        result = analyze(sichuan_state("123m 456m 789p 11p 2p 59s"))
        assert result.best_discard.tile.suit == TileSuit.BAMBOOS

    def test_void_held_single_illegal(self):
        """Holding the void suit yields one illegal suggestion"""
        result = analyze(sichuan_state("123m 456m 789p 11p 23p 5s"))
        assert len(result.suggestions) == 1
        assert result.suggestions[0].is_illegal
        assert result.score_estimate == 0
        assert "Void suit tiles still in hand" in result.warnings

    def test_normal_discard_without_void(self):
        """Without void tiles the efficiency choice stands"""
        result = analyze(sichuan_state("123m 456m 789m 22p 45p 9p"))
        assert result.best_discard.tile == pin(9)
        assert not any(s.is_illegal for s in result.suggestions)

    def test_won_sichuan(self):
        """Complete Sichuan hand uses the doubling law"""
        melds = [kong(man(3)), triplet(man(6)), triplet(pin(7))]
        result = analyze(sichuan_state("999p 11p", melds=melds))
        assert result.status == HandStatus.WON
        assert result.score_estimate == 3
        assert result.suggestions[0].multiplier == 8

    def test_rules_preset(self):
        assert get_rules(GameMode.SICHUAN).initial_wall == 55
        assert get_rules("guobiao").min_fan_to_win == 8

    def test_wall_larger_than_deal_rejected(self):
        """A Sichuan wall cannot hold more than the 55 tiles left after the deal"""
        with pytest.raises(ValueError):
            analyze(sichuan_state("123m 456m 789m 22p 45p", wall_count=60))
        assert analyze(sichuan_state("123m 456m 789m 22p 45p", wall_count=55)).shanten == 0
        assert analyze(mcr_state("123m 456p 789s 1234z", wall_count=60)).shanten == 2


class TestPurity:
    """Test that output depends only on the state"""

    def test_repeatable(self):
        """Same state, same result"""
        state = mcr_state("123m 456p 789s 55m 67p 1z")
        assert analyze(state) == analyze(state)

    def test_locale_changes_labels_only(self):
        """Chinese output has the same numbers"""
        state = mcr_state("123m 456p 789s 55m 67p 1z", wall_count=5)
        english = analyze(state, Locale.EN)
        chinese = analyze(state, Locale.ZH)
        assert english.status == chinese.status
        assert english.shanten == chinese.shanten
        assert english.score_estimate == chinese.score_estimate
        assert english.best_discard.tile == chinese.best_discard.tile
        assert [(s.key, s.fan, s.probability) for s in english.suggestions] == \
            [(s.key, s.fan, s.probability) for s in chinese.suggestions]
        assert english.warnings != chinese.warnings

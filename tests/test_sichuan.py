"""
Tests for Sichuan scoring and suggestions
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjong_core.tiles import TileSuit, parse_tiles, man, pin, sou
from mahjong_core.melds import run, triplet, kong
from mahjong_core.locale import Locale
from sichuan_mahjong.patterns import SICHUAN_PATTERNS, PRECEDENCE, sichuan_multiplier, pattern_name
from sichuan_mahjong.scoring import score_sichuan_hand
from sichuan_mahjong.suggestions import analyze_sichuan


class TestPatterns:
    """Test the pattern table and doubling law"""

    def test_precedence_order(self):
        """Fan never increases down the precedence list"""
        fans = [p.fan for p in PRECEDENCE]
        assert fans == sorted(fans, reverse=True)
        assert PRECEDENCE[-1].key == "ping_hu"

    def test_multiplier(self):
        """Every fan doubles the payout"""
        assert sichuan_multiplier(2, roots=1) == 8
        assert sichuan_multiplier(0) == 1
        assert sichuan_multiplier(4, roots=1, extra=2) == 128

    def test_root_names(self):
        """Seven pairs switch to their dragon names with a root"""
        assert pattern_name("qi_dui") == "Seven Pairs"
        assert pattern_name("qi_dui", roots=1) == "Dragon Seven Pairs + 1 Root"
        assert pattern_name("qing_qi_dui", Locale.ZH, roots=1).startswith("清龙七对")

    def test_illegal_registered(self):
        """Flower pig is a zero-fan entry"""
        assert SICHUAN_PATTERNS["hua_zhu"].fan == 0


class TestScoring:
    """Test the precedence classifier"""

    def test_root_doubling(self):
        """All pungs with one root: 2 + 1 fan, multiplier 8"""
        melds = [kong(man(3)), triplet(man(6)), triplet(pin(7))]
        score = score_sichuan_hand(parse_tiles("999p 11p"), melds)
        assert score.is_complete
        assert score.pattern_key == "dui_dui_hu"
        assert score.base_fan == 2
        assert score.roots == 1
        assert score.total_fan == 3
        assert score.multiplier == 8
        assert score.name == "All Pungs + 1 Root"

    def test_pure_seven_pairs(self):
        """Flush seven pairs outranks plain flush"""
        score = score_sichuan_hand(parse_tiles("11223355778899m"))
        assert score.pattern_key == "qing_qi_dui"
        assert score.total_fan == 8
        assert score.multiplier == 256

    def test_pure_pungs(self):
        """Flush all pungs scores 6"""
        score = score_sichuan_hand(parse_tiles("111222333555m 77m"))
        assert score.pattern_key == "qing_dui"
        assert score.total_fan == 6

    def test_jiang_dui(self):
        """All pungs of 2, 5 and 8"""
        score = score_sichuan_hand(parse_tiles("222m 555p 888s 222p 55s"))
        assert score.pattern_key == "jiang_dui"
        assert score.total_fan == 4

    def test_golden_hook(self):
        """Four pung melds and a pair in hand"""
        melds = [triplet(man(1)), triplet(man(9)), triplet(pin(3)), triplet(pin(4))]
        assert score_sichuan_hand(parse_tiles("55p"), melds).pattern_key == "jin_gou_diao"

        flush_melds = [triplet(man(1)), triplet(man(9)), triplet(man(3)), triplet(man(4))]
        score = score_sichuan_hand(parse_tiles("55m"), flush_melds)
        assert score.pattern_key == "qing_jin_gou"
        assert score.total_fan == 8

    def test_dragon_seven_pairs(self):
        """Seven pairs with four of a kind"""
        score = score_sichuan_hand(parse_tiles("1111m 3355p 77s 1199p"))
        assert score.pattern_key == "qi_dui"
        assert score.roots == 1
        assert score.total_fan == 5
        assert score.name == "Dragon Seven Pairs + 1 Root"

    def test_terminal_pungs(self):
        """All pungs of terminals"""
        score = score_sichuan_hand(parse_tiles("111m 999p 111s 999s 11p"))
        assert score.pattern_key == "dai_yao_jiu"
        assert score.total_fan == 4

    def test_all_simples(self):
        """No terminals scores 2"""
        score = score_sichuan_hand(parse_tiles("234m 567p 345s 678s 55m"))
        assert score.pattern_key == "duan_yao"

    def test_basic_win(self):
        """Fallback basic win"""
        score = score_sichuan_hand(parse_tiles("123m 456p 789s 123s 55m"))
        assert score.pattern_key == "ping_hu"
        assert score.total_fan == 1
        assert score.multiplier == 2

    def test_bonuses(self):
        """Bonus events add one fan each"""
        score = score_sichuan_hand(parse_tiles("123m 456p 789s 123s 55m"),
                                   kong_bloom=True, last_tile=True)
        assert score.bonus_fan == 2
        assert score.total_fan == 3
        assert len(score.breakdown) == 3

    def test_fan_cap(self):
        """The table cap limits the total"""
        score = score_sichuan_hand(parse_tiles("11223355778899m"), fan_cap=4)
        assert score.total_fan == 4
        assert score.multiplier == 16

    def test_void_suit_illegal(self):
        """Holding the void suit is a flower pig"""
        score = score_sichuan_hand(parse_tiles("123m 456p 789s 123s 55m"),
                                   void_suit=TileSuit.BAMBOOS)
        assert score.is_illegal
        assert score.total_fan == 0
        assert score.multiplier == 0

    def test_void_suit_in_melds(self):
        """Void suit tiles in melds also count"""
        score = score_sichuan_hand(parse_tiles("123m 456m 789m 11m"), [run(sou(1))],
                                   void_suit=TileSuit.BAMBOOS)
        assert score.is_illegal


class TestSuggestions:
    """Test Sichuan suggestions"""

    def test_void_single_illegal(self):
        """One bamboo tile with bamboo void yields only the illegal suggestion"""
        suggestions = analyze_sichuan(parse_tiles("123m 456m 789p 11p 23p 5s"),
                                      void_suit=TileSuit.BAMBOOS)
        assert len(suggestions) == 1
        assert suggestions[0].is_illegal
        assert suggestions[0].fan == 0
        assert suggestions[0].multiplier == 0
        assert suggestions[0].key == "hua_zhu"

    def test_baseline_basic_win(self):
        """A scattered hand still gets a basic win"""
        suggestions = analyze_sichuan(parse_tiles("147m 258m 369p 147p 5m"))
        assert [s.key for s in suggestions] == ["ping_hu"]
        assert suggestions[0].fan == 1
        assert suggestions[0].multiplier == 2

    def test_flush_hand(self):
        """One-suit hand suggests pure pungs and flush"""
        suggestions = analyze_sichuan(parse_tiles("1112345678999m"))
        keys = [s.key for s in suggestions]
        assert keys[0] == "qing_dui"
        assert "qing_yi_se" in keys
        assert "ping_hu" not in keys

    def test_roots_added(self):
        """Every suggestion carries the hand's roots"""
        suggestions = analyze_sichuan(parse_tiles("1111m 3355p 7s 19p 25s"))
        assert suggestions
        for s in suggestions:
            assert s.fan == s.base_fan + 1
            assert s.multiplier == 2 ** s.fan
        pairs = {s.key: s for s in suggestions}["qi_dui"]
        assert pairs.name == "Dragon Seven Pairs + 1 Root"

    def test_never_empty(self):
        """Legal hands always get at least one suggestion"""
        for notation in ["", "1m", "11m 22p 33m", "1112345678999m", "12345m 6789p 1234s"]:
            assert analyze_sichuan(parse_tiles(notation) if notation else [])

    def test_locale_changes_labels_only(self):
        """Chinese labels, same numbers"""
        hand = parse_tiles("1112345678999m")
        english = analyze_sichuan(hand)
        chinese = analyze_sichuan(hand, locale=Locale.ZH)
        assert [(s.key, s.fan) for s in english] == [(s.key, s.fan) for s in chinese]
        assert chinese[0].name == "清对"

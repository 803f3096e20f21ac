"""
MCR Scoring Pattern Table

All 81 scoring patterns of Chinese Official Mahjong (MCR), from 88 points
down to 1. Each pattern lists the patterns it folds in (`excludes`, not
counted separately) and the patterns it re-admits (`includes`, counted even
when another matched pattern excludes them).

The table is built once at import into a read-only registry. Any reference
to an unknown pattern, or a pattern that both excludes and includes the same
pattern, raises ValueError at import time.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringPattern:
    """Represents a scoring pattern"""
    key: str
    name: str
    chinese_name: str
    points: int
    description: str
    excludes: Tuple[str, ...] = ()
    includes: Tuple[str, ...] = ()


VALID_POINTS = frozenset({1, 2, 4, 6, 8, 12, 16, 24, 32, 48, 64, 88})


def _p(key, name, chinese_name, points, description, excludes=(), includes=()):
    return ScoringPattern(key, name, chinese_name, points, description,
                          tuple(excludes), tuple(includes))


_TABLE = [
    # ========== 88 Points ==========
    _p("big_four_winds", "Big Four Winds", "大四喜", 88,
       "Four pungs or kongs of winds",
       ["little_four_winds", "big_three_winds", "all_pungs", "prevalent_wind",
        "seat_wind", "pung_of_terminals_or_honors"],
       ["all_terminals_and_honors", "half_flush", "all_honors"]),
    _p("big_three_dragons", "Big Three Dragons", "大三元", 88,
       "Three pungs or kongs of dragons",
       ["little_three_dragons", "dragon_pung", "two_dragon_pungs"],
       ["outside_hand", "all_honors"]),
    _p("all_green", "All Green", "绿一色", 88,
       "Only 2, 3, 4, 6, 8 of bamboo and the green dragon",
       ["half_flush", "full_flush", "all_pungs", "all_simples", "no_honors",
        "one_voided_suit", "dragon_pung"],
       ["tile_hog", "pure_shifted_pungs"]),
    _p("nine_gates", "Nine Gates", "九莲宝灯", 88,
       "Concealed 1112345678999 of one suit plus any tile of that suit",
       ["full_flush", "concealed_hand", "fully_concealed_hand",
        "pung_of_terminals_or_honors"],
       ["tile_hog", "pure_straight", "two_concealed_pungs", "short_straight"]),
    _p("four_kongs", "Four Kongs", "四杠", 88,
       "Four kongs",
       ["three_kongs", "two_melded_kongs", "two_concealed_kongs", "melded_kong",
        "concealed_kong", "single_wait", "all_pungs"],
       ["four_concealed_pungs", "upper_tiles", "mixed_shifted_pungs",
        "double_pung", "pung_of_terminals_or_honors",
        "all_terminals_and_honors", "triple_pung", "all_types", "dragon_pung"]),
    _p("seven_shifted_pairs", "Seven Shifted Pairs", "连七对", 88,
       "Seven consecutive pairs of one suit",
       ["full_flush", "seven_pairs", "concealed_hand", "fully_concealed_hand",
        "all_chows", "single_wait"],
       ["all_simples"]),
    _p("thirteen_orphans", "Thirteen Orphans", "十三幺", 88,
       "One of each terminal and honor plus a duplicate of one of them",
       ["all_types", "concealed_hand", "fully_concealed_hand", "single_wait",
        "all_terminals_and_honors"]),

    # ========== 64 Points ==========
    _p("all_terminals", "All Terminals", "清幺九", 64,
       "Pungs and pair of 1s and 9s only",
       ["all_pungs", "all_terminals_and_honors", "double_pung", "no_honors",
        "pung_of_terminals_or_honors"],
       ["seven_pairs", "tile_hog"]),
    _p("little_four_winds", "Little Four Winds", "小四喜", 64,
       "Three wind pungs plus a wind pair",
       ["big_three_winds", "pung_of_terminals_or_honors"],
       ["all_pungs"]),
    _p("little_three_dragons", "Little Three Dragons", "小三元", 64,
       "Two dragon pungs plus a dragon pair",
       ["two_dragon_pungs", "dragon_pung", "one_voided_suit"],
       ["all_terminals_and_honors", "double_pung"]),
    _p("all_honors", "All Honors", "字一色", 64,
       "Winds and dragons only",
       ["all_pungs", "all_terminals_and_honors", "pung_of_terminals_or_honors"],
       ["two_dragon_pungs"]),
    _p("four_concealed_pungs", "Four Concealed Pungs", "四暗刻", 64,
       "Four concealed pungs or kongs",
       ["all_pungs", "concealed_hand", "fully_concealed_hand",
        "two_concealed_kongs", "three_concealed_pungs", "two_concealed_pungs"]),
    _p("pure_terminal_chows", "Pure Terminal Chows", "一色双龙会", 64,
       "Two 123 and two 789 chows of one suit with a pair of 5s",
       ["full_flush", "all_chows", "pure_double_chow", "two_terminal_chows",
        "no_honors", "one_voided_suit"]),

    # ========== 48 Points ==========
    _p("quadruple_chow", "Quadruple Chow", "一色四同顺", 48,
       "Four identical chows of one suit",
       ["pure_triple_chow", "pure_double_chow", "tile_hog"],
       ["all_green", "full_flush", "all_simples", "all_chows"]),
    _p("four_pure_shifted_pungs", "Four Pure Shifted Pungs", "一色四节高", 48,
       "Four pungs of one suit, each one rank higher",
       ["pure_shifted_pungs", "all_pungs"],
       ["reversible_tiles", "lower_four", "pung_of_terminals_or_honors"]),

    # ========== 32 Points ==========
    _p("four_shifted_chows", "Four Shifted Chows", "一色四步高", 32,
       "Four chows of one suit shifted by one or by two",
       ["pure_shifted_chows", "short_straight"],
       ["half_flush", "all_chows"]),
    _p("three_kongs", "Three Kongs", "三杠", 32,
       "Three kongs",
       ["two_melded_kongs", "two_concealed_kongs", "melded_kong",
        "concealed_kong"],
       ["lower_four", "mixed_shifted_pungs"]),
    _p("all_terminals_and_honors", "All Terminals and Honors", "混幺九", 32,
       "Terminals and honors only",
       ["all_pungs", "outside_hand", "pung_of_terminals_or_honors"],
       ["triple_pung", "dragon_pung", "all_types", "seven_pairs", "tile_hog",
        "one_voided_suit"]),

    # ========== 24 Points ==========
    _p("seven_pairs", "Seven Pairs", "七对", 24,
       "Seven pairs",
       ["concealed_hand", "fully_concealed_hand", "single_wait"],
       ["all_types", "all_green", "full_flush", "all_even_pungs",
        "reversible_tiles"]),
    _p("greater_honors_and_knitted_tiles", "Greater Honors and Knitted Tiles",
       "七星不靠", 24,
       "All seven honors plus seven knitted numbered tiles",
       ["lesser_honors_and_knitted_tiles", "all_types", "concealed_hand",
        "fully_concealed_hand", "single_wait"]),
    _p("all_even_pungs", "All Even Pungs", "全双刻", 24,
       "Pungs and pair of 2, 4, 6, 8 only",
       ["all_pungs", "all_simples"],
       ["reversible_tiles", "double_pung"]),
    _p("full_flush", "Full Flush", "清一色", 24,
       "Numbered tiles of one suit only",
       ["no_honors"],
       ["pure_straight", "pure_double_chow", "tile_hog", "all_chows"]),
    _p("pure_triple_chow", "Pure Triple Chow", "一色三同顺", 24,
       "Three identical chows of one suit",
       ["pure_double_chow"],
       ["lower_tiles", "outside_hand", "all_chows", "one_voided_suit",
        "mixed_double_chow"]),
    _p("pure_shifted_pungs", "Pure Shifted Pungs", "一色三节高", 24,
       "Three pungs of one suit, each one rank higher",
       [],
       ["half_flush", "tile_hog"]),
    _p("upper_tiles", "Upper Tiles", "全大", 24,
       "Numbered tiles 7, 8, 9 only",
       ["no_honors", "upper_four"],
       ["mixed_triple_chow", "outside_hand", "all_chows", "pure_double_chow"]),
    _p("middle_tiles", "Middle Tiles", "全中", 24,
       "Numbered tiles 4, 5, 6 only",
       ["no_honors", "all_simples"],
       ["all_pungs", "mixed_shifted_pungs", "double_pung"]),
    _p("lower_tiles", "Lower Tiles", "全小", 24,
       "Numbered tiles 1, 2, 3 only",
       ["no_honors", "lower_four"],
       ["quadruple_chow", "outside_hand", "one_voided_suit", "all_chows"]),

    # ========== 16 Points ==========
    _p("pure_straight", "Pure Straight", "清龙", 16,
       "Chows 123, 456, 789 of one suit",
       ["short_straight", "two_terminal_chows"],
       ["all_chows", "one_voided_suit", "mixed_double_chow"]),
    _p("three_suited_terminal_chows", "Three-Suited Terminal Chows", "三色双龙会", 16,
       "123 and 789 chows in two suits with a pair of 5s in the third",
       ["all_chows", "two_terminal_chows", "no_honors", "mixed_double_chow"]),
    _p("pure_shifted_chows", "Pure Shifted Chows", "一色三步高", 16,
       "Three chows of one suit shifted by one or by two",
       [],
       ["all_fives", "all_chows", "mixed_double_chow"]),
    _p("all_fives", "All Fives", "全带五", 16,
       "Every set and the pair include a 5",
       ["all_simples"],
       ["middle_tiles", "mixed_triple_chow", "tile_hog", "all_chows",
        "pure_double_chow"]),
    _p("triple_pung", "Triple Pung", "三同刻", 16,
       "Pungs of the same rank in all three suits",
       [],
       ["all_even_pungs", "middle_tiles"]),
    _p("three_concealed_pungs", "Three Concealed Pungs", "三暗刻", 16,
       "Three concealed pungs or kongs",
       ["two_concealed_pungs"]),

    # ========== 12 Points ==========
    _p("lesser_honors_and_knitted_tiles", "Lesser Honors and Knitted Tiles",
       "全不靠", 12,
       "Single honors and knitted numbered tiles, no pairs",
       ["all_types", "concealed_hand", "fully_concealed_hand", "single_wait"],
       ["knitted_straight"]),
    _p("knitted_straight", "Knitted Straight", "组合龙", 12,
       "147, 258, 369 spread across the three suits",
       [],
       ["all_chows", "all_types", "dragon_pung"]),
    _p("upper_four", "Upper Four", "大于五", 12,
       "Numbered tiles 6 to 9 only",
       ["no_honors"],
       ["mixed_triple_chow", "pure_double_chow", "all_chows"]),
    _p("lower_four", "Lower Four", "小于五", 12,
       "Numbered tiles 1 to 4 only",
       ["no_honors"],
       ["full_flush", "pure_shifted_pungs", "reversible_tiles", "tile_hog"]),
    _p("big_three_winds", "Big Three Winds", "三风刻", 12,
       "Three wind pungs",
       ["pung_of_terminals_or_honors"],
       ["all_honors", "dragon_pung"]),

    # ========== 8 Points ==========
    _p("mixed_straight", "Mixed Straight", "花龙", 8,
       "Chows 123, 456, 789 spread across the three suits",
       [],
       ["pure_double_chow", "all_chows"]),
    _p("reversible_tiles", "Reversible Tiles", "推不倒", 8,
       "Only 1234589 of dots, 245689 of bamboo and the white dragon",
       ["one_voided_suit"],
       ["double_pung", "no_honors", "pung_of_terminals_or_honors",
        "full_flush", "seven_pairs"]),
    _p("mixed_triple_chow", "Mixed Triple Chow", "三色三同顺", 8,
       "Chows of the same ranks in all three suits",
       ["mixed_double_chow"],
       ["all_chows", "short_straight"]),
    _p("mixed_shifted_pungs", "Mixed Shifted Pungs", "三色三节高", 8,
       "Pungs in three suits, each one rank higher",
       [],
       ["upper_tiles", "all_pungs", "double_pung",
        "pung_of_terminals_or_honors"]),
    _p("chicken_hand", "Chicken Hand", "无番和", 8,
       "A complete hand with no other scoring pattern"),
    _p("last_tile_draw", "Last Tile Draw", "妙手回春", 8,
       "Self-drawn win on the last tile of the wall",
       ["self_drawn"]),
    _p("last_tile_claim", "Last Tile Claim", "海底捞月", 8,
       "Win on the discard of the last tile of the wall"),
    _p("out_with_replacement_tile", "Out with Replacement Tile", "杠上开花", 8,
       "Win on the replacement tile drawn after a kong",
       ["self_drawn"]),
    _p("robbing_the_kong", "Robbing the Kong", "抢杠和", 8,
       "Win on a tile another player adds to a kong",
       ["last_tile"]),

    # ========== 6 Points ==========
    _p("all_pungs", "All Pungs", "碰碰和", 6,
       "Four pungs or kongs and a pair",
       [],
       ["pure_shifted_pungs", "double_pung", "reversible_tiles"]),
    _p("half_flush", "Half Flush", "混一色", 6,
       "Numbered tiles of one suit plus honors",
       [],
       ["dragon_pung", "two_terminal_chows"]),
    _p("mixed_shifted_chows", "Mixed Shifted Chows", "三色三步高", 6,
       "Chows in three suits, each starting one rank higher",
       [],
       ["all_fives", "tile_hog"]),
    _p("all_types", "All Types", "五门齐", 6,
       "Characters, dots, bamboo, winds and dragons all present",
       [],
       ["outside_hand", "dragon_pung", "mixed_double_chow"]),
    _p("melded_hand", "Melded Hand", "全求人", 6,
       "Four exposed melds and a single wait won on a discard",
       ["single_wait"]),
    _p("two_concealed_kongs", "Two Concealed Kongs", "双暗杠", 6,
       "Two concealed kongs",
       ["concealed_kong"]),
    _p("two_dragon_pungs", "Two Dragon Pungs", "双箭刻", 6,
       "Two dragon pungs or kongs",
       ["dragon_pung"]),

    # ========== 4 Points ==========
    _p("outside_hand", "Outside Hand", "全带幺", 4,
       "Every set and the pair include a terminal or honor"),
    _p("fully_concealed_hand", "Fully Concealed Hand", "不求人", 4,
       "No exposed melds and won by self-draw",
       ["concealed_hand", "self_drawn"]),
    _p("two_melded_kongs", "Two Melded Kongs", "双明杠", 4,
       "Two exposed kongs",
       ["melded_kong"]),
    _p("last_tile", "Last Tile", "和绝张", 4,
       "Win on the fourth tile of a kind when the other three are visible"),

    # ========== 2 Points ==========
    _p("dragon_pung", "Dragon Pung", "箭刻", 2,
       "A pung or kong of dragons, counted per set"),
    _p("prevalent_wind", "Prevalent Wind", "圈风刻", 2,
       "A pung or kong of the round wind"),
    _p("seat_wind", "Seat Wind", "门风刻", 2,
       "A pung or kong of the player's seat wind"),
    _p("concealed_hand", "Concealed Hand", "门前清", 2,
       "No exposed melds, won on a discard"),
    _p("all_chows", "All Chows", "平和", 2,
       "Four chows and a numbered pair",
       ["no_honors"]),
    _p("tile_hog", "Tile Hog", "四归一", 2,
       "All four tiles of a kind used without declaring a kong, counted per kind"),
    _p("double_pung", "Double Pung", "双同刻", 2,
       "Pungs of the same rank in two suits"),
    _p("two_concealed_pungs", "Two Concealed Pungs", "双暗刻", 2,
       "Two concealed pungs or kongs"),
    _p("all_simples", "All Simples", "断幺", 2,
       "No terminals or honors",
       ["no_honors"]),
    _p("concealed_kong", "Concealed Kong", "暗杠", 2,
       "One concealed kong"),

    # ========== 1 Point ==========
    _p("pure_double_chow", "Pure Double Chow", "一般高", 1,
       "Two identical chows of one suit"),
    _p("mixed_double_chow", "Mixed Double Chow", "喜相逢", 1,
       "Chows of the same ranks in two suits"),
    _p("short_straight", "Short Straight", "连六", 1,
       "Two chows of one suit forming six consecutive tiles"),
    _p("two_terminal_chows", "Two Terminal Chows", "老少副", 1,
       "123 and 789 chows of one suit"),
    _p("pung_of_terminals_or_honors", "Pung of Terminals or Honors", "幺九刻", 1,
       "A pung of terminals or winds not otherwise scored, counted per set"),
    _p("melded_kong", "Melded Kong", "明杠", 1,
       "An exposed kong, counted per kong"),
    _p("one_voided_suit", "One Voided Suit", "缺一门", 1,
       "One of the three numbered suits is missing"),
    _p("no_honors", "No Honors", "无字", 1,
       "No winds or dragons"),
    _p("edge_wait", "Edge Wait", "边张", 1,
       "Won on 3 of 12 or 7 of 89"),
    _p("closed_wait", "Closed Wait", "坎张", 1,
       "Won on the middle tile of a chow"),
    _p("single_wait", "Single Wait", "单钓将", 1,
       "Won on the tile completing the pair"),
    _p("self_drawn", "Self-Drawn", "自摸", 1,
       "Won by self-draw"),
    _p("flower_tiles", "Flower Tiles", "花牌", 1,
       "One point per flower tile"),
]


def build_registry(patterns: Iterable[ScoringPattern]) -> Mapping[str, ScoringPattern]:
    """
    Build a read-only registry keyed by pattern key.

    Raises:
        ValueError: on duplicate keys, invalid point values, references to
            unknown patterns, self references, or a pattern that both
            excludes and includes the same pattern
    """
    registry = {}
    for pattern in patterns:
        if pattern.key in registry:
            raise ValueError(f"Duplicate scoring pattern: {pattern.key}")
        if pattern.points not in VALID_POINTS:
            raise ValueError(f"{pattern.key}: invalid point value {pattern.points}")
        registry[pattern.key] = pattern

    for pattern in registry.values():
        for ref in pattern.excludes + pattern.includes:
            if ref not in registry:
                raise ValueError(f"{pattern.key} references unknown pattern {ref}")
            if ref == pattern.key:
                raise ValueError(f"{pattern.key} references itself")
        overlap = set(pattern.excludes) & set(pattern.includes)
        if overlap:
            raise ValueError(
                f"{pattern.key} both excludes and includes {', '.join(sorted(overlap))}"
            )

    logger.debug(f"Built MCR pattern registry with {len(registry)} patterns")
    return MappingProxyType(registry)


PATTERNS: Mapping[str, ScoringPattern] = build_registry(_TABLE)

MIN_POINTS_TO_WIN = 8


def get_pattern(key: str) -> ScoringPattern:
    """Look up a pattern by key (KeyError if unknown)."""
    return PATTERNS[key]


def pattern_name(key: str, chinese: bool = False) -> str:
    pattern = PATTERNS[key]
    return pattern.chinese_name if chinese else pattern.name

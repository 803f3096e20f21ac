"""
Sichuan Scoring

Classifies a declared win by pattern precedence and applies the doubling law:
total fan = pattern fan + roots + bonus events, multiplier = 2 ** total.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from mahjong_core.tiles import Tile, TileSuit, NUMBERED_SUITS, count_tiles, index_is_orphan, rank_of
from mahjong_core.melds import Meld, MeldType, meld_tiles
from mahjong_core.winning import find_decompositions, is_seven_pairs, is_winning_counts
from mahjong_core.locale import Locale, text

from .patterns import PRECEDENCE, ILLEGAL, BONUS_KEYS, SichuanPattern, pattern_name, sichuan_multiplier

logger = logging.getLogger(__name__)


@dataclass
class SichuanScore:
    """Result of classifying a Sichuan hand"""
    pattern_key: str
    name: str
    base_fan: int
    roots: int = 0
    bonus_fan: int = 0
    total_fan: int = 0
    multiplier: int = 0
    breakdown: List[str] = field(default_factory=list)
    is_illegal: bool = False
    is_complete: bool = False


def holds_void_suit(tiles: Sequence[Tile], void_suit: Optional[TileSuit]) -> bool:
    """Whether any tile belongs to the declared void suit (flower pig)."""
    if void_suit is None:
        return False
    return any(t.suit == void_suit for t in tiles)


def count_roots(counts) -> int:
    """Kinds held four times across hand and melds."""
    return sum(1 for c in counts if c == 4)


class HandShape:
    """Structural facts about a Sichuan hand that the precedence table tests."""

    def __init__(self, hand: Sequence[Tile], melds: Sequence[Meld]):
        self.hand = list(hand)
        self.melds = list(melds)
        self.hand_counts = [int(c) for c in count_tiles(self.hand)]
        self.all_tiles = self.hand + meld_tiles(self.melds)
        self.counts = [int(c) for c in count_tiles(self.all_tiles)]
        self.present = [i for i, c in enumerate(self.counts) if c]
        self.is_complete = is_winning_counts(self.hand_counts, len(self.melds))

    @property
    def is_flush(self) -> bool:
        suits = {t.suit for t in self.all_tiles}
        return len(suits) == 1 and next(iter(suits)) in NUMBERED_SUITS

    @property
    def is_seven_pairs(self) -> bool:
        return not self.melds and is_seven_pairs(self.hand_counts)

    @property
    def is_all_pungs(self) -> bool:
        if not all(m.is_pung for m in self.melds):
            return False
        return any(
            all(kind == MeldType.TRIPLET for kind, _ in d.groups)
            for d in find_decompositions(self.hand_counts, len(self.melds))
        )

    @property
    def is_golden_hook(self) -> bool:
        return (len(self.melds) == 4 and all(m.is_pung for m in self.melds)
                and len(self.hand) == 2 and self.hand[0] == self.hand[1])

    @property
    def is_all_258(self) -> bool:
        return bool(self.present) and all(rank_of(i) in (2, 5, 8) for i in self.present)

    @property
    def is_all_terminals(self) -> bool:
        return all(index_is_orphan(i) for i in self.present)

    @property
    def is_all_simples(self) -> bool:
        return bool(self.present) and not any(index_is_orphan(i) for i in self.present)

    def matches(self, key: str) -> bool:
        if key == "qing_jin_gou":
            return self.is_flush and self.is_golden_hook
        if key == "qing_qi_dui":
            return self.is_flush and self.is_seven_pairs
        if key == "qing_dui":
            return self.is_flush and self.is_all_pungs
        if key == "jiang_dui":
            return self.is_all_pungs and self.is_all_258
        if key == "qing_yi_se":
            return self.is_flush
        if key == "jin_gou_diao":
            return self.is_golden_hook
        if key == "qi_dui":
            return self.is_seven_pairs
        if key == "dai_yao_jiu":
            return self.is_all_pungs and self.is_all_terminals
        if key == "duan_yao":
            return self.is_all_simples
        if key == "dui_dui_hu":
            return self.is_all_pungs
        if key == "ping_hu":
            return True
        raise ValueError(f"Unknown Sichuan pattern: {key}")


def classify(shape: HandShape) -> SichuanPattern:
    """Highest-precedence pattern the hand satisfies."""
    for pattern in PRECEDENCE:
        if shape.matches(pattern.key):
            return pattern
    return PRECEDENCE[-1]


def illegal_score(locale: Locale = Locale.EN) -> SichuanScore:
    return SichuanScore(
        pattern_key=ILLEGAL.key,
        name=text(locale, ILLEGAL.key),
        base_fan=0,
        breakdown=[text(locale, "illegal")],
        is_illegal=True,
    )


def score_sichuan_hand(
    hand: Sequence[Tile],
    melds: Sequence[Meld] = (),
    void_suit: Optional[TileSuit] = None,
    kong_bloom: bool = False,
    kong_shot: bool = False,
    robbing_kong: bool = False,
    last_tile: bool = False,
    fan_cap: Optional[int] = None,
    locale: Locale = Locale.EN,
) -> SichuanScore:
    """
    Score a declared Sichuan win.

    Args:
        hand: Concealed tiles including the winning tile
        melds: Declared melds
        void_suit: Suit the player committed to avoid
        kong_bloom / kong_shot / robbing_kong / last_tile: +1 fan events
        fan_cap: Upper bound on the total fan, if the table plays one
        locale: Display language

    Returns:
        SichuanScore; the flower-pig sentinel when the void suit is held
    """
    shape = HandShape(hand, melds)
    if holds_void_suit(shape.all_tiles, void_suit):
        logger.info(f"Sichuan hand holds void suit {TileSuit(void_suit).name}")
        return illegal_score(locale)

    if not shape.is_complete:
        logger.warning("Scoring a declared win whose tiles do not form a complete hand")

    pattern = classify(shape)
    roots = count_roots(shape.counts)
    bonuses = [key for key, on in zip(
        BONUS_KEYS, (kong_bloom, kong_shot, robbing_kong, last_tile)) if on]

    total = pattern.fan + roots + len(bonuses)
    if fan_cap is not None:
        total = min(total, fan_cap)

    breakdown = [f"{pattern_name(pattern.key, locale)} ({pattern.fan})"]
    if roots:
        breakdown.append(text(locale, "root_bonus", root=text(locale, "root"), count=roots))
    breakdown.extend(f"{text(locale, key)} (+1)" for key in bonuses)

    score = SichuanScore(
        pattern_key=pattern.key,
        name=pattern_name(pattern.key, locale, roots),
        base_fan=pattern.fan,
        roots=roots,
        bonus_fan=len(bonuses),
        total_fan=total,
        multiplier=sichuan_multiplier(total),
        breakdown=breakdown,
        is_complete=shape.is_complete,
    )
    logger.info(f"Sichuan hand scored {score.pattern_key}: {score.total_fan} fan, "
                f"x{score.multiplier}")
    return score

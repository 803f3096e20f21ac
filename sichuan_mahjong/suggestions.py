"""
Sichuan Fan Suggestions

Partial-hand estimates for the Blood Battle patterns. A held void-suit tile
short-circuits everything into the flower-pig sentinel; otherwise the list
always contains at least a basic win.
"""

import logging
from typing import List, Optional, Sequence

from mahjong_core.tiles import Tile, TileSuit, NUMBERED_SUITS, count_tiles
from mahjong_core.melds import Meld, MeldType, meld_tiles
from mahjong_core.locale import Locale, text
from mahjong_core.suggestion import FanSuggestion, rank_suggestions

from .patterns import SICHUAN_PATTERNS, ILLEGAL, pattern_name, sichuan_multiplier
from .scoring import holds_void_suit, count_roots

logger = logging.getLogger(__name__)


def illegal_suggestion(locale: Locale = Locale.EN) -> FanSuggestion:
    """The single result returned for a hand still holding its void suit."""
    return FanSuggestion(
        key=ILLEGAL.key,
        name=text(locale, ILLEGAL.key),
        base_fan=0,
        fan=0,
        probability=0,
        breakdown=[text(locale, "illegal")],
        is_illegal=True,
        multiplier=0,
    )


class SichuanSuggestionBuilder:
    """Collects Sichuan suggestions; every one carries the hand's roots."""

    def __init__(
        self,
        hand: Sequence[Tile],
        melds: Sequence[Meld] = (),
        locale: Locale = Locale.EN,
        fan_cap: Optional[int] = None,
    ):
        self.hand = list(hand)
        self.melds = list(melds)
        self.locale = Locale(locale)
        self.fan_cap = fan_cap
        self.all_tiles = self.hand + meld_tiles(self.melds)
        self.counts = [int(c) for c in count_tiles(self.all_tiles)]
        self.hand_counts = [int(c) for c in count_tiles(self.hand)]
        self.roots = count_roots(self.counts)
        self.suggestions: List[FanSuggestion] = []

        suit_counts = {suit: sum(1 for t in self.all_tiles if t.suit == suit)
                       for suit in NUMBERED_SUITS}
        self.main_suit = max(NUMBERED_SUITS, key=lambda s: suit_counts[s])
        self.main_count = suit_counts[self.main_suit]
        self.is_flush = bool(self.all_tiles) and self.main_count == len(self.all_tiles)

        self.pairs = sum(1 for c in self.hand_counts if c >= 2)
        self.pair_tiles = [Tile.from_index(i) for i, c in enumerate(self.hand_counts) if c == 2]
        self.pung_melds = sum(1 for m in self.melds if m.is_pung)
        self.trips = sum(1 for c in self.hand_counts if c >= 3) + self.pung_melds

    def add(self, key: str, probability: float, missing: Sequence[Tile] = ()) -> None:
        base = SICHUAN_PATTERNS[key].fan
        fan = base + self.roots
        if self.fan_cap is not None:
            fan = min(fan, self.fan_cap)
        breakdown = [f"{pattern_name(key, self.locale)} ({base})"]
        if self.roots:
            breakdown.append(text(self.locale, "root_bonus",
                                  root=text(self.locale, "root"), count=self.roots))
        self.suggestions.append(FanSuggestion(
            key=key,
            name=pattern_name(key, self.locale, self.roots),
            base_fan=base,
            fan=fan,
            probability=probability,
            missing_tiles=list(missing)[:4],
            breakdown=breakdown,
            multiplier=sichuan_multiplier(fan),
        ))

    def flush(self):
        if self.is_flush:
            if self.pairs >= 5 and not self.melds:
                self.add("qing_qi_dui", 80)
            elif self.trips >= 3:
                self.add("qing_dui", 85)
            else:
                self.add("qing_yi_se", 90)
            return

        others = len(self.all_tiles) - self.main_count
        if self.all_tiles and (self.main_count >= 8 or others <= 4):
            # Tiles to trade away, shown so the player knows what to drop
            off_suit = [Tile.from_index(t.tile_index) for t in self.all_tiles
                        if t.suit != self.main_suit]
            self.add("qing_yi_se", min(90, self.main_count * 7), off_suit)

    def seven_pairs(self):
        if self.melds:
            return
        singles = [Tile.from_index(i) for i, c in enumerate(self.hand_counts) if c == 1]
        needed = 7 - self.pairs
        if self.pairs >= 3 and len(singles) >= needed:
            base = 90 if self.pairs >= 6 else 75 if self.pairs >= 5 else 55 if self.pairs >= 4 else 35
            self.add("qi_dui", max(10, base - needed * 8), singles[:min(needed, 4)])

    def all_pungs(self):
        if self.trips < 2 and self.pairs < 4:
            return
        needed = max(0, 4 - self.trips)
        probability = 80 if self.trips >= 3 else 60 if self.trips >= 2 else 40
        missing = self.pair_tiles[:min(needed, 4)]
        if self.is_flush or self.main_count >= 10:
            self.add("qing_dui", probability, missing)
        else:
            self.add("dui_dui_hu", probability, missing)

    def golden_hook(self):
        if self.pung_melds < 3:
            return
        key = "qing_jin_gou" if self.is_flush else "jin_gou_diao"
        if self.pung_melds >= 4:
            self.add(key, 85)
        else:
            self.add(key, 50, self.pair_tiles[:1])

    def basic_win(self):
        all_runs = all(m.meld_type == MeldType.RUN for m in self.melds)
        if (not self.is_flush and self.pairs < 4 and all_runs) or not self.suggestions:
            self.add("ping_hu", 95)

    def build(self) -> List[FanSuggestion]:
        self.flush()
        self.seven_pairs()
        self.all_pungs()
        self.golden_hook()
        self.basic_win()
        return rank_suggestions(self.suggestions)


def analyze_sichuan(
    hand: Sequence[Tile],
    melds: Sequence[Meld] = (),
    void_suit: Optional[TileSuit] = None,
    locale: Locale = Locale.EN,
    fan_cap: Optional[int] = None,
) -> List[FanSuggestion]:
    """
    Ranked Sichuan suggestions for a partial hand.

    Returns exactly one illegal suggestion when the void suit is still held.
    """
    tiles = list(hand) + meld_tiles(melds)
    if holds_void_suit(tiles, void_suit):
        logger.debug(f"void suit {TileSuit(void_suit).name} still held")
        return [illegal_suggestion(locale)]

    suggestions = SichuanSuggestionBuilder(hand, melds, locale, fan_cap).build()
    logger.debug(f"Sichuan suggestions: {[s.key for s in suggestions]}")
    return suggestions

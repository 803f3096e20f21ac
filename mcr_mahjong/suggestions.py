"""
MCR Fan Suggestions

Estimates which patterns a partial hand could still reach. Each heuristic
counts the tiles a pattern is missing and turns that into a probability that
falls as more tiles are missing. The projected fan of a suggestion adds the
patterns already recognised on the hand, minus the ones the main pattern
folds in.
"""

import logging
from itertools import permutations
from typing import List, Optional, Sequence, Tuple

from mahjong_core.tiles import Tile, HONOR_START, count_tiles, index_is_orphan
from mahjong_core.melds import Meld, MeldType
from mahjong_core.locale import Locale, text, is_chinese
from mahjong_core.suggestion import FanSuggestion, rank_suggestions

from .patterns import PATTERNS, pattern_name
from .scoring import PatternMatch, calculate_total_fan, recognize_mcr_patterns

logger = logging.getLogger(__name__)


# Suggestions that read the same tiles two ways; only the best of each survives
EXCLUSIVE_GROUPS = (
    ("quadruple_chow", "pure_triple_chow"),
    ("four_pure_shifted_pungs", "pure_shifted_pungs"),
    ("pure_triple_chow", "pure_shifted_pungs"),
    ("quadruple_chow", "four_pure_shifted_pungs"),
    ("mixed_triple_chow", "mixed_shifted_pungs"),
)

# Representative tiles offered for a missing type in All Types
_TYPE_REPRESENTATIVES = (4, 13, 22, 27, 31)   # 5m, 5p, 5s, East, White

SUITS = (0, 1, 2)


def _kind(suit: int, rank: int) -> int:
    return suit * 9 + rank - 1


class MCRSuggestionBuilder:
    """
    Collects suggestions for one hand.

    `all_counts` covers hand and meld tiles; `hand_counts` only the concealed
    hand, which is where missing tiles are looked up.
    """

    def __init__(
        self,
        hand: Sequence[Tile],
        melds: Sequence[Meld] = (),
        locale: Locale = Locale.EN,
        max_missing: int = 4,
    ):
        self.hand = list(hand)
        self.melds = list(melds)
        self.locale = Locale(locale)
        self.max_missing = max_missing
        self.hand_counts = [int(c) for c in count_tiles(self.hand)]
        meld_tiles = [t for m in self.melds for t in m.tiles]
        self.all_counts = [int(c) for c in count_tiles(self.hand + meld_tiles)]
        self.total_tiles = sum(self.all_counts)
        self.suggestions: List[FanSuggestion] = []
        self._recognized: Optional[List[PatternMatch]] = None

    # ========== Helpers ==========

    def text(self, key: str, **kwargs) -> str:
        return text(self.locale, key, **kwargs)

    def name(self, key: str) -> str:
        return pattern_name(key, chinese=is_chinese(self.locale))

    @property
    def recognized(self) -> List[PatternMatch]:
        if self._recognized is None:
            self._recognized = recognize_mcr_patterns(self.hand, self.melds)
        return self._recognized

    def extras(self, related: Sequence[str]) -> Tuple[int, List[str]]:
        """Fan and breakdown of recognised patterns outside `related`."""
        skipped = set(related) | {"chicken_hand"}
        kept = [m for m in self.recognized if m.key not in skipped]
        total = calculate_total_fan(kept)
        details = [f"{self.name(m.key)} ({m.fan})" for m in total.counted]
        return total.total, details

    def seq_cost(self, suit: int, start: int) -> int:
        """Tiles of a chow missing from hand and melds combined"""
        return sum(1 for r in range(start, start + 3) if not self.all_counts[_kind(suit, r)])

    def seq_missing(self, suit: int, start: int) -> List[Tile]:
        """Tiles of a chow missing from the concealed hand"""
        return [Tile.from_index(_kind(suit, r)) for r in range(start, start + 3)
                if not self.hand_counts[_kind(suit, r)]]

    def suit_count(self, suit: int) -> int:
        return sum(self.all_counts[suit * 9:suit * 9 + 9])

    def add(
        self,
        key: str,
        probability: float,
        missing: Sequence[Tile] = (),
        notes: Sequence[str] = (),
        related: Optional[Sequence[str]] = None,
        with_extras: bool = True,
        name: Optional[str] = None,
        base_fan: Optional[int] = None,
    ) -> None:
        base = PATTERNS[key].points if base_fan is None else base_fan
        label = name or self.name(key)
        extra_fan, extra_details = 0, []
        if with_extras:
            extra_fan, extra_details = self.extras(related if related is not None else (key,))
        self.suggestions.append(FanSuggestion(
            key=key,
            name=label,
            base_fan=base,
            fan=base + extra_fan,
            probability=probability,
            missing_tiles=list(missing)[:self.max_missing],
            breakdown=[f"{label} ({base})", *notes, *extra_details],
        ))

    # ========== 48 Points ==========

    def quadruple_chow(self):
        related = ("quadruple_chow", "pure_triple_chow", "pure_double_chow", "tile_hog")
        for suit in SUITS:
            for start in range(1, 8):
                have = [self.all_counts[_kind(suit, start + k)] for k in range(3)]
                if min(have) >= 4:
                    self.add("quadruple_chow", 95, related=related)
                elif min(have) >= 3:
                    missing = [Tile.from_index(_kind(suit, start + k))
                               for k in range(3) if have[k] < 4]
                    self.add("quadruple_chow", 70, missing[:3], related=related)

    def four_pure_shifted_pungs(self):
        related = ("four_pure_shifted_pungs", "pure_shifted_pungs", "all_pungs")
        for suit in SUITS:
            for start in range(1, 7):
                have = [self.all_counts[_kind(suit, start + k)] for k in range(4)]
                if min(have) >= 3:
                    self.add("four_pure_shifted_pungs", 95, related=related)
                elif min(have) >= 2:
                    missing = [Tile.from_index(_kind(suit, start + k))
                               for k in range(4) if have[k] < 3]
                    self.add("four_pure_shifted_pungs", max(40, 80 - len(missing) * 10),
                             missing, related=related)

    # ========== 24 / 16 Points ==========

    def pure_triple_chow(self):
        for suit in SUITS:
            for start in range(1, 8):
                have = [self.all_counts[_kind(suit, start + k)] for k in range(3)]
                if min(have) >= 3:
                    self.add("pure_triple_chow", 90)
                elif min(have) >= 2 and self.seq_cost(suit, start) == 0:
                    missing = [Tile.from_index(_kind(suit, start + k))
                               for k in range(3) if have[k] < 3]
                    self.add("pure_triple_chow", 70, missing)

    def pure_shifted_pungs(self):
        for suit in SUITS:
            for start in range(1, 8):
                have = [self.all_counts[_kind(suit, start + k)] for k in range(3)]
                if min(have) >= 3:
                    self.add("pure_shifted_pungs", 90)
                elif min(have) >= 2:
                    missing = [Tile.from_index(_kind(suit, start + k))
                               for k in range(3) if have[k] < 3]
                    self.add("pure_shifted_pungs", max(40, 80 - len(missing) * 15), missing)

    def pure_shifted_chows(self):
        for suit in SUITS:
            for step, last_start in ((1, 5), (2, 3)):
                for start in range(1, last_start + 1):
                    starts = [start + k * step for k in range(3)]
                    total = sum(self.seq_cost(suit, s) for s in starts)
                    if total <= 4:
                        missing = [t for s in starts for t in self.seq_missing(suit, s)]
                        self.add("pure_shifted_chows", max(20, 80 - total * 15), missing)

    def triple_pung(self):
        for rank in range(1, 10):
            have = [self.all_counts[_kind(suit, rank)] for suit in SUITS]
            if min(have) >= 3:
                self.add("triple_pung", 90)
            elif min(have) >= 2:
                missing = [Tile.from_index(_kind(suit, rank)) for suit in SUITS if have[suit] < 3]
                self.add("triple_pung", max(30, 75 - len(missing) * 15), missing)

    def pure_straight(self):
        for suit in SUITS:
            total = sum(self.seq_cost(suit, start) for start in (1, 4, 7))
            if total <= 5:
                missing = [t for start in (1, 4, 7) for t in self.seq_missing(suit, start)]
                self.add("pure_straight", 80 - total * 10, missing, with_extras=False)

    # ========== 8 / 6 Points ==========

    def mixed_straight(self):
        for order in permutations(SUITS):
            chows = list(zip(order, (1, 4, 7)))
            total = sum(self.seq_cost(suit, start) for suit, start in chows)
            if total <= 5:
                missing = [t for suit, start in chows for t in self.seq_missing(suit, start)]
                self.add("mixed_straight", max(15, 75 - total * 12), missing)

    def mixed_triple_chow(self):
        for start in range(1, 8):
            total = sum(self.seq_cost(suit, start) for suit in SUITS)
            if total <= 5:
                missing = [t for suit in SUITS for t in self.seq_missing(suit, start)]
                self.add("mixed_triple_chow", max(10, 80 - total * 15), missing)

    def mixed_shifted_pungs(self):
        for start in range(1, 8):
            for order in permutations(SUITS):
                kinds = [_kind(suit, start + k) for k, suit in enumerate(order)]
                have = [self.all_counts[i] for i in kinds]
                if min(have) >= 3:
                    self.add("mixed_shifted_pungs", 90)
                    break
                if min(have) >= 2:
                    missing = [Tile.from_index(i) for i in kinds if self.all_counts[i] < 3]
                    self.add("mixed_shifted_pungs", max(30, 70 - len(missing) * 15), missing)

    def mixed_shifted_chows(self):
        for start in range(1, 6):
            for order in permutations(SUITS):
                chows = [(suit, start + k) for k, suit in enumerate(order)]
                total = sum(self.seq_cost(suit, s) for suit, s in chows)
                if total <= 4:
                    missing = [t for suit, s in chows for t in self.seq_missing(suit, s)]
                    self.add("mixed_shifted_chows", max(10, 75 - total * 15), missing)

    def all_types(self):
        present = [
            self.suit_count(0) > 0,
            self.suit_count(1) > 0,
            self.suit_count(2) > 0,
            any(self.all_counts[i] for i in range(27, 31)),
            any(self.all_counts[i] for i in range(31, 34)),
        ]
        gates = sum(present)

        # Rough distance: melds, hand triplets and hand chows against four groups
        groups = len(self.melds)
        groups += sum(1 for c in self.hand_counts if c >= 3)
        for suit in SUITS:
            for start in range(1, 8):
                if all(self.hand_counts[_kind(suit, start + k)] for k in range(3)):
                    groups += 1
        estimate = max(0, 4 - min(4, groups))

        if gates == 5 and estimate <= 2:
            self.add("all_types", max(20, 70 - estimate * 20),
                     notes=[self.text("shanten_estimate", shanten=estimate)])
        elif gates == 4 and estimate <= 1:
            missing = [Tile.from_index(rep) for rep, ok in zip(_TYPE_REPRESENTATIVES, present)
                       if not ok]
            self.add("all_types", max(15, 50 - estimate * 15), missing,
                     notes=[self.text("missing_types", count=len(missing), shanten=estimate)])

    # ========== Flushes ==========

    def flushes(self):
        max_suit_count = max(self.suit_count(suit) for suit in SUITS)
        honors = sum(self.all_counts[HONOR_START:])
        others = self.total_tiles - max_suit_count - honors

        if max_suit_count >= 8 and others + honors <= 4:
            to_discard = others + honors
            if to_discard == 0:
                self.add("full_flush", 95, notes=[self.text("achieved")], with_extras=False)
            else:
                probability = min(90, max_suit_count * 7 - to_discard * 10)
                self.add("full_flush", max(20, probability),
                         notes=[self.text("discard_other_suits", count=to_discard)],
                         with_extras=False)

        if max_suit_count >= 7 and honors >= 1 and others <= 4:
            if others == 0:
                self.add("half_flush", 90, notes=[self.text("achieved")])
            else:
                probability = min(85, (max_suit_count + honors) * 5)
                self.add("half_flush", max(20, probability),
                         notes=[self.text("discard_other_suits", count=others)])

    # ========== Small patterns ==========

    def small_patterns(self):
        for suit in SUITS:
            for start in range(1, 8):
                if min(self.all_counts[_kind(suit, start + k)] for k in range(3)) >= 2:
                    self.add("pure_double_chow", 95, with_extras=False)

            for start in range(1, 5):
                if all(self.all_counts[_kind(suit, start + k)] for k in range(6)):
                    self.add("short_straight", 95, with_extras=False)

            if self.seq_cost(suit, 1) == 0 and self.seq_cost(suit, 7) == 0:
                self.add("two_terminal_chows", 95, with_extras=False)

        if self.total_tiles < 10:
            return

        orphans = sum(c for i, c in enumerate(self.all_counts) if index_is_orphan(i))
        if orphans == 0:
            self.add("all_simples", 90, notes=[self.text("achieved")], with_extras=False)
        elif orphans <= 3:
            self.add("all_simples", max(20, 70 - orphans * 15),
                     notes=[self.text("discard_terminals", count=orphans)], with_extras=False)

        if not any(self.all_counts[HONOR_START:]):
            self.add("no_honors", 95, notes=[self.text("achieved")], with_extras=False)

        if sum(1 for suit in SUITS if self.suit_count(suit)) == 2:
            self.add("one_voided_suit", 95, notes=[self.text("achieved")], with_extras=False)

    # ========== Whole-hand shapes ==========

    def seven_pairs(self):
        if self.melds:
            return
        pairs = sum(1 for c in self.all_counts if c >= 2)
        singles = [Tile.from_index(i) for i, c in enumerate(self.all_counts) if c == 1]
        needed = 7 - pairs
        if pairs >= 3 and len(singles) >= needed:
            base = 90 if pairs >= 6 else 75 if pairs >= 5 else 55 if pairs >= 4 else 35
            self.add("seven_pairs", max(10, base - needed * 8), singles[:min(needed, 4)],
                     notes=[self.text("pairs_progress", pairs=pairs, needed=needed)],
                     with_extras=False)

    def _exposed_pungs(self) -> int:
        return sum(1 for m in self.melds if m.is_pung and not m.is_concealed)

    def _concealed_trips(self) -> int:
        concealed_kongs = sum(1 for m in self.melds if m.meld_type == MeldType.KONG and m.is_concealed)
        return sum(1 for c in self.hand_counts if c >= 3) + concealed_kongs

    def four_concealed_pungs(self) -> bool:
        """Returns True when the hand already holds four concealed pungs"""
        related = ("four_concealed_pungs", "all_pungs", "concealed_hand",
                   "fully_concealed_hand", "three_concealed_pungs", "two_concealed_pungs")
        if self._exposed_pungs():
            return False
        trips = self._concealed_trips()
        if trips >= 4:
            self.add("four_concealed_pungs", 95, related=related,
                     notes=[self.text("concealed_pungs_progress", count=trips)])
            return True
        if trips == 3:
            pair_tiles = [Tile.from_index(i) for i, c in enumerate(self.hand_counts) if c == 2]
            if pair_tiles:
                self.add("four_concealed_pungs", 60, pair_tiles[:1], related=related,
                         notes=[self.text("concealed_pungs_one_short", count=trips)])
        return False

    def all_pungs(self, has_four_concealed: bool):
        if has_four_concealed:
            return
        trips = sum(1 for c in self.hand_counts if c >= 3)
        trips += sum(1 for m in self.melds if m.is_pung)
        pair_tiles = [Tile.from_index(i) for i, c in enumerate(self.hand_counts) if c == 2]
        if trips >= 2 or len(pair_tiles) >= 4:
            needed = max(0, 4 - trips)
            base = 80 if trips >= 3 else 55 if trips >= 2 else 35
            self.add("all_pungs", base, pair_tiles[:min(needed, 4)],
                     notes=[self.text("pungs_progress", count=trips, needed=needed)])

    def last_tile(self, wall_count: Optional[int], window: int = 4):
        if wall_count is None or not 0 < wall_count <= window:
            return
        if len(self.hand) not in (13, 14):
            return
        if wall_count == 1:
            label, probability = self.text("last_tile_draw_claim"), 90
        else:
            label, probability = self.text("last_tile_chance"), max(10, 60 - (wall_count - 1) * 15)
        draw, claim = self.name("last_tile_draw"), self.name("last_tile_claim")
        self.suggestions.append(FanSuggestion(
            key="last_tile_draw",
            name=label,
            base_fan=8,
            fan=8,
            probability=probability,
            breakdown=[f"{draw} / {claim} (8)",
                       self.text("wall_left", count=wall_count),
                       self.text("last_tile_hint")],
        ))

    def build(self, wall_count: Optional[int] = None, last_tile_window: int = 4) -> List[FanSuggestion]:
        self.quadruple_chow()
        self.four_pure_shifted_pungs()
        self.pure_triple_chow()
        self.pure_shifted_pungs()
        self.pure_shifted_chows()
        self.triple_pung()
        self.mixed_straight()
        self.mixed_triple_chow()
        self.mixed_shifted_pungs()
        self.mixed_shifted_chows()
        self.all_types()
        self.pure_straight()
        self.flushes()
        self.small_patterns()
        self.seven_pairs()
        has_four_concealed = self.four_concealed_pungs()
        self.all_pungs(has_four_concealed)
        self.last_tile(wall_count, last_tile_window)

        ranked = rank_suggestions(self.suggestions, EXCLUSIVE_GROUPS)
        logger.debug(f"MCR suggestions: {len(self.suggestions)} raw, {len(ranked)} ranked")
        return ranked


def analyze_mcr(
    hand: Sequence[Tile],
    melds: Sequence[Meld] = (),
    locale: Locale = Locale.EN,
    wall_count: Optional[int] = None,
    max_missing: int = 4,
    last_tile_window: int = 4,
) -> List[FanSuggestion]:
    """
    Ranked MCR fan suggestions for a partial hand.

    Args:
        hand: Concealed tiles
        melds: Declared melds
        locale: Display language for names and notes
        wall_count: Tiles left in the wall; enables the last-tile hint
        max_missing: Display cap on missing tiles per suggestion

    Returns:
        Suggestions ordered by fan, then probability
    """
    builder = MCRSuggestionBuilder(hand, melds, locale, max_missing)
    return builder.build(wall_count, last_tile_window)

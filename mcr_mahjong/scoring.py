"""
MCR Mahjong Scoring System

Implements all 81 scoring patterns according to Chinese Official Mahjong rules (MCR).
Patterns are organized by point value from 88 down to 1.

MCR uses an exclusion principle where higher-scoring patterns exclude
patterns they imply (e.g., Big Four Winds excludes All Pungs). A pattern's
`includes` list re-admits patterns that another match excluded.

A complete hand is scored under every exact reading (each pair + groups
decomposition, seven pairs, thirteen orphans, knitted shapes) and the best
reading wins. A partial hand is read with as many complete groups as
possible, so composition patterns such as flushes are still recognised.
"""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from functools import lru_cache
from itertools import permutations
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
import numpy as np

from mahjong_core.tiles import (
    Tile, NUM_TILE_TYPES, HONOR_START, GREEN_INDICES, REVERSIBLE_INDICES,
    can_start_run, count_tiles, index_is_honor, index_is_orphan,
    index_is_terminal, rank_of, removed,
)
from mahjong_core.melds import Meld, MeldType, meld_tiles
from mahjong_core.winning import find_decompositions, is_seven_pairs, is_thirteen_orphans

from .patterns import PATTERNS, MIN_POINTS_TO_WIN, ScoringPattern

logger = logging.getLogger(__name__)


# Hand readings
STANDARD = "standard"
SEVEN_PAIRS = "seven_pairs"
THIRTEEN_ORPHANS = "thirteen_orphans"
HONORS_KNITTED = "honors_knitted"
KNITTED_STRAIGHT = "knitted_straight"
PARTIAL = "partial"

# 147 / 258 / 369 spread over the three suits, in every suit order
KNITTED_SETS = tuple(
    frozenset(suit * 9 + rank - 1
              for suit, first in zip(order, (1, 2, 3))
              for rank in (first, first + 3, first + 6))
    for order in permutations(range(3))
)


@dataclass(frozen=True)
class HandSet:
    """One group of a hand reading"""
    kind: str          # 'chow', 'pung' or 'kong'
    index: int         # Lowest tile of a chow, repeated tile otherwise
    concealed: bool

    @property
    def is_pung(self) -> bool:
        """Pung or kong"""
        return self.kind != 'chow'

    @property
    def indices(self) -> Tuple[int, ...]:
        if self.kind == 'chow':
            return (self.index, self.index + 1, self.index + 2)
        return (self.index,) * (4 if self.kind == 'kong' else 3)

    @property
    def suit(self) -> int:
        return self.index // 9

    @property
    def rank(self) -> int:
        return rank_of(self.index)


def _meld_set(meld: Meld) -> HandSet:
    if meld.meld_type == MeldType.RUN:
        return HandSet('chow', meld.base_index, False)
    if meld.meld_type == MeldType.TRIPLET:
        return HandSet('pung', meld.base_index, False)
    return HandSet('kong', meld.base_index, meld.is_concealed)


@dataclass
class ScoringContext:
    """One reading of a hand plus the win context needed for scoring"""
    hand: List[Tile]               # Concealed tiles (including the winning tile)
    melds: List[Meld]              # Declared melds
    sets: List[HandSet] = field(default_factory=list)
    pair: Optional[int] = None     # Tile index of the pair
    shape: str = PARTIAL
    # Win context; None/False means unknown, and dependent patterns never match
    winning_tile: Optional[Tile] = None
    is_zimo: Optional[bool] = None
    round_wind: Optional[int] = None   # 0=E, 1=S, 2=W, 3=N
    seat_wind: Optional[int] = None
    is_last_tile: bool = False
    is_kong_draw: bool = False
    is_robbing_kong: bool = False
    is_last_of_kind: bool = False
    flower_count: int = 0

    # Computed fields (set in __post_init__)
    all_tiles: List[Tile] = field(default_factory=list)
    counts: np.ndarray = field(default_factory=lambda: np.zeros(NUM_TILE_TYPES, dtype=np.int8))
    present: List[int] = field(default_factory=list)

    def __post_init__(self):
        self.all_tiles = list(self.hand) + meld_tiles(self.melds)
        self.counts = count_tiles(self.all_tiles)
        self.present = [i for i in range(NUM_TILE_TYPES) if self.counts[i] > 0]

    @property
    def is_complete(self) -> bool:
        return self.shape != PARTIAL

    @property
    def has_four_sets(self) -> bool:
        """Standard complete reading: four groups and a pair"""
        return self.shape == STANDARD and len(self.sets) == 4 and self.pair is not None

    @property
    def has_exposed_melds(self) -> bool:
        return any(not m.is_concealed for m in self.melds)

    @property
    def winning_index(self) -> Optional[int]:
        return self.winning_tile.tile_index if self.winning_tile is not None else None

    @property
    def chows(self) -> List[HandSet]:
        return [s for s in self.sets if s.kind == 'chow']

    @property
    def pungs(self) -> List[HandSet]:
        return [s for s in self.sets if s.is_pung]

    @property
    def kongs(self) -> List[HandSet]:
        return [s for s in self.sets if s.kind == 'kong']

    @property
    def wind_pungs(self) -> List[int]:
        return [s.index - HONOR_START for s in self.pungs if 27 <= s.index <= 30]

    @property
    def dragon_pungs(self) -> List[int]:
        return [s.index - 31 for s in self.pungs if s.index >= 31]

    @property
    def numbered_suits(self) -> set:
        return {i // 9 for i in self.present if i < HONOR_START}

    @property
    def has_honors(self) -> bool:
        return any(index_is_honor(i) for i in self.present)

    def all_present(self, predicate) -> bool:
        """predicate holds for every tile kind in the hand (False for an empty hand)"""
        return bool(self.present) and all(predicate(i) for i in self.present)

    def chow_starts(self, suit: int) -> List[int]:
        return sorted(s.rank for s in self.chows if s.suit == suit)

    def pung_ranks(self, suit: int) -> List[int]:
        return sorted(s.rank for s in self.pungs if s.index < HONOR_START and s.suit == suit)

    @property
    def concealed_pung_count(self) -> int:
        """
        Concealed pungs and kongs. A hand pung completed by a claimed discard
        counts as exposed when the winning tile fits nowhere else.
        """
        count = sum(1 for s in self.pungs if s.concealed)
        win = self.winning_index
        if self.is_zimo is False and win is not None:
            claimed = any(s.kind == 'pung' and s.concealed and s.index == win for s in self.sets)
            elsewhere = self.pair == win or any(
                s.kind == 'chow' and s.concealed and win in s.indices for s in self.sets)
            if claimed and not elsewhere:
                count -= 1
        return count


@dataclass(frozen=True)
class PatternMatch:
    """A recognised pattern and how many times it applies"""
    key: str
    name: str
    chinese_name: str
    points: int
    count: int = 1

    @property
    def fan(self) -> int:
        return self.points * self.count

    @classmethod
    def of(cls, pattern: ScoringPattern, count: int = 1) -> 'PatternMatch':
        return cls(pattern.key, pattern.name, pattern.chinese_name, pattern.points, count)


@dataclass
class FanTotal:
    """Result of applying the exclusion principle"""
    total: int
    counted: List[PatternMatch]
    excluded: List[str] = field(default_factory=list)


@dataclass
class MCRScore:
    """Score of a hand: counted patterns and the minimum-fan gate"""
    total_fan: int
    breakdown: List[PatternMatch]
    patterns: List[PatternMatch]      # Everything recognised, before exclusion
    meets_minimum: bool
    is_complete: bool = False
    shape: str = PARTIAL


# ========== Hand readings ==========

def _is_honors_and_knitted(counts: Sequence[int]) -> bool:
    """Fourteen distinct tiles: honors plus numbered tiles of one knitted set"""
    if sum(counts) != 14 or any(c > 1 for c in counts):
        return False
    numbered = {i for i in range(HONOR_START) if counts[i]}
    return any(numbered <= knitted for knitted in KNITTED_SETS)


def _knitted_straight_readings(counts: List[int], num_melds: int):
    """(sets, pair) readings with a full knitted straight standing in for three groups"""
    readings = []
    if num_melds > 1:
        return readings
    for knitted in KNITTED_SETS:
        if any(counts[i] == 0 for i in knitted):
            continue
        with removed(counts, *knitted):
            for decomposition in find_decompositions(counts, num_melds + 3):
                sets = [HandSet('pung' if kind == MeldType.TRIPLET else 'chow', index, True)
                        for kind, index in decomposition.groups]
                readings.append((sets, decomposition.pair))
    return readings


@lru_cache(maxsize=4096)
def _max_groups(counts: Tuple[int, ...]) -> Tuple[Tuple[str, int], ...]:
    """Largest set of complete groups extractable from a partial hand"""
    first = next((i for i, c in enumerate(counts) if c), -1)
    if first == -1:
        return ()

    scratch = list(counts)
    best: Tuple[Tuple[str, int], ...] = ()

    def consider(group, *indices):
        nonlocal best
        with removed(scratch, *indices):
            rest = _max_groups(tuple(scratch))
        candidate = ((group,) if group else ()) + rest
        if len(candidate) > len(best):
            best = candidate

    if counts[first] >= 3:
        consider(('pung', first), first, first, first)
    if can_start_run(first) and counts[first + 1] and counts[first + 2]:
        consider(('chow', first), first, first + 1, first + 2)
    consider(None, first)
    return best


def _partial_reading(counts: List[int]) -> Tuple[List[HandSet], Optional[int]]:
    groups = _max_groups(tuple(counts))
    scratch = list(counts)
    sets = []
    for kind, index in groups:
        hand_set = HandSet(kind, index, True)
        sets.append(hand_set)
        for i in hand_set.indices:
            scratch[i] -= 1
    pair = next((i for i, c in enumerate(scratch) if c >= 2), None)
    return sets, pair


def build_contexts(
    hand: Sequence[Tile],
    melds: Sequence[Meld] = (),
    **context,
) -> List[ScoringContext]:
    """
    Every reading of the hand worth scoring.

    Complete hands yield one context per exact reading; anything else yields
    a single PARTIAL context.
    """
    hand = list(hand)
    melds = list(melds)
    counts = [int(c) for c in count_tiles(hand)]
    meld_sets = [_meld_set(m) for m in melds]

    contexts = []

    def add(shape: str, sets: List[HandSet], pair: Optional[int]) -> None:
        contexts.append(ScoringContext(hand, melds, meld_sets + sets, pair, shape, **context))

    for decomposition in find_decompositions(counts, len(melds)):
        sets = [HandSet('pung' if kind == MeldType.TRIPLET else 'chow', index, True)
                for kind, index in decomposition.groups]
        add(STANDARD, sets, decomposition.pair)

    if not melds and sum(counts) == 14:
        if is_seven_pairs(counts):
            add(SEVEN_PAIRS, [], None)
        if is_thirteen_orphans(counts):
            add(THIRTEEN_ORPHANS, [], None)
        if _is_honors_and_knitted(counts):
            add(HONORS_KNITTED, [], None)

    for sets, pair in _knitted_straight_readings(counts, len(melds)):
        add(KNITTED_STRAIGHT, sets, pair)

    if not contexts:
        sets, pair = _partial_reading(counts)
        add(PARTIAL, sets, pair)
    return contexts


# ========== Exclusion principle ==========

def calculate_total_fan(
    matches: Sequence[PatternMatch],
    patterns: Mapping[str, ScoringPattern] = PATTERNS,
) -> FanTotal:
    """
    Apply exclusions, then re-admit excluded patterns that a surviving
    pattern includes.
    """
    ordered = sorted(matches, key=lambda m: m.points, reverse=True)

    excluded = set()
    for match in ordered:
        excluded.update(patterns[match.key].excludes)

    survivors = [m for m in ordered if m.key not in excluded]
    included = set()
    for match in survivors:
        included.update(patterns[match.key].includes)

    counted = [m for m in ordered if m.key not in excluded or m.key in included]
    total = sum(m.fan for m in counted)
    return FanTotal(total, counted, sorted(excluded & {m.key for m in ordered}))


# ========== Scorer ==========

class MCRScorer:
    """
    MCR Mahjong Scorer

    Holds one `_check_<key>` method per registered pattern, each returning how
    many times the pattern applies to a reading (0 = no match).
    """

    def __init__(self, patterns: Mapping[str, ScoringPattern] = PATTERNS):
        self.patterns = patterns
        self._checks = {}
        missing = []
        for key in patterns:
            check = getattr(self, f"_check_{key}", None)
            if check is None:
                missing.append(key)
            else:
                self._checks[key] = check
        if missing:
            raise ValueError(f"No check method for patterns: {', '.join(missing)}")

    def match(self, ctx: ScoringContext) -> List[PatternMatch]:
        """All patterns a reading satisfies, before exclusion"""
        matches = []
        for key, pattern in self.patterns.items():
            count = int(self._checks[key](ctx))
            if count > 0:
                matches.append(PatternMatch.of(pattern, count))

        # Chicken hand: complete with nothing else but flowers
        if ctx.is_complete and all(m.key == "flower_tiles" for m in matches):
            matches.append(PatternMatch.of(self.patterns["chicken_hand"]))
        return matches

    def evaluate(
        self,
        hand: Sequence[Tile],
        melds: Sequence[Meld] = (),
        **context,
    ) -> Tuple[ScoringContext, List[PatternMatch], FanTotal]:
        """Best-scoring reading of a hand with its matches and total"""
        best = None
        for ctx in build_contexts(hand, melds, **context):
            matches = self.match(ctx)
            total = calculate_total_fan(matches, self.patterns)
            logger.debug(f"{ctx.shape} reading: {total.total} points "
                         f"({', '.join(m.key for m in total.counted)})")
            if best is None or total.total > best[2].total:
                best = (ctx, matches, total)
        return best

    # ========== Pattern Check Functions ==========

    # --- 88 Points ---
    def _check_big_four_winds(self, ctx: ScoringContext) -> int:
        """Pungs/Kongs of all four winds"""
        return int(len(ctx.wind_pungs) == 4)

    def _check_big_three_dragons(self, ctx: ScoringContext) -> int:
        """Pungs/Kongs of all three dragons"""
        return int(len(ctx.dragon_pungs) == 3)

    def _check_all_green(self, ctx: ScoringContext) -> int:
        """All tiles are green (2,3,4,6,8 bamboo + green dragon)"""
        return int(ctx.all_present(lambda i: i in GREEN_INDICES))

    def _check_nine_gates(self, ctx: ScoringContext) -> int:
        """1112345678999 + any same suit, concealed"""
        if ctx.melds or not ctx.is_complete:
            return 0
        if ctx.has_honors or len(ctx.numbered_suits) != 1:
            return 0
        base = next(iter(ctx.numbered_suits)) * 9
        required = (3, 1, 1, 1, 1, 1, 1, 1, 3)
        return int(all(ctx.counts[base + k] >= need for k, need in enumerate(required)))

    def _check_four_kongs(self, ctx: ScoringContext) -> int:
        return int(len(ctx.kongs) == 4)

    def _check_seven_shifted_pairs(self, ctx: ScoringContext) -> int:
        """Seven consecutive pairs in same suit"""
        if ctx.shape != SEVEN_PAIRS:
            return 0
        for suit in range(3):
            for start in range(3):
                base = suit * 9 + start
                if all(ctx.counts[base + k] == 2 for k in range(7)):
                    return 1
        return 0

    def _check_thirteen_orphans(self, ctx: ScoringContext) -> int:
        return int(ctx.shape == THIRTEEN_ORPHANS)

    # --- 64 Points ---
    def _check_all_terminals(self, ctx: ScoringContext) -> int:
        """All tiles are terminals (1 or 9)"""
        return int(ctx.all_present(index_is_terminal))

    def _check_little_four_winds(self, ctx: ScoringContext) -> int:
        """Three wind pungs + wind pair"""
        pair_is_wind = ctx.pair is not None and 27 <= ctx.pair <= 30
        return int(len(ctx.wind_pungs) == 3 and pair_is_wind)

    def _check_little_three_dragons(self, ctx: ScoringContext) -> int:
        """Two dragon pungs + dragon pair"""
        pair_is_dragon = ctx.pair is not None and ctx.pair >= 31
        return int(len(ctx.dragon_pungs) == 2 and pair_is_dragon)

    def _check_all_honors(self, ctx: ScoringContext) -> int:
        return int(ctx.all_present(index_is_honor))

    def _check_four_concealed_pungs(self, ctx: ScoringContext) -> int:
        return int(ctx.concealed_pung_count >= 4)

    def _check_pure_terminal_chows(self, ctx: ScoringContext) -> int:
        """123+789 twice in same suit + 5 pair of that suit"""
        if not ctx.has_four_sets or rank_of(ctx.pair) != 5:
            return 0
        suit = ctx.pair // 9
        return int(ctx.chow_starts(suit) == [1, 1, 7, 7])

    # --- 48 Points ---
    def _check_quadruple_chow(self, ctx: ScoringContext) -> int:
        """Four identical chows"""
        return int(any(c >= 4 for c in Counter(s.index for s in ctx.chows).values()))

    def _check_four_pure_shifted_pungs(self, ctx: ScoringContext) -> int:
        """Four pungs in sequence in same suit (e.g., 2222-3333-4444-5555)"""
        return int(any(_shifted(ctx.pung_ranks(suit), 4, 1) for suit in range(3)))

    # --- 32 Points ---
    def _check_four_shifted_chows(self, ctx: ScoringContext) -> int:
        """Four chows in sequence (by 1 or 2) in same suit"""
        return int(any(
            _shifted(ctx.chow_starts(suit), 4, step)
            for suit in range(3) for step in (1, 2)
        ))

    def _check_three_kongs(self, ctx: ScoringContext) -> int:
        return int(len(ctx.kongs) == 3)

    def _check_all_terminals_and_honors(self, ctx: ScoringContext) -> int:
        return int(ctx.all_present(index_is_orphan))

    # --- 24 Points ---
    def _check_seven_pairs(self, ctx: ScoringContext) -> int:
        return int(ctx.shape == SEVEN_PAIRS)

    def _check_greater_honors_and_knitted_tiles(self, ctx: ScoringContext) -> int:
        """All 7 honors + 7 knitted tiles (147, 258, 369 from different suits)"""
        if ctx.shape != HONORS_KNITTED:
            return 0
        return int(all(ctx.counts[i] == 1 for i in range(HONOR_START, NUM_TILE_TYPES)))

    def _check_all_even_pungs(self, ctx: ScoringContext) -> int:
        """All pungs of even numbers (2,4,6,8)"""
        if not self._check_all_pungs(ctx):
            return 0
        return int(ctx.all_present(lambda i: i < HONOR_START and rank_of(i) % 2 == 0))

    def _check_full_flush(self, ctx: ScoringContext) -> int:
        """All tiles same numbered suit (no honors)"""
        return int(len(ctx.numbered_suits) == 1 and not ctx.has_honors)

    def _check_pure_triple_chow(self, ctx: ScoringContext) -> int:
        """Three identical chows"""
        return int(any(c >= 3 for c in Counter(s.index for s in ctx.chows).values()))

    def _check_pure_shifted_pungs(self, ctx: ScoringContext) -> int:
        """Three pungs in sequence in same suit"""
        return int(any(_shifted(ctx.pung_ranks(suit), 3, 1) for suit in range(3)))

    def _check_upper_tiles(self, ctx: ScoringContext) -> int:
        return int(ctx.all_present(lambda i: i < HONOR_START and rank_of(i) >= 7))

    def _check_middle_tiles(self, ctx: ScoringContext) -> int:
        return int(ctx.all_present(lambda i: i < HONOR_START and 4 <= rank_of(i) <= 6))

    def _check_lower_tiles(self, ctx: ScoringContext) -> int:
        return int(ctx.all_present(lambda i: i < HONOR_START and rank_of(i) <= 3))

    # --- 16 Points ---
    def _check_pure_straight(self, ctx: ScoringContext) -> int:
        """123-456-789 in same suit"""
        return int(any({1, 4, 7} <= set(ctx.chow_starts(suit)) for suit in range(3)))

    def _check_three_suited_terminal_chows(self, ctx: ScoringContext) -> int:
        """123+789 from two suits + 5 pair from third suit"""
        if not ctx.has_four_sets or len(ctx.chows) != 4:
            return 0
        if ctx.pair >= HONOR_START or rank_of(ctx.pair) != 5:
            return 0
        pair_suit = ctx.pair // 9
        chow_suits = [suit for suit in range(3) if ctx.chow_starts(suit) == [1, 7]]
        return int(len(chow_suits) == 2 and pair_suit not in chow_suits)

    def _check_pure_shifted_chows(self, ctx: ScoringContext) -> int:
        """Three chows in sequence (by 1 or 2) in same suit"""
        return int(any(
            _shifted(ctx.chow_starts(suit), 3, step)
            for suit in range(3) for step in (1, 2)
        ))

    def _check_all_fives(self, ctx: ScoringContext) -> int:
        """Every set and pair contains a 5"""
        if not ctx.has_four_sets or rank_of(ctx.pair) != 5:
            return 0
        return int(all(
            any(i < HONOR_START and rank_of(i) == 5 for i in s.indices) for s in ctx.sets
        ))

    def _check_triple_pung(self, ctx: ScoringContext) -> int:
        """Three pungs of same number in different suits"""
        return int(any(len(suits) >= 3 for suits in _pung_suits_by_rank(ctx).values()))

    def _check_three_concealed_pungs(self, ctx: ScoringContext) -> int:
        return int(ctx.concealed_pung_count == 3)

    # --- 12 Points ---
    def _check_lesser_honors_and_knitted_tiles(self, ctx: ScoringContext) -> int:
        """Single honors and knitted tiles, no pairs"""
        return int(ctx.shape == HONORS_KNITTED)

    def _check_knitted_straight(self, ctx: ScoringContext) -> int:
        """147-258-369 from three different suits"""
        if ctx.shape == KNITTED_STRAIGHT:
            return 1
        if ctx.shape == HONORS_KNITTED:
            return int(any(all(ctx.counts[i] for i in knitted) for knitted in KNITTED_SETS))
        return 0

    def _check_upper_four(self, ctx: ScoringContext) -> int:
        return int(ctx.all_present(lambda i: i < HONOR_START and rank_of(i) >= 6))

    def _check_lower_four(self, ctx: ScoringContext) -> int:
        return int(ctx.all_present(lambda i: i < HONOR_START and rank_of(i) <= 4))

    def _check_big_three_winds(self, ctx: ScoringContext) -> int:
        return int(len(ctx.wind_pungs) == 3)

    # --- 8 Points ---
    def _check_mixed_straight(self, ctx: ScoringContext) -> int:
        """123-456-789 from three different suits"""
        starts = [set(ctx.chow_starts(suit)) for suit in range(3)]
        return int(any(
            all(rank in starts[suit] for rank, suit in zip((1, 4, 7), order))
            for order in permutations(range(3))
        ))

    def _check_reversible_tiles(self, ctx: ScoringContext) -> int:
        return int(ctx.all_present(lambda i: i in REVERSIBLE_INDICES))

    def _check_mixed_triple_chow(self, ctx: ScoringContext) -> int:
        """Three chows of same numbers in different suits"""
        return int(any(len(suits) >= 3 for suits in _chow_suits_by_rank(ctx).values()))

    def _check_mixed_shifted_pungs(self, ctx: ScoringContext) -> int:
        """Three pungs in sequence from three suits"""
        ranks = [set(ctx.pung_ranks(suit)) for suit in range(3)]
        return int(any(
            all(start + k in ranks[suit] for k, suit in enumerate(order))
            for order in permutations(range(3)) for start in range(1, 8)
        ))

    def _check_chicken_hand(self, ctx: ScoringContext) -> int:
        # Applied in match() once every other pattern has been checked
        return 0

    def _check_last_tile_draw(self, ctx: ScoringContext) -> int:
        return int(ctx.is_last_tile and ctx.is_zimo is True)

    def _check_last_tile_claim(self, ctx: ScoringContext) -> int:
        return int(ctx.is_last_tile and ctx.is_zimo is False)

    def _check_out_with_replacement_tile(self, ctx: ScoringContext) -> int:
        return int(ctx.is_kong_draw and ctx.is_zimo is not False)

    def _check_robbing_the_kong(self, ctx: ScoringContext) -> int:
        return int(ctx.is_robbing_kong)

    # --- 6 Points ---
    def _check_all_pungs(self, ctx: ScoringContext) -> int:
        """Four pungs/kongs + pair"""
        return int(ctx.has_four_sets and not ctx.chows)

    def _check_half_flush(self, ctx: ScoringContext) -> int:
        """One numbered suit + honors"""
        return int(len(ctx.numbered_suits) == 1 and ctx.has_honors)

    def _check_mixed_shifted_chows(self, ctx: ScoringContext) -> int:
        """Three chows in sequence from three suits"""
        starts = [set(ctx.chow_starts(suit)) for suit in range(3)]
        return int(any(
            all(start + k in starts[suit] for k, suit in enumerate(order))
            for order in permutations(range(3)) for start in range(1, 6)
        ))

    def _check_all_types(self, ctx: ScoringContext) -> int:
        """All five tile types present (3 suits + winds + dragons)"""
        has_winds = any(27 <= i <= 30 for i in ctx.present)
        has_dragons = any(i >= 31 for i in ctx.present)
        return int(len(ctx.numbered_suits) == 3 and has_winds and has_dragons)

    def _check_melded_hand(self, ctx: ScoringContext) -> int:
        """Four exposed melds + win on discard"""
        exposed = sum(1 for m in ctx.melds if not m.is_concealed)
        return int(ctx.is_complete and exposed == 4 and ctx.is_zimo is False)

    def _check_two_concealed_kongs(self, ctx: ScoringContext) -> int:
        return int(sum(1 for s in ctx.kongs if s.concealed) >= 2)

    def _check_two_dragon_pungs(self, ctx: ScoringContext) -> int:
        return int(len(ctx.dragon_pungs) == 2)

    # --- 4 Points ---
    def _check_outside_hand(self, ctx: ScoringContext) -> int:
        """Every set and the pair contain a terminal or honor"""
        if not ctx.has_four_sets or not index_is_orphan(ctx.pair):
            return 0
        return int(all(any(index_is_orphan(i) for i in s.indices) for s in ctx.sets))

    def _check_fully_concealed_hand(self, ctx: ScoringContext) -> int:
        """Concealed hand with self-drawn win"""
        return int(ctx.is_complete and not ctx.has_exposed_melds and ctx.is_zimo is True)

    def _check_two_melded_kongs(self, ctx: ScoringContext) -> int:
        return int(sum(1 for s in ctx.kongs if not s.concealed) >= 2)

    def _check_last_tile(self, ctx: ScoringContext) -> int:
        """Win on 4th tile of a kind (all others visible)"""
        return int(ctx.is_complete and ctx.is_last_of_kind)

    # --- 2 Points ---
    def _check_dragon_pung(self, ctx: ScoringContext) -> int:
        return len(ctx.dragon_pungs)

    def _check_prevalent_wind(self, ctx: ScoringContext) -> int:
        return int(ctx.round_wind is not None and int(ctx.round_wind) in ctx.wind_pungs)

    def _check_seat_wind(self, ctx: ScoringContext) -> int:
        return int(ctx.seat_wind is not None and int(ctx.seat_wind) in ctx.wind_pungs)

    def _check_concealed_hand(self, ctx: ScoringContext) -> int:
        """No exposed melds (concealed kongs OK), won on a discard"""
        return int(ctx.is_complete and not ctx.has_exposed_melds and ctx.is_zimo is False)

    def _check_all_chows(self, ctx: ScoringContext) -> int:
        """Four chows + non-honor pair"""
        return int(ctx.has_four_sets and len(ctx.chows) == 4 and ctx.pair < HONOR_START)

    def _check_tile_hog(self, ctx: ScoringContext) -> int:
        """Four of a tile kind without a kong, once per kind"""
        kong_indices = {s.index for s in ctx.kongs}
        return sum(1 for i in ctx.present if ctx.counts[i] == 4 and i not in kong_indices)

    def _check_double_pung(self, ctx: ScoringContext) -> int:
        """Two pungs of same number in different suits"""
        return sum(1 for suits in _pung_suits_by_rank(ctx).values() if len(suits) == 2)

    def _check_two_concealed_pungs(self, ctx: ScoringContext) -> int:
        return int(ctx.concealed_pung_count == 2)

    def _check_all_simples(self, ctx: ScoringContext) -> int:
        return int(ctx.all_present(lambda i: i < HONOR_START and 2 <= rank_of(i) <= 8))

    def _check_concealed_kong(self, ctx: ScoringContext) -> int:
        return int(any(s.concealed for s in ctx.kongs))

    # --- 1 Point ---
    def _check_pure_double_chow(self, ctx: ScoringContext) -> int:
        """Two identical chows, once per pair of chows"""
        return sum(c // 2 for c in Counter(s.index for s in ctx.chows).values())

    def _check_mixed_double_chow(self, ctx: ScoringContext) -> int:
        """Two chows of the same numbers in different suits"""
        return int(any(len(suits) >= 2 for suits in _chow_suits_by_rank(ctx).values()))

    def _check_short_straight(self, ctx: ScoringContext) -> int:
        """Two chows in same suit forming six consecutive tiles (e.g., 123-456)"""
        for suit in range(3):
            starts = set(ctx.chow_starts(suit))
            if any(start + 3 in starts for start in starts):
                return 1
        return 0

    def _check_two_terminal_chows(self, ctx: ScoringContext) -> int:
        """123 and 789 in same suit"""
        return int(any({1, 7} <= set(ctx.chow_starts(suit)) for suit in range(3)))

    def _check_pung_of_terminals_or_honors(self, ctx: ScoringContext) -> int:
        """Pungs of terminals, or of winds that are neither prevalent nor seat wind"""
        count = 0
        for s in ctx.pungs:
            if index_is_terminal(s.index):
                count += 1
            elif 27 <= s.index <= 30:
                wind_value = s.index - HONOR_START
                if wind_value not in (ctx.round_wind, ctx.seat_wind):
                    count += 1
        return count

    def _check_melded_kong(self, ctx: ScoringContext) -> int:
        return sum(1 for s in ctx.kongs if not s.concealed)

    def _check_one_voided_suit(self, ctx: ScoringContext) -> int:
        """Missing one numbered suit"""
        return int(len(ctx.numbered_suits) == 2)

    def _check_no_honors(self, ctx: ScoringContext) -> int:
        return int(bool(ctx.present) and not ctx.has_honors)

    def _check_edge_wait(self, ctx: ScoringContext) -> int:
        """Waiting on 3 to complete 12X or 7 to complete X89"""
        win = ctx.winning_index
        if win is None or not ctx.is_complete:
            return 0
        for s in ctx.chows:
            if not s.concealed:
                continue
            if (s.rank == 1 and win == s.index + 2) or (s.rank == 7 and win == s.index):
                return 1
        return 0

    def _check_closed_wait(self, ctx: ScoringContext) -> int:
        """Waiting on middle tile of a sequence"""
        win = ctx.winning_index
        if win is None or not ctx.is_complete or self._check_edge_wait(ctx):
            return 0
        return int(any(s.concealed and win == s.index + 1 for s in ctx.chows))

    def _check_single_wait(self, ctx: ScoringContext) -> int:
        """Waiting on the pair tile"""
        win = ctx.winning_index
        if win is None or not ctx.is_complete or ctx.pair != win:
            return 0
        return int(not self._check_edge_wait(ctx) and not self._check_closed_wait(ctx))

    def _check_self_drawn(self, ctx: ScoringContext) -> int:
        return int(ctx.is_zimo is True)

    def _check_flower_tiles(self, ctx: ScoringContext) -> int:
        return max(0, ctx.flower_count)


def _shifted(values: Sequence[int], length: int, step: int) -> bool:
    """Whether `values` contain `length` ranks spaced by `step`"""
    present = set(values)
    return any(all(v + k * step in present for k in range(length)) for v in present)


def _pung_suits_by_rank(ctx: ScoringContext) -> Dict[int, set]:
    by_rank = defaultdict(set)
    for s in ctx.pungs:
        if s.index < HONOR_START:
            by_rank[s.rank].add(s.suit)
    return by_rank


def _chow_suits_by_rank(ctx: ScoringContext) -> Dict[int, set]:
    by_rank = defaultdict(set)
    for s in ctx.chows:
        by_rank[s.rank].add(s.suit)
    return by_rank


# ========== Entry points ==========

_scorer: Optional[MCRScorer] = None


def get_scorer() -> MCRScorer:
    global _scorer
    if _scorer is None:
        _scorer = MCRScorer()
    return _scorer


def recognize_mcr_patterns(
    hand: Sequence[Tile],
    melds: Sequence[Meld] = (),
    **context,
) -> List[PatternMatch]:
    """
    Patterns the hand satisfies under its best reading, before exclusion.

    Context keywords (all optional): winning_tile, is_zimo, round_wind,
    seat_wind, is_last_tile, is_kong_draw, is_robbing_kong, is_last_of_kind,
    flower_count.
    """
    _, matches, _ = get_scorer().evaluate(hand, melds, **context)
    return matches


def calculate_mcr_total_fan(
    hand: Sequence[Tile],
    melds: Sequence[Meld] = (),
    min_fan: int = MIN_POINTS_TO_WIN,
    **context,
) -> MCRScore:
    """
    Score a hand after exclusions.

    Returns:
        MCRScore with counted patterns and whether the total reaches `min_fan`
    """
    ctx, matches, total = get_scorer().evaluate(hand, melds, **context)
    return MCRScore(
        total_fan=total.total,
        breakdown=total.counted,
        patterns=matches,
        meets_minimum=total.total >= min_fan,
        is_complete=ctx.is_complete,
        shape=ctx.shape,
    )


def score_completed_hand(
    hand: Sequence[Tile],
    melds: Sequence[Meld] = (),
    min_fan: int = MIN_POINTS_TO_WIN,
    **context,
) -> MCRScore:
    """Score a declared win. Same scoring as calculate_mcr_total_fan."""
    score = calculate_mcr_total_fan(hand, melds, min_fan=min_fan, **context)
    if not score.is_complete:
        logger.warning("Scoring a declared win whose tiles do not form a complete hand")
    logger.info(f"MCR hand scored {score.total_fan} points "
                f"({'meets' if score.meets_minimum else 'below'} minimum {min_fan})")
    return score

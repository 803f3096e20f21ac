"""
Shanten Calculator

Calculates the shanten number (distance to a complete hand) for the three
hand shapes shared by MCR and Sichuan:
- Standard form (groups + 1 pair)
- Seven pairs
- Thirteen orphans

Shanten values:
- -1: Complete hand (passes the exact winning check)
-  0: Ready (one tile away from winning)
-  1+: Further away
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Sequence, Tuple
import numpy as np

from .tiles import Tile, ORPHAN_INDICES, count_tiles, removed
from .melds import Meld
from .winning import is_winning_counts


# Shanten reported for an empty hand with no melds
MAX_SHANTEN = 8

# (start, length, runs allowed) for the three numbered suits and the honors
_BLOCKS = ((0, 9, True), (9, 9, True), (18, 9, True), (27, 7, False))

Option = Tuple[int, int]  # (complete groups, partial groups)


def _pareto(options) -> Tuple[Option, ...]:
    """Drop (groups, partials) options that another option beats on both counts."""
    kept = []
    for m, t in options:
        if not any(m2 >= m and t2 >= t and (m2, t2) != (m, t) for m2, t2 in options):
            kept.append((m, t))
    return tuple(sorted(set(kept), reverse=True))


@lru_cache(maxsize=None)
def _block_options(block: Tuple[int, ...], allow_runs: bool) -> Tuple[Option, ...]:
    """
    All useful (complete, partial) group counts one suit block can yield.

    Backtracks over a scratch copy of the block, always consuming the lowest
    remaining tile: as a triplet, run, pair, two-sided/edge partial, gapped
    partial, or as an isolated tile.
    """
    counts = list(block)
    first = next((i for i, c in enumerate(counts) if c), -1)
    if first == -1:
        return ((0, 0),)

    size = len(counts)
    options = set()

    def explore(groups: int, partials: int, *indices: int) -> None:
        with removed(counts, *indices):
            for m, t in _block_options(tuple(counts), allow_runs):
                options.add((m + groups, t + partials))

    if counts[first] >= 3:
        explore(1, 0, first, first, first)
    if allow_runs and first + 2 < size and counts[first + 1] and counts[first + 2]:
        explore(1, 0, first, first + 1, first + 2)
    if counts[first] >= 2:
        explore(0, 1, first, first)
    if allow_runs and first + 1 < size and counts[first + 1]:
        explore(0, 1, first, first + 1)
    if allow_runs and first + 2 < size and counts[first + 2]:
        explore(0, 1, first, first + 2)
    explore(0, 0, first)

    return _pareto(options)


def _merge(left: Sequence[Option], right: Sequence[Option], needed: int) -> Tuple[Option, ...]:
    """Combine two blocks' options, capping at the groups the hand still needs."""
    merged = set()
    for m1, t1 in left:
        for m2, t2 in right:
            m = min(m1 + m2, needed)
            t = min(t1 + t2, needed - m)
            merged.add((m, t))
    return _pareto(merged)


@dataclass
class ShantenResult:
    """Result of shanten calculation, overall and per hand shape."""
    shanten: int                        # -1 = complete, 0 = ready, 1+ = tiles away
    standard: int
    seven_pairs: Optional[int] = None   # None when the shape is not applicable
    thirteen_orphans: Optional[int] = None


class ShantenCalculator:
    """
    Shanten calculator for standard, seven pairs and thirteen orphans shapes.

    The standard-form search is exhaustive: each suit block is decomposed on
    its own (memoised by block contents) and the blocks are combined, once
    with no pair set aside and once for every possible pair.
    """

    def calculate(self, hand_counts: np.ndarray, num_melds: int = 0) -> ShantenResult:
        """
        Calculate shanten for a hand.

        Args:
            hand_counts: 34-element array of concealed tile counts
            num_melds: Number of melds already set aside

        Returns:
            ShantenResult with the overall and per-shape values
        """
        counts = [int(c) for c in hand_counts]
        total = sum(counts)

        if total == 0 and num_melds == 0:
            return ShantenResult(MAX_SHANTEN, MAX_SHANTEN)

        standard = self._calculate_standard(counts, num_melds)
        seven_pairs = None
        thirteen_orphans = None
        best = standard

        # Special shapes only exist for a full concealed hand
        if num_melds == 0 and total >= 13:
            seven_pairs = self._calculate_seven_pairs(counts)
            thirteen_orphans = self._calculate_thirteen_orphans(counts)
            best = min(best, seven_pairs, thirteen_orphans)

        if is_winning_counts(counts, num_melds):
            best = -1
        else:
            best = max(best, 0)

        return ShantenResult(best, standard, seven_pairs, thirteen_orphans)

    def _calculate_standard(self, counts, num_melds: int) -> int:
        """
        Standard form shanten: 2 * groups needed - 2 * complete - partial,
        minus one more when a pair is already set aside.
        """
        needed = max(0, 4 - num_melds)

        block_options = [
            _block_options(tuple(counts[start:start + size]), runs)
            for start, size, runs in _BLOCKS
        ]

        def best_value(options_per_block) -> int:
            combined: Sequence[Option] = ((0, 0),)
            for options in options_per_block:
                combined = _merge(combined, options, needed)
            return max(2 * m + t for m, t in combined)

        # No pair yet: one worse than any reading with a head
        shanten = 2 * needed - best_value(block_options)

        for block_no, (start, size, runs) in enumerate(_BLOCKS):
            for i in range(start, start + size):
                if counts[i] < 2:
                    continue
                with removed(counts, i, i):
                    with_head = list(block_options)
                    with_head[block_no] = _block_options(
                        tuple(counts[start:start + size]), runs)
                    shanten = min(shanten, 2 * needed - best_value(with_head) - 1)

        return shanten

    def _calculate_seven_pairs(self, counts) -> int:
        """
        Seven pairs shanten: 6 - pairs + max(0, singles - (7 - pairs)).
        Four of a kind counts as two pairs.
        """
        pairs = sum(c // 2 for c in counts)
        singles = sum(c % 2 for c in counts)
        return 6 - pairs + max(0, singles - (7 - pairs))

    def _calculate_thirteen_orphans(self, counts) -> int:
        """13 - distinct orphan kinds - (1 if any orphan kind is paired)."""
        distinct = sum(1 for i in ORPHAN_INDICES if counts[i] >= 1)
        has_pair = any(counts[i] >= 2 for i in ORPHAN_INDICES)
        return 13 - distinct - (1 if has_pair else 0)


_calculator = ShantenCalculator()


def calculate_shanten(hand_counts: np.ndarray, num_melds: int = 0) -> int:
    """
    Convenience function to calculate shanten from a count array.

    Returns:
        Shanten value (-1 to 8)
    """
    return _calculator.calculate(hand_counts, num_melds).shanten


def compute_shanten(hand: Sequence[Tile], melds: Sequence[Meld] = ()) -> int:
    """Shanten of a concealed hand given its exposed melds."""
    return calculate_shanten(count_tiles(hand), len(melds))

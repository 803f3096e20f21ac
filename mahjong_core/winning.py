"""
Winning Hand Detection

Exact checks, as opposed to the shanten estimate: a hand is complete only when
its concealed tiles partition into the required groups plus a pair with no
leftovers, or form seven pairs / thirteen orphans with no melds.
"""

from dataclasses import dataclass
from typing import List, Sequence, Set, Tuple

from .tiles import (
    Tile, NUM_TILE_TYPES, COPIES_PER_TYPE, ORPHAN_INDICES,
    can_start_run, count_tiles, removed, added,
)
from .melds import Meld, MeldType


def full_hand_size(num_melds: int) -> int:
    """Concealed tile count right after drawing (14 with no melds)."""
    return (4 - num_melds) * 3 + 2


def ready_hand_size(num_melds: int) -> int:
    """Concealed tile count while waiting for a draw (13 with no melds)."""
    return (4 - num_melds) * 3 + 1


@dataclass(frozen=True)
class Decomposition:
    """One exact reading of a concealed hand: a pair and its groups."""
    pair: int
    groups: Tuple[Tuple[MeldType, int], ...]  # (RUN or TRIPLET, base index)


def _first_tile(counts: List[int]) -> int:
    for i in range(NUM_TILE_TYPES):
        if counts[i] > 0:
            return i
    return -1


def _can_partition(counts: List[int], groups_needed: int) -> bool:
    """Whether counts split exactly into `groups_needed` runs/triplets."""
    first = _first_tile(counts)
    if first == -1:
        return groups_needed == 0
    if groups_needed == 0:
        return False

    if counts[first] >= 3:
        with removed(counts, first, first, first):
            if _can_partition(counts, groups_needed - 1):
                return True

    if can_start_run(first) and counts[first + 1] and counts[first + 2]:
        with removed(counts, first, first + 1, first + 2):
            if _can_partition(counts, groups_needed - 1):
                return True

    return False


def _collect_partitions(
    counts: List[int],
    groups_needed: int,
    current: List[Tuple[MeldType, int]],
    found: Set[Tuple[Tuple[MeldType, int], ...]],
) -> None:
    first = _first_tile(counts)
    if first == -1:
        if groups_needed == 0:
            found.add(tuple(current))
        return
    if groups_needed == 0:
        return

    if counts[first] >= 3:
        with removed(counts, first, first, first):
            current.append((MeldType.TRIPLET, first))
            _collect_partitions(counts, groups_needed - 1, current, found)
            current.pop()

    if can_start_run(first) and counts[first + 1] and counts[first + 2]:
        with removed(counts, first, first + 1, first + 2):
            current.append((MeldType.RUN, first))
            _collect_partitions(counts, groups_needed - 1, current, found)
            current.pop()


def is_seven_pairs(counts) -> bool:
    """Fourteen tiles of seven pairs; four of a kind counts as two pairs."""
    return sum(int(c) for c in counts) == 14 and all(int(c) % 2 == 0 for c in counts)


def is_thirteen_orphans(counts) -> bool:
    """One of each terminal/honor plus one duplicate among them."""
    if sum(int(c) for c in counts) != 14:
        return False
    if any(int(counts[i]) == 0 for i in ORPHAN_INDICES):
        return False
    return sum(int(counts[i]) for i in ORPHAN_INDICES) == 14


def is_winning_counts(counts, num_melds: int = 0) -> bool:
    """
    Exact winning check on a concealed-hand count array.

    Args:
        counts: 34-element count array (not modified)
        num_melds: Number of melds already set aside

    Returns:
        True if the concealed tiles complete the hand
    """
    groups_needed = 4 - num_melds
    if groups_needed < 0:
        return False

    scratch = [int(c) for c in counts]
    total = sum(scratch)
    if total != full_hand_size(num_melds):
        return False

    for i in range(NUM_TILE_TYPES):
        if scratch[i] >= 2:
            with removed(scratch, i, i):
                if _can_partition(scratch, groups_needed):
                    return True

    if num_melds == 0:
        return is_seven_pairs(scratch) or is_thirteen_orphans(scratch)
    return False


def is_winning_hand(hand: Sequence[Tile], melds: Sequence[Meld] = ()) -> bool:
    return is_winning_counts(count_tiles(hand), len(melds))


def find_decompositions(counts, num_melds: int = 0) -> List[Decomposition]:
    """
    Every exact (pair + groups) reading of a complete concealed hand.

    Returns an empty list when the hand has no standard-shape reading.
    """
    groups_needed = 4 - num_melds
    scratch = [int(c) for c in counts]
    if groups_needed < 0 or sum(scratch) != full_hand_size(num_melds):
        return []

    decompositions = []
    for i in range(NUM_TILE_TYPES):
        if scratch[i] < 2:
            continue
        found: Set[Tuple[Tuple[MeldType, int], ...]] = set()
        with removed(scratch, i, i):
            _collect_partitions(scratch, groups_needed, [], found)
        for groups in sorted(found):
            decompositions.append(Decomposition(pair=i, groups=groups))
    return decompositions


def compute_winning_tiles(hand: Sequence[Tile], melds: Sequence[Meld] = ()) -> List[Tile]:
    """
    Tile kinds that complete the hand if drawn.

    Kinds already held four times in the concealed hand are skipped.
    """
    counts = [int(c) for c in count_tiles(hand)]
    waits = []
    for i in range(NUM_TILE_TYPES):
        if counts[i] >= COPIES_PER_TYPE:
            continue
        with added(counts, i):
            if is_winning_counts(counts, len(melds)):
                waits.append(Tile.from_index(i))
    return waits

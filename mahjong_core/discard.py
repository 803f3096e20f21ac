"""
Discard Analyzer

Ranks every possible discard from a hand that has just drawn, by resulting
shanten and then ukeire (how many live tiles would improve the hand).
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .tiles import (
    Tile, TileSet, NUM_TILE_TYPES, COPIES_PER_TYPE, count_tiles, added, removed,
)
from .melds import Meld, meld_tiles
from .shanten import ShantenCalculator
from .winning import full_hand_size, compute_winning_tiles

logger = logging.getLogger(__name__)


@dataclass
class DiscardOption:
    """Evaluation of discarding one tile kind."""
    tile: Tile
    shanten: int                                     # Shanten after the discard
    ukeire: int                                      # Live tiles that lower shanten
    ukeire_tiles: List[Tile] = field(default_factory=list)
    waiting_tiles: List[Tile] = field(default_factory=list)  # Only when ready

    @property
    def ukeire_kinds(self) -> int:
        return len(self.ukeire_tiles)

    @property
    def sort_key(self) -> Tuple[int, int, int]:
        return (self.shanten, -self.ukeire, -len(self.waiting_tiles))


def visible_counts(
    hand: Sequence[Tile],
    melds: Sequence[Meld] = (),
    discards: Sequence[Tile] = (),
) -> List[int]:
    """Copies of each kind the player can see: own hand, melds and the discard pile."""
    counts = count_tiles(list(hand) + meld_tiles(melds) + list(discards))
    return [int(c) for c in counts]


def calculate_ukeire(
    hand_counts,
    num_melds: int,
    visible: Sequence[int],
    calculator: Optional[ShantenCalculator] = None,
) -> Tuple[List[Tile], int]:
    """
    Tiles that would lower the shanten of a (post-discard) hand.

    Args:
        hand_counts: 34-element concealed counts
        num_melds: Number of melds already set aside
        visible: Visible copies per kind, used for availability

    Returns:
        Tuple of (improving tile kinds, total live copies of them)
    """
    calculator = calculator or ShantenCalculator()
    counts = [int(c) for c in hand_counts]
    current = calculator.calculate(counts, num_melds).shanten

    improving = []
    total = 0
    for i in range(NUM_TILE_TYPES):
        available = COPIES_PER_TYPE - visible[i]
        if available <= 0:
            continue
        with added(counts, i):
            if calculator.calculate(counts, num_melds).shanten < current:
                improving.append(Tile.from_index(i))
                total += available
    return improving, total


class DiscardAnalyzer:
    """
    Evaluates each distinct tile in a freshly drawn hand as a discard.

    Selection order: lowest shanten, then most ukeire, then most waits;
    remaining ties keep first-encounter order.
    """

    def __init__(self):
        self.calculator = ShantenCalculator()

    def evaluate(
        self,
        tile: Tile,
        hand: Sequence[Tile],
        melds: Sequence[Meld] = (),
        discards: Sequence[Tile] = (),
    ) -> DiscardOption:
        """Evaluate discarding one copy of `tile` (which must be in hand)."""
        counts = [int(c) for c in count_tiles(hand)]
        if counts[tile.tile_index] == 0:
            raise ValueError(f"Cannot discard {tile}: not in hand")

        outside = visible_counts((), melds, discards)
        index = tile.tile_index

        with removed(counts, index):
            # Availability is counted against the hand after the discard
            visible = [c + o for c, o in zip(counts, outside)]
            shanten = self.calculator.calculate(counts, len(melds)).shanten
            ukeire_tiles, ukeire = calculate_ukeire(
                counts, len(melds), visible, self.calculator)

        waits: List[Tile] = []
        if shanten == 0:
            remaining = TileSet(hand)
            remaining.remove(tile)
            waits = compute_winning_tiles(remaining.tiles, melds)

        return DiscardOption(
            tile=Tile.from_index(index),
            shanten=shanten,
            ukeire=ukeire,
            ukeire_tiles=ukeire_tiles,
            waiting_tiles=waits,
        )

    def evaluate_all(
        self,
        hand: Sequence[Tile],
        melds: Sequence[Meld] = (),
        discards: Sequence[Tile] = (),
    ) -> List[DiscardOption]:
        """
        Rank every distinct discard. Empty unless the hand is in the
        just-drawn state: `full_hand_size(melds)` concealed tiles, which is
        14 with no melds and three fewer per declared meld.
        """
        if not hand or len(hand) != full_hand_size(len(melds)):
            return []

        options = [
            self.evaluate(tile, hand, melds, discards)
            for tile in TileSet(hand).get_unique_tiles()
        ]
        options.sort(key=lambda option: option.sort_key)

        if logger.isEnabledFor(logging.DEBUG):
            for option in options:
                logger.debug(
                    f"discard {option.tile.notation}: shanten={option.shanten} "
                    f"ukeire={option.ukeire} ({option.ukeire_kinds} kinds)"
                )
        return options


def evaluate_discards(
    hand: Sequence[Tile],
    melds: Sequence[Meld] = (),
    discards: Sequence[Tile] = (),
) -> List[DiscardOption]:
    """All candidate discards, best first."""
    return DiscardAnalyzer().evaluate_all(hand, melds, discards)


def evaluate_discard(
    tile: Tile,
    hand: Sequence[Tile],
    melds: Sequence[Meld] = (),
    discards: Sequence[Tile] = (),
) -> DiscardOption:
    """Evaluation of one specific discard."""
    return DiscardAnalyzer().evaluate(tile, hand, melds, discards)


def calculate_best_discard(
    hand: Sequence[Tile],
    melds: Sequence[Meld] = (),
    discards: Sequence[Tile] = (),
) -> Optional[DiscardOption]:
    """Best discard, or None when the hand is not in the just-drawn state."""
    options = evaluate_discards(hand, melds, discards)
    return options[0] if options else None

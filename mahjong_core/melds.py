"""
Meld Model

Exposed groups set aside from the concealed hand: runs (chi), triplets (pong)
and kongs (gang). A kong may be concealed; the flag is ignored for runs and
triplets, which are always exposed.
"""

from enum import IntEnum
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .tiles import Tile, NUMBERED_SUITS, count_tiles


class MeldType(IntEnum):
    """Types of melds a player can expose"""
    RUN = 0      # 顺子 - Sequence of 3 consecutive tiles in same suit
    TRIPLET = 1  # 刻子 - 3 identical tiles
    KONG = 2     # 杠 - 4 identical tiles


@dataclass(frozen=True)
class Meld:
    """
    An exposed (or concealed-kong) meld.

    Attributes:
        meld_type: Run, Triplet or Kong
        tiles: Tiles forming the meld
        is_concealed: Concealed kong (暗杠); only valid for kongs
    """
    meld_type: MeldType
    tiles: Tuple[Tile, ...]
    is_concealed: bool = False

    def __post_init__(self):
        """Validate meld"""
        # Accept any sequence of tiles but store an immutable tuple
        object.__setattr__(self, "tiles", tuple(self.tiles))

        if self.meld_type == MeldType.RUN:
            if len(self.tiles) != 3:
                raise ValueError("Run must have exactly 3 tiles")
            if not self._is_valid_sequence(sorted(self.tiles)):
                raise ValueError(f"Invalid run: {' '.join(str(t) for t in self.tiles)}")
        elif self.meld_type == MeldType.TRIPLET:
            if len(self.tiles) != 3:
                raise ValueError("Triplet must have exactly 3 tiles")
            if not all(t == self.tiles[0] for t in self.tiles):
                raise ValueError("Triplet tiles must be identical")
        elif self.meld_type == MeldType.KONG:
            if len(self.tiles) != 4:
                raise ValueError("Kong must have exactly 4 tiles")
            if not all(t == self.tiles[0] for t in self.tiles):
                raise ValueError("Kong tiles must be identical")
        else:
            raise ValueError(f"Unknown meld type: {self.meld_type}")

        if self.is_concealed and self.meld_type != MeldType.KONG:
            raise ValueError("Only kongs can be concealed")

    @staticmethod
    def _is_valid_sequence(tiles: List[Tile]) -> bool:
        """Check if sorted tiles form a run in one numbered suit"""
        if tiles[0].suit not in NUMBERED_SUITS:
            return False
        if not all(t.suit == tiles[0].suit for t in tiles):
            return False
        values = [t.value for t in tiles]
        return values[1] == values[0] + 1 and values[2] == values[1] + 1

    @property
    def base_tile(self) -> Tile:
        """Lowest tile of a run, or the repeated tile of a triplet/kong"""
        if self.meld_type == MeldType.RUN:
            return min(self.tiles)
        return self.tiles[0]

    @property
    def base_index(self) -> int:
        return self.base_tile.tile_index

    @property
    def is_pung(self) -> bool:
        """Triplet or kong (kongs count as pungs for pattern purposes)"""
        return self.meld_type in (MeldType.TRIPLET, MeldType.KONG)

    @property
    def is_exposed(self) -> bool:
        return not self.is_concealed

    def __str__(self) -> str:
        label = self.meld_type.name.lower()
        if self.is_concealed:
            label = "concealed " + label
        return f"{label}[{' '.join(str(t) for t in sorted(self.tiles))}]"


def run(start: Tile) -> Meld:
    """Exposed run starting at `start`."""
    if start.suit not in NUMBERED_SUITS or start.value > 7:
        raise ValueError(f"No run can start at {start}")
    return Meld(MeldType.RUN, tuple(
        Tile(start.suit, start.value + i, i) for i in range(3)
    ))


def triplet(tile: Tile) -> Meld:
    """Exposed triplet of `tile`."""
    return Meld(MeldType.TRIPLET, tuple(Tile(tile.suit, tile.value, i) for i in range(3)))


def kong(tile: Tile, concealed: bool = False) -> Meld:
    """Kong of `tile`, exposed unless `concealed`."""
    return Meld(MeldType.KONG, tuple(Tile(tile.suit, tile.value, i) for i in range(4)),
                is_concealed=concealed)


def meld_tiles(melds: Iterable[Meld]) -> List[Tile]:
    """All tiles contained in the melds."""
    tiles: List[Tile] = []
    for meld in melds:
        tiles.extend(meld.tiles)
    return tiles


def meld_counts(melds: Iterable[Meld]):
    """34-element count array of meld tiles."""
    return count_tiles(meld_tiles(melds))

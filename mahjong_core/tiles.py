"""
Mahjong Tile Model

Defines the 34 tile kinds shared by the MCR and Sichuan engines:
- 9 Characters (万)  -> indices 0-8
- 9 Dots (筒)        -> indices 9-17
- 9 Bamboos (条)     -> indices 18-26
- 4 Winds (东南西北)  -> indices 27-30
- 3 Dragons (白发中)  -> indices 31-33

Sequences only ever form inside one 9-wide numbered block, so index 8 (9万)
and index 9 (1筒) are never adjacent for hand analysis.
"""

from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterable, Iterator, List, Optional
import numpy as np


NUM_TILE_TYPES = 34
COPIES_PER_TYPE = 4
HONOR_START = 27


class TileSuit(IntEnum):
    """Tile suits"""
    CHARACTERS = 0  # 万 (Wan) - Numbers 1-9
    DOTS = 1        # 筒 (Tong) - Numbers 1-9
    BAMBOOS = 2     # 条 (Tiao) - Numbers 1-9
    WINDS = 3       # 风 (Feng) - East, South, West, North
    DRAGONS = 4     # 箭 (Jian) - White, Green, Red


NUMBERED_SUITS = (TileSuit.CHARACTERS, TileSuit.DOTS, TileSuit.BAMBOOS)


class WindType(IntEnum):
    """Wind tile types"""
    EAST = 0   # 东
    SOUTH = 1  # 南
    WEST = 2   # 西
    NORTH = 3  # 北


class DragonType(IntEnum):
    """Dragon tile types"""
    WHITE = 0  # 白 (Bai)
    GREEN = 1  # 发 (Fa)
    RED = 2    # 中 (Zhong)


SUIT_LETTERS = {
    TileSuit.CHARACTERS: "m",
    TileSuit.DOTS: "p",
    TileSuit.BAMBOOS: "s",
}
SUIT_GLYPHS = {
    TileSuit.CHARACTERS: "万",
    TileSuit.DOTS: "筒",
    TileSuit.BAMBOOS: "条",
}
WIND_GLYPHS = ["东", "南", "西", "北"]
DRAGON_GLYPHS = ["白", "发", "中"]

# Terminal and honor indices (1/9 of each suit + all honors)
ORPHAN_INDICES = (0, 8, 9, 17, 18, 26, 27, 28, 29, 30, 31, 32, 33)

# Green tiles: 2/3/4/6/8 bamboo and the green dragon
GREEN_INDICES = frozenset({19, 20, 21, 23, 25, 32})

# Tiles whose face looks the same upside down: 1234589 dots, 245689 bamboo, white
REVERSIBLE_INDICES = frozenset({9, 10, 11, 12, 13, 16, 17,
                                19, 21, 22, 23, 25, 26, 31})


def suit_of(index: int) -> TileSuit:
    """Suit of a tile index"""
    if index < HONOR_START:
        return TileSuit(index // 9)
    return TileSuit.WINDS if index < 31 else TileSuit.DRAGONS


def rank_of(index: int) -> int:
    """Rank 1-9 of a numbered tile index (honors return 0)"""
    if index >= HONOR_START:
        return 0
    return index % 9 + 1


def index_is_honor(index: int) -> bool:
    return index >= HONOR_START


def index_is_terminal(index: int) -> bool:
    return index < HONOR_START and index % 9 in (0, 8)


def index_is_orphan(index: int) -> bool:
    return index_is_honor(index) or index_is_terminal(index)


def can_start_run(index: int) -> bool:
    """Whether a run (index, index+1, index+2) stays within one suit"""
    return index < HONOR_START and index % 9 <= 6


@dataclass(frozen=True)
class Tile:
    """
    A single Mahjong tile.

    Attributes:
        suit: The suit of the tile (Characters, Dots, Bamboos, Winds, Dragons)
        value: 1-9 for numbered suits, 0-3 for winds, 0-2 for dragons
        id: Instance identity for list management, ignored by equality
    """
    suit: TileSuit
    value: int
    id: int = 0

    def __post_init__(self):
        """Validate tile values"""
        if self.suit in NUMBERED_SUITS:
            if not 1 <= self.value <= 9:
                raise ValueError(f"Numbered suits must have value 1-9, got {self.value}")
        elif self.suit == TileSuit.WINDS:
            if not 0 <= self.value <= 3:
                raise ValueError(f"Wind tiles must have value 0-3, got {self.value}")
        elif self.suit == TileSuit.DRAGONS:
            if not 0 <= self.value <= 2:
                raise ValueError(f"Dragon tiles must have value 0-2, got {self.value}")
        else:
            raise ValueError(f"Unknown suit: {self.suit}")

    @property
    def is_honor(self) -> bool:
        """Check if tile is an honor tile (Wind or Dragon)"""
        return self.suit in (TileSuit.WINDS, TileSuit.DRAGONS)

    @property
    def is_terminal(self) -> bool:
        """Check if tile is a terminal (1 or 9 of numbered suits)"""
        return self.suit in NUMBERED_SUITS and self.value in (1, 9)

    @property
    def is_terminal_or_honor(self) -> bool:
        return self.is_terminal or self.is_honor

    @property
    def is_simple(self) -> bool:
        """Check if tile is a simple (2-8 of numbered suits)"""
        return self.suit in NUMBERED_SUITS and 2 <= self.value <= 8

    @property
    def is_green(self) -> bool:
        """Check if tile counts for All Green"""
        return self.tile_index in GREEN_INDICES

    @property
    def is_reversible(self) -> bool:
        """Check if tile counts for Reversible Tiles"""
        return self.tile_index in REVERSIBLE_INDICES

    @property
    def tile_index(self) -> int:
        """Kind index (0-33), see module docstring for the layout."""
        if self.suit in NUMBERED_SUITS:
            return int(self.suit) * 9 + self.value - 1
        if self.suit == TileSuit.WINDS:
            return 27 + self.value
        return 31 + self.value

    @property
    def notation(self) -> str:
        """Compact notation: 5m, 3p, 9s, 1z-7z"""
        if self.suit in NUMBERED_SUITS:
            return f"{self.value}{SUIT_LETTERS[self.suit]}"
        return f"{self.tile_index - HONOR_START + 1}z"

    def __eq__(self, other) -> bool:
        """Two tiles are equal if they have same suit and value (ignoring instance id)"""
        if not isinstance(other, Tile):
            return False
        return self.suit == other.suit and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.suit, self.value))

    def __lt__(self, other) -> bool:
        if not isinstance(other, Tile):
            return NotImplemented
        return self.tile_index < other.tile_index

    def __repr__(self) -> str:
        return f"Tile({self.suit.name}, {self.value})"

    def __str__(self) -> str:
        if self.suit in NUMBERED_SUITS:
            return f"{self.value}{SUIT_GLYPHS[self.suit]}"
        if self.suit == TileSuit.WINDS:
            return WIND_GLYPHS[self.value]
        return DRAGON_GLYPHS[self.value]

    @classmethod
    def from_index(cls, tile_index: int, instance_id: int = 0) -> 'Tile':
        """
        Create a tile from its kind index (0-33).

        Raises:
            ValueError: if the index is out of range
        """
        if not 0 <= tile_index < NUM_TILE_TYPES:
            raise ValueError(f"Tile index must be 0-33, got {tile_index}")
        if tile_index < HONOR_START:
            return cls(TileSuit(tile_index // 9), tile_index % 9 + 1, instance_id)
        if tile_index < 31:
            return cls(TileSuit.WINDS, tile_index - 27, instance_id)
        return cls(TileSuit.DRAGONS, tile_index - 31, instance_id)

    @classmethod
    def from_string(cls, s: str, instance_id: int = 0) -> 'Tile':
        """
        Create tile from a string such as "5m", "7z", "5万", "东" or "中".
        """
        s = s.strip()

        if len(s) == 2 and s[0].isdigit():
            value = int(s[0])
            suit_char = s[1]
            for suit in NUMBERED_SUITS:
                if suit_char in (SUIT_LETTERS[suit], SUIT_GLYPHS[suit]):
                    return cls(suit, value, instance_id)
            if suit_char == "z" and 1 <= value <= 7:
                return cls.from_index(HONOR_START + value - 1, instance_id)

        if s in WIND_GLYPHS:
            return cls(TileSuit.WINDS, WIND_GLYPHS.index(s), instance_id)
        if s in DRAGON_GLYPHS:
            return cls(TileSuit.DRAGONS, DRAGON_GLYPHS.index(s), instance_id)

        raise ValueError(f"Cannot parse tile string: {s}")


class TileSet:
    """
    A collection of tiles with utility methods.
    Used to represent hands, meld contents and discard piles.
    """

    def __init__(self, tiles: Optional[Iterable[Tile]] = None):
        self.tiles: List[Tile] = list(tiles) if tiles else []

    def add(self, tile: Tile) -> None:
        self.tiles.append(tile)

    def remove(self, tile: Tile) -> bool:
        """
        Remove a tile from the set (matches by suit and value).
        Returns True if removed, False if not found.
        """
        for i, t in enumerate(self.tiles):
            if t == tile:
                self.tiles.pop(i)
                return True
        return False

    def count(self, tile: Tile) -> int:
        """Count occurrences of a tile kind"""
        return sum(1 for t in self.tiles if t == tile)

    def to_count_array(self) -> np.ndarray:
        """Convert to a 34-element array counting each tile kind."""
        return count_tiles(self.tiles)

    def get_unique_tiles(self) -> List[Tile]:
        """Unique tile kinds in first-encounter order"""
        seen = set()
        unique = []
        for tile in self.tiles:
            if tile.tile_index not in seen:
                seen.add(tile.tile_index)
                unique.append(tile)
        return unique

    def sort(self) -> None:
        self.tiles.sort()

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def __getitem__(self, index):
        return self.tiles[index]

    def __repr__(self) -> str:
        return f"TileSet({len(self.tiles)} tiles)"

    def __str__(self) -> str:
        return " ".join(str(t) for t in sorted(self.tiles))


# ========== Count arrays and histograms ==========

def count_tiles(tiles: Iterable[Tile]) -> np.ndarray:
    """Build the 34-element count array for any tile collection."""
    counts = np.zeros(NUM_TILE_TYPES, dtype=np.int8)
    for tile in tiles:
        counts[tile.tile_index] += 1
    return counts


def counts_to_histogram(counts: np.ndarray) -> Counter:
    """Count array -> Counter keyed by tile index (zero counts dropped)."""
    return Counter({i: int(c) for i, c in enumerate(counts) if c > 0})


def histogram_to_counts(histogram: Dict[int, int]) -> np.ndarray:
    """Counter keyed by tile index -> 34-element count array."""
    counts = np.zeros(NUM_TILE_TYPES, dtype=np.int8)
    for index, count in histogram.items():
        if not 0 <= index < NUM_TILE_TYPES:
            raise ValueError(f"Tile index must be 0-33, got {index}")
        counts[index] = count
    return counts


def tiles_from_counts(counts: np.ndarray) -> List[Tile]:
    """Expand a count array back into tiles, in index order."""
    tiles = []
    for index in range(NUM_TILE_TYPES):
        for copy in range(int(counts[index])):
            tiles.append(Tile.from_index(index, copy))
    return tiles


# ========== Scoped in-place branches ==========

@contextmanager
def removed(counts, *indices: int):
    """Take tiles out of a scratch count buffer for the duration of a branch."""
    for i in indices:
        counts[i] -= 1
    try:
        yield counts
    finally:
        for i in indices:
            counts[i] += 1


@contextmanager
def added(counts, *indices: int):
    """Put tiles into a scratch count buffer for the duration of a branch."""
    for i in indices:
        counts[i] += 1
    try:
        yield counts
    finally:
        for i in indices:
            counts[i] -= 1


# ========== Tile construction helpers ==========

def man(value: int, instance_id: int = 0) -> Tile:
    """Create a Characters tile (1-9万)"""
    return Tile(TileSuit.CHARACTERS, value, instance_id)


def pin(value: int, instance_id: int = 0) -> Tile:
    """Create a Dots tile (1-9筒)"""
    return Tile(TileSuit.DOTS, value, instance_id)


def sou(value: int, instance_id: int = 0) -> Tile:
    """Create a Bamboos tile (1-9条)"""
    return Tile(TileSuit.BAMBOOS, value, instance_id)


def wind(wind_type: WindType, instance_id: int = 0) -> Tile:
    """Create a Wind tile (东南西北)"""
    return Tile(TileSuit.WINDS, wind_type, instance_id)


def dragon(dragon_type: DragonType, instance_id: int = 0) -> Tile:
    """Create a Dragon tile (白发中)"""
    return Tile(TileSuit.DRAGONS, dragon_type, instance_id)


def parse_tiles(text: str) -> List[Tile]:
    """
    Parse compact hand notation into tiles.

    Digits are followed by their suit letter: "123m 456p 789s 11z".
    Honors use 1-7z (East, South, West, North, White, Green, Red).
    Instance ids are assigned in reading order.
    """
    tiles: List[Tile] = []
    pending: List[int] = []
    for ch in text.replace(" ", ""):
        if ch.isdigit():
            pending.append(int(ch))
        elif ch in "mpsz":
            if not pending:
                raise ValueError(f"Suit letter '{ch}' without digits in {text!r}")
            for value in pending:
                tiles.append(Tile.from_string(f"{value}{ch}", len(tiles)))
            pending = []
        else:
            raise ValueError(f"Unexpected character '{ch}' in {text!r}")
    if pending:
        raise ValueError(f"Digits without a suit letter in {text!r}")
    return tiles


# Named wind tiles
EAST = Tile(TileSuit.WINDS, WindType.EAST)
SOUTH = Tile(TileSuit.WINDS, WindType.SOUTH)
WEST = Tile(TileSuit.WINDS, WindType.WEST)
NORTH = Tile(TileSuit.WINDS, WindType.NORTH)

# Named dragon tiles
WHITE_DRAGON = Tile(TileSuit.DRAGONS, DragonType.WHITE)
GREEN_DRAGON = Tile(TileSuit.DRAGONS, DragonType.GREEN)
RED_DRAGON = Tile(TileSuit.DRAGONS, DragonType.RED)

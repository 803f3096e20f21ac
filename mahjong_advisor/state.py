"""
Advisor Input and Output

`GameState` is the whole contract with the caller: it is passed by value into
every analysis and nothing is kept between calls. `AnalysisResult` is the
frozen per-turn report.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional, Tuple

from mahjong_core.tiles import Tile, TileSuit, NUMBERED_SUITS
from mahjong_core.melds import Meld
from mahjong_core.suggestion import FanSuggestion


class GameMode(str, Enum):
    """Rule variant"""
    MCR = "guobiao"      # 国标麻将 Chinese Official
    SICHUAN = "sichuan"  # 四川麻将 Blood Battle


class HandStatus(str, Enum):
    """Classification of the concealed hand"""
    WON = "won"              # shanten -1
    READY = "ready"          # shanten 0 (tenpai)
    NOT_READY = "not_ready"  # shanten 1+


@dataclass(frozen=True)
class GameState:
    """
    Snapshot of one player's position.

    Attributes:
        mode: Rule variant
        wall_count: Tiles left in the wall, as entered by the player
        void_suit: Declared void suit (Sichuan only)
        hand: Concealed tiles
        melds: Declared melds
        discards: Tiles seen in the discard pile
    """
    mode: GameMode
    wall_count: int
    void_suit: Optional[TileSuit] = None
    hand: Tuple[Tile, ...] = ()
    melds: Tuple[Meld, ...] = ()
    discards: Tuple[Tile, ...] = ()

    def __post_init__(self):
        """Validate and freeze the snapshot"""
        object.__setattr__(self, "mode", GameMode(self.mode))
        object.__setattr__(self, "hand", tuple(self.hand))
        object.__setattr__(self, "melds", tuple(self.melds))
        object.__setattr__(self, "discards", tuple(self.discards))

        if self.wall_count < 0:
            raise ValueError(f"Wall count cannot be negative, got {self.wall_count}")
        if len(self.hand) > 14:
            raise ValueError(f"Hand cannot hold more than 14 tiles, got {len(self.hand)}")
        if len(self.melds) > 4:
            raise ValueError(f"At most 4 melds, got {len(self.melds)}")
        if self.void_suit is not None:
            void_suit = TileSuit(self.void_suit)
            if void_suit not in NUMBERED_SUITS:
                raise ValueError(f"Void suit must be a numbered suit, got {void_suit.name}")
            object.__setattr__(self, "void_suit", void_suit)


@dataclass(frozen=True)
class WaitingTile:
    """A tile that completes a ready hand"""
    tile: Tile
    remaining: int     # 4 - visible copies, never negative
    probability: str   # remaining / wall, e.g. "12.5%"; "0%" on an empty wall


@dataclass(frozen=True)
class BestDiscard:
    """Recommended discard from a freshly drawn hand"""
    tile: Tile
    reason: str
    ukeire: int
    ukeire_kinds: int
    shanten: int
    waiting_tiles: Tuple[Tile, ...] = ()


@dataclass(frozen=True)
class AnalysisResult:
    """Per-turn analysis report"""
    status: HandStatus
    shanten: int
    waiting_tiles: Tuple[WaitingTile, ...] = ()
    best_discard: Optional[BestDiscard] = None
    suggestions: Tuple[FanSuggestion, ...] = ()
    score_estimate: int = 0
    warnings: Tuple[str, ...] = ()

    @property
    def is_ready(self) -> bool:
        """Ready or already complete"""
        return self.status in (HandStatus.READY, HandStatus.WON)

    @property
    def is_won(self) -> bool:
        return self.status == HandStatus.WON

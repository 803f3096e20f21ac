"""
Mahjong Hand Evaluation Core

Tile model, melds, shanten, exact winning detection and discard analysis
shared by the MCR and Sichuan engines.
"""

from .tiles import Tile, TileSuit, TileSet, WindType, DragonType, parse_tiles
from .melds import Meld, MeldType
from .shanten import ShantenCalculator, ShantenResult, calculate_shanten, compute_shanten
from .winning import (
    Decomposition, is_winning_hand, is_winning_counts, find_decompositions,
    compute_winning_tiles, full_hand_size, ready_hand_size,
)
from .discard import (
    DiscardAnalyzer, DiscardOption, calculate_best_discard, evaluate_discards,
    evaluate_discard,
)
from .locale import Locale
from .suggestion import FanSuggestion, rank_suggestions

__all__ = [
    "Tile",
    "TileSuit",
    "TileSet",
    "WindType",
    "DragonType",
    "parse_tiles",
    "Meld",
    "MeldType",
    "ShantenCalculator",
    "ShantenResult",
    "calculate_shanten",
    "compute_shanten",
    "Decomposition",
    "is_winning_hand",
    "is_winning_counts",
    "find_decompositions",
    "compute_winning_tiles",
    "full_hand_size",
    "ready_hand_size",
    "DiscardAnalyzer",
    "DiscardOption",
    "calculate_best_discard",
    "evaluate_discards",
    "evaluate_discard",
    "Locale",
    "FanSuggestion",
    "rank_suggestions",
]

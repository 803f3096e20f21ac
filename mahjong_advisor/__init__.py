"""
Mahjong Advisor
Per-turn decision support for MCR and Sichuan Mahjong
"""

from mahjong_core import Locale, FanSuggestion, compute_shanten, compute_winning_tiles
from mcr_mahjong import score_completed_hand
from sichuan_mahjong import score_sichuan_hand

from .state import GameMode, GameState, HandStatus, WaitingTile, BestDiscard, AnalysisResult
from .rules import AdvisorRules, MCR_RULES, SICHUAN_RULES, get_rules
from .analyzer import analyze

__version__ = "0.1.0"
__all__ = [
    "analyze",
    "compute_shanten",
    "compute_winning_tiles",
    "score_completed_hand",
    "score_sichuan_hand",
    "Locale",
    "FanSuggestion",
    "GameMode",
    "GameState",
    "HandStatus",
    "WaitingTile",
    "BestDiscard",
    "AnalysisResult",
    "AdvisorRules",
    "MCR_RULES",
    "SICHUAN_RULES",
    "get_rules",
]

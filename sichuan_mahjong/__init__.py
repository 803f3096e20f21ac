"""
Sichuan Mahjong (四川麻将 血战到底)

Precedence scoring with roots and the doubling law, void-suit legality and
partial-hand suggestions.
"""

from .patterns import SICHUAN_PATTERNS, SichuanPattern, sichuan_multiplier
from .scoring import SichuanScore, score_sichuan_hand
from .suggestions import analyze_sichuan, illegal_suggestion

__all__ = [
    "SICHUAN_PATTERNS",
    "SichuanPattern",
    "sichuan_multiplier",
    "SichuanScore",
    "score_sichuan_hand",
    "analyze_sichuan",
    "illegal_suggestion",
]

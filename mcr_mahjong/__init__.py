"""
MCR Mahjong Scoring Engine
Chinese Official Mahjong (Mahjong Competition Rules)
"""

from .patterns import PATTERNS, ScoringPattern, MIN_POINTS_TO_WIN, get_pattern, pattern_name
from .scoring import (
    MCRScorer, MCRScore, PatternMatch, FanTotal, calculate_total_fan,
    recognize_mcr_patterns, calculate_mcr_total_fan, score_completed_hand,
)
from .suggestions import analyze_mcr

__version__ = "0.1.0"
__all__ = [
    "PATTERNS",
    "ScoringPattern",
    "MIN_POINTS_TO_WIN",
    "get_pattern",
    "pattern_name",
    "MCRScorer",
    "MCRScore",
    "PatternMatch",
    "FanTotal",
    "calculate_total_fan",
    "recognize_mcr_patterns",
    "calculate_mcr_total_fan",
    "score_completed_hand",
    "analyze_mcr",
]

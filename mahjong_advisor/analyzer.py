"""
Analysis Orchestrator

One call per turn: classify the hand, list waits or pick a discard, run the
variant's pattern engine, and attach wall warnings. Every call is a pure
function of the `GameState` it receives.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from mahjong_core.tiles import Tile, COPIES_PER_TYPE
from mahjong_core.locale import Locale, is_chinese
from mahjong_core.shanten import compute_shanten
from mahjong_core.winning import compute_winning_tiles, full_hand_size, ready_hand_size
from mahjong_core.discard import DiscardAnalyzer, DiscardOption, visible_counts
from mahjong_core.suggestion import FanSuggestion
from mcr_mahjong import analyze_mcr, score_completed_hand, pattern_name
from sichuan_mahjong import analyze_sichuan, score_sichuan_hand, illegal_suggestion

from .state import GameMode, GameState, HandStatus, WaitingTile, BestDiscard, AnalysisResult
from .rules import AdvisorRules, get_rules
from .text import advisor_text

logger = logging.getLogger(__name__)


def classify_shanten(shanten: int) -> HandStatus:
    if shanten == -1:
        return HandStatus.WON
    if shanten == 0:
        return HandStatus.READY
    return HandStatus.NOT_READY


def format_probability(remaining: int, wall_count: int) -> str:
    """Naive draw chance of one kind, "0%" when the wall is empty."""
    if wall_count <= 0:
        return "0%"
    return f"{remaining / wall_count * 100:.1f}%"


def waiting_tiles(state: GameState) -> List[WaitingTile]:
    """Winning tiles of a ready hand with live copies and draw chance."""
    visible = visible_counts(state.hand, state.melds, state.discards)
    waits = []
    for tile in compute_winning_tiles(state.hand, state.melds):
        remaining = max(0, COPIES_PER_TYPE - visible[tile.tile_index])
        waits.append(WaitingTile(tile, remaining, format_probability(remaining, state.wall_count)))
    return waits


def _best_discard(option: DiscardOption, reason: str) -> BestDiscard:
    return BestDiscard(
        tile=option.tile,
        reason=reason,
        ukeire=option.ukeire,
        ukeire_kinds=option.ukeire_kinds,
        shanten=option.shanten,
        waiting_tiles=tuple(option.waiting_tiles),
    )


def recommend_discard(state: GameState, locale: Locale = Locale.EN) -> Optional[BestDiscard]:
    """
    Best discard from a freshly drawn hand, None for any other hand size.

    In Sichuan a held void-suit tile is always the recommendation; among
    several void tiles the most efficient one is chosen.
    """
    if not state.hand or len(state.hand) != full_hand_size(len(state.melds)):
        return None

    analyzer = DiscardAnalyzer()
    options = analyzer.evaluate_all(state.hand, state.melds, state.discards)

    if state.mode == GameMode.SICHUAN and state.void_suit is not None:
        void_options = [o for o in options if o.tile.suit == state.void_suit]
        if void_options:
            logger.debug(f"forced void discard {void_options[0].tile.notation}")
            return _best_discard(void_options[0], advisor_text(locale, "discard_void"))

    if not options:
        return None
    return _best_discard(options[0], advisor_text(locale, "discard_hint"))


def _won_suggestions(state: GameState, locale: Locale, rules: AdvisorRules) -> Tuple[List[FanSuggestion], List[str]]:
    """Exact score of a complete hand as a single certain suggestion."""
    warnings = []
    if state.mode == GameMode.SICHUAN:
        score = score_sichuan_hand(state.hand, state.melds, state.void_suit,
                                   fan_cap=rules.fan_cap, locale=locale)
        if score.is_illegal:
            return [illegal_suggestion(locale)], warnings
        return [FanSuggestion(
            key=score.pattern_key,
            name=score.name,
            base_fan=score.base_fan,
            fan=score.total_fan,
            probability=100,
            breakdown=score.breakdown,
            multiplier=score.multiplier,
        )], warnings

    score = score_completed_hand(state.hand, state.melds, min_fan=rules.min_fan_to_win)
    if not score.meets_minimum:
        warnings.append(advisor_text(locale, "below_minimum",
                                     fan=score.total_fan, minimum=rules.min_fan_to_win))
    chinese = is_chinese(locale)
    names = [f"{pattern_name(m.key, chinese)} ({m.fan})" for m in score.breakdown]
    top = score.breakdown[0] if score.breakdown else None
    return [FanSuggestion(
        key=top.key if top else "chicken_hand",
        name=pattern_name(top.key if top else "chicken_hand", chinese),
        base_fan=top.points if top else 0,
        fan=score.total_fan,
        probability=100,
        breakdown=names,
    )], warnings


def _wall_warnings(wall_count: int, rules: AdvisorRules, locale: Locale) -> List[str]:
    if wall_count == 0:
        return [advisor_text(locale, "wall_empty")]
    if wall_count <= rules.low_wall_threshold:
        return [advisor_text(locale, "wall_low", count=wall_count)]
    return []


def analyze(
    state: GameState,
    locale: Locale = Locale.EN,
    rules: Optional[AdvisorRules] = None,
) -> AnalysisResult:
    """
    Analyze one turn.

    Args:
        state: Player position, passed by value
        locale: Display language; never changes numbers
        rules: Variant settings, defaulting to the mode's preset

    Returns:
        Frozen AnalysisResult

    Raises:
        ValueError: if the wall count is larger than the rule set's wall
    """
    locale = Locale(locale)
    rules = rules or get_rules(state.mode)
    if state.wall_count > rules.initial_wall:
        raise ValueError(f"Wall count {state.wall_count} exceeds the {rules.name} wall "
                         f"of {rules.initial_wall} tiles")

    shanten = compute_shanten(state.hand, state.melds)
    status = classify_shanten(shanten)
    logger.debug(f"{state.mode.value}: {len(state.hand)} tiles, {len(state.melds)} melds, "
                 f"shanten {shanten} ({status.value})")

    waits: Sequence[WaitingTile] = ()
    if status == HandStatus.READY and len(state.hand) == ready_hand_size(len(state.melds)):
        waits = waiting_tiles(state)

    best_discard = None
    if status != HandStatus.WON:
        best_discard = recommend_discard(state, locale)

    warnings: List[str] = []
    if status == HandStatus.WON:
        suggestions, won_warnings = _won_suggestions(state, locale, rules)
        warnings.extend(won_warnings)
    elif state.mode == GameMode.SICHUAN:
        suggestions = analyze_sichuan(state.hand, state.melds, state.void_suit,
                                      locale, fan_cap=rules.fan_cap)
    else:
        suggestions = analyze_mcr(state.hand, state.melds, locale,
                                  wall_count=state.wall_count,
                                  max_missing=rules.max_missing_display,
                                  last_tile_window=rules.last_tile_window)

    if suggestions and suggestions[0].is_illegal:
        warnings.append(advisor_text(locale, "void_held"))
    warnings.extend(_wall_warnings(state.wall_count, rules, locale))

    result = AnalysisResult(
        status=status,
        shanten=shanten,
        waiting_tiles=tuple(waits),
        best_discard=best_discard,
        suggestions=tuple(suggestions),
        score_estimate=suggestions[0].fan if suggestions else 0,
        warnings=tuple(warnings),
    )
    logger.info(
        f"{state.mode.value} analysis: {status.value}, shanten {shanten}, "
        f"{len(result.suggestions)} suggestions, estimate {result.score_estimate}"
    )
    return result

"""
Fan Suggestions

Result type shared by the MCR and Sichuan suggestion engines, plus the
ranking rules both apply: one suggestion per pattern key, one per
exclusivity group, then highest fan and probability first.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .tiles import Tile


def clamp_probability(value: float) -> int:
    """Round and clamp a probability estimate to 0-100."""
    return max(0, min(100, int(round(value))))


@dataclass(frozen=True)
class FanSuggestion:
    """
    A pattern the hand could score.

    Attributes:
        key: Pattern key (MCR registry key or Sichuan pattern key)
        name: Localized display name
        base_fan: Fan of the main pattern
        fan: Projected total (base + currently recognised extras, or roots)
        probability: Estimate 0-100
        missing_tiles: Tile kinds still needed (display-capped)
        breakdown: Display lines such as "Full Flush (24)"
        is_illegal: Sichuan flower-pig sentinel
        multiplier: Sichuan payout multiplier (2 ** fan); None for MCR
    """
    key: str
    name: str
    base_fan: int
    fan: int
    probability: int
    missing_tiles: Tuple[Tile, ...] = ()
    breakdown: Tuple[str, ...] = ()
    is_illegal: bool = False
    multiplier: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "probability", clamp_probability(self.probability))
        object.__setattr__(self, "missing_tiles", tuple(self.missing_tiles))
        object.__setattr__(self, "breakdown", tuple(self.breakdown))


def _better(a: FanSuggestion, b: FanSuggestion) -> bool:
    """Whether `a` beats `b`: higher fan, then higher probability."""
    return (a.fan, a.probability) > (b.fan, b.probability)


def rank_suggestions(
    suggestions: Iterable[FanSuggestion],
    exclusive_groups: Sequence[Sequence[str]] = (),
) -> List[FanSuggestion]:
    """
    Deduplicate and order suggestions.

    Keeps the best suggestion per key, then the best per exclusivity group,
    and sorts by fan then probability, both descending. Ties keep the order
    in which suggestions were produced.
    """
    best = {}
    for suggestion in suggestions:
        current = best.get(suggestion.key)
        if current is None or _better(suggestion, current):
            best[suggestion.key] = suggestion

    for group in exclusive_groups:
        members = [best[key] for key in group if key in best]
        if len(members) > 1:
            members.sort(key=lambda s: (s.fan, s.probability), reverse=True)
            for loser in members[1:]:
                del best[loser.key]

    return sorted(best.values(), key=lambda s: (-s.fan, -s.probability))

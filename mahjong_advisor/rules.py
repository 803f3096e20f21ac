"""
Advisor Rule Sets

Per-variant settings the analyzer reads:
- MCR (Chinese Official, 8-fan minimum)
- Sichuan (Blood Battle, 108 tiles)
"""

from dataclasses import dataclass
from typing import Optional

from .state import GameMode


@dataclass
class AdvisorRules:
    """
    Rule configuration for one Mahjong variant.

    Only settings that change analysis output live here; locale is passed
    separately since it never affects numbers.
    """

    name: str = "Default"

    # Wall size after the deal
    initial_wall: int = 83

    # Minimum fan to declare a win (0 = no minimum)
    min_fan_to_win: int = 0

    # Wall warnings: low at or below this count, empty at 0
    low_wall_threshold: int = 10

    # Wall counts at which the MCR last-tile hint appears
    last_tile_window: int = 4

    # Missing tiles shown per suggestion
    max_missing_display: int = 4

    # Sichuan table cap on total fan (None = uncapped)
    fan_cap: Optional[int] = None

    def __repr__(self) -> str:
        return f"AdvisorRules({self.name})"


# Chinese Official: 144 tiles with flowers, 83 left after the deal
MCR_RULES = AdvisorRules(
    name="MCR",
    initial_wall=83,
    min_fan_to_win=8,
    low_wall_threshold=10,
    last_tile_window=4,
    max_missing_display=4,
    fan_cap=None,
)


# Sichuan: 108 suited tiles, 55 left after the deal
SICHUAN_RULES = AdvisorRules(
    name="Sichuan",
    initial_wall=55,
    min_fan_to_win=0,
    low_wall_threshold=10,
    last_tile_window=4,
    max_missing_display=4,
    fan_cap=None,
)


_RULES_BY_MODE = {
    GameMode.MCR: MCR_RULES,
    GameMode.SICHUAN: SICHUAN_RULES,
}


def get_rules(mode: GameMode) -> AdvisorRules:
    """Default rule set for a variant"""
    return _RULES_BY_MODE[GameMode(mode)]

"""
Sichuan Patterns

Blood Battle scores a single pattern, the highest in precedence order, plus
one fan per root and per bonus event. Payout doubles with every fan.

Pattern precedence (first match wins):
    8  清金钩钓  flush + golden hook
    8  清七对    flush + seven pairs (清龙七对 with a root)
    6  清对      flush + all pungs
    4  将对      all pungs of 2/5/8
    4  清一色    flush
    4  金钩钓    four pung/kong melds, pair in hand
    4  七对      seven pairs (龙七对 with a root)
    4  带幺九    all pungs of terminals
    2  断幺九    no terminals
    2  对对胡    all pungs
    1  平胡      basic win
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from mahjong_core.locale import Locale, TEXT, text


@dataclass(frozen=True)
class SichuanPattern:
    """A Sichuan scoring pattern"""
    key: str
    fan: int
    root_key: Optional[str] = None  # Name used when the hand holds a root


# Precedence order, highest first
PRECEDENCE = (
    SichuanPattern("qing_jin_gou", 8),
    SichuanPattern("qing_qi_dui", 8, root_key="qing_long_qi_dui"),
    SichuanPattern("qing_dui", 6),
    SichuanPattern("jiang_dui", 4),
    SichuanPattern("qing_yi_se", 4),
    SichuanPattern("jin_gou_diao", 4),
    SichuanPattern("qi_dui", 4, root_key="long_qi_dui"),
    SichuanPattern("dai_yao_jiu", 4),
    SichuanPattern("duan_yao", 2),
    SichuanPattern("dui_dui_hu", 2),
    SichuanPattern("ping_hu", 1),
)

# Flower pig: void suit still held
ILLEGAL = SichuanPattern("hua_zhu", 0)

# Bonus events worth +1 fan each
BONUS_KEYS = ("kong_bloom", "kong_shot", "robbing_kong", "last_tile")


def _build_table(patterns: Sequence[SichuanPattern]) -> Mapping[str, SichuanPattern]:
    table = {}
    for pattern in patterns:
        if pattern.key in table:
            raise ValueError(f"Duplicate Sichuan pattern: {pattern.key}")
        if pattern.fan < 0:
            raise ValueError(f"Negative fan for {pattern.key}")
        for name_key in filter(None, (pattern.key, pattern.root_key)):
            for locale in Locale:
                if name_key not in TEXT[locale]:
                    raise ValueError(f"No {locale.value} name for {name_key}")
        table[pattern.key] = pattern
    return MappingProxyType(table)


SICHUAN_PATTERNS = _build_table(PRECEDENCE + (ILLEGAL,))


def sichuan_multiplier(base_fan: int, roots: int = 0, extra: int = 0) -> int:
    """Payout multiplier: doubles for every fan."""
    return 2 ** (base_fan + roots + extra)


def pattern_name(key: str, locale: Locale = Locale.EN, roots: int = 0) -> str:
    """
    Display name of a pattern, switching to its root variant and appending
    the root count when the hand holds roots.
    """
    pattern = SICHUAN_PATTERNS[key]
    name = text(locale, pattern.root_key if roots > 0 and pattern.root_key else key)
    if roots > 0 and pattern is not ILLEGAL:
        return text(locale, "with_roots", name=name, count=roots, root=text(locale, "root"))
    return name

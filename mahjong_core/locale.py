"""
Display Text for the Pattern Engines

Locale only selects labels; it never changes numbers.
"""

from enum import Enum
from typing import Dict


class Locale(str, Enum):
    """Display language"""
    EN = "en"
    ZH = "zh"


TEXT: Dict[Locale, Dict[str, str]] = {
    Locale.EN: {
        # Suggestion notes
        "achieved": "Achieved",
        "discard_other_suits": "Discard {count} tile(s) of other suits",
        "discard_terminals": "Discard {count} terminal/honor tile(s)",
        "shanten_estimate": "Shanten {shanten}",
        "missing_types": "Missing {count} type(s), shanten {shanten}",
        "pairs_progress": "{pairs} pairs, {needed} more needed",
        "concealed_pungs_progress": "{count} concealed pungs",
        "concealed_pungs_one_short": "{count} concealed pungs, 1 tile short",
        "pungs_progress": "{count} pungs, {needed} more needed",
        "last_tile_draw_claim": "Last Tile Draw/Claim",
        "last_tile_chance": "Last Tile Chance",
        "wall_left": "Only {count} tile(s) left",
        "last_tile_hint": "Wall nearly empty - last tile bonus possible!",
        # Sichuan patterns
        "ping_hu": "Basic Win",
        "duan_yao": "All Simples",
        "dui_dui_hu": "All Pungs",
        "dai_yao_jiu": "All Terminal Pungs",
        "qing_yi_se": "Full Flush",
        "jin_gou_diao": "Golden Hook",
        "qi_dui": "Seven Pairs",
        "long_qi_dui": "Dragon Seven Pairs",
        "jiang_dui": "All 258 Pungs",
        "qing_dui": "Pure Pungs",
        "qing_jin_gou": "Pure Golden Hook",
        "qing_qi_dui": "Pure Seven Pairs",
        "qing_long_qi_dui": "Pure Dragon Seven Pairs",
        "hua_zhu": "Flower Pig",
        "illegal": "Illegal",
        "root": "Root",
        "with_roots": "{name} + {count} {root}",
        "root_bonus": "{root} x{count} (+{count})",
        "kong_bloom": "Win on Kong",
        "kong_shot": "Win on Kong Discard",
        "robbing_kong": "Robbing the Kong",
        "last_tile": "Last Tile",
    },
    Locale.ZH: {
        "achieved": "已达成",
        "discard_other_suits": "需打掉{count}张其他花色",
        "discard_terminals": "需打掉{count}张幺九字牌",
        "shanten_estimate": "向听{shanten}",
        "missing_types": "缺{count}门，向听{shanten}",
        "pairs_progress": "已有{pairs}对，缺{needed}张",
        "concealed_pungs_progress": "已有{count}个暗刻",
        "concealed_pungs_one_short": "已有{count}个暗刻，缺1张",
        "pungs_progress": "已有{count}刻，缺{needed}张",
        "last_tile_draw_claim": "妙手回春/海底捞月",
        "last_tile_chance": "海底机会",
        "wall_left": "牌墙仅剩{count}张",
        "last_tile_hint": "牌墙将尽，可能获得海底番！",
        "ping_hu": "基本和",
        "duan_yao": "断幺九",
        "dui_dui_hu": "对对胡",
        "dai_yao_jiu": "带幺九",
        "qing_yi_se": "清一色",
        "jin_gou_diao": "金钩钓",
        "qi_dui": "七对",
        "long_qi_dui": "龙七对",
        "jiang_dui": "将对",
        "qing_dui": "清对",
        "qing_jin_gou": "清金钩钓",
        "qing_qi_dui": "清七对",
        "qing_long_qi_dui": "清龙七对",
        "hua_zhu": "花猪",
        "illegal": "无法和牌",
        "root": "根",
        "with_roots": "{name} + {count}{root}",
        "root_bonus": "{root} x{count} (+{count})",
        "kong_bloom": "杠上开花",
        "kong_shot": "杠上炮",
        "robbing_kong": "抢杠",
        "last_tile": "海底捞月",
    },
}


def text(locale: Locale, key: str, **kwargs) -> str:
    """Look up a display string and fill in its placeholders."""
    return TEXT[Locale(locale)][key].format(**kwargs)


def is_chinese(locale: Locale) -> bool:
    return Locale(locale) == Locale.ZH

"""
Advisor display strings (reasons and warnings).
"""

from typing import Dict

from mahjong_core.locale import Locale


ADVISOR_TEXT: Dict[Locale, Dict[str, str]] = {
    Locale.EN: {
        "mode_guobiao": "Chinese Official",
        "mode_sichuan": "Sichuan Blood",
        "discard_hint": "Discard this to improve efficiency",
        "discard_void": "Flower Pig risk: discard your void suit first",
        "wall_low": "Only {count} tile(s) left in the wall",
        "wall_empty": "The wall is empty",
        "below_minimum": "{fan} fan is below the {minimum}-fan minimum to win",
        "void_held": "Void suit tiles still in hand",
    },
    Locale.ZH: {
        "mode_guobiao": "国标麻将",
        "mode_sichuan": "四川血战",
        "discard_hint": "打出此牌进张面最广",
        "discard_void": "有缺未打，先打定缺花色",
        "wall_low": "牌墙仅剩{count}张",
        "wall_empty": "牌墙已空",
        "below_minimum": "{fan}番未达{minimum}番起和",
        "void_held": "手中仍有定缺花色",
    },
}


def advisor_text(locale: Locale, key: str, **kwargs) -> str:
    return ADVISOR_TEXT[Locale(locale)][key].format(**kwargs)

"""
Font Variation Description (FVD) decoding.

Font loaders report an active font as a family name plus a two character
description: the first character is the style (n = normal, i = italic,
o = oblique) and the second the weight in hundreds ("n4" is normal 400,
"i7" italic 700).
"""

from typing import Any, Dict

from .properties import FONT_STYLE, FONT_WEIGHT
from .validation import InvalidVariationDescription

STYLES = {"n": "normal", "i": "italic", "o": "oblique"}


def parse(description: str) -> Dict[str, Any]:
    """
    Decode an FVD such as "n4" into font-style / font-weight properties.

    Raises:
        InvalidVariationDescription: If the description is malformed
    """
    value = (description or "").strip().lower()
    if len(value) != 2 or value[0] not in STYLES or value[1] not in "123456789":
        raise InvalidVariationDescription(
            f"Invalid font variation description '{description}'"
        )
    return {FONT_STYLE: STYLES[value[0]], FONT_WEIGHT: int(value[1]) * 100}

"""Font shorthand parsing and font-file resolution for the rasterization backend."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Tuple, Union

from matplotlib import font_manager
from PIL import ImageFont

from .validation import FontShorthandError

logger = logging.getLogger(__name__)

# Canvas initial font
DEFAULT_FONT = "10px sans-serif"

# CSS absolute lengths in px; relative units resolve against the 16px medium size
_UNITS = {"px": 1.0, "pt": 4.0 / 3.0, "em": 16.0, "rem": 16.0, "%": 16.0 / 100.0}

_SHORTHAND = re.compile(
    r"^\s*(?P<prefix>(?:\S+\s+)*?)"
    r"(?P<size>\d*\.?\d+)(?P<unit>px|pt|em|rem|%)"
    r"(?:/\S+)?\s+(?P<family>\S.*?)\s*$",
    re.IGNORECASE,
)

_STYLES = {"italic", "oblique"}
_WEIGHT_KEYWORDS = {"bold": "bold", "bolder": "bold", "lighter": "light"}
# Accepted by CSS before the size but irrelevant for glyph selection here
_IGNORED = {
    "normal",
    "small-caps",
    "ultra-condensed",
    "extra-condensed",
    "condensed",
    "semi-condensed",
    "semi-expanded",
    "expanded",
    "extra-expanded",
    "ultra-expanded",
}


@dataclass(frozen=True)
class FontSpec:
    style: str
    weight: Union[int, str]
    size: float  # px
    families: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.size > 0:
            raise FontShorthandError(f"Font size must be > 0, got {self.size}")
        if not self.families:
            raise FontShorthandError("Font shorthand needs at least one family")


def _parse_families(value: str) -> Tuple[str, ...]:
    families = []
    for name in value.split(","):
        name = name.strip().strip("\"'").strip()
        if name:
            families.append(name)
    return tuple(families)


def parse_font_shorthand(value: str) -> FontSpec:
    """
    Parse a CSS font shorthand such as "italic 700 24px Georgia, serif".

    Raises:
        FontShorthandError: If no size/family pair or an unknown keyword is found
    """
    match = _SHORTHAND.match(value or "")
    if not match:
        raise FontShorthandError(f"Invalid font shorthand '{value}'")

    style = "normal"
    weight: Union[int, str] = 400
    for token in match.group("prefix").split():
        lowered = token.lower()
        if lowered in _STYLES:
            style = lowered
        elif lowered.isdigit():
            weight = int(lowered)
            if not (1 <= weight <= 1000):
                raise FontShorthandError(f"Invalid font weight {weight} in '{value}'")
        elif lowered in _WEIGHT_KEYWORDS:
            weight = _WEIGHT_KEYWORDS[lowered]
        elif lowered in _IGNORED or lowered.endswith("deg"):
            continue
        else:
            raise FontShorthandError(f"Unknown keyword '{token}' in font shorthand '{value}'")

    size = float(match.group("size")) * _UNITS[match.group("unit").lower()]
    return FontSpec(
        style=style,
        weight=weight,
        size=size,
        families=_parse_families(match.group("family")),
    )


def resolve_font_path(spec: FontSpec) -> str:
    """Find the font file that best matches the spec (matplotlib's DejaVu as fallback)."""
    properties = font_manager.FontProperties(
        family=list(spec.families), style=spec.style, weight=spec.weight
    )
    path = font_manager.findfont(properties, fallback_to_default=True)
    logger.debug("Resolved %s -> %s", spec, path)
    return path


def load_font(spec: FontSpec, scale: float = 1.0) -> ImageFont.FreeTypeFont:
    """Load the resolved font at the spec size multiplied by `scale` (physical px)."""
    return ImageFont.truetype(resolve_font_path(spec), size=spec.size * scale)

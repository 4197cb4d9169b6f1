from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Union

from .validation import InvalidFontSize

logger = logging.getLogger(__name__)

FONT_STYLE = "font-style"
FONT_WEIGHT = "font-weight"
FONT_SIZE = "font-size"
FONT_FAMILY = "font-family"

# Order matters: it is the order of the font shorthand.
FONT_PROPERTY_KEYS = (FONT_STYLE, FONT_WEIGHT, FONT_SIZE, FONT_FAMILY)

DEFAULTS: Dict[str, Any] = {
    FONT_STYLE: "normal",
    FONT_WEIGHT: 400,
    FONT_SIZE: "100px",
    FONT_FAMILY: "serif",
}

_NON_DIGITS = re.compile(r"\D")
_NON_DECIMAL = re.compile(r"[^\d.]")
_UNITLESS = re.compile(r"^\d*\.?\d+$")


@dataclass(frozen=True)
class FontProperties:
    """
    Font description used for a measurement.

    Attributes:
    - font_style: CSS font-style ("normal", "italic", "oblique").
    - font_weight: CSS font-weight, numeric (400) or keyword ("bold").
    - font_size: CSS font-size, a number or a string with a unit ("100px").
    - font_family: CSS font-family list ("Georgia, serif").
    - extra: Any other keys of the source mapping, passed through untouched.
    """

    font_style: Optional[str] = None
    font_weight: Optional[Union[str, int]] = None
    font_size: Optional[Union[str, int, float]] = None
    font_family: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @staticmethod
    def from_mapping(values: Optional[Mapping[str, Any]]) -> "FontProperties":
        """Build from a mapping keyed by the hyphenated CSS property names."""
        values = dict(values or {})
        return FontProperties(
            font_style=values.pop(FONT_STYLE, None),
            font_weight=values.pop(FONT_WEIGHT, None),
            font_size=values.pop(FONT_SIZE, None),
            font_family=values.pop(FONT_FAMILY, None),
            extra=values,
        )

    def with_defaults(self) -> "FontProperties":
        """Return a copy where every unset property takes its default value."""
        return replace(
            self,
            font_style=_or_default(self.font_style, FONT_STYLE),
            font_weight=_or_default(self.font_weight, FONT_WEIGHT),
            font_size=_or_default(self.font_size, FONT_SIZE),
            font_family=_or_default(self.font_family, FONT_FAMILY),
            extra=dict(self.extra),
        )

    def get(self, key: str, default: Any = None) -> Any:
        value = self.to_mapping().get(key)
        return default if value is None else value

    def to_mapping(self) -> Dict[str, Any]:
        """Hyphenated mapping with the recognised keys first, unset keys omitted."""
        out: Dict[str, Any] = {}
        for key, value in zip(
            FONT_PROPERTY_KEYS,
            (self.font_style, self.font_weight, self.font_size, self.font_family),
        ):
            if value is not None:
                out[key] = value
        for key, value in self.extra.items():
            out.setdefault(key, value)
        return out


def _or_default(value: Any, key: str) -> Any:
    return DEFAULTS[key] if value is None else value


def normalize(
    partial: Union[FontProperties, Mapping[str, Any], None],
) -> FontProperties:
    """Merge a partial font description with the defaults."""
    if not isinstance(partial, FontProperties):
        partial = FontProperties.from_mapping(partial)
    return partial.with_defaults()


def extract_font_size(
    properties: Union[FontProperties, Mapping[str, Any]],
    *,
    preserve_fractional: bool = False,
) -> float:
    """
    Get the font-size as a unitless number.

    Numbers are taken as they are. Strings have every non-digit character
    stripped before parsing, so "100px" gives 100. The decimal point is
    stripped as well unless `preserve_fractional` is set: "12.5px" gives 125
    by default and 12.5 with the flag.

    Raises:
        InvalidFontSize: If nothing numeric remains or the size is 0
    """
    raw = properties.get(FONT_SIZE, 0)
    if raw is None:
        raw = 0

    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        font_size = abs(float(raw))
    else:
        pattern = _NON_DECIMAL if preserve_fractional else _NON_DIGITS
        try:
            font_size = float(pattern.sub("", str(raw)))
        except ValueError:
            raise InvalidFontSize(
                "Cannot calculate the height of the text with invalid font-size."
            ) from None

    if not math.isfinite(font_size):
        raise InvalidFontSize(
            "Cannot calculate the height of the text with invalid font-size."
        )
    if font_size == 0:
        raise InvalidFontSize(
            "Cannot calculate the height of the text with font-size: 0."
        )

    logger.debug("Extracted font-size %r -> %s", raw, font_size)
    return font_size


def compose_font_shorthand(
    properties: Union[FontProperties, Mapping[str, Any]],
    font_size: Optional[float] = None,
) -> str:
    """
    Compose the CSS font shorthand "<style> <weight> <size><unit> <family>".

    When `font_size` is given it replaces the size property and is written
    in pixels, so the glyph is drawn at the same size the surface was sized
    for. Otherwise a unit-less size (a number, or digits only) is taken as
    pixels.
    """
    if isinstance(properties, FontProperties):
        properties = properties.to_mapping()
    if font_size is not None:
        # Fixed-point: the shorthand grammar has no exponent form
        size = format(font_size, "f").rstrip("0").rstrip(".") + "px"
    else:
        size = str(properties[FONT_SIZE]).strip()
        if _UNITLESS.match(size):
            size += "px"
    return " ".join(
        [
            str(properties[FONT_STYLE]),
            str(properties[FONT_WEIGHT]),
            size,
            str(properties[FONT_FAMILY]),
        ]
    )

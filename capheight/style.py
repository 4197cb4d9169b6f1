"""Computed-style reading for `CapHeightCalculator.inspect`."""

from typing import Any, Dict, Mapping

from .properties import FONT_PROPERTY_KEYS


def parse_declarations(css: str) -> Dict[str, str]:
    """Parse "font-size: 24px; font-family: Georgia, serif" into a dict."""
    out: Dict[str, str] = {}
    for declaration in css.split(";"):
        name, sep, value = declaration.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        value = value.strip()
        if name and value:
            out[name] = value
    return out


def read_computed_style(element: Any) -> Mapping[str, Any]:
    """
    Read the computed style of an element.

    Accepts a mapping of CSS properties, an object with a callable
    `computed_style()` returning one, or a CSS declaration string.
    """
    if isinstance(element, Mapping):
        return element
    computed = getattr(element, "computed_style", None)
    if callable(computed):
        return computed()
    if isinstance(element, str):
        return parse_declarations(element)
    raise TypeError(f"Cannot read a computed style from {type(element).__name__}")


def pick_font_properties(style: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep only the recognised font keys that have a value."""
    return {key: style[key] for key in FONT_PROPERTY_KEYS if style.get(key) not in (None, "")}

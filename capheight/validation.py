"""
Error taxonomy and cross-cutting validation for cap-height measurement.

Type-local invariants stay in the dataclass __post_init__ methods of their
modules. The helpers here cover the rules shared by several stages:
- Measurement text must not contain whitespace
- Pixel buffers must match their declared dimensions
- Ratios and sizes used as divisors must be positive
"""

import re
from typing import Optional

_WHITESPACE = re.compile(r"\s")


class ValidationError(ValueError):
    """Base exception for validation errors."""
    pass


class InvalidFontSize(ValidationError):
    """Raised when the font-size is missing, non-numeric or zero."""
    pass


class WhitespaceTextError(ValidationError):
    """Raised when the measurement text contains whitespace."""
    pass


class NoGlyphDetected(ValidationError):
    """Raised when the rasterized text produced no foreground pixel."""
    pass


class PixelBufferError(ValidationError):
    """Raised when a pixel buffer does not match its dimensions."""
    pass


class FontShorthandError(ValidationError):
    """Raised when a font shorthand string cannot be parsed."""
    pass


class InvalidVariationDescription(ValidationError):
    """Raised when a font variation description cannot be decoded."""
    pass


class ConfigError(ValidationError):
    """Raised when configuration values are invalid."""
    pass


def validate_text(text: Optional[str], default: str = "H") -> str:
    """
    Resolve the measurement text and reject whitespace.

    Cross-cutting rule: whitespace glyphs have no pixels to measure, so any
    whitespace character anywhere in the text is rejected.

    Args:
        text: Text to measure; empty or None falls back to `default`
        default: Text used when none is given

    Returns:
        The text that will be rasterized

    Raises:
        WhitespaceTextError: If the text contains whitespace
    """
    text = text or default
    if _WHITESPACE.search(text):
        raise WhitespaceTextError("Cannot calculate the height of whitespace.")
    return text


def validate_buffer_size(data_length: int, width: int, height: int, channels: int = 4) -> None:
    """
    Validate that a flat pixel buffer matches its dimensions.

    Args:
        data_length: Length of the buffer in bytes
        width: Buffer width in physical pixels
        height: Buffer height in physical pixels
        channels: Channel values per pixel

    Raises:
        PixelBufferError: If dimensions are not positive or the size differs
    """
    if width <= 0 or height <= 0:
        raise PixelBufferError(f"Pixel buffer must have positive size, got {width}x{height}")

    expected = width * height * channels
    if data_length != expected:
        raise PixelBufferError(
            f"Pixel buffer size {data_length} doesn't match expected {expected} "
            f"for {width}x{height} pixels with {channels} channels"
        )


def validate_positive(name: str, value: float) -> None:
    """
    Validate that a divisor-like value is a positive number.

    Raises:
        ValidationError: If value is not > 0 (NaN included)
    """
    if not value > 0:
        raise ValidationError(f"{name} must be > 0, got {value}")

from __future__ import annotations

from dataclasses import dataclass

from .validation import ValidationError, validate_positive


@dataclass(frozen=True)
class Metrics:
    """
    Foreground row bounds of a raster, in physical pixel rows (0-based, top-down).

    Not the typographic ascent/descent of the font: these are the topmost and
    bottommost rows that actually hold foreground content.
    """

    ascent: int
    descent: int

    def __post_init__(self) -> None:
        if self.ascent < 0:
            raise ValidationError(f"ascent must be >= 0, got {self.ascent}")
        if self.descent < self.ascent:
            raise ValidationError(
                f"descent ({self.descent}) must not be above ascent ({self.ascent})"
            )

    @property
    def height(self) -> int:
        return height(self)


def height(metrics: Metrics) -> int:
    """Inclusive row span: a single-row glyph is 1 pixel high."""
    return metrics.descent - metrics.ascent + 1


def cap_height_ratio(
    height_px: float, device_pixel_ratio: float, font_size: float
) -> float:
    """Height in logical pixels divided by the numeric font size."""
    validate_positive("device pixel ratio", device_pixel_ratio)
    validate_positive("font size", font_size)
    return (height_px / device_pixel_ratio) / font_size

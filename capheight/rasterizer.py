from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from .properties import FontProperties, compose_font_shorthand
from .scanner import PixelBuffer
from .surface import Dimensions, Surface, SurfaceFactory, create_surface
from .validation import validate_positive, validate_text

logger = logging.getLogger(__name__)

# Canvas size / font-size ratio; leaves room for any ascender/descender combination
MULTIPLIER = 2

# Every channel of the background is 255 and every channel of the text is 0,
# which keeps the foreground test unambiguous.
BACKGROUND = "white"
FOREGROUND = "black"


@dataclass
class Raster:
    surface: Surface
    dimensions: Dimensions
    physical_dimensions: Dimensions
    text: str

    def pixel_buffer(self) -> PixelBuffer:
        """Read back the whole physical rectangle."""
        width, height = self.physical_dimensions.as_size()
        return self.surface.get_context().get_image_data(0, 0, width, height)


def raster_dimensions(
    font_size: float,
    text: str,
    *,
    multiplier: float = MULTIPLIER,
    device_pixel_ratio: float = 1.0,
) -> Tuple[Dimensions, Dimensions]:
    """Logical and physical surface dimensions for `text` at `font_size`."""
    validate_positive("font size", font_size)
    base = multiplier * font_size
    dimensions = Dimensions(width=base * len(text), height=base)
    return dimensions, dimensions.scaled(device_pixel_ratio)


def rasterize(
    properties: FontProperties,
    text: str,
    *,
    font_size: float,
    device_pixel_ratio: float = 1.0,
    multiplier: float = MULTIPLIER,
    default_text: str = "H",
    surface_factory: SurfaceFactory = create_surface,
) -> Raster:
    """
    Paint `text` centred on a uniform white surface.

    Args:
        properties: Normalized font properties
        text: Text to draw; empty falls back to `default_text`
        font_size: Numeric font size extracted from `properties`
        device_pixel_ratio: Physical pixels per logical pixel
        multiplier: Surface size / font size ratio
        surface_factory: Allocates the drawing surface

    Raises:
        WhitespaceTextError: If the text contains whitespace
    """
    text = validate_text(text, default_text)
    dimensions, physical = raster_dimensions(
        font_size,
        text,
        multiplier=multiplier,
        device_pixel_ratio=device_pixel_ratio,
    )

    surface = surface_factory(dimensions, device_pixel_ratio)
    context = surface.get_context()

    # Draw in logical units on the physical-resolution buffer
    context.scale(device_pixel_ratio)

    # Background first: every pixel 255 before any text is painted
    context.fill_style = BACKGROUND
    context.fill_rect(0, 0, dimensions.width, dimensions.height)

    # The numeric size in px, whatever unit the property carried
    context.font = compose_font_shorthand(properties, font_size)
    context.fill_style = FOREGROUND
    context.text_align = "center"
    context.text_baseline = "middle"
    context.fill_text(text, dimensions.width / 2, dimensions.height / 2)

    logger.debug(
        "Rasterized %r with '%s' on %sx%s surface (physical %sx%s)",
        text,
        context.font,
        dimensions.width,
        dimensions.height,
        physical.width,
        physical.height,
    )
    return Raster(surface, dimensions, surface.physical_dimensions, text)

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple, Union

from PIL import Image, ImageDraw

from .fonts import DEFAULT_FONT, FontSpec, load_font, parse_font_shorthand
from .scanner import PixelBuffer
from .validation import validate_positive

logger = logging.getLogger(__name__)

Color = Union[str, Tuple[int, int, int], Tuple[int, int, int, int]]

# Canvas textAlign / textBaseline -> Pillow anchor characters (horizontal text)
_ALIGN_ANCHORS = {"left": "l", "start": "l", "center": "m", "right": "r", "end": "r"}
_BASELINE_ANCHORS = {
    "top": "t",
    "hanging": "t",
    "middle": "m",
    "alphabetic": "s",
    "ideographic": "d",
    "bottom": "d",
}


@dataclass(frozen=True)
class Dimensions:
    width: float
    height: float

    def __post_init__(self) -> None:
        if not (self.width > 0 and self.height > 0):
            raise ValueError(
                f"Dimensions must be positive, got ({self.width}x{self.height})"
            )

    def scaled(self, ratio: float) -> "Dimensions":
        """Physical dimensions for a device pixel ratio, truncated to whole pixels."""
        validate_positive("device pixel ratio", ratio)
        return Dimensions(
            max(1, int(self.width * ratio)), max(1, int(self.height * ratio))
        )

    def as_size(self) -> Tuple[int, int]:
        return int(self.width), int(self.height)


class Context2D:
    """
    Subset of the canvas 2D drawing context backed by a Pillow image.

    Coordinates passed to the drawing methods are transformed by the current
    scale, so after `scale(device_pixel_ratio)` callers draw in logical units
    while pixels land on the physical-resolution image.
    """

    def __init__(self, image: Image.Image) -> None:
        self.image = image
        self._draw = ImageDraw.Draw(image)
        self._sx = 1.0
        self._sy = 1.0
        self.fill_style: Color = "black"
        self.text_align = "start"
        self.text_baseline = "alphabetic"
        self._font = DEFAULT_FONT
        self._font_spec = parse_font_shorthand(DEFAULT_FONT)

    @property
    def font(self) -> str:
        return self._font

    @font.setter
    def font(self, value: str) -> None:
        self._font_spec = parse_font_shorthand(value)
        self._font = value

    @property
    def font_spec(self) -> FontSpec:
        return self._font_spec

    @property
    def transform(self) -> Tuple[float, float]:
        return self._sx, self._sy

    def scale(self, x: float, y: Optional[float] = None) -> "Context2D":
        self._sx *= x
        self._sy *= x if y is None else y
        return self

    def _to_device(self, x: float, y: float) -> Tuple[float, float]:
        return x * self._sx, y * self._sy

    def fill_rect(self, x: float, y: float, width: float, height: float) -> "Context2D":
        x0, y0 = self._to_device(x, y)
        x1, y1 = self._to_device(x + width, y + height)
        x0, x1 = sorted((round(x0), round(x1)))
        y0, y1 = sorted((round(y0), round(y1)))
        if x1 > x0 and y1 > y0:
            # Pillow rectangles include their end coordinate
            self._draw.rectangle((x0, y0, x1 - 1, y1 - 1), fill=self.fill_style)
        return self

    def _anchor(self) -> str:
        try:
            return _ALIGN_ANCHORS[self.text_align] + _BASELINE_ANCHORS[self.text_baseline]
        except KeyError:
            raise ValueError(
                f"Unsupported text placement align={self.text_align!r} "
                f"baseline={self.text_baseline!r}"
            ) from None

    def fill_text(self, text: str, x: float, y: float) -> "Context2D":
        font = load_font(self._font_spec, scale=self._sy)
        position = self._to_device(x, y)
        self._draw.text(position, text, font=font, fill=self.fill_style, anchor=self._anchor())
        logger.debug("fill_text %r at %s with %s (anchor=%s)", text, position, self._font, self._anchor())
        return self

    def get_image_data(self, x: int, y: int, width: int, height: int) -> PixelBuffer:
        """Read back a device-pixel rectangle as RGBA bytes."""
        region = self.image.crop((x, y, x + width, y + height)).convert("RGBA")
        return PixelBuffer(region.tobytes(), width, height)


ContextFactory = Callable[[Image.Image], Context2D]


@dataclass
class Surface:
    """Offscreen drawing surface with logical size and physical backing image."""

    image: Image.Image
    dimensions: Dimensions
    device_pixel_ratio: float = 1.0
    context_factory: ContextFactory = Context2D
    _context: Optional[Context2D] = field(default=None, init=False, repr=False)

    @property
    def physical_dimensions(self) -> Dimensions:
        return Dimensions(*self.image.size)

    def get_context(self) -> Context2D:
        """Return the drawing context; the same one on every call, like a canvas."""
        if self._context is None:
            self._context = self.context_factory(self.image)
        return self._context


SurfaceFactory = Callable[[Dimensions, float], Surface]


def create_surface(
    dimensions: Dimensions,
    device_pixel_ratio: float = 1.0,
    *,
    context_factory: ContextFactory = Context2D,
) -> Surface:
    """Allocate a surface of logical `dimensions` backed by physical-resolution pixels."""
    physical = dimensions.scaled(device_pixel_ratio)
    image = Image.new("RGBA", physical.as_size(), (0, 0, 0, 0))
    logger.debug(
        "Created surface %sx%s (physical %sx%s, dpr=%s)",
        dimensions.width,
        dimensions.height,
        physical.width,
        physical.height,
        device_pixel_ratio,
    )
    return Surface(image, dimensions, device_pixel_ratio, context_factory)

"""
Cap-height calculation pipeline.

normalize -> font size -> rasterize -> scan -> height -> ratio -> display

`CapHeightCalculator` owns its configuration and display container, so
independent callers can hold independent calculators. The module-level
`calculate` builds a throwaway calculator for one-off measurements.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

from . import fvd
from .config import CapHeightConfig, default_config
from .display import DisplaySink
from .metrics import Metrics, cap_height_ratio, height
from .properties import FONT_FAMILY, FontProperties, extract_font_size, normalize
from .rasterizer import Raster, rasterize
from .scanner import scan
from .style import pick_font_properties, read_computed_style
from .surface import Dimensions, SurfaceFactory, create_surface

logger = logging.getLogger(__name__)

PropertiesLike = Union[FontProperties, Mapping[str, Any], None]
Decoder = Callable[[str], Mapping[str, Any]]
StyleReader = Callable[[Any], Mapping[str, Any]]


@dataclass(frozen=True)
class Measurement:
    properties: FontProperties
    text: str
    font_size: float
    dimensions: Dimensions
    physical_dimensions: Dimensions
    device_pixel_ratio: float
    metrics: Metrics
    height: int
    ratio: float


class CapHeightCalculator:
    """
    Measures cap-height ratios with one configuration and one display container.

    Args:
        config: Measurement configuration (defaults to `default_config()`)
        surface_factory: Allocates rasterization surfaces
        decoder: Turns a font variation description into font properties
        style_reader: Reads the computed style of an element for `inspect`
    """

    def __init__(
        self,
        config: Optional[CapHeightConfig] = None,
        *,
        surface_factory: SurfaceFactory = create_surface,
        decoder: Decoder = fvd.parse,
        style_reader: StyleReader = read_computed_style,
    ) -> None:
        self.config = config or default_config()
        self.surface_factory = surface_factory
        self.decoder = decoder
        self.style_reader = style_reader
        self.display_sink = DisplaySink(self.config.display)
        self.predicate = self.config.scan.predicate()

    def set_container(self, element: Any) -> None:
        """Set where rendered surfaces are displayed; None disables display."""
        self.display_sink.set_container(element)

    def measure(self, properties: PropertiesLike = None, text: Optional[str] = None) -> Measurement:
        """
        Run the measurement pipeline and return every intermediate value.

        Raises:
            InvalidFontSize: If the font-size is missing, non-numeric or zero
            WhitespaceTextError: If the text contains whitespace
            NoGlyphDetected: If nothing was drawn
        """
        render = self.config.render
        normalized = normalize(properties)
        font_size = extract_font_size(
            normalized, preserve_fractional=self.config.font.preserve_fractional_size
        )

        raster: Raster = rasterize(
            normalized,
            text,
            font_size=font_size,
            device_pixel_ratio=render.device_pixel_ratio,
            multiplier=render.multiplier,
            default_text=render.default_text,
            surface_factory=self.surface_factory,
        )
        metrics = scan(raster.pixel_buffer(), self.predicate)
        height_px = height(metrics)
        ratio = cap_height_ratio(height_px, render.device_pixel_ratio, font_size)

        self.display_sink.display(raster.surface, metrics)

        logger.info(
            "Measured %r with %s: rows %d-%d, height=%dpx, ratio=%.4f",
            raster.text,
            normalized.to_mapping(),
            metrics.ascent,
            metrics.descent,
            height_px,
            ratio,
        )
        return Measurement(
            properties=normalized,
            text=raster.text,
            font_size=font_size,
            dimensions=raster.dimensions,
            physical_dimensions=raster.physical_dimensions,
            device_pixel_ratio=render.device_pixel_ratio,
            metrics=metrics,
            height=height_px,
            ratio=ratio,
        )

    def calculate(self, properties: PropertiesLike = None, text: Optional[str] = None) -> Dict[str, Any]:
        """
        Calculate the cap height.

        Returns:
            A new dict holding the properties with defaults filled in and the
            cap-height ratio added. The caller's mapping is not modified.
        """
        measurement = self.measure(properties, text)
        result = measurement.properties.to_mapping()
        result[self.config.font.result_key] = measurement.ratio
        return result

    def font_active(
        self, callback: Callable[[Dict[str, Any]], Any], text: Optional[str] = None
    ) -> Callable[[str, str], Any]:
        """
        Build a listener for font loader "font active" notifications.

        The listener decodes the variation description, sets the family,
        calculates, and returns whatever `callback` returns for the result.
        """

        def listener(family_name: str, description: str) -> Any:
            properties = dict(self.decoder(description))
            properties[FONT_FAMILY] = family_name
            return callback(self.calculate(properties, text))

        return listener

    def inspect(self, element: Any, text: Optional[str] = None) -> Dict[str, Any]:
        """Calculate the cap height from the computed font properties of `element`."""
        style = self.style_reader(element)
        return self.calculate(pick_font_properties(style), text)


def calculate(
    properties: PropertiesLike = None,
    text: Optional[str] = None,
    *,
    config: Optional[CapHeightConfig] = None,
) -> Dict[str, Any]:
    """One-off `CapHeightCalculator(config).calculate(properties, text)`."""
    return CapHeightCalculator(config).calculate(properties, text)

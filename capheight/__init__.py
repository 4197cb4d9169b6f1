"""
Cap-height measurement package.

This package provides:
- Font property normalization with CSS-style defaults
- Offscreen rasterization of sample text with Pillow
- Pixel scanning for the first and last foreground rows
- Cap-height ratio calculation normalized by device pixel ratio
"""

from .calculator import CapHeightCalculator, Measurement, calculate

__version__ = "0.1.0"

__all__ = ["CapHeightCalculator", "Measurement", "calculate", "__version__"]

"""Shared fixtures: synthetic pixel buffers and a deterministic block-glyph backend."""

from functools import partial

import numpy as np
import pytest
from PIL import ImageDraw

from capheight.scanner import PixelBuffer
from capheight.surface import Context2D, create_surface

# Height of a block glyph as a fraction of the font size
BLOCK_CAP = 0.7


class BlockGlyphContext(Context2D):
    """Draws every text run as one solid block BLOCK_CAP * size high, centred."""

    def fill_text(self, text, x, y):
        sx, sy = self.transform
        size = self.font_spec.size * sy
        h = round(size * BLOCK_CAP)
        w = round(size * 0.5 * len(text))
        left = round(x * sx - w / 2)
        top = round(y * sy - h / 2)
        ImageDraw.Draw(self.image).rectangle(
            (left, top, left + w - 1, top + h - 1), fill=self.fill_style
        )
        return self


@pytest.fixture
def block_surface_factory():
    return partial(create_surface, context_factory=BlockGlyphContext)


def make_buffer(width: int, height: int, rows=(), value: int = 0) -> PixelBuffer:
    """White opaque buffer with the given rows painted `value` on R, G and B."""
    arr = np.full((height, width, 4), 255, dtype=np.uint8)
    for r in rows:
        arr[r, :, :3] = value
    return PixelBuffer.from_array(arr)


@pytest.fixture
def buffer_factory():
    return make_buffer

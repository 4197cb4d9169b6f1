"""
Pixel scanning over flat RGBA buffers.

The scanner walks the raw channel values of a rendered surface once
forward and once backward, looking for the first and last value that the
foreground predicate accepts, and converts those flat indices to row
coordinates. Two predicates are provided:

- ThresholdForeground: value < 255 * threshold, tolerates anti-aliased edges
- ExactForeground: value == foreground value, for pure black-on-white output
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np

from .metrics import Metrics
from .validation import NoGlyphDetected, validate_buffer_size

logger = logging.getLogger(__name__)

CHANNELS = 4  # R, G, B, A
THRESHOLD = 0.75

Predicate = Callable[[int], bool]


@dataclass(frozen=True)
class PixelBuffer:
    """Read-only RGBA snapshot, row-major, `width * height * 4` bytes."""

    data: bytes
    width: int
    height: int

    def __post_init__(self) -> None:
        validate_buffer_size(len(self.data), self.width, self.height, CHANNELS)

    @staticmethod
    def from_array(array: np.ndarray) -> "PixelBuffer":
        """Build from a (height, width, 4) uint8 array."""
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise ValueError(f"Expected (height, width, 4) array, got {array.shape}")
        h, w = array.shape[:2]
        return PixelBuffer(np.ascontiguousarray(array, dtype=np.uint8).tobytes(), w, h)

    def as_array(self) -> np.ndarray:
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, CHANNELS
        )


@dataclass(frozen=True)
class ThresholdForeground:
    threshold: float = THRESHOLD

    def __post_init__(self) -> None:
        if not (0 < self.threshold <= 1):
            raise ValueError(f"threshold must be in (0, 1], got {self.threshold}")

    @property
    def limit(self) -> float:
        return 255 * self.threshold

    def __call__(self, value: int) -> bool:
        return value < self.limit


@dataclass(frozen=True)
class ExactForeground:
    value: int = 0

    def __call__(self, value: int) -> bool:
        return value == self.value


def foreground_predicate(
    policy: str = "threshold", *, threshold: float = THRESHOLD, value: int = 0
) -> Predicate:
    policy = policy.lower()
    if policy == "threshold":
        return ThresholdForeground(threshold)
    if policy == "exact":
        return ExactForeground(value)
    raise ValueError(f"Unknown foreground policy '{policy}'")


def _fast(predicate: Predicate) -> Predicate:
    # Bind the threshold limit once so the loops avoid attribute lookups
    if isinstance(predicate, ThresholdForeground):
        limit = predicate.limit
        return lambda v: v < limit
    return predicate


def find_first(data: Sequence[int], predicate: Predicate) -> Optional[int]:
    """Index of the first channel value accepted by `predicate`, or None."""
    is_foreground = _fast(predicate)
    for index in range(len(data)):
        if is_foreground(data[index]):
            return index
    return None


def find_last(data: Sequence[int], predicate: Predicate) -> Optional[int]:
    """Index of the last channel value accepted by `predicate`, or None."""
    is_foreground = _fast(predicate)
    for index in range(len(data) - 1, -1, -1):
        if is_foreground(data[index]):
            return index
    return None


def row_of(index: int, width: int) -> int:
    """Row of a flat channel index in a buffer `width` pixels wide."""
    return int((index / CHANNELS) // width)


def scan(buffer: PixelBuffer, predicate: Optional[Predicate] = None) -> Metrics:
    """
    Find the first and last rows holding foreground channel values.

    Raises:
        NoGlyphDetected: If no channel value is foreground
    """
    predicate = predicate or ThresholdForeground()

    first = find_first(buffer.data, predicate)
    last = find_last(buffer.data, predicate)
    if first is None or last is None:
        raise NoGlyphDetected(
            f"No foreground pixel found in {buffer.width}x{buffer.height} buffer"
        )

    metrics = Metrics(ascent=row_of(first, buffer.width), descent=row_of(last, buffer.width))
    logger.debug(
        "Scanned %dx%d buffer: ascent=%d descent=%d",
        buffer.width,
        buffer.height,
        metrics.ascent,
        metrics.descent,
    )
    return metrics

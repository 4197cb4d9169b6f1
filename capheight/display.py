from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

from PIL import Image, ImageDraw, ImageOps

from .config import DisplayConfig
from .metrics import Metrics
from .surface import Surface

logger = logging.getLogger(__name__)

# rgba(255, 85, 51, .1)
HIGHLIGHT = (255, 85, 51, 26)


class DisplaySink:
    """
    Optional debug output for rendered surfaces.

    The container decides where surfaces go:
    - an existing directory (str or PathLike): each surface is saved as PNG
    - any object with a callable `append` (a list, a gallery): the image is appended
    - None or anything else: display is a no-op

    Display never raises; failures are logged and skipped.
    """

    def __init__(self, config: Optional[DisplayConfig] = None) -> None:
        self.config = config or DisplayConfig()
        self._container: Any = self.config.directory
        self._count = 0

    @property
    def container(self) -> Any:
        return self._container

    def set_container(self, element: Any) -> None:
        self._container = element

    def _target(self) -> Any:
        element = self._container
        if element is None:
            return None
        if isinstance(element, (str, os.PathLike)):
            path = Path(element)
            return path if path.is_dir() else None
        if callable(getattr(element, "append", None)):
            return element
        return None

    def _next_path(self, directory: Path) -> Path:
        """Next numbered PNG name in `directory` that is not taken yet."""
        while True:
            self._count += 1
            path = directory / f"capheight-{self._count:04d}.png"
            if not path.exists():
                return path

    def render(self, surface: Surface, metrics: Optional[Metrics] = None) -> Image.Image:
        """Copy of the surface with the measured rows marked and a transparent margin."""
        image = surface.image.copy()
        if self.config.highlight and metrics is not None:
            overlay = Image.new("RGBA", image.size, (0, 0, 0, 0))
            ImageDraw.Draw(overlay).rectangle(
                (0, metrics.ascent, image.width - 1, metrics.descent), fill=HIGHLIGHT
            )
            image = Image.alpha_composite(image, overlay)
        border = int(round(self.config.margin * surface.device_pixel_ratio))
        if border:
            image = ImageOps.expand(image, border=border, fill=(0, 0, 0, 0))
        return image

    def display(self, surface: Surface, metrics: Optional[Metrics] = None) -> bool:
        """
        Send the surface to the container.

        Returns:
            bool: True if the surface was displayed, False if skipped
        """
        target = self._target()
        if target is None:
            if self._container is not None:
                logger.debug("Ignoring invalid display container %r", self._container)
            return False

        image = self.render(surface, metrics)
        if isinstance(target, Path):
            path = self._next_path(target)
            try:
                image.save(path)
            except OSError as e:
                logger.warning("Could not save surface to %s: %s", path, e)
                return False
            logger.info("Saved surface to %s", path)
            return True

        try:
            target.append(image)
        except Exception as e:
            logger.warning("Could not append surface to %r: %s", target, e)
            return False
        return True

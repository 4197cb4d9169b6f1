# capheight/config.py
from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

from .scanner import THRESHOLD, foreground_predicate
from .validation import ConfigError, WhitespaceTextError, validate_text

logger = logging.getLogger(__name__)


Policy = Literal["threshold", "exact"]
ResultKey = Literal["cap-height", "--cap-height"]


@dataclass(frozen=True)
class RenderConfig:
    device_pixel_ratio: float = 1.0
    multiplier: float = 2.0
    default_text: str = "H"

    def __post_init__(self) -> None:
        if not self.device_pixel_ratio > 0:
            raise ConfigError(
                f"device_pixel_ratio must be > 0, got {self.device_pixel_ratio}"
            )
        if not self.multiplier > 0:
            raise ConfigError(f"multiplier must be > 0, got {self.multiplier}")
        if not self.default_text:
            raise ConfigError("default_text must not be empty")
        try:
            validate_text(self.default_text)
        except WhitespaceTextError:
            raise ConfigError(
                f"default_text must not contain whitespace, got {self.default_text!r}"
            ) from None


@dataclass(frozen=True)
class ScanConfig:
    policy: Policy = "threshold"
    threshold: float = THRESHOLD
    foreground_value: int = 0

    def __post_init__(self) -> None:
        policy = (self.policy or "threshold").lower()
        if policy not in {"threshold", "exact"}:
            raise ConfigError(f"Invalid scan policy '{self.policy}'")
        if not (0 < self.threshold <= 1):
            raise ConfigError(f"threshold must be in (0, 1], got {self.threshold}")
        if not (0 <= self.foreground_value <= 0xFF):
            raise ConfigError(
                f"foreground_value must be 0-255, got {self.foreground_value}"
            )

    def predicate(self):
        """Build the foreground predicate selected by this configuration."""
        return foreground_predicate(
            self.policy, threshold=self.threshold, value=self.foreground_value
        )


@dataclass(frozen=True)
class FontConfig:
    preserve_fractional_size: bool = False
    result_key: ResultKey = "cap-height"

    def __post_init__(self) -> None:
        if self.result_key not in {"cap-height", "--cap-height"}:
            raise ConfigError(f"Invalid result_key '{self.result_key}'")


@dataclass(frozen=True)
class DisplayConfig:
    directory: Optional[Path] = None
    margin: int = 10
    highlight: bool = True

    def __post_init__(self) -> None:
        if self.margin < 0:
            raise ConfigError(f"margin must be >= 0, got {self.margin}")


@dataclass(frozen=True)
class CapHeightConfig:
    render: RenderConfig = field(default_factory=RenderConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    font: FontConfig = field(default_factory=FontConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)


def load_from_toml(config_path: str | Path) -> CapHeightConfig:
    """
    Load a CapHeightConfig from a TOML file.

    Expected TOML structure (every table and key is optional):

    [render]
    device_pixel_ratio = 2.0
    multiplier = 2.0
    default_text = "H"

    [scan]
    policy = "threshold"  # threshold|exact
    threshold = 0.75
    foreground_value = 0

    [font]
    preserve_fractional_size = false
    result_key = "cap-height"  # cap-height|--cap-height

    [display]
    directory = "out"
    margin = 10
    highlight = true
    """
    p = Path(config_path)
    if not p.exists():
        raise FileNotFoundError(f"Configuration file not found: {p}")

    with p.open("rb") as f:
        data = tomllib.load(f)

    render = data.get("render") or {}
    scan = data.get("scan") or {}
    font = data.get("font") or {}
    display = data.get("display") or {}

    directory = display.get("directory")
    if directory is not None:
        directory = Path(directory)
        if not directory.is_absolute():
            # Relative directories are resolved against the config file
            directory = p.parent / directory

    cfg = CapHeightConfig(
        render=RenderConfig(
            device_pixel_ratio=float(render.get("device_pixel_ratio", 1.0)),
            multiplier=float(render.get("multiplier", 2.0)),
            default_text=str(render.get("default_text", "H")),
        ),
        scan=ScanConfig(
            policy=str(scan.get("policy", "threshold")),  # type: ignore[arg-type]
            threshold=float(scan.get("threshold", THRESHOLD)),
            foreground_value=int(scan.get("foreground_value", 0)),
        ),
        font=FontConfig(
            preserve_fractional_size=bool(font.get("preserve_fractional_size", False)),
            result_key=str(font.get("result_key", "cap-height")),  # type: ignore[arg-type]
        ),
        display=DisplayConfig(
            directory=directory,
            margin=int(display.get("margin", 10)),
            highlight=bool(display.get("highlight", True)),
        ),
    )

    logger.info(
        "Loaded CapHeightConfig: dpr=%s, multiplier=%s, policy=%s (threshold=%s), key=%s",
        cfg.render.device_pixel_ratio,
        cfg.render.multiplier,
        cfg.scan.policy,
        cfg.scan.threshold,
        cfg.font.result_key,
    )
    return cfg


def default_config() -> CapHeightConfig:
    """Threshold scanning at device pixel ratio 1, no display output."""
    return CapHeightConfig()

#!/usr/bin/env python3
"""
Cap-height command line entry point.

Measures one font description and prints the resulting properties as JSON.
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from . import fvd
from .calculator import CapHeightCalculator
from .config import CapHeightConfig, default_config, load_from_toml
from .validation import ValidationError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Measure the cap-height ratio of rendered text"
    )
    parser.add_argument("text", nargs="?", default=None, help="Text to measure (default: H)")
    parser.add_argument("--config", help="Path to TOML configuration file")
    parser.add_argument("--font-style", help="CSS font-style (default: normal)")
    parser.add_argument("--font-weight", help="CSS font-weight (default: 400)")
    parser.add_argument("--font-size", help="CSS font-size (default: 100px)")
    parser.add_argument("--font-family", help="CSS font-family (default: serif)")
    parser.add_argument(
        "--fvd", help='Font variation description, e.g. "i7" (sets style and weight)'
    )
    parser.add_argument("--dpr", type=float, help="Device pixel ratio")
    parser.add_argument(
        "--policy", choices=["threshold", "exact"], help="Foreground detection policy"
    )
    parser.add_argument("--save-dir", help="Existing directory to save rendered surfaces")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _config_from_args(args: argparse.Namespace) -> CapHeightConfig:
    cfg = load_from_toml(args.config) if args.config else default_config()
    if args.dpr is not None:
        cfg = replace(cfg, render=replace(cfg.render, device_pixel_ratio=args.dpr))
    if args.policy:
        cfg = replace(cfg, scan=replace(cfg.scan, policy=args.policy))
    if args.save_dir:
        cfg = replace(cfg, display=replace(cfg.display, directory=Path(args.save_dir)))
    return cfg


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        calculator = CapHeightCalculator(_config_from_args(args))
        properties = fvd.parse(args.fvd) if args.fvd else {}
        for key in ("font_style", "font_weight", "font_size", "font_family"):
            value = getattr(args, key)
            if value is not None:
                properties[key.replace("_", "-")] = value
        result = calculator.calculate(properties, args.text)
    except ValidationError as e:
        logger.error("%s", e)
        return 2
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1

    print(json.dumps(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())

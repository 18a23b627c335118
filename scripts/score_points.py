#!/usr/bin/env python3
"""
Score exported raw stroke files against a perfect circle.

Usage:
    python3 scripts/score_points.py circle-20250630-1405.json [more.json ...] \
        --target-radius 250 --n-angles 360

Each file holds a JSON list of {"t", "x", "y"} samples, as written by the
session exporter. Files that cannot be scored print N/A.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from core.config import load_scoring_config
from core.errors import ScoringError
from core.models import SamplePoint
from scoring.feedback import format_mse, grade_feedback
from scoring.scorer import calculate_mse


def load_points(path: Path) -> List[SamplePoint]:
    payload = json.loads(path.read_text())
    return [SamplePoint.model_validate(item) for item in payload]


def main(argv: Optional[List[str]] = None) -> int:
    defaults = load_scoring_config()
    parser = argparse.ArgumentParser(description="Score circle drawings from raw points files")
    parser.add_argument("files", nargs="+", type=Path)
    parser.add_argument("--target-radius", type=float, default=defaults.target_radius)
    parser.add_argument("--n-angles", type=int, default=defaults.n_angles)
    args = parser.parse_args(argv)

    try:
        config = defaults.with_overrides(target_radius=args.target_radius, n_angles=args.n_angles)
    except ValidationError as exc:
        parser.error(f"invalid scoring options: {exc}")
    failures = 0
    for path in args.files:
        try:
            points = load_points(path)
        except (OSError, ValueError) as exc:
            print(f"{path.name}: unreadable ({exc})", file=sys.stderr)
            failures += 1
            continue
        try:
            mse = calculate_mse(points, config.target_radius, config.n_angles)
        except ScoringError as exc:
            print(f"{path.name}\tN/A\t{exc}")
            continue
        feedback = grade_feedback(mse, config)
        print(f"{path.name}\t{format_mse(mse)}\t{feedback.message}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())

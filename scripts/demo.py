from __future__ import annotations

import argparse
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional

from core.config import load_scoring_config
from core.models import Session
from core.synthetic import synthetic_circle
from sessions.export import SessionExporter


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run a synthetic circle-drawing session")
    parser.add_argument("--trials", type=int, default=10)
    parser.add_argument("--fatigue", type=int, default=5)
    parser.add_argument("--export-dir", type=Path, default=None)
    parser.add_argument("--seed", type=int, default=7)
    args = parser.parse_args(argv)

    config = load_scoring_config()
    session = Session(fatigue_rating=args.fatigue)
    start = datetime.now(timezone.utc)
    for i in range(args.trials):
        # drawings get steadier as practice goes on
        wobble = max(0.02, 0.12 - 0.01 * i)
        drawing = synthetic_circle(
            radius=180 + 10 * i,
            ovality=wobble / 2,
            tremor=wobble / 3,
            noise=0.005,
            n_strokes=1 + i % 2,
            seed=args.seed + i,
        )
        trial = session.record(drawing, timestamp=start + timedelta(seconds=90 * i), config=config)
        tag = "practice" if session.is_warmup(trial.id) else "scored"
        print(f"trial {i + 1:2d} [{tag}] mse={trial.mse_display}")

    print(session.export_metadata().to_json())
    if args.export_dir:
        for path in SessionExporter(args.export_dir).export(session):
            print("wrote", path)


if __name__ == "__main__":
    main()

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List

from core.models import Session, Trial

logger = logging.getLogger(__name__)

SESSION_METADATA_FILE = "session-metadata.json"


def raw_points_payload(trial: Trial) -> List[Dict[str, float]]:
    return [point.model_dump() for point in trial.points()]


class SessionExporter:
    """Writes the exportable part of a session as key-sorted JSON files.

    One raw points file per trial past the warm-up window, named by the
    trial's ``raw_points_file``, plus ``session-metadata.json``.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _write(self, path: Path, payload) -> Path:
        path.write_text(json.dumps(payload, indent=2, sort_keys=True))
        return path

    def export(self, session: Session) -> List[Path]:
        target = self.directory / f"circle-session-{session.id}"
        target.mkdir(parents=True, exist_ok=True)
        trials = session.export_view()
        written: List[Path] = []
        for trial in trials:
            path = target / trial.metadata.raw_points_file
            if path in written:
                logger.warning(
                    "raw points file %s is shared by several trials in session %s; keeping the latest",
                    path.name,
                    session.id,
                )
                written.remove(path)
            written.append(self._write(path, raw_points_payload(trial)))
        metadata_path = target / SESSION_METADATA_FILE
        metadata_path.write_text(session.export_metadata().to_json())
        written.append(metadata_path)
        logger.info("exported %d trials of session %s to %s", len(trials), session.id, target)
        return written

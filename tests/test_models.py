import json
import math
import threading
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from core.errors import DuplicateTrial, NotFound
from core.models import Drawing, SamplePoint, Session, SessionMetadata, Trial, TrialMetadata

T0 = datetime(2025, 6, 30, 14, 5, 9, tzinfo=timezone.utc)


def _circle(radius=100.0, step=10, cx=384.0, cy=512.0):
    return Drawing.from_points(
        [
            SamplePoint(
                x=cx + radius * math.cos(math.radians(d)),
                y=cy + radius * math.sin(math.radians(d)),
                t=d / 360.0,
            )
            for d in range(0, 360, step)
        ]
    )


def _session_with(n, fatigue_rating=6):
    session = Session(fatigue_rating=fatigue_rating)
    for i in range(n):
        session.record(_circle(), timestamp=T0 + timedelta(minutes=i))
    return session


def test_sample_point_is_immutable_and_time_non_negative():
    point = SamplePoint(x=1.0, y=2.0, t=0.5)
    with pytest.raises(ValidationError):
        point.x = 3.0
    with pytest.raises(ValidationError):
        SamplePoint(x=0.0, y=0.0, t=-0.1)


def test_drawing_flattens_strokes_in_order():
    a = [SamplePoint(x=0, y=0, t=0), SamplePoint(x=1, y=0, t=0.1)]
    b = [SamplePoint(x=2, y=0, t=0)]
    drawing = Drawing(strokes=[a, b])
    assert [p.x for p in drawing.points()] == [0, 1, 2]
    assert Drawing.from_points([]).points() == []


def test_trial_capture_scores_and_derives_identifiers():
    trial = Trial.capture(_circle(), timestamp=T0, fatigue_rating=3)
    assert trial.metadata.trial_id == "2025-06-30T14:05:09Z"
    assert trial.metadata.raw_points_file == "circle-20250630-1405.json"
    assert trial.metadata.fatigue_rating == 3
    assert trial.mse == pytest.approx(0.0, abs=1e-9)
    assert trial.mse_display == "0.0"
    assert len(trial.points()) == 36


def test_trial_capture_converts_timestamps_to_utc():
    local = datetime(2025, 6, 30, 16, 5, 9, tzinfo=timezone(timedelta(hours=2)))
    trial = Trial.capture(_circle(), timestamp=local)
    assert trial.metadata.trial_id == "2025-06-30T14:05:09Z"


@pytest.mark.parametrize(
    "points",
    [
        [],
        [SamplePoint(x=1, y=1, t=0), SamplePoint(x=2, y=2, t=0.1)],
        [SamplePoint(x=7, y=7, t=i / 10) for i in range(5)],
    ],
)
def test_unscorable_drawing_still_produces_trial(points):
    trial = Trial.capture(Drawing.from_points(points), timestamp=T0)
    assert trial.metadata.mse is None
    assert trial.mse_display == "N/A"


def test_trial_metadata_rejects_non_finite_scores_and_bad_ratings():
    with pytest.raises(ValidationError):
        TrialMetadata(trial_id="a", mse=float("inf"), raw_points_file="f.json")
    with pytest.raises(ValidationError):
        TrialMetadata(trial_id="a", mse=-1.0, raw_points_file="f.json")
    with pytest.raises(ValidationError):
        TrialMetadata(trial_id="a", fatigue_rating=11, raw_points_file="f.json")


def test_append_rejects_duplicate_identifier():
    session = Session()
    trial = Trial.capture(_circle(), timestamp=T0)
    session.append(trial)
    with pytest.raises(DuplicateTrial):
        session.append(trial)


@pytest.mark.parametrize("n", range(0, 12))
def test_export_view_drops_first_five(n):
    session = _session_with(n)
    view = session.export_view()
    assert len(view) == max(0, n - 5)
    first_five = {t.id for t in session.trials[:5]}
    assert not first_five & {t.id for t in view}


def test_record_rates_only_post_warmup_trials():
    session = _session_with(7, fatigue_rating=8)
    assert [t.metadata.fatigue_rating for t in session.trials] == [None] * 5 + [8, 8]


def test_remove_promotes_later_trial_into_warmup_window():
    session = _session_with(7)
    sixth = session.trials[5]
    assert not session.is_warmup(sixth.id)
    session.remove(session.trials[0].id)
    assert session.is_warmup(sixth.id)
    assert [t.id for t in session.export_view()] == [session.trials[5].id]


def test_operations_on_unknown_trial_raise_not_found():
    session = _session_with(2)
    with pytest.raises(NotFound):
        session.remove("missing")
    with pytest.raises(NotFound):
        session.rename("missing", "label")
    with pytest.raises(NotFound):
        session.get("missing")
    assert len(session.trials) == 2


def test_rename_changes_only_the_label():
    session = _session_with(3)
    before = session.trials[1]
    after = session.rename(before.id, "wobbly one")
    assert after.metadata.trial_id == "wobbly one"
    assert after.metadata.mse == before.metadata.mse
    assert after.drawing == before.drawing
    assert after.id == before.id
    assert after.timestamp == before.timestamp
    assert after.metadata.raw_points_file == before.metadata.raw_points_file
    assert session.get(before.id) is after


def test_rename_rejects_empty_and_duplicate_labels():
    session = _session_with(2)
    first, second = session.trials
    with pytest.raises(ValueError):
        session.rename(first.id, "  ")
    with pytest.raises(DuplicateTrial):
        session.rename(first.id, second.metadata.trial_id)
    # renaming to its own label is a no-op
    session.rename(first.id, first.metadata.trial_id)


def test_session_rating_is_fixed_after_creation():
    session = Session(fatigue_rating=4)
    with pytest.raises(ValidationError):
        session.fatigue_rating = 9
    with pytest.raises(ValidationError):
        Session(fatigue_rating=0)


def test_session_metadata_json_is_key_sorted_and_omits_absent_fields():
    session = Session(fatigue_rating=None, created=T0)
    for i in range(6):
        session.record(_circle(), timestamp=T0 + timedelta(minutes=i))
    session.append(Trial.capture(Drawing(), timestamp=T0 + timedelta(minutes=10)))
    text = session.export_metadata().to_json()
    payload = json.loads(text)
    assert list(payload) == sorted(payload)
    assert "fatigue_rating" not in payload
    assert payload["created"] == "2025-06-30T14:05:09Z"
    assert payload["session_id"] == session.id
    assert [t["trial_id"] for t in payload["trials"]] == ["2025-06-30T14:10:09Z", "2025-06-30T14:15:09Z"]
    assert set(payload["trials"][0]) == {"trial_id", "mse", "raw_points_file"}
    assert set(payload["trials"][1]) == {"trial_id", "raw_points_file"}


def test_session_metadata_reads_reference_date_seconds():
    text = json.dumps(
        {
            "session_id": "abc",
            "created": 86400,
            "fatigue_rating": 5,
            "trials": [{"trial_id": "t1", "mse": 12.5, "raw_points_file": "circle-20010102-0000.json"}],
        }
    )
    meta = SessionMetadata.from_json(text)
    assert meta.created == datetime(2001, 1, 2, tzinfo=timezone.utc)
    assert meta.trials[0].mse == 12.5
    assert meta.trials[0].fatigue_rating is None


def test_concurrent_appends_are_not_lost():
    session = Session()
    trials = [Trial.capture(Drawing(), timestamp=T0) for _ in range(200)]

    def worker(chunk):
        for trial in chunk:
            session.append(trial)

    threads = [threading.Thread(target=worker, args=(trials[i::4],)) for i in range(4)]
    for th in threads:
        th.start()
    for th in threads:
        th.join()
    assert len(session.trials) == 200
    assert len({t.id for t in session.trials}) == 200


def test_trial_fields_are_fixed_after_capture():
    trial = Trial.capture(_circle(), timestamp=T0)
    for field, value in (
        ("timestamp", datetime(1999, 1, 1, tzinfo=timezone.utc)),
        ("id", "other"),
        ("drawing", Drawing()),
        ("metadata", trial.metadata.model_copy(update={"mse": 0.5})),
    ):
        with pytest.raises(ValidationError):
            setattr(trial, field, value)
    assert isinstance(trial.drawing.strokes, tuple)
    assert isinstance(trial.drawing.strokes[0], tuple)
    with pytest.raises(AttributeError):
        trial.drawing.strokes[0].append(SamplePoint(x=0, y=0, t=9))
    assert trial.timestamp == T0
    assert len(trial.points()) == 36


def test_position_and_snapshot():
    session = _session_with(3)
    ids = [t.id for t in session.trials]
    assert [session.position(i) for i in ids] == [0, 1, 2]
    snapshot = session.snapshot()
    session.remove(ids[0])
    assert [t.id for t in snapshot] == ids
    assert session.position(ids[2]) == 1
    with pytest.raises(NotFound):
        session.position(ids[0])


def test_locked_blocks_other_writers():
    session = _session_with(2)
    target = session.trials[0].id
    remover = threading.Thread(target=session.remove, args=(target,))
    with session.locked():
        remover.start()
        remover.join(timeout=0.2)
        assert remover.is_alive()
        assert session.position(target) == 0
    remover.join()
    assert len(session.trials) == 1

import json

import numpy as np
import pandas as pd
import pytest

import ambitus


def _run(capsys, *argv):
    rc = ambitus.main(list(argv))
    out = capsys.readouterr().out
    return rc, out


def test_classify_command(capsys):
    rc, out = _run(
        capsys, "classify", "--low", "64", "--high", "84",
        "--speaking", "69", "--grouping", "woman",
    )
    assert rc == 0
    data = json.loads(out)
    assert data["category"] == "soprano"
    assert data["confidence"] > 0.4
    assert data["suggestedRange"] == {"min": 60, "max": 84}


def test_classify_rejects_unknown_grouping(capsys):
    with pytest.raises(SystemExit):
        ambitus.main(["classify", "--low", "50", "--high", "60", "--grouping", "robot"])


def test_analyze_command(capsys, sine, write_wav):
    path = write_wav("a3.wav", sine(220.0, dur=1.0))
    rc, out = _run(capsys, "analyze", path)
    assert rc == 0
    data = json.loads(out)
    assert data[0]["path"] == path
    assert data[0]["stats"]["median"] == pytest.approx(57.0, abs=0.2)
    assert data[0]["stats"]["confidence"] == 1.0


def test_analyze_stereo_file(capsys, sine, write_wav):
    mono = sine(440.0, dur=0.5)
    path = write_wav("stereo.wav", np.column_stack([mono, mono]))
    rc, out = _run(capsys, "analyze", path)
    assert rc == 0
    assert json.loads(out)[0]["stats"]["median"] == pytest.approx(69.0, abs=0.2)


def test_analyze_missing_file(capsys, tmp_path):
    rc = ambitus.main(["analyze", str(tmp_path / "nope.wav")])
    assert rc == 2


def test_analyze_bad_frame_size(capsys, sine, write_wav):
    path = write_wav("a3.wav", sine(220.0, dur=0.5))
    assert ambitus.main(["analyze", path, "--frame-size", "256"]) == 2


def test_session_command(capsys, sine, write_wav):
    speaking = write_wav("speaking.wav", sine(196.0, dur=0.5))   # G3, MIDI 55
    low = write_wav("low.wav", sine(130.81, dur=0.5))            # C3, MIDI 48
    high = write_wav("high.wav", sine(392.0, dur=0.5))           # G4, MIDI 67
    rc, out = _run(
        capsys, "session", "--speaking", speaking,
        "--range", low, "--range", high, "--grouping", "man",
    )
    assert rc == 0
    data = json.loads(out)
    assert [r["step"] for r in data["recordings"]] == ["speaking", "range", "range"]
    assert data["classification"]["category"] in {"tenor", "baritone", "bass"}


def test_session_without_pitch(capsys, write_wav):
    path = write_wav("silence.wav", np.zeros(22050))
    rc, out = _run(capsys, "session", "--song", path, "--grouping", "woman")
    assert rc == 0
    assert json.loads(out)["classification"] is None


def test_session_needs_recordings(capsys):
    assert ambitus.main(["session", "--grouping", "man"]) == 2


def test_batch_command(capsys, tmp_path, sine, write_wav):
    write_wav("one.wav", sine(220.0, dur=0.5))
    write_wav("two.wav", np.zeros(22050))
    (tmp_path / "notes.txt").write_text("not audio")
    report = tmp_path / "report.csv"

    rc, out = _run(capsys, "batch", "--input-dir", str(tmp_path), "--out", str(report))
    assert rc == 0
    assert "Analyzed 2 files: 1 without pitch" in out

    df = pd.read_csv(report)
    assert list(df.columns) == ambitus.REPORT_COLUMNS
    assert len(df) == 2
    row = df[df["path"].str.endswith("one.wav")].iloc[0]
    assert row["min_note"] == "A3"
    assert row["confidence"] == 1.0


def test_patterns_command(capsys):
    rc, out = _run(capsys, "patterns", "--grouping", "man", "--variant", "1")
    assert rc == 0
    data = json.loads(out)
    assert [p["id"] for p in data] == ["masculine-1-low", "masculine-1-high"]
    assert len(data[0]["frequencies"]) == 5

import math

from analysis.pitch_stats import PitchStats
from analysis.range_classifier import ClassificationInput
from analysis.session import (
    Recording,
    build_classification_input,
    classify_session,
    pooled_pitches,
    speaking_median,
)


def _rec(step, lo=None, hi=None, med=None):
    return Recording(step=step, stats=PitchStats(min=lo, max=hi, median=med, confidence=1.0))


def test_pool_collects_every_measured_value():
    recs = [
        _rec("speaking", 52, 60, 55),
        _rec("song", 50, 70, None),
        Recording("range"),
    ]
    assert sorted(pooled_pitches(recs)) == [50, 52, 55, 60, 70]


def test_pool_skips_non_finite():
    recs = [_rec("song", float("nan"), 66, math.inf)]
    assert pooled_pitches(recs) == [66.0]


def test_build_input_uses_extremes_and_speaking_median():
    recs = [
        _rec("speaking", 50, 58, 53),
        _rec("song", 48, 67, 60),
        _rec("range", 45, 72, 58),
    ]
    inp = build_classification_input(recs, "man")
    assert inp == ClassificationInput(45, 72, 53, "man")


def test_speaking_median_only_from_speaking_step():
    recs = [_rec("song", 50, 70, 60), _rec("range", 45, 72, 58)]
    assert speaking_median(recs) is None
    inp = build_classification_input(recs, "woman")
    assert inp.speaking_median is None


def test_speaking_median_first_speaking_take():
    recs = [
        Recording("speaking"),
        _rec("speaking", 50, 58, 53),
    ]
    assert speaking_median(recs) is None


def test_no_data_means_no_input():
    assert build_classification_input([], "woman") is None
    assert build_classification_input([Recording("song")], "woman") is None
    assert classify_session([Recording("range", PitchStats())], "man") is None


def test_classify_session():
    recs = [
        _rec("speaking", 64, 74, 69),
        _rec("range", 64, 84, 72),
    ]
    result = classify_session(recs, "woman")
    assert result.category == "soprano"
    assert result.suggested_range.min == 60
    assert result.suggested_range.max == 84


def test_accepts_generator():
    recs = (r for r in [_rec("speaking", 45, 55, 52), _rec("range", 45, 63, 50)])
    inp = build_classification_input(recs, "man")
    assert inp.lowest_midi == 45
    assert inp.highest_midi == 63
    assert inp.speaking_median == 52

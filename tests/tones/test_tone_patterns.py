import pytest

from utils.music_utils import frequency_to_midi, midi_to_frequency
from utils.tone_patterns import (
    PATTERN_INTERVALS,
    PATTERN_VARIANT_COUNT,
    get_pattern_set,
    profile_for_grouping,
)


def _midis(pattern):
    return [round(frequency_to_midi(f), 6) for f in pattern.frequencies]


def test_feminine_variant_zero():
    low, high = get_pattern_set("feminine", 0)
    assert low.id == "feminine-0-low"
    assert high.id == "feminine-0-high"
    assert low.label == "Glow low"
    assert high.label == "Float high"
    assert low.frequencies[0] == pytest.approx(261.6256, rel=1e-6)
    assert _midis(low) == [60, 62, 64, 62, 60]
    # next root (62) plus a fourth
    assert _midis(high) == [67, 69, 71, 69, 67]


def test_masculine_variant_wraps():
    low, high = get_pattern_set("masculine", 3)
    assert _midis(low)[0] == 55
    # wraps back to the first root, 48 + 5
    assert _midis(high)[0] == 53
    assert high.id == "masculine-3-high"


def test_variant_beyond_count_reuses_roots():
    a = get_pattern_set("feminine", 1)
    b = get_pattern_set("feminine", 1 + PATTERN_VARIANT_COUNT)
    assert a[0].frequencies == b[0].frequencies
    assert a[0].id != b[0].id


def test_pattern_shape():
    for pattern in get_pattern_set("masculine", 2):
        assert len(pattern.frequencies) == len(PATTERN_INTERVALS)
        assert pattern.frequencies[0] == pattern.frequencies[-1]
        assert pattern.frequencies[2] == pytest.approx(
            midi_to_frequency(frequency_to_midi(pattern.frequencies[0]) + 4)
        )


def test_unknown_profile():
    with pytest.raises(ValueError):
        get_pattern_set("alto", 0)


def test_profile_for_grouping():
    assert profile_for_grouping("man") == "masculine"
    assert profile_for_grouping("woman") == "feminine"
    assert profile_for_grouping("nonbinary") == "feminine"

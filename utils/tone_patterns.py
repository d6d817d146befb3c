# utils/tone_patterns.py
"""
Tone-matching patterns played during the range step.

Each pattern is a five-note "do-re-mi-re-do" figure. A variant picks the
root for the low pattern; the high pattern starts a fourth above the next
root along.
"""
from dataclasses import dataclass
from typing import List, Tuple

from utils.music_utils import midi_to_frequency

PATTERN_INTERVALS = (0, 2, 4, 2, 0)

FEMININE_ROOTS = (60, 62, 65, 67)
MASCULINE_ROOTS = (48, 50, 53, 55)

PATTERN_VARIANT_COUNT = 4

PROFILE_META = {
    "feminine": {
        "low": ("Glow low", "Gentle chest “ma” around middle C."),
        "high": ("Float high", "Soft head mix to show your upper shimmer."),
    },
    "masculine": {
        "low": ("Ground low", "Relaxed chest “ma” that sits comfortably."),
        "high": ("Reach high", "Ease into your upper chest / mix without strain."),
    },
}

_ROOTS = {"feminine": FEMININE_ROOTS, "masculine": MASCULINE_ROOTS}


@dataclass(frozen=True)
class PatternDefinition:
    id: str
    label: str
    description: str
    frequencies: Tuple[float, ...]


def build_pattern(pattern_id, label, description, root_midi) -> PatternDefinition:
    return PatternDefinition(
        id=pattern_id,
        label=label,
        description=description,
        frequencies=tuple(midi_to_frequency(root_midi + i) for i in PATTERN_INTERVALS),
    )


def get_pattern_set(profile, variant) -> List[PatternDefinition]:
    """Low and high pattern for a profile ("feminine" or "masculine")."""
    if profile not in _ROOTS:
        raise ValueError(f"unknown tone profile: {profile!r}")

    roots = _ROOTS[profile]
    meta = PROFILE_META[profile]
    root_index = variant % len(roots)
    low_root = roots[root_index]
    high_root = roots[(root_index + 1) % len(roots)] + 5

    low_label, low_desc = meta["low"]
    high_label, high_desc = meta["high"]
    return [
        build_pattern(f"{profile}-{variant}-low", low_label, low_desc, low_root),
        build_pattern(f"{profile}-{variant}-high", high_label, high_desc, high_root),
    ]


def profile_for_grouping(grouping) -> str:
    """Tone profile to offer for a preferred grouping; men get the lower set."""
    return "masculine" if grouping == "man" else "feminine"

"""
Static voice tables used by the classifiers.

All values are MIDI note numbers (60 = C4, 69 = A4).
These are read-only reference data; nothing mutates them at runtime.
"""
from collections import namedtuple

VocalRangeDefinition = namedtuple("VocalRangeDefinition", ["category", "min", "max"])

# ---------------------------------------------------------
# Coarse tessitura bands (gender-agnostic heuristic)
#
# The heuristic picks the fitting band centred nearest the observed
# span; table order only breaks ties.
# ---------------------------------------------------------

VOICE_BANDS = (
    ("bass",     (40, 52)),   # E2 – E3
    ("baritone", (48, 60)),   # C3 – C4
    ("tenor",    (52, 64)),   # E3 – E4
    ("alto",     (55, 67)),   # G3 – G4
    ("mezzo",    (60, 72)),   # C4 – C5
    ("soprano",  (65, 77)),   # F4 – F5
)

BAND_TOLERANCE = 2  # semitones either side

# ---------------------------------------------------------
# Full ranges scored by the range classifier
# ---------------------------------------------------------

UPPER_VOICE_RANGES = (
    VocalRangeDefinition("soprano", 60, 84),   # C4 – C6
    VocalRangeDefinition("mezzo",   57, 81),   # A3 – A5
    VocalRangeDefinition("alto",    52, 76),   # E3 – E5
)

LOWER_VOICE_RANGES = (
    VocalRangeDefinition("tenor",    48, 72),  # C3 – C5
    VocalRangeDefinition("baritone", 44, 68),  # G#2 – G#4
    VocalRangeDefinition("bass",     38, 62),  # D2 – D4
)

ALL_RANGES = UPPER_VOICE_RANGES + LOWER_VOICE_RANGES

GROUPINGS = ("woman", "man", "nonbinary", "prefer-not-to-say")

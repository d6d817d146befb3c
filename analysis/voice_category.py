# analysis/voice_category.py
from analysis.utils import safe_array
from analysis.voice_data import BAND_TOLERANCE, VOICE_BANDS


def fitting_bands(lo, hi):
    """Bands (in VOICE_BANDS order) that contain [lo, hi] within BAND_TOLERANCE."""
    return [
        (label, (band_lo, band_hi))
        for label, (band_lo, band_hi) in VOICE_BANDS
        if lo >= band_lo - BAND_TOLERANCE and hi <= band_hi + BAND_TOLERANCE
    ]


def midi_to_voice_category(midi_values):
    """
    Coarse voice label from a set of MIDI observations.

    Every band that contains [min, max] once widened by BAND_TOLERANCE is
    a candidate. Neighbouring bands overlap by most of an octave, so the
    candidate centred nearest the observed span wins; equal distances go
    to the earlier band in VOICE_BANDS. Returns None when nothing fits or
    there are no observations.
    """
    values = safe_array(midi_values)
    if values.size == 0:
        return None

    lo = float(values.min())
    hi = float(values.max())

    candidates = fitting_bands(lo, hi)
    if not candidates:
        return None

    midpoint = (lo + hi) / 2
    # min() keeps the first of equal keys
    label, _ = min(
        candidates,
        key=lambda c: abs((c[1][0] + c[1][1]) / 2 - midpoint),
    )
    return label

# analysis/level.py
"""
Loudness helpers for the recording meter.

These values drive the live level bar only; nothing here feeds
classification.
"""
import math

import numpy as np

from analysis.utils import audio_array

# Linear amplitude that reads as a full meter
RMS_REFERENCE = 0.5

# Decibel window mapped onto [0, 1]
DB_FLOOR = -72.0
DB_CEILING = -12.0


def compute_rms_level(samples) -> float:
    """RMS of the buffer relative to RMS_REFERENCE, capped at 1. Empty → 0."""
    buf = audio_array(samples)
    if buf.size == 0:
        return 0.0

    rms = math.sqrt(float(np.sum(buf * buf)) / buf.size)
    return min(1.0, rms / RMS_REFERENCE)


def normalise_decibels(db) -> float:
    """Map a dB reading in [-72, -12] onto [0, 1]; anything outside saturates."""
    try:
        db = float(db)
    except (TypeError, ValueError):
        return 0.0

    if not math.isfinite(db):
        return 0.0

    clamped = max(DB_FLOOR, min(DB_CEILING, db))
    normalised = (clamped - DB_FLOOR) / (DB_CEILING - DB_FLOOR)
    return max(0.0, min(1.0, normalised))

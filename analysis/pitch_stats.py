# analysis/pitch_stats.py
"""
Per-take pitch statistics.

A completed recording is cut into overlapping frames, each frame goes
through the autocorrelation detector, and the voiced frames are summarised
in MIDI units. These are the numbers the session aggregator pools.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np

from analysis.pitch import MIN_SAMPLES, detect_pitch
from analysis.utils import audio_array
from utils.music_utils import frequency_to_midi

logger = logging.getLogger(__name__)

DEFAULT_FRAME_SIZE = 2048
DEFAULT_HOP_SIZE = 1024

# Detections outside this band are treated as unvoiced
MIN_VOICE_HZ = 50.0
MAX_VOICE_HZ = 1500.0


@dataclass(frozen=True)
class PitchStats:
    min: Optional[float] = None
    max: Optional[float] = None
    median: Optional[float] = None
    confidence: float = 0.0
    frames: int = 0
    voiced_frames: int = 0

    @property
    def voiced(self) -> bool:
        return self.voiced_frames > 0

    def to_dict(self) -> Dict[str, Any]:
        """Numeric stats only; missing values are left out."""
        out = {}
        for key in ("min", "max", "median"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        out["confidence"] = self.confidence
        return out

    @classmethod
    def from_dict(cls, data) -> "PitchStats":
        if not data:
            return cls()
        return cls(
            min=data.get("min"),
            max=data.get("max"),
            median=data.get("median"),
            confidence=float(data.get("confidence", 0.0) or 0.0),
        )


def iter_frames(buf, frame_size, hop_size):
    """Yield successive frames; a buffer shorter than one frame is yielded whole."""
    if buf.size <= frame_size:
        if buf.size:
            yield buf
        return
    for start in range(0, buf.size - frame_size + 1, hop_size):
        yield buf[start:start + frame_size]


def pitch_track(samples, sample_rate, frame_size=DEFAULT_FRAME_SIZE,
                hop_size=DEFAULT_HOP_SIZE):
    """
    MIDI value per frame, NaN where the frame is unvoiced.
    """
    if frame_size < MIN_SAMPLES:
        raise ValueError(f"frame_size must be at least {MIN_SAMPLES}, got {frame_size}")
    if hop_size <= 0:
        raise ValueError(f"hop_size must be positive, got {hop_size}")

    buf = audio_array(samples)
    track = []
    for frame in iter_frames(buf, frame_size, hop_size):
        f0 = detect_pitch(frame, sample_rate)
        if f0 is None or not (MIN_VOICE_HZ <= f0 <= MAX_VOICE_HZ):
            track.append(np.nan)
            continue
        track.append(frequency_to_midi(f0))

    return np.asarray(track, dtype=float)


def summarize_pitch(samples, sample_rate, frame_size=DEFAULT_FRAME_SIZE,
                    hop_size=DEFAULT_HOP_SIZE) -> PitchStats:
    """Min/max/median MIDI over the voiced frames of a take."""
    track = pitch_track(samples, sample_rate, frame_size, hop_size)
    frames = int(track.size)
    voiced = track[np.isfinite(track)]

    logger.debug("pitch summary: %d/%d voiced frames", voiced.size, frames)

    if voiced.size == 0:
        return PitchStats(confidence=0.0, frames=frames, voiced_frames=0)

    return PitchStats(
        min=float(np.min(voiced)),
        max=float(np.max(voiced)),
        median=float(np.median(voiced)),
        confidence=float(voiced.size) / frames,
        frames=frames,
        voiced_frames=int(voiced.size),
    )

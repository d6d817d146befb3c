# analysis/pitch.py
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np

from analysis.utils import audio_array

logger = logging.getLogger(__name__)

# Empirically tuned; keep these exact
MIN_SAMPLES = 1024
GOOD_ENOUGH_CORRELATION = 0.9
SILENCE_RMS = 0.01
EDGE_THRESHOLD = 0.2


@dataclass(frozen=True)
class PitchResult:
    f0: Optional[float]
    method: str          # "autocorr", "fallback" or "none"
    debug: Dict[str, Any] = field(default_factory=dict)


def _none(reason, **extra):
    logger.debug("no pitch: %s", reason)
    return PitchResult(None, "none", {"reason": reason, **extra})


def _trim_edges(buf):
    """
    Return (r1, r2) bounding the analysis window.

    r1 is the first quiet sample in the first half, r2 the last quiet
    sample in the second half; the buffer edges are kept when nothing
    is below EDGE_THRESHOLD.
    """
    n = buf.size
    half = (n + 1) // 2
    quiet = np.abs(buf) < EDGE_THRESHOLD

    head = np.flatnonzero(quiet[:half])
    r1 = int(head[0]) if head.size else 0

    tail_start = n - half + 1
    tail = np.flatnonzero(quiet[tail_start:])
    r2 = tail_start + int(tail[-1]) if tail.size else n - 1

    return r1, r2


def _normalised_autocorrelation(window):
    """
    Average lagged product for every lag, divided by the zero-lag value.

    corr[0] == 1.0; a perfectly periodic signal approaches 1.0 again at
    multiples of its period.
    """
    size = window.size
    # Zero-padded FFT gives the linear (not circular) lagged sums
    nfft = 1 << (2 * size - 1).bit_length()
    spectrum = np.fft.rfft(window, n=nfft)
    sums = np.fft.irfft(spectrum * np.conj(spectrum), n=nfft)[:size]
    corr = sums / (size - np.arange(size))
    energy = corr[0]
    if energy <= 1e-12:
        return None
    return corr / energy


def estimate_pitch(samples, sample_rate) -> PitchResult:
    """
    Autocorrelation pitch estimate of a mono buffer.

    The lag scan starts once the correlation has dropped below
    GOOD_ENOUGH_CORRELATION after lag zero, and only accepts lags on a
    rising slope from there. The first peak above
    GOOD_ENOUGH_CORRELATION wins, corrected by the relative drop to the
    following lag. If the buffer ends while still climbing through such a
    peak, its lag is used uncorrected; no lag above the threshold means
    no pitch.
    """
    buf = audio_array(samples)
    n = buf.size

    if n < MIN_SAMPLES:
        return _none("short", samples=n)

    if sample_rate is None or sample_rate <= 0:
        return _none("invalid sample rate", sample_rate=sample_rate)

    rms = math.sqrt(float(np.mean(buf * buf)))
    if rms < SILENCE_RMS:
        return _none("silent", rms=rms)

    r1, r2 = _trim_edges(buf)
    window = buf[r1:r2]
    if window.size < 2:
        return _none("empty window", r1=r1, r2=r2)

    corr = _normalised_autocorrelation(window)
    if corr is None:
        return _none("no energy", r1=r1, r2=r2)

    best_offset = -1
    best_correlation = 0.0
    found_good = False

    in_zero_lobe = True
    last = corr[0]
    for offset in range(1, window.size):
        correlation = float(corr[offset])

        # Edge effects can lift the first few lags above corr[0]; nothing
        # counts until the correlation has fallen away from lag zero.
        if in_zero_lobe:
            if correlation < GOOD_ENOUGH_CORRELATION:
                in_zero_lobe = False
            last = correlation
            continue

        rising = correlation > last

        if correlation > GOOD_ENOUGH_CORRELATION and rising:
            found_good = True
            if correlation > best_correlation:
                best_correlation = correlation
                best_offset = offset
        elif found_good:
            shift = (best_correlation - correlation) / best_correlation
            f0 = float(sample_rate) / (best_offset + shift)
            return PitchResult(
                f0,
                "autocorr",
                {
                    "offset": best_offset,
                    "shift": shift,
                    "correlation": best_correlation,
                    "window": (r1, r2),
                },
            )

        last = correlation

    # Scan ran off the end while still climbing through a good peak
    if found_good:
        return PitchResult(
            float(sample_rate) / best_offset,
            "fallback",
            {
                "offset": best_offset,
                "correlation": best_correlation,
                "window": (r1, r2),
            },
        )

    return _none("no correlation", window=(r1, r2))


def detect_pitch(samples, sample_rate) -> Optional[float]:
    """Fundamental frequency in Hz, or None when no periodic signal is found."""
    return estimate_pitch(samples, sample_rate).f0

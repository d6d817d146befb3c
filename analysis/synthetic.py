import numpy as np
from scipy.signal import lfilter


def sine_tone(freq, sr=44100, dur=0.1, amplitude=0.8):
    """
    Pure sine tone.

    Parameters
    ----------
    freq : float
        Frequency in Hz.
    sr : int
        Sample rate.
    dur : float
        Duration in seconds.
    amplitude : float
        Peak amplitude.

    Returns
    -------
    np.ndarray
        The tone, starting at zero phase.
    """
    t = np.arange(int(sr * dur)) / sr
    return amplitude * np.sin(2 * np.pi * freq * t)


def _resonator(fc, sr, bw=100):
    R = np.exp(-np.pi * bw / sr)
    theta = 2 * np.pi * fc / sr
    a = [1, -2 * R * np.cos(theta), R**2]
    b = [1 - R]
    return b, a


def synthetic_voice(f0, sr=44100, dur=0.2, formants=(700, 1200), n_harmonics=8,
                    amplitude=0.8):
    """
    Voice-like signal: a decaying harmonic series at f0 shaped by
    two formant resonators, normalised to the given peak amplitude.
    """
    t = np.arange(int(sr * dur)) / sr
    if t.size == 0:
        return t
    source = np.zeros_like(t)
    for h in range(1, n_harmonics + 1):
        if h * f0 >= sr / 2:
            break
        source += np.sin(2 * np.pi * h * f0 * t) / h

    y = source
    for fc in formants:
        b, a = _resonator(fc, sr)
        y = lfilter(b, a, y)

    peak = np.max(np.abs(y)) if y.size else 0.0
    if peak > 0:
        y = amplitude * y / peak
    return y


def render_pattern(pattern, sr=44100, note_dur=0.5, amplitude=0.5):
    """Concatenate sine tones for every frequency of a tone pattern."""
    tones = [sine_tone(f, sr, note_dur, amplitude) for f in pattern.frequencies]
    if not tones:
        return np.zeros(0, dtype=float)
    return np.concatenate(tones)

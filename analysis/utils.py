# analysis.utils
import numpy as np


def safe_array(x):
    """
    Convert x into a safe 1D float64 numpy array.
    Returns a zero-length array if x is None or invalid.
    Non-finite entries (NaN/inf) are dropped.
    """
    if x is None:
        return np.zeros(0, dtype=float)

    try:
        arr = np.asarray(x, dtype=float).flatten()
        arr = arr[np.isfinite(arr)]  # remove NaN/inf
        return arr
    except (TypeError, ValueError):
        return np.zeros(0, dtype=float)


def audio_array(samples):
    """
    Coerce an audio buffer into a 1D float64 array without changing its length.

    Unlike safe_array, sample positions matter here, so non-finite samples
    are zeroed instead of removed. 2D input (frames x channels) is averaged
    down to mono.
    """
    if samples is None:
        return np.zeros(0, dtype=float)

    arr = np.asarray(samples, dtype=float)
    if arr.ndim == 2:
        arr = arr.mean(axis=1)
    arr = arr.flatten()
    return np.nan_to_num(arr, nan=0.0, posinf=0.0, neginf=0.0)

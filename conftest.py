# conftest.py
import numpy as np
import pytest
import soundfile as sf

from analysis.synthetic import sine_tone


@pytest.fixture
def sine():
    """Factory: sine(freq, sr=44100, dur=0.1, amplitude=0.8)."""
    return sine_tone


@pytest.fixture
def write_wav(tmp_path):
    """Write a float signal to tmp_path/<name> and return the path as str."""
    def _write(name, y, sr=44100):
        path = tmp_path / name
        sf.write(str(path), np.asarray(y, dtype=float), sr)
        return str(path)

    return _write

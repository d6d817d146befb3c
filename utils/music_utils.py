import numpy as np

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

A4_MIDI = 69
A4_HZ = 440.0

# -------------------------
# Frequency <-> MIDI
# -------------------------


def frequency_to_midi(freq):
    """
    Convert frequency in Hz to a (fractional) MIDI note number.

    No validation: 0 Hz gives -inf and negative input gives NaN.
    Callers are expected to pass detector output, which is always positive.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(A4_MIDI + 12 * np.log2(float(freq) / A4_HZ))


def midi_to_frequency(midi):
    """Convert a (fractional) MIDI note number to Hz."""
    with np.errstate(over="ignore"):
        return float(A4_HZ * np.power(2.0, (float(midi) - A4_MIDI) / 12))


def midi_to_note_name(midi) -> str:
    """Nearest equal-tempered note name, e.g. 60 → "C4"."""
    if midi is None or not np.isfinite(midi):
        return "N/A"
    note = int(round(midi))
    if note < 0 or note >= 128:
        return "N/A"
    name = NOTE_NAMES[note % 12]
    octave = note // 12 - 1
    return f"{name}{octave}"


def freq_to_note_name(freq: float) -> str:
    if not freq or freq <= 0:
        return "N/A"
    return midi_to_note_name(frequency_to_midi(freq))

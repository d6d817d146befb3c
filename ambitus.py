"""
Command-line front end for vocal range analysis.

    ambitus classify --low 64 --high 84 --speaking 69 --grouping woman
    ambitus analyze take1.wav take2.wav
    ambitus session --speaking intro.wav --range sweep.wav --grouping man
    ambitus batch --input-dir takes/ --out report.csv
    ambitus patterns --grouping woman --variant 1
"""
import argparse
import json
import logging
import os

import numpy as np
import pandas as pd
import soundfile as sf

from analysis.pitch_stats import (
    DEFAULT_FRAME_SIZE,
    DEFAULT_HOP_SIZE,
    summarize_pitch,
)
from analysis.range_classifier import ClassificationInput, classify_vocal_range
from analysis.session import Recording, build_classification_input
from analysis.voice_data import GROUPINGS
from utils.music_utils import midi_to_note_name
from utils.tone_patterns import get_pattern_set, profile_for_grouping

logger = logging.getLogger("ambitus")

AUDIO_EXTENSIONS = (".wav", ".flac", ".ogg", ".aiff", ".aif")

REPORT_COLUMNS = [
    "path", "sr", "duration_s", "frames", "voiced_frames",
    "min_midi", "max_midi", "median_midi", "min_note", "max_note", "confidence",
]


class AudioLoadError(Exception):
    pass


def load_audio(path):
    """Read an audio file as mono float64. Raises AudioLoadError."""
    try:
        y, sr = sf.read(path, dtype="float64", always_2d=False)
    except (RuntimeError, OSError) as e:
        raise AudioLoadError(f"could not read {path}: {e}") from e

    y = np.asarray(y, dtype=float)
    if y.ndim == 2:
        y = y.mean(axis=1)
    return y, int(sr)


def analyze_file(path, frame_size=DEFAULT_FRAME_SIZE, hop_size=DEFAULT_HOP_SIZE):
    y, sr = load_audio(path)
    stats = summarize_pitch(y, sr, frame_size=frame_size, hop_size=hop_size)
    logger.info("%s: %d frames, %d voiced", path, stats.frames, stats.voiced_frames)
    return stats, sr, len(y)


def _stats_row(path, stats, sr, n_samples):
    return {
        "path": path,
        "sr": sr,
        "duration_s": n_samples / sr if sr else 0.0,
        "frames": stats.frames,
        "voiced_frames": stats.voiced_frames,
        "min_midi": stats.min,
        "max_midi": stats.max,
        "median_midi": stats.median,
        "min_note": midi_to_note_name(stats.min),
        "max_note": midi_to_note_name(stats.max),
        "confidence": stats.confidence,
    }


def _emit(obj):
    print(json.dumps(obj, indent=2))


# -------------------------
# Subcommands
# -------------------------

def cmd_classify(args):
    inp = ClassificationInput(
        lowest_midi=args.low,
        highest_midi=args.high,
        speaking_median=args.speaking,
        preferred_grouping=args.grouping,
    )
    _emit(classify_vocal_range(inp).to_dict())
    return 0


def cmd_analyze(args):
    out = []
    for path in args.files:
        stats, sr, n = analyze_file(path, args.frame_size, args.hop_size)
        out.append({"path": path, "stats": stats.to_dict()})
    _emit(out)
    return 0


def cmd_session(args):
    takes = []
    if args.speaking:
        takes.append(("speaking", args.speaking))
    takes.extend(("song", p) for p in args.song)
    takes.extend(("range", p) for p in args.range)

    if not takes:
        logger.error("session needs at least one recording")
        return 2

    recordings = []
    for step, path in takes:
        stats, _, _ = analyze_file(path, args.frame_size, args.hop_size)
        recordings.append(Recording(step=step, stats=stats))

    inp = build_classification_input(recordings, args.grouping)
    result = classify_vocal_range(inp) if inp is not None else None
    _emit({
        "recordings": [
            {"step": r.step, "path": p, "stats": r.stats.to_dict()}
            for r, (_, p) in zip(recordings, takes)
        ],
        "classification": result.to_dict() if result is not None else None,
    })
    return 0


def cmd_batch(args):
    files = sorted(
        os.path.join(args.input_dir, f)
        for f in os.listdir(args.input_dir)
        if f.lower().endswith(AUDIO_EXTENSIONS)
    )
    rows = []
    for path in files:
        stats, sr, n = analyze_file(path, args.frame_size, args.hop_size)
        rows.append(_stats_row(path, stats, sr, n))

    pd.DataFrame(rows, columns=REPORT_COLUMNS).to_csv(args.out, index=False)
    unvoiced = sum(1 for r in rows if r["voiced_frames"] == 0)
    print(f"Analyzed {len(rows)} files: {unvoiced} without pitch")
    return 0


def cmd_patterns(args):
    profile = args.profile or profile_for_grouping(args.grouping)
    patterns = get_pattern_set(profile, args.variant)
    _emit([
        {
            "id": p.id,
            "label": p.label,
            "description": p.description,
            "frequencies": list(p.frequencies),
        }
        for p in patterns
    ])
    return 0


# -------------------------
# Entry point
# -------------------------

def _add_frame_args(p):
    p.add_argument("--frame-size", type=int, default=DEFAULT_FRAME_SIZE)
    p.add_argument("--hop-size", type=int, default=DEFAULT_HOP_SIZE)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="ambitus", description="Estimate vocal range and voice type."
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("classify", help="classify a known MIDI span")
    p.add_argument("--low", type=float, required=True)
    p.add_argument("--high", type=float, required=True)
    p.add_argument("--speaking", type=float, default=None)
    p.add_argument("--grouping", choices=GROUPINGS, default="prefer-not-to-say")
    p.set_defaults(func=cmd_classify)

    p = sub.add_parser("analyze", help="pitch statistics per audio file")
    p.add_argument("files", nargs="+")
    _add_frame_args(p)
    p.set_defaults(func=cmd_analyze)

    p = sub.add_parser("session", help="classify a set of takes")
    p.add_argument("--speaking", default=None)
    p.add_argument("--song", action="append", default=[])
    p.add_argument("--range", action="append", default=[])
    p.add_argument("--grouping", choices=GROUPINGS, default="prefer-not-to-say")
    _add_frame_args(p)
    p.set_defaults(func=cmd_session)

    p = sub.add_parser("batch", help="CSV report for a directory of takes")
    p.add_argument("--input-dir", required=True)
    p.add_argument("--out", default="report.csv")
    _add_frame_args(p)
    p.set_defaults(func=cmd_batch)

    p = sub.add_parser("patterns", help="tone-matching patterns")
    p.add_argument("--profile", choices=("feminine", "masculine"), default=None)
    p.add_argument("--grouping", choices=GROUPINGS, default="prefer-not-to-say")
    p.add_argument("--variant", type=int, default=0)
    p.set_defaults(func=cmd_patterns)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except AudioLoadError as e:
        logger.error("%s", e)
        return 2
    except ValueError as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

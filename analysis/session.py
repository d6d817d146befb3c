# analysis/session.py
"""
Reduce the takes of one test session to a classifier input.

A session holds up to three kinds of take: speaking, song and range.
Every min/max/median that was measured goes into one pool; the pool's
extremes become the observed span and the speaking take's median becomes
the speaking baseline.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from analysis.pitch_stats import PitchStats
from analysis.range_classifier import (
    ClassificationInput,
    ClassificationResult,
    classify_vocal_range,
)

logger = logging.getLogger(__name__)

STEPS = ("speaking", "song", "range")


@dataclass(frozen=True)
class Recording:
    step: str
    stats: Optional[PitchStats] = None
    pattern_id: Optional[str] = None


def _finite(value):
    return value is not None and np.isfinite(value)


def pooled_pitches(recordings: Iterable[Recording]):
    pool = []
    for rec in recordings:
        if rec.stats is None:
            continue
        for value in (rec.stats.min, rec.stats.max, rec.stats.median):
            if _finite(value):
                pool.append(float(value))
    return pool


def speaking_median(recordings: Iterable[Recording]) -> Optional[float]:
    """Median of the first speaking take, if it has one."""
    for rec in recordings:
        if rec.step == "speaking":
            if rec.stats is not None and _finite(rec.stats.median):
                return float(rec.stats.median)
            return None
    return None


def build_classification_input(recordings, preferred_grouping) -> Optional[ClassificationInput]:
    recordings = list(recordings)
    pool = pooled_pitches(recordings)
    if not pool:
        logger.debug("no pitch data across %d recordings", len(recordings))
        return None

    return ClassificationInput(
        lowest_midi=min(pool),
        highest_midi=max(pool),
        speaking_median=speaking_median(recordings),
        preferred_grouping=preferred_grouping,
    )


def classify_session(recordings, preferred_grouping) -> Optional[ClassificationResult]:
    """Classifier result for the session, or None when there is nothing to go on."""
    inp = build_classification_input(recordings, preferred_grouping)
    if inp is None:
        return None
    return classify_vocal_range(inp)

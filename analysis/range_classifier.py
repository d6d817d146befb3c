# analysis/range_classifier.py
"""
Vocal range classifier.

Scores every candidate range in analysis.voice_data against an observed
[lowest, highest] MIDI span:

  - coverage:    share of the observed span inside the candidate range
  - proximity:   closeness of the candidate centre to the speaking median
                 (or to the middle of the observed span when no median)
  - fit penalty: how far the observation spills past the candidate range

score = 0.8 * coverage + 0.2 * proximity - 0.4 * fit_penalty

The best score wins; equal scores keep the table order.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from analysis.voice_category import midi_to_voice_category
from analysis.voice_data import (
    ALL_RANGES,
    LOWER_VOICE_RANGES,
    UPPER_VOICE_RANGES,
    VocalRangeDefinition,
)

logger = logging.getLogger(__name__)

COVERAGE_WEIGHT = 0.8
PROXIMITY_WEIGHT = 0.2
FIT_PENALTY_WEIGHT = 0.4

# One octave: proximity reaches 0 and fit penalty reaches 1 at this distance
OCTAVE = 12.0


@dataclass(frozen=True)
class ClassificationInput:
    lowest_midi: float
    highest_midi: float
    speaking_median: Optional[float] = None
    preferred_grouping: str = "prefer-not-to-say"


@dataclass(frozen=True)
class SuggestedRange:
    min: float
    max: float


@dataclass(frozen=True)
class ClassificationResult:
    category: str
    confidence: float
    coverage: float
    suggested_range: SuggestedRange
    voice_category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "confidence": self.confidence,
            "coverage": self.coverage,
            "voiceCategory": self.voice_category,
            "suggestedRange": {
                "min": self.suggested_range.min,
                "max": self.suggested_range.max,
            },
        }


@dataclass(frozen=True)
class RangeScore:
    definition: VocalRangeDefinition
    coverage: float
    proximity: float
    fit_penalty: float
    score: float


# ---------------------------------------------------------
# Candidate selection
# ---------------------------------------------------------

def get_candidate_ranges(grouping):
    """woman → upper voices, man → lower voices, anything else → all six."""
    if grouping == "woman":
        return UPPER_VOICE_RANGES
    if grouping == "man":
        return LOWER_VOICE_RANGES
    return ALL_RANGES


# ---------------------------------------------------------
# Sub-scores
# ---------------------------------------------------------

def coverage_score(definition, lowest_midi, highest_midi):
    span = max(1.0, highest_midi - lowest_midi)
    overlap_start = max(definition.min, lowest_midi)
    overlap_end = min(definition.max, highest_midi)
    overlap = max(0.0, overlap_end - overlap_start)
    return max(0.0, min(1.0, overlap / span))


def proximity_score(definition, median):
    centre = (definition.min + definition.max) / 2
    distance = abs(centre - median)
    return max(0.0, 1 - distance / OCTAVE)


def baseline_proximity(definition, lowest_midi, highest_midi):
    """Proximity against the middle of the observed span."""
    span_midpoint = lowest_midi + (highest_midi - lowest_midi) / 2
    return proximity_score(definition, span_midpoint)


def fit_penalty(definition, lowest_midi, highest_midi):
    low_penalty = max(0.0, definition.min - lowest_midi)
    high_penalty = max(0.0, highest_midi - definition.max)
    return min(1.0, (low_penalty + high_penalty) / OCTAVE)


def _has_median(value):
    # 0 and NaN count as "no speaking baseline"
    if value is None:
        return False
    try:
        value = float(value)
    except (TypeError, ValueError):
        return False
    return value != 0 and not math.isnan(value)


# ---------------------------------------------------------
# Input normalisation
# ---------------------------------------------------------

_KEY_ALIASES = {
    "lowestMidi": "lowest_midi",
    "highestMidi": "highest_midi",
    "speakingMedian": "speaking_median",
    "speaking_median_midi": "speaking_median",
    "speakingMedianMidi": "speaking_median",
    "preferredGrouping": "preferred_grouping",
}


def _coerce_input(data=None, **kwargs) -> ClassificationInput:
    """
    Accept a ClassificationInput, a mapping (snake_case or camelCase keys)
    or keyword arguments.
    """
    if isinstance(data, ClassificationInput):
        return data

    fields: Dict[str, Any] = {}
    if isinstance(data, Mapping):
        fields.update(data)
    elif data is not None:
        raise TypeError(
            f"expected ClassificationInput or mapping, got {type(data).__name__}"
        )
    fields.update(kwargs)

    normalised = {_KEY_ALIASES.get(k, k): v for k, v in fields.items()}
    return ClassificationInput(**normalised)


# ---------------------------------------------------------
# Classification
# ---------------------------------------------------------

def rank_vocal_ranges(data=None, **kwargs) -> List[RangeScore]:
    """Score every candidate range, best first (stable on ties)."""
    inp = _coerce_input(data, **kwargs)
    lo, hi = inp.lowest_midi, inp.highest_midi
    use_median = _has_median(inp.speaking_median)

    scored = []
    for definition in get_candidate_ranges(inp.preferred_grouping):
        coverage = coverage_score(definition, lo, hi)
        if use_median:
            proximity = proximity_score(definition, float(inp.speaking_median))
        else:
            proximity = baseline_proximity(definition, lo, hi)
        penalty = fit_penalty(definition, lo, hi)
        score = (
            coverage * COVERAGE_WEIGHT
            + proximity * PROXIMITY_WEIGHT
            - penalty * FIT_PENALTY_WEIGHT
        )
        scored.append(RangeScore(definition, coverage, proximity, penalty, score))

    # sorted() is stable, so ties keep the table order
    return sorted(scored, key=lambda s: s.score, reverse=True)


def classify_vocal_range(data=None, **kwargs) -> ClassificationResult:
    """
    Pick the best-fitting vocal range for an observed MIDI span.

    Usage:
        classify_vocal_range(ClassificationInput(64, 84, 69, "woman"))
        classify_vocal_range(lowest_midi=45, highest_midi=63,
                             preferred_grouping="man")
    """
    inp = _coerce_input(data, **kwargs)
    scored = rank_vocal_ranges(inp)

    if scored:
        top = scored[0]
    else:
        # Unreachable with the static tables; every grouping has candidates
        candidates = get_candidate_ranges(inp.preferred_grouping)
        definition = candidates[0] if candidates else ALL_RANGES[0]
        top = RangeScore(definition, 0.0, 0.0, 0.0, 0.0)

    voice_category = midi_to_voice_category([inp.lowest_midi, inp.highest_midi])
    confidence = min(1.0, max(0.0, top.score))

    logger.debug(
        "classified [%s, %s] (%s) as %s score=%.3f",
        inp.lowest_midi,
        inp.highest_midi,
        inp.preferred_grouping,
        top.definition.category,
        top.score,
    )

    return ClassificationResult(
        category=top.definition.category,
        confidence=confidence,
        coverage=top.coverage,
        suggested_range=SuggestedRange(top.definition.min, top.definition.max),
        voice_category=voice_category,
    )

"""Face descriptor matching.

Pure comparison helpers shared by the attendance workflows. A descriptor is a
fixed-length float vector produced by the embedding provider; similarity is
expressed as ``1 - euclidean_distance`` so that larger means closer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

Descriptor = Sequence[float]
Candidate = Tuple[str, Descriptor]


@dataclass(frozen=True)
class MatchResult:
    id: str
    confidence: float


def euclidean_distance(a: Descriptor, b: Descriptor) -> float:
    """Euclidean distance between two descriptors of equal length."""
    va = np.asarray(a, dtype=np.float64).ravel()
    vb = np.asarray(b, dtype=np.float64).ravel()
    if va.shape != vb.shape:
        raise ValueError(f"Descriptor length mismatch: {va.shape[0]} != {vb.shape[0]}")
    return float(np.linalg.norm(va - vb))


def compare_faces(a: Descriptor, b: Descriptor) -> float:
    """Similarity score in distance space; not clamped to [0, 1]."""
    return 1.0 - euclidean_distance(a, b)


def find_best_match(
    target: Descriptor,
    candidates: Iterable[Candidate],
    threshold: float,
) -> Optional[MatchResult]:
    """
    Return the candidate with the highest confidence strictly above ``threshold``.

    Args:
        target: descriptor extracted from the captured image
        candidates: ``(id, descriptor)`` pairs of enrolled faces
        threshold: minimum confidence (exclusive)

    Returns:
        MatchResult or None when the list is empty or nothing clears the threshold.
        Equal confidences resolve to the lowest id.
    """
    best: Optional[MatchResult] = None

    for candidate_id, descriptor in candidates:
        try:
            confidence = compare_faces(target, descriptor)
        except ValueError as exc:
            logger.warning("[Matcher] Skipping candidate %s: %s", candidate_id, exc)
            continue

        if confidence <= threshold:
            continue

        if (
            best is None
            or confidence > best.confidence
            or (confidence == best.confidence and candidate_id < best.id)
        ):
            best = MatchResult(id=candidate_id, confidence=confidence)

    if best is not None:
        logger.debug("[Matcher] Best match %s (confidence=%.4f, threshold=%.3f)",
                     best.id, best.confidence, threshold)
    return best

from __future__ import annotations

from typing import Iterable, List

from currency_lens.models.detection import DetectedAmount


def resolve(candidates: Iterable[DetectedAmount]) -> List[DetectedAmount]:
    """Pick non-overlapping candidates, first come first served.

    Input order is priority order: a candidate is accepted only if its span
    does not intersect any span accepted before it (partial overlap and
    containment in either direction both count). The accepted set is returned
    sorted by start offset.
    """
    accepted: List[DetectedAmount] = []
    for candidate in candidates:
        if any(
            kept.overlaps(candidate.start_index, candidate.end_index) for kept in accepted
        ):
            continue
        accepted.append(candidate)
    return sorted(accepted, key=lambda d: d.start_index)

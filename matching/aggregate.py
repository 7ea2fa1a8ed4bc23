from typing import Iterable, List, Tuple

from ingestion import utils

MIN_SCORE = 0
MAX_SCORE = 100


def apply_penalties(base_score: float, penalties: Iterable) -> Tuple[float, List]:
    """
    Fold rule penalties into a fit score.

    Deltas are added in order, then the total is clamped to 0..100 and
    rounded to one decimal. Returns (score, applied penalties).
    """
    applied = list(penalties or [])

    score = base_score
    for penalty in applied:
        delta = penalty.delta if hasattr(penalty, "delta") else penalty.get("delta")
        score += utils.safe_number(delta, 0)

    score = utils.clamp(score, MIN_SCORE, MAX_SCORE)
    return utils.round1(score), applied

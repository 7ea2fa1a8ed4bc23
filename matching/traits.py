from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from core.traits import MAX_VALUE, MIN_VALUE, TraitVector, trait_value
from ingestion import utils

# Higher weight = stronger influence on the match
DEFAULT_WEIGHTS = {
    "T1": 4,
    "T2": 4,
    "T3": 2,
    "T4": 2,
    "T5": 4,
    "T6": 2,
    "T7": 1,
    "T8": 1,
    "T9": 3,
    "T10": 3,
}

# Largest possible per-trait distance on the 0..4 scale
MAX_DISTANCE = MAX_VALUE - MIN_VALUE


@dataclass
class ScoreResult:
    score: float
    base_score: float
    penalty: float
    max_penalty: float
    diffs: Dict[str, float] = field(default_factory=dict)
    applied_penalties: List = field(default_factory=list)

    def to_dict(self):
        return {
            "score": self.score,
            "base_score": self.base_score,
            "penalty": self.penalty,
            "max_penalty": self.max_penalty,
            "diffs": dict(self.diffs),
            "applied_penalties": [p.to_dict() if hasattr(p, "to_dict") else p for p in self.applied_penalties],
        }


def match_traits(
    user_traits,
    archetype_traits,
    weights: Optional[Mapping[str, float]] = None,
) -> ScoreResult:
    """
    Weighted distance fit.

    Rule:
    - Exact match on every weighted trait scores 100
    - Each trait costs weight * |user - archetype|
    - Normalised against the worst case (every trait 4 apart)
    """
    weights = DEFAULT_WEIGHTS if weights is None else weights

    diffs: Dict[str, float] = {}
    penalty = 0.0
    max_penalty = 0.0

    for key in TraitVector.TRAIT_TYPES:
        weight = utils.safe_number(weights.get(key), 0)
        if weight <= 0:
            continue

        diff = abs(trait_value(archetype_traits, key) - trait_value(user_traits, key))
        diffs[key] = utils.round1(diff)

        penalty += weight * diff
        max_penalty += weight * MAX_DISTANCE

    raw = 0 if max_penalty == 0 else 100 * (1 - penalty / max_penalty)
    score = utils.round1(utils.clamp(raw, 0, 100))

    return ScoreResult(
        score=score,
        base_score=score,
        penalty=utils.round1(penalty),
        max_penalty=utils.round1(max_penalty),
        diffs=diffs,
    )


def rank_by_fit(archetypes, user_traits, weights: Optional[Mapping[str, float]] = None) -> List[tuple]:
    """Score archetypes on traits alone, best first. Ties keep input order."""
    scored = [(archetype, match_traits(user_traits, archetype.traits, weights)) for archetype in archetypes]
    return sorted(scored, key=lambda item: item[1].score, reverse=True)

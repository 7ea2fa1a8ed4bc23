import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from core.user_profile import UserProfile
from matching.aggregate import apply_penalties
from matching.rules import BlockedEntry, Penalty, filter_archetypes
from matching.traits import ScoreResult, match_traits
from models.catalog import Archetype

"""
Matching orchestration layer.

This module coordinates the rule filter, the trait scorer and the
penalty merge. It does not contain scoring logic itself.
"""

logger = logging.getLogger(__name__)


@dataclass
class MergedResult:
    archetype: Archetype
    score: float
    base_score: float
    penalties: List[Penalty]
    diffs: Dict[str, float]

    @property
    def id(self) -> str:
        return self.archetype.id


@dataclass
class MatchResults:
    top: List[MergedResult] = field(default_factory=list)
    avoid: List[BlockedEntry] = field(default_factory=list)


def rank_archetypes(
    archetypes: Iterable[Archetype],
    user: UserProfile,
    weights: Optional[Mapping[str, float]] = None,
) -> MatchResults:
    """
    Entry point for matching.

    Returns every allowed archetype ordered by final score (best first)
    and every blocked archetype with its reasons. No truncation.
    """
    filtered = filter_archetypes(archetypes, user)

    merged: List[MergedResult] = []
    for entry in filtered.allowed:
        base = match_traits(user.traits, entry.archetype.traits, weights)
        score, applied = apply_penalties(base.score, entry.penalties)
        merged.append(
            MergedResult(
                archetype=entry.archetype,
                score=score,
                base_score=base.score,
                penalties=applied,
                diffs=base.diffs,
            )
        )

    # Stable: equal scores keep catalog order
    merged.sort(key=lambda result: result.score, reverse=True)

    logger.debug("Ranked %d archetypes, blocked %d", len(merged), len(filtered.blocked))
    return MatchResults(top=merged, avoid=filtered.blocked)


def score_one(
    user: UserProfile,
    archetype: Archetype,
    weights: Optional[Mapping[str, float]] = None,
    penalties: Iterable[Penalty] = (),
) -> ScoreResult:
    """Ad hoc re-score of a single archetype, e.g. for a detail view."""
    result = match_traits(user.traits, archetype.traits, weights)
    result.score, result.applied_penalties = apply_penalties(result.base_score, penalties)
    return result

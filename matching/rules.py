import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from core.traits import trait_value
from core.user_profile import UserProfile
from models.catalog import Archetype

"""
Hard filters + soft penalties.

Rules run in a fixed order. The first rule that excludes an archetype
ends evaluation for it; penalties from earlier rules are discarded.
"""

logger = logging.getLogger(__name__)

SENIOR_ARCHETYPE_ID = "senior_dog"
DEFAULT_BLOCK_REASON = "Not a fit"


@dataclass(frozen=True)
class Penalty:
    key: str
    delta: float

    def to_dict(self):
        return {"key": self.key, "delta": self.delta}


@dataclass(frozen=True)
class RuleDecision:
    exclude: bool = False
    reason: Optional[str] = None
    penalty: Optional[Penalty] = None


PASS = RuleDecision()


@dataclass
class RuleOutcome:
    allowed: bool
    reasons: List[str] = field(default_factory=list)
    penalties: List[Penalty] = field(default_factory=list)


@dataclass
class AllowedEntry:
    archetype: Archetype
    reasons: List[str]
    penalties: List[Penalty]


@dataclass
class BlockedEntry:
    archetype: Archetype
    reasons: List[str]


@dataclass
class FilterResult:
    allowed: List[AllowedEntry] = field(default_factory=list)
    blocked: List[BlockedEntry] = field(default_factory=list)


def has_support(profile: UserProfile) -> bool:
    support = profile.answer("support_system")
    if not support:
        return False
    if isinstance(support, list):
        return any(x and x != "none" for x in support)
    return support != "none"


class Rule:
    key = ""

    def evaluate(self, archetype: Archetype, profile: UserProfile) -> RuleDecision:
        raise NotImplementedError

    def exclude(self, reason: str) -> RuleDecision:
        return RuleDecision(exclude=True, reason=reason)

    def penalise(self, key: str, delta: float) -> RuleDecision:
        return RuleDecision(penalty=Penalty(key=key, delta=delta))


class AloneTimeRule(Rule):
    key = "alone_time"

    def evaluate(self, archetype, profile):
        high_alone = profile.has_flag("high_alone_time") or profile.trait("T5") == 0
        if not high_alone or has_support(profile):
            return PASS

        if "separation_sensitivity" in archetype.risk_set or "high_energy" in archetype.tag_set:
            return self.exclude("Long alone time without support increases risk of distress.")

        # Still possible, just less ideal
        return self.penalise("alone_time_no_support", -6)


class PreyDriveRule(Rule):
    key = "prey_drive"

    def evaluate(self, archetype, profile):
        low_experience = profile.trait("T2") <= 1
        low_training = profile.has_flag("low_training_commitment")
        if not profile.has_flag("cat_home") or not (low_experience or low_training):
            return PASS

        # TODO: confirm whether allowed profiles should also take a cat-home soft penalty
        if "high_prey_drive" in archetype.risk_set:
            return self.exclude("Cat at home + beginner/low training increases prey-drive risk.")
        return PASS


class NoiseRule(Rule):
    key = "noise"
    VOCAL_RISKS = frozenset({"noise", "vocal", "barking"})

    def evaluate(self, archetype, profile):
        if not (profile.has_flag("noise_sensitive") or profile.trait("T6") == 0):
            return PASS

        if archetype.risk_set & self.VOCAL_RISKS:
            return self.exclude("Noise-sensitive household is a poor fit for vocal profiles.")

        if trait_value(archetype.traits, "T6") >= 3:
            return self.penalise("noise_sensitive", -8)
        return PASS


class SheddingRule(Rule):
    key = "shedding"

    def evaluate(self, archetype, profile):
        if not (profile.has_flag("shedding_sensitive") or profile.trait("T7") == 0):
            return PASS

        if "high_shedding" in archetype.risk_set or trait_value(archetype.traits, "T7") >= 3:
            return self.exclude("Low shedding preference conflicts with heavy-shedding profiles.")
        return PASS


class BusyFamilyRule(Rule):
    key = "busy_family"

    def evaluate(self, archetype, profile):
        kids_home = profile.answer_is("children", "kids_home") or profile.has_flag("kids_home")
        frequent_guests = profile.answer_is("hosting", "guests_often") or profile.has_flag("frequent_guests")
        first_time = profile.answer_is("experience", "first_time") or profile.trait("T2") == 0
        if not (kids_home and frequent_guests and first_time):
            return PASS

        very_high_difficulty = trait_value(archetype.traits, "T2") >= 3
        very_high_energy = trait_value(archetype.traits, "T1") >= 3
        if very_high_difficulty and very_high_energy:
            return self.exclude(
                "High-difficulty, high-energy profiles are risky for first-time families with lots of guests."
            )
        return PASS


class StairsRule(Rule):
    key = "stairs"

    def evaluate(self, archetype, profile):
        if not (profile.has_flag("stairs_high") or profile.answer_is("stairs_elevator", "stairs_high")):
            return PASS

        large_only = list(archetype.size) == ["large"]
        if large_only or archetype.id == SENIOR_ARCHETYPE_ID:
            return self.penalise("stairs_high_mobility", -5)
        return PASS


DEFAULT_RULES: Sequence[Rule] = (
    AloneTimeRule(),
    PreyDriveRule(),
    NoiseRule(),
    SheddingRule(),
    BusyFamilyRule(),
    StairsRule(),
)


def evaluate_archetype(
    archetype: Archetype,
    profile: UserProfile,
    rules: Iterable[Rule] = DEFAULT_RULES,
) -> RuleOutcome:
    penalties: List[Penalty] = []

    for rule in rules:
        decision = rule.evaluate(archetype, profile)
        if decision.exclude:
            reason = decision.reason or DEFAULT_BLOCK_REASON
            logger.debug("Rule %s excluded %s: %s", rule.key, archetype.id, reason)
            return RuleOutcome(allowed=False, reasons=[reason], penalties=[])
        if decision.penalty is not None:
            penalties.append(decision.penalty)

    return RuleOutcome(allowed=True, reasons=[], penalties=penalties)


def filter_archetypes(
    archetypes: Iterable[Archetype],
    profile: UserProfile,
    rules: Iterable[Rule] = DEFAULT_RULES,
) -> FilterResult:
    rules = tuple(rules)
    result = FilterResult()

    for archetype in archetypes:
        outcome = evaluate_archetype(archetype, profile, rules)
        if outcome.allowed:
            result.allowed.append(AllowedEntry(archetype, outcome.reasons, outcome.penalties))
        else:
            result.blocked.append(BlockedEntry(archetype, outcome.reasons or [DEFAULT_BLOCK_REASON]))

    return result

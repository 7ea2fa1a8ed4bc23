from conftest import make_archetype

from core.traits import TraitVector
from core.user_profile import UserProfile
from matching.rules import (
    DEFAULT_RULES,
    Penalty,
    Rule,
    RuleDecision,
    StairsRule,
    evaluate_archetype,
    filter_archetypes,
    has_support,
)


def _user(traits=None, flags=(), answers=None) -> UserProfile:
    return UserProfile(traits=TraitVector(traits), flags=frozenset(flags), answers=answers or {})


def _keys(outcome):
    return [p.key for p in outcome.penalties]


def test_neutral_user_allows_everything_without_penalties(archetypes):
    user = _user()
    for archetype in archetypes:
        outcome = evaluate_archetype(archetype, user)
        assert outcome.allowed
        assert outcome.reasons == []
        assert outcome.penalties == []


def test_rules_run_in_documented_order():
    assert [r.key for r in DEFAULT_RULES] == ["alone_time", "prey_drive", "noise", "shedding", "busy_family", "stairs"]


# --------------------------------------------------------------------------
# R1 alone time
# --------------------------------------------------------------------------

def test_alone_time_blocks_separation_sensitive_profiles():
    user = _user(flags={"high_alone_time"}, answers={"support_system": "none"})
    outcome = evaluate_archetype(make_archetype(risks=["separation_sensitivity"]), user)
    assert not outcome.allowed
    assert outcome.reasons == ["Long alone time without support increases risk of distress."]
    assert outcome.penalties == []


def test_alone_time_blocks_high_energy_tag():
    user = _user(traits={"T5": 0})
    outcome = evaluate_archetype(make_archetype(tags=["high_energy"]), user)
    assert not outcome.allowed


def test_alone_time_soft_penalty_otherwise():
    user = _user(flags={"high_alone_time"})
    outcome = evaluate_archetype(make_archetype(), user)
    assert outcome.allowed
    assert outcome.penalties == [Penalty("alone_time_no_support", -6)]


def test_support_system_lifts_alone_time_rule():
    archetype = make_archetype(risks=["separation_sensitivity"])
    for support in ("family", ["none", "dog_walker"], ["daycare"]):
        user = _user(flags={"high_alone_time"}, answers={"support_system": support})
        outcome = evaluate_archetype(archetype, user)
        assert outcome.allowed
        assert outcome.penalties == []


def test_has_support_sentinel_values():
    assert not has_support(_user())
    assert not has_support(_user(answers={"support_system": "none"}))
    assert not has_support(_user(answers={"support_system": ["none"]}))
    assert not has_support(_user(answers={"support_system": []}))
    assert has_support(_user(answers={"support_system": ["family"]}))


# --------------------------------------------------------------------------
# R2 prey drive
# --------------------------------------------------------------------------

def test_cat_home_beginner_blocks_prey_drive():
    user = _user(traits={"T2": 1}, flags={"cat_home"})
    outcome = evaluate_archetype(make_archetype(risks=["high_prey_drive"]), user)
    assert not outcome.allowed
    assert "prey-drive" in outcome.reasons[0]


def test_cat_home_low_training_blocks_prey_drive_even_when_experienced():
    user = _user(traits={"T2": 4}, flags={"cat_home", "low_training_commitment"})
    assert not evaluate_archetype(make_archetype(risks=["high_prey_drive"]), user).allowed


def test_cat_home_experienced_keeps_prey_drive_without_penalty():
    user = _user(traits={"T2": 2}, flags={"cat_home"})
    outcome = evaluate_archetype(make_archetype(risks=["high_prey_drive"]), user)
    assert outcome.allowed
    assert outcome.penalties == []


def test_cat_home_beginner_adds_no_penalty_to_other_profiles():
    user = _user(traits={"T2": 0}, flags={"cat_home"})
    outcome = evaluate_archetype(make_archetype(), user)
    assert outcome.allowed
    assert outcome.penalties == []


# --------------------------------------------------------------------------
# R3 noise
# --------------------------------------------------------------------------

def test_noise_sensitive_blocks_vocal_risks():
    user = _user(flags={"noise_sensitive"})
    for risk in ("noise", "vocal", "barking"):
        outcome = evaluate_archetype(make_archetype(risks=[risk]), user)
        assert not outcome.allowed
        assert outcome.reasons == ["Noise-sensitive household is a poor fit for vocal profiles."]


def test_noise_sensitive_penalises_noisy_trait():
    user = _user(traits={"T6": 0})
    assert evaluate_archetype(make_archetype(traits={"T6": 3}), user).penalties == [Penalty("noise_sensitive", -8)]
    assert evaluate_archetype(make_archetype(traits={"T6": 2}), user).penalties == []


# --------------------------------------------------------------------------
# R4 shedding
# --------------------------------------------------------------------------

def test_shedding_sensitive_blocks_heavy_shedders():
    user = _user(traits={"T7": 0}, flags={"shedding_sensitive"})
    assert not evaluate_archetype(make_archetype(risks=["high_shedding"]), user).allowed
    assert not evaluate_archetype(make_archetype(traits={"T7": 3}), user).allowed
    assert evaluate_archetype(make_archetype(traits={"T7": 2}), user).allowed


# --------------------------------------------------------------------------
# R5 busy first-time family
# --------------------------------------------------------------------------

BUSY_FAMILY = {"children": "kids_home", "hosting": "guests_often", "experience": "first_time"}


def test_busy_first_time_family_blocks_hard_high_energy():
    outcome = evaluate_archetype(make_archetype(traits={"T1": 3, "T2": 3}), _user(answers=BUSY_FAMILY))
    assert not outcome.allowed
    assert "first-time families" in outcome.reasons[0]


def test_busy_family_rule_needs_both_difficulty_and_energy():
    user = _user(answers=BUSY_FAMILY)
    assert evaluate_archetype(make_archetype(traits={"T1": 4, "T2": 2}), user).allowed
    assert evaluate_archetype(make_archetype(traits={"T1": 2, "T2": 4}), user).allowed


def test_busy_family_rule_accepts_flags_and_trait():
    user = _user(traits={"T2": 0}, flags={"kids_home", "frequent_guests"})
    assert not evaluate_archetype(make_archetype(traits={"T1": 4, "T2": 4}), user).allowed

    experienced = _user(traits={"T2": 3}, flags={"kids_home", "frequent_guests"})
    assert evaluate_archetype(make_archetype(traits={"T1": 4, "T2": 4}), experienced).allowed


# --------------------------------------------------------------------------
# R6 stairs
# --------------------------------------------------------------------------

def test_stairs_penalise_large_only_and_senior():
    user = _user(flags={"stairs_high"})
    assert _keys(evaluate_archetype(make_archetype(size=["large"]), user)) == ["stairs_high_mobility"]
    assert _keys(evaluate_archetype(make_archetype("senior_dog", size=["small"]), user)) == ["stairs_high_mobility"]
    assert _keys(evaluate_archetype(make_archetype(size=["medium", "large"]), user)) == []
    assert _keys(evaluate_archetype(make_archetype(), user)) == []


def test_stairs_rule_reads_raw_answer():
    user = _user(answers={"stairs_elevator": "stairs_high"})
    decision = StairsRule().evaluate(make_archetype(size=["large"]), user)
    assert not decision.exclude
    assert decision.penalty == Penalty("stairs_high_mobility", -5)


# --------------------------------------------------------------------------
# Ordering and short-circuit
# --------------------------------------------------------------------------

def test_first_exclusion_wins_and_later_reasons_are_absent():
    user = _user(flags={"high_alone_time", "noise_sensitive", "shedding_sensitive"})
    archetype = make_archetype(risks=["separation_sensitivity", "barking", "high_shedding"])
    outcome = evaluate_archetype(archetype, user)
    assert outcome.reasons == ["Long alone time without support increases risk of distress."]
    assert outcome.penalties == []


def test_exclusion_discards_earlier_penalties():
    user = _user(flags={"high_alone_time", "noise_sensitive"})
    outcome = evaluate_archetype(make_archetype(risks=["vocal"]), user)
    assert not outcome.allowed
    assert len(outcome.reasons) == 1
    assert outcome.penalties == []


def test_penalties_accumulate_in_rule_order():
    user = _user(flags={"high_alone_time", "noise_sensitive", "stairs_high"})
    outcome = evaluate_archetype(make_archetype(size=["large"], traits={"T6": 4}), user)
    assert outcome.allowed
    assert outcome.reasons == []
    assert [(p.key, p.delta) for p in outcome.penalties] == [
        ("alone_time_no_support", -6),
        ("noise_sensitive", -8),
        ("stairs_high_mobility", -5),
    ]


def test_exclusion_without_reason_gets_default():
    class Veto(Rule):
        key = "veto"

        def evaluate(self, archetype, profile):
            return RuleDecision(exclude=True)

    result = filter_archetypes([make_archetype()], _user(), rules=[Veto()])
    assert result.allowed == []
    assert result.blocked[0].reasons == ["Not a fit"]


def test_filter_partitions_catalog_in_order():
    user = _user(flags={"noise_sensitive"})
    catalog = [
        make_archetype("quiet_one"),
        make_archetype("loud_one", risks=["barking"]),
        make_archetype("noisy_trait", traits={"T6": 4}),
    ]
    result = filter_archetypes(catalog, user)
    assert [e.archetype.id for e in result.allowed] == ["quiet_one", "noisy_trait"]
    assert [e.archetype.id for e in result.blocked] == ["loud_one"]
    assert result.allowed[1].penalties == [Penalty("noise_sensitive", -8)]

from typing import List

from core.traits import trait_value
from core.user_profile import UserProfile
from models.catalog import Archetype

"""
Deterministic transparency copy for results.
No LLM calls: every line comes from the archetype record or a fixed table.
"""

RISK_LABELS = {
    "separation_sensitivity": "Sensitive to alone time",
    "high_shedding": "Heavy shedding",
    "needs_daily_activity": "Needs daily activity",
    "dog_selective": "May be dog-selective",
    "stigma": "May face stigma",
    "high_grooming": "High grooming needs",
    "understimulation": "Needs mental stimulation",
    "barking": "Can be vocal",
    "vocal": "Can be vocal",
    "noise": "Noise-prone",
    "prey_drive": "Prey drive",
    "high_prey_drive": "High prey drive",
    "recall_challenges": "Recall can be hard",
    "escape_risk": "Escape / roaming risk",
    "health_costs": "Potential health costs",
}

ALONE_TIME_NOTE = "If your dog will be alone for long hours, prioritize foster notes about alone-time."
CAT_HOME_NOTE = "With a cat at home, ask specifically about prey drive and cat-testing."
DEFAULT_NOTE = "These are mix archetypes: use them to guide questions, not labels."


def build_badges(archetype: Archetype, limit: int = 5) -> List[str]:
    t = archetype.traits
    badges = []

    if trait_value(t, "T9") >= 3:
        badges.append("Apartment-friendly")
    if trait_value(t, "T10") >= 3:
        badges.append("Good with kids")
    if trait_value(t, "T2") <= 1:
        badges.append("Beginner-friendly")
    if trait_value(t, "T6") <= 1:
        badges.append("Quieter")
    if trait_value(t, "T7") <= 1:
        badges.append("Lower shedding")
    if trait_value(t, "T8") <= 1:
        badges.append("Low grooming")
    if trait_value(t, "T1") >= 3:
        badges.append("Very active")

    return badges[:limit]


def build_card_badges(archetype: Archetype, limit: int = 3) -> List[str]:
    """Short labels for a result card; the detail view uses build_badges."""
    t = archetype.traits
    badges = []

    if trait_value(t, "T9") >= 3:
        badges.append("Apartment")
    if trait_value(t, "T10") >= 3:
        badges.append("Kids")
    if trait_value(t, "T2") <= 1:
        badges.append("Beginner")
    if trait_value(t, "T6") <= 1:
        badges.append("Quiet")
    if trait_value(t, "T7") <= 1:
        badges.append("Low shed")
    if trait_value(t, "T1") >= 3:
        badges.append("Very active")

    return badges[:limit]


def humanize_risk(risk: str) -> str:
    return RISK_LABELS.get(risk) or str(risk).replace("_", " ")


def quick_notes(user: UserProfile, limit: int = 2) -> List[str]:
    notes = []
    if user.trait("T5") <= 1:
        notes.append(ALONE_TIME_NOTE)
    if user.has_flag("cat_home"):
        notes.append(CAT_HOME_NOTE)
    if not notes:
        notes.append(DEFAULT_NOTE)
    return notes[:limit]


def shelter_checklist(archetype: Archetype) -> str:
    lines = [f"Questions to ask the shelter about {archetype.name}:", ""]
    lines.extend(f"{i}. {question}" for i, question in enumerate(archetype.ask_shelter, start=1))
    lines.append("")
    lines.append("Generated by AdoptMatch (adoption-first fit guidance).")
    return "\n".join(lines)

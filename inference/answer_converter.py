from dataclasses import dataclass
from typing import Callable, Iterable, List, Mapping, Optional, Set

from core.traits import TraitVector
from core.user_profile import UserProfile
from models.catalog import Option, Question

STAIRS_HIGH_FLAG = "stairs_high"


def equals(expected: str) -> Callable[[object], bool]:
    return lambda answer: answer == expected


def contains(expected: str) -> Callable[[object], bool]:
    return lambda answer: isinstance(answer, list) and expected in answer


@dataclass(frozen=True)
class FlagDerivation:
    """Raise `flag` when the raw answer to `question_id` satisfies `matches`."""

    question_id: str
    matches: Callable[[object], bool]
    flag: str

    def applies(self, answers: Mapping[str, object]) -> bool:
        return self.matches(answers.get(self.question_id))


# Flags read straight from raw answers, independent of option traits
FLAG_DERIVATIONS: List[FlagDerivation] = [
    FlagDerivation("tolerances", contains("barking"), "noise_sensitive"),
    FlagDerivation("tolerances", contains("shedding"), "shedding_sensitive"),
    FlagDerivation("tolerances", contains("grooming"), "grooming_sensitive"),
    FlagDerivation("stairs_elevator", equals("stairs_high"), STAIRS_HIGH_FLAG),
    FlagDerivation("children", equals("kids_home"), "kids_home"),
    FlagDerivation("hosting", equals("guests_often"), "frequent_guests"),
    FlagDerivation("other_pets", contains("cat"), "cat_home"),
    FlagDerivation("alone_time", equals("alone_very_long"), "high_alone_time"),
    FlagDerivation("training_commitment", equals("low"), "low_training_commitment"),
]


def _selected_option_ids(question: Question, answer) -> List[str]:
    if question.type == "multi":
        return list(answer) if isinstance(answer, list) else []
    return [answer]


def _apply_option(option: Optional[Option], traits: TraitVector, flags: Set[str]) -> None:
    if option is None:
        return

    # Later options overwrite earlier ones, no averaging
    for key, value in option.traits.items():
        if key in TraitVector.TRAIT_TYPES:
            traits.set(key, value)

    if option.risk:
        flags.add(str(option.risk))
    if option.mobility_penalty:
        flags.add(STAIRS_HIGH_FLAG)


def derive_flags(answers: Mapping[str, object], derivations: Iterable[FlagDerivation] = FLAG_DERIVATIONS) -> List[str]:
    return [d.flag for d in derivations if d.applies(answers)]


def build_profile(answers: Optional[Mapping[str, object]], questions: Iterable[Question]) -> UserProfile:
    """
    Convert raw quiz answers into a UserProfile (traits + flags).

    Traits start neutral (2) and take the target values of each chosen option.
    Unknown questions or options are ignored so a partial quiz still scores.
    Anything other than a mapping of answers reads as an empty quiz.
    """
    answers = dict(answers) if isinstance(answers, Mapping) else {}
    traits = TraitVector()
    flags: Set[str] = set()

    for question in questions or []:
        answer = answers.get(question.id)
        if not answer:
            continue

        for option_id in _selected_option_ids(question, answer):
            _apply_option(question.option(option_id), traits, flags)

    flags.update(derive_flags(answers))

    traits.clamp_all()

    return UserProfile(traits=traits, flags=frozenset(flags), answers=answers)

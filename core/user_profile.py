from dataclasses import dataclass, field

from core.traits import TraitVector, trait_value


@dataclass
class UserProfile:
    """
    Matching view of one person's quiz answers.

    Always rebuilt from the answers mapping; never updated in place.
    """

    traits: TraitVector = field(default_factory=TraitVector)
    flags: frozenset = field(default_factory=frozenset)

    # Raw answers: question id -> option id, or list of option ids
    answers: dict[str, object] = field(default_factory=dict)

    def trait(self, key: str) -> float:
        return trait_value(self.traits, key)

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags

    def answer(self, question_id: str):
        return self.answers.get(question_id)

    def answer_is(self, question_id: str, option_id: str) -> bool:
        return self.answers.get(question_id) == option_id

    def to_dict(self):
        return {
            "traits": self.traits.to_dict(),
            "flags": sorted(self.flags),
            "answers": dict(self.answers),
        }

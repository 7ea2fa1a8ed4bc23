from ingestion import utils

# Midpoint of the 0..4 scale, used wherever there is no signal
NEUTRAL = 2
MIN_VALUE = 0
MAX_VALUE = 4


'''
T1: exercise fit
T2: handling difficulty tolerance (experience)
T3: guest/stranger sociability preference
T4: other-pet compatibility needs (cats/dogs)
T5: alone-time tolerance / separation risk
T6: noise tolerance
T7: shedding tolerance
T8: grooming tolerance
T9: space/environment fit
T10: kids/household fit
'''

# Shared by user targets and archetype characteristics
class TraitVector:
    TRAIT_TYPES = [
        "T1",
        "T2",
        "T3",
        "T4",
        "T5",
        "T6",
        "T7",
        "T8",
        "T9",
        "T10",
    ]

    def __init__(self, scores=None):
        self.scores = {trait: NEUTRAL for trait in self.TRAIT_TYPES}

        if scores:
            for trait, value in scores.items():
                if trait not in self.scores:
                    raise ValueError(f"Invalid trait: {trait}")
                self.scores[trait] = utils.clamp(value, MIN_VALUE, MAX_VALUE)

    def set(self, trait, value):
        if trait not in self.scores:
            raise ValueError(f"Invalid trait: {trait}")

        self.scores[trait] = utils.clamp(value, MIN_VALUE, MAX_VALUE)

    def get(self, trait):
        return trait_value(self.scores, trait)

    def clamp_all(self):
        for trait, value in self.scores.items():
            self.scores[trait] = utils.clamp(value, MIN_VALUE, MAX_VALUE)

    def to_dict(self):
        return dict(self.scores)

    def __eq__(self, other):
        if not isinstance(other, TraitVector):
            return NotImplemented
        return self.scores == other.scores

    def __repr__(self):
        return f"TraitVector({self.scores!r})"


def trait_value(traits, trait: str) -> float:
    """
    Look up a trait on a TraitVector or plain mapping.
    Missing or non-numeric values read as NEUTRAL; result is clamped to 0..4.
    """
    scores = getattr(traits, "scores", traits) or {}
    raw = scores.get(trait)
    return utils.clamp(utils.safe_number(raw, NEUTRAL), MIN_VALUE, MAX_VALUE)

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.traits import MAX_VALUE, MIN_VALUE, TraitVector

"""
Catalog records handed to the matching core.
Shape checks live here so the core can trust what it receives.
"""


class Option(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    id: str = Field(min_length=1)
    label: str = Field(min_length=1)
    traits: Dict[str, float] = Field(default_factory=dict)
    risk: Optional[str] = None
    mobility_penalty: bool = False

    @model_validator(mode="before")
    @classmethod
    def _lift_trait_markers(cls, data):
        # Persisted options keep risk/mobility markers inside "traits"
        if not isinstance(data, dict):
            return data
        traits = data.get("traits")
        if not isinstance(traits, dict):
            return data

        data = dict(data)
        traits = dict(traits)
        risk = traits.pop("risk", None)
        mobility = traits.pop("mobility_penalty", None)
        if risk and not data.get("risk"):
            data["risk"] = str(risk)
        if mobility and not data.get("mobility_penalty"):
            data["mobility_penalty"] = True
        data["traits"] = {k: v for k, v in traits.items() if k.startswith("T")}
        return data


class Question(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    type: Literal["single", "multi"]
    options: List[Option] = Field(min_length=2)

    @model_validator(mode="after")
    def _unique_option_ids(self):
        seen = set()
        for option in self.options:
            if option.id in seen:
                raise ValueError(f"Duplicate option id '{option.id}' in question {self.id}")
            seen.add(option.id)
        return self

    def option(self, option_id) -> Optional[Option]:
        for opt in self.options:
            if opt.id == option_id:
                return opt
        return None


class BreedExample(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    name: str
    note: Optional[str] = None


class Archetype(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    tier: Optional[Union[int, str]] = None
    traits: Dict[str, float]
    size: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    why: List[str] = Field(default_factory=list)
    ask_shelter: List[str] = Field(default_factory=list)
    breed_examples: List[BreedExample] = Field(default_factory=list)
    breed_examples_disclaimer: Optional[str] = None

    @field_validator("size", "tags", "risks", "why", "ask_shelter", "breed_examples", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("traits")
    @classmethod
    def _validate_traits(cls, value: Dict[str, float]) -> Dict[str, float]:
        for key in TraitVector.TRAIT_TYPES:
            if key not in value:
                raise ValueError(f"missing trait {key}")
            if not MIN_VALUE <= value[key] <= MAX_VALUE:
                raise ValueError(f"invalid {key}: {value[key]} (expected {MIN_VALUE}..{MAX_VALUE})")
        return value

    @property
    def tag_set(self) -> frozenset:
        return frozenset(self.tags)

    @property
    def risk_set(self) -> frozenset:
        return frozenset(self.risks)


class QuestionCatalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: Optional[Union[int, str]] = None
    description: Optional[str] = None
    questions: List[Question]

    @model_validator(mode="after")
    def _unique_ids(self):
        seen = set()
        for question in self.questions:
            if question.id in seen:
                raise ValueError(f"Duplicate question id: {question.id}")
            seen.add(question.id)
        return self

    def get(self, question_id) -> Optional[Question]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None


class ArchetypeCatalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: Optional[Union[int, str]] = None
    description: Optional[str] = None
    archetypes: List[Archetype]

    @model_validator(mode="after")
    def _unique_ids(self):
        seen = set()
        for archetype in self.archetypes:
            if archetype.id in seen:
                raise ValueError(f"Duplicate archetype id: {archetype.id}")
            seen.add(archetype.id)
        return self

    def get(self, archetype_id) -> Optional[Archetype]:
        key = str(archetype_id or "").strip()
        if not key:
            return None
        for archetype in self.archetypes:
            if archetype.id == key:
                return archetype
        return None

import pytest

from ingestion.catalogs import load_archetypes, load_questions
from models.catalog import Archetype, Question

NEUTRAL_TRAITS = {f"T{i}": 2 for i in range(1, 11)}


def make_archetype(archetype_id="test_mix", traits=None, **fields) -> Archetype:
    payload = {
        "id": archetype_id,
        "name": fields.pop("name", archetype_id.replace("_", " ").title()),
        "traits": {**NEUTRAL_TRAITS, **(traits or {})},
    }
    payload.update(fields)
    return Archetype.model_validate(payload)


def make_question(question_id, options, type="single") -> Question:
    return Question.model_validate(
        {
            "id": question_id,
            "title": question_id.replace("_", " "),
            "type": type,
            "options": [
                {"id": option_id, "label": option_id, "traits": traits}
                for option_id, traits in options.items()
            ],
        }
    )


@pytest.fixture(scope="session")
def question_catalog():
    return load_questions()


@pytest.fixture(scope="session")
def archetype_catalog():
    return load_archetypes()


@pytest.fixture
def questions(question_catalog):
    return question_catalog.questions


@pytest.fixture
def archetypes(archetype_catalog):
    return archetype_catalog.archetypes

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from models.catalog import ArchetypeCatalog, QuestionCatalog


# -----------------------------
# Paths
# -----------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]
QUESTIONS_PATH = PROJECT_ROOT / "data" / "questions.v1.json"
ARCHETYPES_PATH = PROJECT_ROOT / "data" / "archetypes.v1.json"

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    pass


def _read_json(path: Path, label: str) -> dict:
    path = Path(path)
    if not path.exists():
        raise CatalogError(f"{label} file not found: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogError(f"invalid {label} JSON: {path}: {exc}") from exc
    return payload


# -----------------------------
# Questions
# -----------------------------

def parse_questions(payload) -> QuestionCatalog:
    if not isinstance(payload, dict) or not isinstance(payload.get("questions"), list):
        raise CatalogError("Questions JSON is invalid: expected { questions: [] }")
    try:
        return QuestionCatalog.model_validate(payload)
    except ValidationError as exc:
        raise CatalogError(f"invalid question catalog: {exc}") from exc


def load_questions(path: Path = QUESTIONS_PATH) -> QuestionCatalog:
    catalog = parse_questions(_read_json(path, "questions"))
    logger.info("Loaded %d questions (version=%s) from %s", len(catalog.questions), catalog.version, path)
    return catalog


# -----------------------------
# Archetypes
# -----------------------------

def parse_archetypes(payload) -> ArchetypeCatalog:
    if not isinstance(payload, dict) or not isinstance(payload.get("archetypes"), list):
        raise CatalogError("Archetypes JSON is invalid: expected { archetypes: [] }")

    for index, entry in enumerate(payload["archetypes"]):
        if not isinstance(entry, dict):
            raise CatalogError(f"Archetype entry {index} must be an object")
        if not entry.get("id"):
            raise CatalogError(f"Archetype entry {index} missing id")
        if not isinstance(entry["id"], str):
            raise CatalogError(f"Archetype id must be a string: {entry['id']!r}")

    try:
        return ArchetypeCatalog.model_validate(payload)
    except ValidationError as exc:
        raise CatalogError(f"invalid archetype catalog: {exc}") from exc


def load_archetypes(path: Path = ARCHETYPES_PATH) -> ArchetypeCatalog:
    catalog = parse_archetypes(_read_json(path, "archetypes"))
    logger.info("Loaded %d archetypes (version=%s) from %s", len(catalog.archetypes), catalog.version, path)
    return catalog

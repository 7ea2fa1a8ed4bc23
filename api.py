"""
FastAPI application for AdoptMatch adoption-fit matching.
Stateless: every request rebuilds the profile from the answers it carries.
"""
import logging
from datetime import datetime
from functools import lru_cache
from typing import Dict, List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from core.settings import Settings, configure_logging, load_settings
from explanation.annotations import build_badges, build_card_badges, humanize_risk, quick_notes, shelter_checklist
from inference.answer_converter import build_profile
from ingestion.catalogs import CatalogError, load_archetypes, load_questions
from matching.engine import rank_archetypes, score_one
from matching.rules import evaluate_archetype
from models.catalog import ArchetypeCatalog, QuestionCatalog

logger = logging.getLogger(__name__)

settings = load_settings()
configure_logging(settings.log_level)

app = FastAPI(title="AdoptMatch API", version="1.0.0")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# DEPENDENCIES
# ============================================================================

def get_settings() -> Settings:
    return settings


@lru_cache(maxsize=1)
def _question_catalog() -> QuestionCatalog:
    return load_questions(settings.questions_path)


@lru_cache(maxsize=1)
def _archetype_catalog() -> ArchetypeCatalog:
    return load_archetypes(settings.archetypes_path)


def get_questions() -> QuestionCatalog:
    try:
        return _question_catalog()
    except CatalogError as e:
        logger.error("Question catalog failed to load: %s", e)
        raise HTTPException(status_code=500, detail=f"Question catalog unavailable: {e}")


def get_archetypes() -> ArchetypeCatalog:
    try:
        return _archetype_catalog()
    except CatalogError as e:
        logger.error("Archetype catalog failed to load: %s", e)
        raise HTTPException(status_code=500, detail=f"Archetype catalog unavailable: {e}")


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class AnswersSubmission(BaseModel):
    """Quiz answers: question id -> option id, or list of option ids for multi questions"""
    answers: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)


class ProfileResponse(BaseModel):
    traits: Dict[str, float]
    flags: List[str]
    answers: Dict[str, Union[str, List[str]]]


class PenaltyItem(BaseModel):
    key: str
    delta: float


class ResultItem(BaseModel):
    id: str
    name: str
    score: float
    base_score: float
    penalties: List[PenaltyItem]
    diffs: Dict[str, float]
    badges: List[str]
    why: List[str]


class AvoidItem(BaseModel):
    id: str
    name: str
    reasons: List[str]


class ResultsResponse(BaseModel):
    top: List[ResultItem]
    avoid: List[AvoidItem]
    notes: List[str]
    total_allowed: int
    total_blocked: int


class ArchetypeSummary(BaseModel):
    id: str
    name: str
    tier: Optional[Union[int, str]] = None
    size: List[str]
    badges: List[str]
    risks: List[str]


class ArchetypeDetail(ArchetypeSummary):
    why: List[str]
    ask_shelter: List[str]
    breed_examples: List[str]
    breed_examples_disclaimer: Optional[str] = None
    shelter_checklist: str


class ScoreResponse(BaseModel):
    archetype_id: str
    allowed: bool
    reasons: List[str]
    score: float
    base_score: float
    penalty: float
    max_penalty: float
    diffs: Dict[str, float]
    applied_penalties: List[PenaltyItem]


def _summary(archetype) -> dict:
    return {
        "id": archetype.id,
        "name": archetype.name,
        "tier": archetype.tier,
        "size": list(archetype.size),
        "badges": build_badges(archetype),
        "risks": [humanize_risk(r) for r in archetype.risks],
    }


def _lookup(catalog: ArchetypeCatalog, archetype_id: str):
    archetype = catalog.get(archetype_id)
    if archetype is None:
        raise HTTPException(status_code=404, detail=f"Unknown archetype: {archetype_id}")
    return archetype


# ============================================================================
# HEALTH CHECK
# ============================================================================

@app.get("/")
@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": "adoptmatch",
        "timestamp": datetime.now().isoformat()
    }


# ============================================================================
# CATALOG ENDPOINTS
# ============================================================================

@app.get("/archetypes", response_model=List[ArchetypeSummary])
async def list_archetypes(catalog: ArchetypeCatalog = Depends(get_archetypes)):
    return [_summary(a) for a in catalog.archetypes]


@app.get("/archetypes/{archetype_id}", response_model=ArchetypeDetail)
async def archetype_detail(archetype_id: str, catalog: ArchetypeCatalog = Depends(get_archetypes)):
    archetype = _lookup(catalog, archetype_id)
    return {
        **_summary(archetype),
        "why": list(archetype.why),
        "ask_shelter": list(archetype.ask_shelter),
        "breed_examples": [b.name for b in archetype.breed_examples],
        "breed_examples_disclaimer": archetype.breed_examples_disclaimer,
        "shelter_checklist": shelter_checklist(archetype),
    }


# ============================================================================
# MATCHING ENDPOINTS
# ============================================================================

@app.post("/profile", response_model=ProfileResponse)
async def profile(
        submission: AnswersSubmission,
        questions: QuestionCatalog = Depends(get_questions),
):
    """Build the matching profile (traits + flags) for a set of answers"""
    return build_profile(submission.answers, questions.questions).to_dict()


@app.post("/results", response_model=ResultsResponse)
async def results(
        submission: AnswersSubmission,
        questions: QuestionCatalog = Depends(get_questions),
        catalog: ArchetypeCatalog = Depends(get_archetypes),
        config: Settings = Depends(get_settings),
):
    """Ranked matches plus the avoid list for a completed (or partial) quiz"""
    if not submission.answers:
        raise HTTPException(status_code=400, detail="No answers submitted")

    user = build_profile(submission.answers, questions.questions)
    matches = rank_archetypes(catalog.archetypes, user)

    top = [
        {
            "id": m.id,
            "name": m.archetype.name,
            "score": m.score,
            "base_score": m.base_score,
            "penalties": [p.to_dict() for p in m.penalties],
            "diffs": m.diffs,
            "badges": build_card_badges(m.archetype),
            "why": list(m.archetype.why[:2]),
        }
        for m in matches.top[:config.top_n]
    ]
    avoid = [
        {"id": b.archetype.id, "name": b.archetype.name or b.archetype.id, "reasons": b.reasons}
        for b in matches.avoid[:config.avoid_n]
    ]

    return ResultsResponse(
        top=top,
        avoid=avoid,
        notes=quick_notes(user),
        total_allowed=len(matches.top),
        total_blocked=len(matches.avoid),
    )


@app.post("/archetypes/{archetype_id}/score", response_model=ScoreResponse)
async def score_archetype(
        archetype_id: str,
        submission: AnswersSubmission,
        questions: QuestionCatalog = Depends(get_questions),
        catalog: ArchetypeCatalog = Depends(get_archetypes),
):
    """Re-score one archetype for the detail view, including its rule outcome"""
    archetype = _lookup(catalog, archetype_id)
    user = build_profile(submission.answers, questions.questions)
    outcome = evaluate_archetype(archetype, user)
    scored = score_one(user, archetype, penalties=outcome.penalties)

    return {
        "archetype_id": archetype.id,
        "allowed": outcome.allowed,
        "reasons": outcome.reasons,
        **scored.to_dict(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

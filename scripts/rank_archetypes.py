"""
Rank every archetype for a saved set of quiz answers.
Run from the project root: python -m scripts.rank_archetypes --answers answers.json
"""
import argparse
import json
import sys
from pathlib import Path

from core.settings import configure_logging, load_settings
from inference.answer_converter import build_profile
from ingestion.catalogs import CatalogError, load_archetypes, load_questions
from matching.engine import rank_archetypes


def rank_answers(answers, questions_path: Path, archetypes_path: Path):
    questions = load_questions(questions_path)
    archetypes = load_archetypes(archetypes_path)

    user = build_profile(answers, questions.questions)
    return user, rank_archetypes(archetypes.archetypes, user)


def format_results(matches, top_n: int, avoid_n: int) -> str:
    lines = ["===== ARCHETYPE RANKINGS =====", ""]

    for rank, result in enumerate(matches.top[:top_n], start=1):
        lines.append(f"{rank:3d}. {result.archetype.name}  |  SCORE: {result.score:.1f}  (base {result.base_score:.1f})")
        for penalty in result.penalties:
            lines.append(f"     penalty {penalty.key}: {penalty.delta:+g}")

    if matches.avoid:
        lines.append("")
        lines.append("===== AVOID (FOR YOUR SITUATION) =====")
        lines.append("")
        for blocked in matches.avoid[:avoid_n]:
            lines.append(f"  - {blocked.archetype.name}: {' '.join(blocked.reasons)}")

    return "\n".join(lines)


def main(argv=None) -> int:
    settings = load_settings()

    parser = argparse.ArgumentParser(description="Rank adoption archetypes for a set of quiz answers.")
    parser.add_argument("--answers", required=True, help="JSON file mapping question id -> option id(s)")
    parser.add_argument("--questions", default=str(settings.questions_path))
    parser.add_argument("--archetypes", default=str(settings.archetypes_path))
    parser.add_argument("--top", type=int, default=settings.top_n)
    parser.add_argument("--avoid", type=int, default=settings.avoid_n)
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)

    try:
        answers = json.loads(Path(args.answers).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Could not read answers file {args.answers}: {e}", file=sys.stderr)
        return 2

    if not isinstance(answers, dict):
        print(f"Could not read answers file {args.answers}: answers file must be a JSON object", file=sys.stderr)
        return 2

    try:
        _user, matches = rank_answers(answers, Path(args.questions), Path(args.archetypes))
    except CatalogError as e:
        print(f"Catalog error: {e}", file=sys.stderr)
        return 2

    print(format_results(matches, args.top, args.avoid))
    return 0


if __name__ == "__main__":
    sys.exit(main())

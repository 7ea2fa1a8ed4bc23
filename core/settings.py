"""
Runtime configuration, read from the environment (.env supported).
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from ingestion.catalogs import ARCHETYPES_PATH, QUESTIONS_PATH

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 5
DEFAULT_AVOID_N = 5
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r; using default=%d", name, raw, default)
        return default
    if value < 0:
        logger.warning("Negative %s=%d; using default=%d", name, value, default)
        return default
    return value


def _log_level_env(name: str, default: str) -> str:
    raw = (os.getenv(name) or default).strip().upper()
    if not isinstance(logging.getLevelName(raw), int):
        logger.warning("Unknown %s=%r; using default=%s", name, raw, default)
        return default
    return raw


@dataclass(frozen=True)
class Settings:
    questions_path: Path
    archetypes_path: Path
    top_n: int = DEFAULT_TOP_N
    avoid_n: int = DEFAULT_AVOID_N
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        questions_path=Path(os.getenv("ADOPTMATCH_QUESTIONS_PATH") or QUESTIONS_PATH),
        archetypes_path=Path(os.getenv("ADOPTMATCH_ARCHETYPES_PATH") or ARCHETYPES_PATH),
        top_n=_int_env("ADOPTMATCH_TOP_N", DEFAULT_TOP_N),
        avoid_n=_int_env("ADOPTMATCH_AVOID_N", DEFAULT_AVOID_N),
        log_level=_log_level_env("ADOPTMATCH_LOG_LEVEL", "INFO"),
    )


def configure_logging(level: str = "INFO") -> None:
    if logging.getLogger().hasHandlers():
        logging.getLogger().setLevel(level)
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)

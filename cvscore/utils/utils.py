import os
import json
from dotenv import load_dotenv

from cvscore.models.settings import AppSettings, ScoringWeights, TextkernelSettings, UploadSettings

load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_settings() -> AppSettings:
    """Build settings from the environment; read on every call so .env edits apply without a restart"""
    return AppSettings(
        textkernel=TextkernelSettings(
            account_id=os.getenv("TEXTKERNEL_ACCOUNT_ID") or None,
            service_key=os.getenv("TEXTKERNEL_API_KEY") or None,
            base_url=os.getenv("TEXTKERNEL_BASE_URL") or "https://api.eu.textkernel.com/tx/v10",
            timeout=_env_int("TEXTKERNEL_TIMEOUT", 60),
        ),
        uploads=UploadSettings(max_file_size_mb=_env_int("MAX_UPLOAD_MB", 10)),
        weights=ScoringWeights(
            position_title=_env_float("SCORE_WEIGHT_POSITION_TITLE", 1.0),
            skills=_env_float("SCORE_WEIGHT_SKILLS", 1.0),
            education=_env_float("SCORE_WEIGHT_EDUCATION", 1.0),
            experience=_env_float("SCORE_WEIGHT_EXPERIENCE", 1.0),
            languages=_env_float("SCORE_WEIGHT_LANGUAGES", 1.0),
        ),
    )


def safe_json(s: str, fallback: dict):
    try:
        parsed = json.loads(s)
    except (TypeError, ValueError):
        return fallback
    return parsed if isinstance(parsed, dict) else fallback

"""Application configuration and constants."""
import os


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_list_env(name: str, default: list[str]) -> list[str]:
    """Parse a comma-separated list from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    values = [item.strip() for item in raw.split(",")]
    return [item for item in values if item] or default


# Remote question API
QUESTION_API_URL = os.environ.get(
    "QUESTION_API_URL", "https://api.mobile.akili.guru"
).rstrip("/")
QUESTION_API_TOKEN = os.environ.get("QUESTION_API_TOKEN") or None
QUESTION_API_TIMEOUT_SECONDS = _parse_int_env("QUESTION_API_TIMEOUT_SECONDS", 15)

ANSWER_STRUCTURE_PATH = "/questions/v2/answer-structure/create/"
METADATA_PATH = "/questions/v2/metadata/"

# HTTP service
CORS_ALLOW_ORIGINS = _parse_list_env("CORS_ALLOW_ORIGINS", ["*"])
BUILDER_SESSION_IDLE_SECONDS = _parse_int_env("BUILDER_SESSION_IDLE_SECONDS", 60 * 60)

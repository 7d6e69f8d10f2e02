from __future__ import annotations
import logging
import os


def _level_from_env(default: int) -> int:
    name = os.environ.get("LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


def setup_console_logging(level: int = logging.INFO) -> None:
    """
    Call once at app start. Prints builder and API client logs to console.
    LOG_LEVEL overrides ``level``.
    """
    level = _level_from_env(level)
    root = logging.getLogger()
    if root.handlers:
        # already configured (uvicorn, pytest)
        root.setLevel(level)
        return

    root.setLevel(level)
    h = logging.StreamHandler()
    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    h.setFormatter(fmt)
    root.addHandler(h)
    # request-level chatter from the HTTP client
    logging.getLogger("urllib3").setLevel(logging.WARNING)

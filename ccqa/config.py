"""CCQA Configuration."""
import os
import tempfile
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    if not value or not value.strip():
        return default
    return Path(value.strip()).expanduser()


# Claude Code keeps one directory per project, one JSONL file per session
PROJECTS_DIR = _env_path("CCQA_PROJECTS_DIR", Path.home() / ".claude" / "projects")

# Report output
OUTPUT_PATH = _env_path("CCQA_OUTPUT_PATH", Path(tempfile.gettempdir()) / "claude-qa-sessions.html")
OPEN_BROWSER = _env_bool("CCQA_OPEN_BROWSER", True)

# Server settings
HOST = os.getenv("CCQA_HOST", "127.0.0.1")
PORT = _env_int("CCQA_PORT", 8000)

# CORS
FRONTEND_ORIGIN = os.getenv("CCQA_FRONTEND_ORIGIN", "http://localhost:3000")

"""Locate session transcripts under the Claude Code projects directory."""
from __future__ import annotations

import logging
from pathlib import Path

from ccqa.models import SessionFileInfo

logger = logging.getLogger("ccqa")

SESSION_FILE_SUFFIX = ".jsonl"


def project_label(dir_name: str) -> str:
    """Human label for an encoded project directory.

    ``-Users-jane-Desktop-ticket-summarizer`` becomes ``Ticket Summarizer``:
    path segments up to and including ``Desktop`` are dropped.
    """
    parts = [part for part in dir_name.split("-") if part]
    desktop_idx = next((idx for idx, part in enumerate(parts) if part.lower() == "desktop"), -1)
    meaningful = parts[desktop_idx + 1:] if desktop_idx >= 0 else parts
    if not meaningful:
        return dir_name
    return " ".join(word[:1].upper() + word[1:] for word in meaningful)


def discover_session_files(projects_dir: Path, suffix: str = SESSION_FILE_SUFFIX) -> list[SessionFileInfo]:
    """One entry per session file in each immediate project subdirectory."""
    results: list[SessionFileInfo] = []
    if not projects_dir.is_dir():
        logger.warning("Claude projects directory not found: %s", projects_dir)
        return results

    for project_dir in sorted(p for p in projects_dir.iterdir() if p.is_dir()):
        for path in sorted(project_dir.glob(f"*{suffix}")):
            if not path.is_file():
                continue
            results.append(
                SessionFileInfo(
                    filePath=str(path),
                    projectDir=project_dir.name,
                    sessionId=path.stem,
                )
            )
    return results

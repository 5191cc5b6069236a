"""Transcript reader registry for platform-specific implementations."""
from __future__ import annotations

from pathlib import Path

from ccqa.models import EventRecord
from ccqa.parsers.platforms.claude_code import records as claude_code_records


def read_session_records(path: Path) -> list[EventRecord]:
    """Read a session file by delegating to the matching platform reader.

    Current implementation routes Claude Code `.jsonl` transcripts to the
    Claude-specific reader module. Additional platforms can be registered here.
    """
    if path.suffix.lower() == ".jsonl":
        return claude_code_records.read_records_file(path)
    return []

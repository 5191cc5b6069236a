"""Reconstruct a Session (metadata, Q&A pairs, timeline) from one transcript."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from ccqa.models import (
    EventRecord,
    Session,
    SessionFileInfo,
    SessionMeta,
    TextBlock,
    UserRecord,
)
from ccqa.parsers.correlation import extract_qa_pairs
from ccqa.parsers.discovery import project_label
from ccqa.parsers.platforms.registry import read_session_records
from ccqa.parsers.timeline import build_session_timeline, strip_tags

FIRST_MESSAGE_LIMIT = 300
SLUG_FALLBACK_LENGTH = 8


class SessionParseError(ValueError):
    """A transcript has content but not a single parseable record."""


def _first_user_text(record: UserRecord) -> str:
    if isinstance(record.content, str):
        return record.content
    for block in record.content:
        if isinstance(block, TextBlock):
            return block.text
    return ""


def _is_substantive_prompt(candidate: str) -> bool:
    if not candidate:
        return False
    if candidate.startswith(("<command-", "<system-")):
        return False
    return "tool_result" not in candidate


def extract_session_meta(records: list[EventRecord], file_info: SessionFileInfo) -> SessionMeta:
    slug = ""
    cwd = ""
    git_branch = ""
    start_time = ""
    first_user_message = ""

    for record in records:
        if not start_time and record.timestamp:
            start_time = record.timestamp
        if not slug and record.slug:
            slug = record.slug
        if not cwd and record.cwd:
            cwd = record.cwd
        if not git_branch and record.gitBranch:
            git_branch = record.gitBranch
        if not first_user_message and isinstance(record, UserRecord):
            candidate = _first_user_text(record)
            if _is_substantive_prompt(candidate):
                first_user_message = candidate
        if slug and cwd and git_branch and start_time and first_user_message:
            break

    return SessionMeta(
        sessionId=file_info.sessionId,
        projectDir=file_info.projectDir,
        projectName=project_label(file_info.projectDir),
        slug=slug or file_info.sessionId[:SLUG_FALLBACK_LENGTH],
        cwd=cwd,
        gitBranch=git_branch,
        startTime=start_time,
        firstUserMessage=strip_tags(first_user_message)[:FIRST_MESSAGE_LIMIT],
    )


def build_session(records: list[EventRecord], file_info: SessionFileInfo) -> Session:
    return Session(
        meta=extract_session_meta(records, file_info),
        qaPairs=extract_qa_pairs(records),
        timeline=build_session_timeline(records),
    )


def parse_session_file(file_info: SessionFileInfo) -> Optional[Session]:
    """Parse one transcript; None when the file is blank.

    Read errors and ``SessionParseError`` (content present, nothing parsed)
    propagate so the caller can record a per-file diagnostic.
    """
    path = Path(file_info.filePath)
    records = read_session_records(path)
    if not records:
        if path.read_text(encoding="utf-8").strip():
            raise SessionParseError("no parseable records")
        return None
    return build_session(records, file_info)

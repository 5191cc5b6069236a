"""Scan every session transcript and assemble the Q&A report."""
from __future__ import annotations

import logging
from pathlib import Path

from ccqa.aggregate import build_aggregate_view
from ccqa.models import ReportResult, ScanDiagnostic, Session
from ccqa.parsers.discovery import discover_session_files
from ccqa.parsers.sessions import parse_session_file

logger = logging.getLogger("ccqa.report")


class NoSessionFilesError(Exception):
    """Discovery found no session files at all."""

    def __init__(self, projects_dir: Path):
        super().__init__(f"No session files found under {projects_dir}")
        self.projects_dir = projects_dir


def build_report(projects_dir: Path) -> ReportResult:
    """Parse each session file independently and aggregate the results.

    A file that cannot be read, or whose content yields no records, is skipped
    and recorded as a diagnostic; the remaining files are still processed.
    """
    session_files = discover_session_files(projects_dir)
    logger.info("Found %d session files", len(session_files))
    if not session_files:
        raise NoSessionFilesError(projects_dir)

    sessions: list[Session] = []
    diagnostics: list[ScanDiagnostic] = []
    for file_info in session_files:
        try:
            session = parse_session_file(file_info)
        except Exception as exc:
            logger.warning("Skipped %s: %s", file_info.sessionId, exc)
            diagnostics.append(
                ScanDiagnostic(sessionId=file_info.sessionId, filePath=file_info.filePath, reason=str(exc))
            )
            continue
        if session is not None:
            sessions.append(session)

    view = build_aggregate_view(sessions)
    logger.info("Parsed %d sessions", len(sessions))
    logger.info(
        "Found %d sessions with %d total Q&A interactions",
        view.totals.qaSessionCount,
        view.totals.totalQA,
    )
    return ReportResult(view=view, diagnostics=diagnostics, filesFound=len(session_files))

"""Q&A report API."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from ccqa import config
from ccqa.models import AggregateTotals, ReportResult, ScanDiagnostic, Session, SessionMeta
from ccqa.render.html_report import render_report
from ccqa.services.qa_report import NoSessionFilesError, build_report

qa_router = APIRouter(prefix="/api/qa", tags=["qa"])


class QASummaryResponse(BaseModel):
    totals: AggregateTotals
    filesFound: int = 0
    skippedFiles: list[ScanDiagnostic] = Field(default_factory=list)


class SessionSummary(BaseModel):
    meta: SessionMeta
    qaCount: int = 0
    timelineCount: int = 0


def _load_report() -> ReportResult:
    try:
        return build_report(config.PROJECTS_DIR)
    except NoSessionFilesError as exc:
        raise HTTPException(status_code=404, detail="No session files found") from exc


@qa_router.get("/summary", response_model=QASummaryResponse)
async def get_summary():
    report = _load_report()
    return QASummaryResponse(
        totals=report.view.totals,
        filesFound=report.filesFound,
        skippedFiles=report.diagnostics,
    )


@qa_router.get("/sessions", response_model=list[SessionSummary])
async def list_qa_sessions(project: Optional[str] = Query(None, description="Project label filter")):
    report = _load_report()
    sessions = report.view.grouped.get(project, []) if project else report.view.sessions
    return [
        SessionSummary(meta=session.meta, qaCount=len(session.qaPairs), timelineCount=len(session.timeline))
        for session in sessions
    ]


@qa_router.get("/sessions/{session_id}", response_model=Session)
async def get_qa_session(session_id: str):
    report = _load_report()
    for session in report.view.sessions:
        if session.meta.sessionId == session_id:
            return session
    raise HTTPException(status_code=404, detail="Session not found")


@qa_router.get("/report", response_class=HTMLResponse)
async def get_report_html():
    report = _load_report()
    return HTMLResponse(content=render_report(report.view))

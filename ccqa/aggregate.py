"""Combine per-file sessions into the cross-project report view."""
from __future__ import annotations

from ccqa.date_utils import iso_to_epoch
from ccqa.models import AggregateTotals, AggregateView, Session


def build_aggregate_view(all_sessions: list[Session]) -> AggregateView:
    """Totals over every session; grouping and ordering over Q&A sessions only.

    Sessions are ordered by start time, newest first. Missing or unparsable
    start times count as the epoch, so those sessions land last in a stable
    order instead of being dropped.
    """
    with_qa = [session for session in all_sessions if session.qaPairs]
    totals = AggregateTotals(
        totalSessions=len(all_sessions),
        totalProjects=len({session.meta.projectName for session in all_sessions}),
        qaSessionCount=len(with_qa),
        totalQA=sum(len(session.qaPairs) for session in with_qa),
    )

    ordered = sorted(with_qa, key=lambda session: iso_to_epoch(session.meta.startTime), reverse=True)

    grouped: dict[str, list[Session]] = {}
    for session in ordered:
        grouped.setdefault(session.meta.projectName, []).append(session)

    return AggregateView(
        totals=totals,
        grouped={name: grouped[name] for name in sorted(grouped)},
        sessions=ordered,
    )

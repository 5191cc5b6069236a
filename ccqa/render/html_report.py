"""Render the aggregate Q&A view as a single self-contained HTML page."""
from __future__ import annotations

import html
import json

from ccqa.date_utils import format_display_date, format_display_time
from ccqa.models import AggregateView, QAPair, Session, TimelineEntry
from ccqa.parsers.timeline import find_answer_index, what_happened_next

PREVIEW_LIMIT = 160
ENTRY_TEXT_LIMIT = 200

_STYLE = """
:root { --primary: #d97706; --text: #1f2937; --muted: #6b7280; --border: #e5e7eb; --surface: #ffffff; --bg: #f9fafb; }
body { font-family: system-ui, sans-serif; background: var(--bg); color: var(--text); margin: 0; padding: 2rem; }
header h1 { margin: 0 0 .25rem; font-size: 1.4rem; }
.totals { color: var(--muted); font-family: monospace; font-size: .85rem; margin-bottom: 2rem; }
.project h2 { font-family: monospace; font-size: .8rem; text-transform: uppercase; letter-spacing: .1em; color: var(--muted); }
details.session { background: var(--surface); border: 1px solid var(--border); border-radius: 4px; margin-bottom: .75rem; }
details.session > summary { cursor: pointer; padding: .9rem 1.2rem; list-style: none; }
.slug { font-family: monospace; color: var(--primary); font-weight: 600; }
.when, .meta { font-family: monospace; font-size: .75rem; color: var(--muted); }
.preview { margin: .35rem 0 0; font-size: .9rem; color: #4b5563; }
.badge-qa { float: right; background: #fef3c7; color: var(--primary); border-radius: 999px; padding: 0 .6rem; font-family: monospace; font-weight: 700; }
.session-body { padding: 0 1.2rem 1.2rem; border-top: 1px solid var(--border); }
.qa-only-toggle:checked ~ .timeline > .log-row { display: none; }
.log-row { display: flex; gap: 1rem; font-family: monospace; font-size: .75rem; padding: .3rem 0; }
.log-row .time { width: 3.5rem; color: var(--muted); flex-shrink: 0; }
.log-row .who { font-weight: 700; }
.log-row.user .who { color: #3b82f6; }
.log-row.assistant .who { color: #8b5cf6; }
.log-row.tool .who { color: var(--primary); }
.qa-card { border-left: 3px solid var(--primary); background: #fffbeb; margin: 1rem 0; padding: .8rem 1.2rem; }
.qa-label { font-family: monospace; font-size: .65rem; text-transform: uppercase; font-weight: 700; color: var(--primary); }
.qa-header { font-family: monospace; font-size: .65rem; text-transform: uppercase; color: var(--muted); }
.qa-question { font-family: Georgia, serif; font-style: italic; font-size: 1.1rem; margin: .2rem 0 .6rem; }
.option-pill { display: inline-block; border: 1px solid var(--border); border-radius: 999px; padding: .1rem .7rem; margin: 0 .3rem .3rem 0; font-size: .75rem; }
.option-pill.selected { background: var(--primary); color: #fff; border-color: var(--primary); }
.qa-answer { font-family: Georgia, serif; margin: .3rem 0 .8rem; }
.qa-extra > summary { cursor: pointer; font-size: .75rem; color: var(--muted); }
.qa-extra pre { font-size: .7rem; background: var(--surface); padding: .5rem; overflow-x: auto; }
"""


def _esc(value: object) -> str:
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def render_timeline_entry(entry: TimelineEntry) -> str:
    time = _esc(format_display_time(entry.timestamp))
    if entry.type == "user_text":
        css, who = "user", "User"
    elif entry.type == "assistant_text":
        css, who = "assistant", "Claude"
    elif entry.type == "tool_use":
        css, who = "tool", f"Tool · {entry.toolName}"
    else:
        return ""
    return (
        f'<div class="log-row {css}"><span class="time">{time}</span>'
        f'<span class="who">{_esc(who)}</span>'
        f'<span class="text">{_esc(entry.content[:ENTRY_TEXT_LIMIT])}</span></div>'
    )


def render_qa_card(pair: QAPair, what_next: list[TimelineEntry], timestamp: str | None) -> str:
    parts = ['<div class="qa-card">', '<span class="qa-label">Claude asked</span>']
    if timestamp:
        parts.append(f' <span class="when">{_esc(format_display_time(timestamp))}</span>')

    for question in pair.questions:
        selected = set(pair.selected_options(question))
        parts.append('<div class="qa-item">')
        if question.header:
            parts.append(f'<span class="qa-header">{_esc(question.header)}</span>')
        parts.append(f'<p class="qa-question">"{_esc(question.question)}"</p>')
        if question.options:
            parts.append('<div class="options">')
            for option in question.options:
                css = "option-pill selected" if option.label in selected else "option-pill"
                parts.append(
                    f'<span class="{css}" title="{_esc(option.description)}">{_esc(option.label)}</span>'
                )
            parts.append("</div>")
        parts.append('<span class="qa-label">You answered</span>')
        parts.append(f'<p class="qa-answer">{_esc(pair.answer_for(question))}</p>')
        parts.append("</div>")

    if what_next:
        parts.append('<details class="qa-extra"><summary>What happened next</summary>')
        parts.extend(render_timeline_entry(entry) for entry in what_next)
        parts.append("</details>")

    payload = json.dumps(
        {
            "questions": [question.model_dump(mode="json") for question in pair.questions],
            "answers": pair.answers,
        },
        indent=2,
        ensure_ascii=False,
    )
    parts.append(f'<details class="qa-extra"><summary>JSON</summary><pre>{_esc(payload)}</pre></details>')
    parts.append("</div>")
    return "".join(parts)


def render_timeline(session: Session) -> str:
    """Timeline with each question replaced by its Q&A card.

    Answer markers are not rendered on their own; the card already shows
    the answer.
    """
    pairs_by_id = {pair.toolUseId: pair for pair in session.qaPairs}
    rendered_ids: set[str] = set()
    parts: list[str] = []
    timeline = session.timeline

    for idx, entry in enumerate(timeline):
        if entry.type == "ask_user_question":
            pair = pairs_by_id.get(entry.toolUseId)
            if pair is None or entry.toolUseId in rendered_ids:
                continue
            rendered_ids.add(entry.toolUseId)
            answer_idx = find_answer_index(timeline, idx, entry.toolUseId)
            parts.append(render_qa_card(pair, what_happened_next(timeline, answer_idx), entry.timestamp))
            continue
        if entry.type == "user_answer":
            continue
        parts.append(render_timeline_entry(entry))
    return "".join(parts)


def render_session(session: Session, index: int) -> str:
    meta = session.meta
    toggle_id = f"qa-only-{index}"
    return (
        f'<details class="session" id="session-{_esc(meta.sessionId)}"><summary>'
        f'<span class="badge-qa">{len(session.qaPairs)} Q&amp;A</span>'
        f'<span class="slug">{_esc(meta.slug)}</span> '
        f'<span class="when">{_esc(format_display_date(meta.startTime))} {_esc(format_display_time(meta.startTime))}</span>'
        f'<p class="preview">{_esc(meta.firstUserMessage[:PREVIEW_LIMIT])}</p>'
        f'</summary><div class="session-body">'
        f'<p class="meta">{_esc(format_display_date(meta.startTime))} · {_esc(meta.projectName)} · {_esc(meta.cwd)}</p>'
        f'<input type="checkbox" class="qa-only-toggle" id="{toggle_id}">'
        f'<label for="{toggle_id}" class="meta">Q&amp;A only</label>'
        f'<div class="timeline">{render_timeline(session)}</div>'
        f"</div></details>"
    )


def render_report(view: AggregateView) -> str:
    totals = view.totals
    parts = [
        "<!DOCTYPE html>",
        '<html lang="en"><head><meta charset="utf-8">',
        "<title>Claude Code Q&amp;A Sessions</title>",
        f"<style>{_STYLE}</style></head><body>",
        "<header><h1>Claude Code Q&amp;A Sessions</h1>",
        (
            f'<p class="totals">{totals.totalSessions} sessions scanned · {totals.totalProjects} projects · '
            f"{totals.qaSessionCount} sessions with Q&amp;A · {totals.totalQA} questions answered</p>"
        ),
        "</header><main>",
    ]

    if not view.sessions:
        parts.append('<p class="meta">No sessions with AskUserQuestion interactions were found.</p>')

    index = 0
    for project_name, sessions in view.grouped.items():
        parts.append(f'<section class="project"><h2>{_esc(project_name)}</h2>')
        for session in sessions:
            parts.append(render_session(session, index))
            index += 1
        parts.append("</section>")

    parts.append("</main></body></html>")
    return "\n".join(parts)

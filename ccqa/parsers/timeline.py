"""Build the display timeline for a session transcript."""
from __future__ import annotations

import json
import re
from typing import Any, Callable, Optional

from ccqa.models import (
    AssistantRecord,
    EventRecord,
    QuestionRequestBlock,
    QuestionResponseBlock,
    TextBlock,
    TimelineEntry,
    ToolUseBlock,
    UserRecord,
)

MIN_TEXT_LENGTH = 2
TEXT_PREVIEW_LIMIT = 300
TOOL_SUMMARY_LIMIT = 120
WHAT_HAPPENED_NEXT_LIMIT = 3

# System-injected text that is never worth showing as a conversation turn
BOILERPLATE_PREFIXES = (
    "<system-reminder",
    "<command-",
    "<local-command-",
    "<task-notification",
    "Caveat: The messages below were generated by the user",
    "[Request interrupted by user",
)

_TAG_PATTERN = re.compile(r"<[^>]+>")


def strip_tags(text: str) -> str:
    if not text:
        return ""
    return _TAG_PATTERN.sub("", text).strip()


def is_boilerplate(text: str) -> bool:
    return text.lstrip().startswith(BOILERPLATE_PREFIXES)


def clean_narrative_text(text: str) -> str:
    """Tag-stripped preview text, or "" when the text is noise."""
    if not isinstance(text, str) or is_boilerplate(text):
        return ""
    cleaned = strip_tags(text)
    if len(cleaned) < MIN_TEXT_LENGTH:
        return ""
    return cleaned[:TEXT_PREVIEW_LIMIT]


def _string_field(name: str, prefix: str = "") -> Callable[[dict[str, Any]], str]:
    def extract(tool_input: dict[str, Any]) -> str:
        value = tool_input.get(name)
        if isinstance(value, str) and value.strip():
            return f"{prefix}{value}"
        return ""

    return extract


# First extractor to return a non-empty string wins.
TOOL_SUMMARY_EXTRACTORS: list[tuple[str, Callable[[dict[str, Any]], str]]] = [
    ("command", _string_field("command")),
    ("file_path", _string_field("file_path")),
    ("pattern", _string_field("pattern", prefix="pattern: ")),
    ("query", _string_field("query")),
    ("url", _string_field("url")),
    ("content", _string_field("content")),
]


def summarize_tool_input(tool_input: dict[str, Any]) -> str:
    """One-line summary of a tool invocation's most telling argument."""
    if not tool_input:
        return ""
    for _field, extract in TOOL_SUMMARY_EXTRACTORS:
        summary = extract(tool_input)
        if summary:
            return summary[:TOOL_SUMMARY_LIMIT]
    return json.dumps(tool_input, separators=(",", ":"), ensure_ascii=False, default=str)[:TOOL_SUMMARY_LIMIT]


def _narrative_entry(entry_type: str, text: str, record: EventRecord) -> Optional[TimelineEntry]:
    content = clean_narrative_text(text)
    if not content:
        return None
    return TimelineEntry(type=entry_type, timestamp=record.timestamp, sequence=record.sequence, content=content)


def _assistant_entries(record: AssistantRecord) -> list[TimelineEntry]:
    if not isinstance(record.content, list):
        return []
    entries: list[TimelineEntry] = []
    for block in record.content:
        if isinstance(block, TextBlock):
            entry = _narrative_entry("assistant_text", block.text, record)
            if entry:
                entries.append(entry)
        elif isinstance(block, QuestionRequestBlock):
            entries.append(
                TimelineEntry(
                    type="ask_user_question",
                    timestamp=record.timestamp,
                    sequence=record.sequence,
                    toolUseId=block.id,
                    questions=block.questions,
                )
            )
        elif isinstance(block, ToolUseBlock):
            entries.append(
                TimelineEntry(
                    type="tool_use",
                    timestamp=record.timestamp,
                    sequence=record.sequence,
                    toolName=block.name,
                    content=summarize_tool_input(block.input),
                )
            )
    return entries


def _user_entries(record: UserRecord) -> list[TimelineEntry]:
    if isinstance(record.content, str):
        entry = _narrative_entry("user_text", record.content, record)
        return [entry] if entry else []

    entries: list[TimelineEntry] = []
    for block in record.content:
        if isinstance(block, TextBlock):
            entry = _narrative_entry("user_text", block.text, record)
            if entry:
                entries.append(entry)
        elif isinstance(block, QuestionResponseBlock):
            entries.append(
                TimelineEntry(
                    type="user_answer",
                    timestamp=record.timestamp,
                    sequence=record.sequence,
                    toolUseId=block.toolUseId,
                )
            )
    return entries


def build_session_timeline(records: list[EventRecord]) -> list[TimelineEntry]:
    """Single forward pass; tool results and thinking blocks are never emitted."""
    timeline: list[TimelineEntry] = []
    for record in records:
        if not record.timestamp:
            continue
        if isinstance(record, AssistantRecord):
            timeline.extend(_assistant_entries(record))
        elif isinstance(record, UserRecord):
            timeline.extend(_user_entries(record))
    return timeline


def find_answer_index(timeline: list[TimelineEntry], ask_index: int, tool_use_id: str) -> int:
    for idx in range(ask_index + 1, len(timeline)):
        entry = timeline[idx]
        if entry.type == "user_answer" and entry.toolUseId == tool_use_id:
            return idx
    return -1


def what_happened_next(
    timeline: list[TimelineEntry],
    answer_index: int,
    limit: int = WHAT_HAPPENED_NEXT_LIMIT,
) -> list[TimelineEntry]:
    """The next few assistant turns and tool calls after an answer."""
    following: list[TimelineEntry] = []
    if answer_index < 0:
        return following
    for entry in timeline[answer_index + 1:]:
        if len(following) >= limit:
            break
        if entry.type in ("assistant_text", "tool_use"):
            following.append(entry)
    return following

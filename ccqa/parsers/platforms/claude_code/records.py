"""Claude Code JSONL transcript reader.

Turns raw transcript text into typed event records. Parsing is tolerant:
blank lines, lines that are not valid JSON and JSON values that are not
objects are dropped without raising, since transcripts are appended to
concurrently and often end in a partial line.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ccqa.models import (
    AssistantRecord,
    ContentBlock,
    EventRecord,
    OtherRecord,
    Question,
    QuestionOption,
    QuestionRequestBlock,
    QuestionResponseBlock,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    UnknownBlock,
    UserRecord,
)

QUESTION_TOOL_NAME = "AskUserQuestion"

_THINKING_BLOCK_TYPES = {"thinking", "redacted_thinking"}


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _parse_option(raw: Any) -> QuestionOption | None:
    if isinstance(raw, str):
        return QuestionOption(label=raw)
    if not isinstance(raw, dict):
        return None
    return QuestionOption(label=_as_str(raw.get("label")), description=_as_str(raw.get("description")))


def parse_questions(raw_input: Any) -> list[Question]:
    """Extract the question list from an AskUserQuestion input payload."""
    if not isinstance(raw_input, dict):
        return []
    raw_questions = raw_input.get("questions")
    if not isinstance(raw_questions, list):
        return []

    questions: list[Question] = []
    for raw in raw_questions:
        if not isinstance(raw, dict):
            continue
        raw_options = raw.get("options")
        options = []
        if isinstance(raw_options, list):
            options = [opt for opt in (_parse_option(item) for item in raw_options) if opt is not None]
        questions.append(
            Question(
                question=_as_str(raw.get("question")),
                header=_as_str(raw.get("header")),
                options=options,
                multiSelect=bool(raw.get("multiSelect")),
            )
        )
    return questions


def _is_question_response(block: dict[str, Any], tool_use_result: Any, question_ids: set[str]) -> bool:
    if isinstance(tool_use_result, dict) and isinstance(tool_use_result.get("answers"), dict):
        return True
    return _as_str(block.get("tool_use_id")) in question_ids


def _parse_block(
    block: Any,
    *,
    tool_use_result: Any,
    question_ids: set[str],
) -> ContentBlock:
    if not isinstance(block, dict):
        return UnknownBlock(rawType=type(block).__name__)

    block_type = _as_str(block.get("type"))
    if block_type == "text":
        return TextBlock(text=_as_str(block.get("text")))
    if block_type in _THINKING_BLOCK_TYPES:
        return ThinkingBlock()
    if block_type == "tool_use":
        tool_id = _as_str(block.get("id"))
        name = _as_str(block.get("name"))
        raw_input = block.get("input")
        if name == QUESTION_TOOL_NAME:
            if tool_id:
                question_ids.add(tool_id)
            return QuestionRequestBlock(id=tool_id, questions=parse_questions(raw_input))
        return ToolUseBlock(
            id=tool_id,
            name=name,
            input=raw_input if isinstance(raw_input, dict) else {},
        )
    if block_type == "tool_result":
        fields = {
            "toolUseId": _as_str(block.get("tool_use_id")),
            "content": block.get("content"),
            "isError": bool(block.get("is_error")),
        }
        if _is_question_response(block, tool_use_result, question_ids):
            return QuestionResponseBlock(**fields)
        return ToolResultBlock(**fields)
    return UnknownBlock(rawType=block_type)


def _parse_content(
    raw_content: Any,
    *,
    tool_use_result: Any = None,
    question_ids: set[str],
) -> str | list[ContentBlock]:
    if isinstance(raw_content, str):
        return raw_content
    if not isinstance(raw_content, list):
        return []
    return [
        _parse_block(block, tool_use_result=tool_use_result, question_ids=question_ids)
        for block in raw_content
    ]


def parse_record(entry: dict[str, Any], sequence: int, question_ids: set[str] | None = None) -> EventRecord:
    """Classify one decoded transcript line into a typed record.

    *question_ids* collects AskUserQuestion ids seen so far in the file so
    later tool_result blocks answering them are tagged as question responses.
    """
    if question_ids is None:
        question_ids = set()

    common: dict[str, Any] = {
        "timestamp": _as_optional_str(entry.get("timestamp")),
        "sequence": sequence,
        "cwd": _as_str(entry.get("cwd")),
        "slug": _as_str(entry.get("slug")),
        "gitBranch": _as_str(entry.get("gitBranch")),
    }
    message = entry.get("message")
    raw_content = message.get("content") if isinstance(message, dict) else None
    raw_type = entry.get("type")

    if raw_type == "assistant":
        return AssistantRecord(content=_parse_content(raw_content, question_ids=question_ids), **common)
    if raw_type == "user":
        tool_use_result = entry.get("toolUseResult")
        return UserRecord(
            content=_parse_content(raw_content, tool_use_result=tool_use_result, question_ids=question_ids),
            toolUseResult=tool_use_result,
            **common,
        )
    return OtherRecord(rawType=_as_str(raw_type), **common)


def read_records(text: str) -> list[EventRecord]:
    """Parse JSONL text into records, in input order."""
    records: list[EventRecord] = []
    question_ids: set[str] = set()
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError:
            continue
        if not isinstance(entry, dict):
            continue
        records.append(parse_record(entry, len(records), question_ids))
    return records


def read_records_file(path: Path) -> list[EventRecord]:
    """Read and parse a transcript file. I/O and decoding errors propagate."""
    return read_records(path.read_text(encoding="utf-8"))


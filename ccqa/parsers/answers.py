"""Recover question -> answer mappings from AskUserQuestion responses."""
from __future__ import annotations

from typing import Any

from ccqa.models import Question

# Separator between `"question"="answer"` pairs in the free-text result
_PAIR_DELIMITER = '", "'


def tool_result_to_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        chunks: list[str] = []
        for block in content:
            if isinstance(block, str):
                chunks.append(block)
            elif isinstance(block, dict) and isinstance(block.get("text"), str):
                chunks.append(block["text"])
        return "\n".join(chunks)
    return ""


def parse_answers_from_text(text: str, questions: list[Question]) -> dict[str, str]:
    """Parse answers out of the free-text tool result.

    The result reads like
    ``User has answered your questions: "Q1"="A1", "Q2"="A2". ...``.
    For each question the answer starts after ``"<question>"="`` and ends at
    the next ``", "``; failing that at the last ``"`` in the text, and
    failing that at the end of the text. Questions that do not appear are
    left out.

    Quotes inside answers are not escaped upstream: an answer containing
    ``", "`` is cut short, and a question whose ``"<question>"="`` marker
    also appears inside an earlier answer is matched there instead.
    """
    answers: dict[str, str] = {}
    if not isinstance(text, str) or not text:
        return answers

    for question in questions:
        if not question.question:
            continue
        marker = f'"{question.question}"="'
        idx = text.find(marker)
        if idx == -1:
            continue
        start = idx + len(marker)
        end = text.find(_PAIR_DELIMITER, start)
        if end == -1:
            end = text.rfind('"')
            if end <= start:
                end = len(text)
        answers[question.question] = text[start:end]
    return answers


def _answer_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(_answer_text(item) for item in value)
    return str(value)


def _structured_answers(tool_use_result: Any) -> dict[str, str] | None:
    if not isinstance(tool_use_result, dict):
        return None
    raw = tool_use_result.get("answers")
    if not isinstance(raw, dict):
        return None
    return {str(key): _answer_text(value) for key, value in raw.items()}


def resolve_answers(tool_use_result: Any, content: Any, questions: list[Question]) -> dict[str, str]:
    """Structured ``toolUseResult.answers`` wins; otherwise parse the result text."""
    structured = _structured_answers(tool_use_result)
    if structured is not None:
        return structured
    return parse_answers_from_text(tool_result_to_text(content), questions)

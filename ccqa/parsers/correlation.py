"""Join AskUserQuestion requests to their responses by tool_use id."""
from __future__ import annotations

from ccqa.models import (
    AssistantRecord,
    EventRecord,
    PendingQuestion,
    QAPair,
    QuestionRequestBlock,
    QuestionResponseBlock,
    ToolResultBlock,
    UserRecord,
)
from ccqa.parsers.answers import resolve_answers


def index_pending_questions(records: list[EventRecord]) -> dict[str, PendingQuestion]:
    """Pass 1: every AskUserQuestion request keyed by its id (last write wins)."""
    pending: dict[str, PendingQuestion] = {}
    for record in records:
        if not isinstance(record, AssistantRecord) or not isinstance(record.content, list):
            continue
        if not record.timestamp:
            continue
        for block in record.content:
            if not isinstance(block, QuestionRequestBlock):
                continue
            pending[block.id] = PendingQuestion(
                toolUseId=block.id,
                questions=block.questions,
                timestamp=record.timestamp,
                sequence=record.sequence,
            )
    return pending


def extract_qa_pairs(records: list[EventRecord]) -> list[QAPair]:
    """Build Q&A pairs in the order the responses appear.

    Responses flagged ``is_error``, responses whose id matches no request and
    records without a timestamp are skipped.
    """
    pending = index_pending_questions(records)
    if not pending:
        return []

    pairs: list[QAPair] = []
    for record in records:
        if not isinstance(record, UserRecord) or not isinstance(record.content, list):
            continue
        if not record.timestamp:
            continue
        for block in record.content:
            if not isinstance(block, (QuestionResponseBlock, ToolResultBlock)):
                continue
            ask = pending.get(block.toolUseId)
            if ask is None or block.isError:
                continue
            pairs.append(
                QAPair(
                    toolUseId=ask.toolUseId,
                    questions=ask.questions,
                    answers=resolve_answers(record.toolUseResult, block.content, ask.questions),
                    askTimestamp=ask.timestamp,
                    answerTimestamp=record.timestamp,
                    askSequence=ask.sequence,
                    answerSequence=record.sequence,
                )
            )
    return pairs

"""Pydantic models for transcript records, Q&A pairs, timelines and reports."""
from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# ── Content blocks ──────────────────────────────────────────────────


class QuestionOption(BaseModel):
    label: str = ""
    description: str = ""


class Question(BaseModel):
    question: str = ""
    header: str = ""
    options: list[QuestionOption] = Field(default_factory=list)
    multiSelect: bool = False


class TextBlock(BaseModel):
    blockKind: Literal["text"] = "text"
    text: str = ""


class ToolUseBlock(BaseModel):
    blockKind: Literal["tool_use"] = "tool_use"
    id: str = ""
    name: str = ""
    input: dict[str, Any] = Field(default_factory=dict)


class QuestionRequestBlock(BaseModel):
    """An AskUserQuestion tool_use block."""

    blockKind: Literal["question_request"] = "question_request"
    id: str = ""
    questions: list[Question] = Field(default_factory=list)


class ToolResultBlock(BaseModel):
    blockKind: Literal["tool_result"] = "tool_result"
    toolUseId: str = ""
    content: Any = None
    isError: bool = False


class QuestionResponseBlock(BaseModel):
    """A tool_result block whose record carries a structured toolUseResult."""

    blockKind: Literal["question_response"] = "question_response"
    toolUseId: str = ""
    content: Any = None
    isError: bool = False


class ThinkingBlock(BaseModel):
    blockKind: Literal["thinking"] = "thinking"


class UnknownBlock(BaseModel):
    blockKind: Literal["unknown"] = "unknown"
    rawType: str = ""


ContentBlock = Annotated[
    Union[
        TextBlock,
        ToolUseBlock,
        QuestionRequestBlock,
        ToolResultBlock,
        QuestionResponseBlock,
        ThinkingBlock,
        UnknownBlock,
    ],
    Field(discriminator="blockKind"),
]

# ── Event records ───────────────────────────────────────────────────


class _RecordBase(BaseModel):
    timestamp: Optional[str] = None
    sequence: int = 0
    cwd: str = ""
    slug: str = ""
    gitBranch: str = ""


class AssistantRecord(_RecordBase):
    kind: Literal["assistant"] = "assistant"
    content: Union[str, list[ContentBlock]] = Field(default_factory=list)


class UserRecord(_RecordBase):
    kind: Literal["user"] = "user"
    content: Union[str, list[ContentBlock]] = Field(default_factory=list)
    toolUseResult: Any = None


class OtherRecord(_RecordBase):
    kind: Literal["other"] = "other"
    rawType: str = ""


EventRecord = Annotated[
    Union[AssistantRecord, UserRecord, OtherRecord],
    Field(discriminator="kind"),
]

# ── Q&A reconstruction ──────────────────────────────────────────────


class PendingQuestion(BaseModel):
    toolUseId: str
    questions: list[Question] = Field(default_factory=list)
    timestamp: Optional[str] = None
    sequence: int = 0


class QAPair(BaseModel):
    toolUseId: str
    questions: list[Question] = Field(default_factory=list)
    answers: dict[str, str] = Field(default_factory=dict)
    askTimestamp: Optional[str] = None
    answerTimestamp: Optional[str] = None
    askSequence: int = 0
    answerSequence: int = 0

    def answer_for(self, question: Question) -> str:
        return self.answers.get(question.question, "")

    def selected_options(self, question: Question) -> list[str]:
        """Option labels that appear (case-insensitively) in the answer text."""
        answer = self.answer_for(question).lower()
        if not answer:
            return []
        return [opt.label for opt in question.options if opt.label and opt.label.lower() in answer]


class TimelineEntry(BaseModel):
    type: Literal["user_text", "assistant_text", "ask_user_question", "user_answer", "tool_use"]
    timestamp: str
    sequence: int = 0
    content: str = ""
    toolName: str = ""
    toolUseId: str = ""
    questions: list[Question] = Field(default_factory=list)

# ── Sessions & reports ──────────────────────────────────────────────


class SessionFileInfo(BaseModel):
    filePath: str
    projectDir: str
    sessionId: str


class SessionMeta(BaseModel):
    sessionId: str
    projectDir: str = ""
    projectName: str = ""
    slug: str = ""
    cwd: str = ""
    gitBranch: str = ""
    startTime: str = ""
    firstUserMessage: str = ""


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    meta: SessionMeta
    qaPairs: list[QAPair] = Field(default_factory=list)
    timeline: list[TimelineEntry] = Field(default_factory=list)


class AggregateTotals(BaseModel):
    totalSessions: int = 0
    totalProjects: int = 0
    qaSessionCount: int = 0
    totalQA: int = 0


class AggregateView(BaseModel):
    model_config = ConfigDict(frozen=True)

    totals: AggregateTotals = Field(default_factory=AggregateTotals)
    grouped: dict[str, list[Session]] = Field(default_factory=dict)
    sessions: list[Session] = Field(default_factory=list)


class ScanDiagnostic(BaseModel):
    sessionId: str
    filePath: str
    reason: str


class ReportResult(BaseModel):
    view: AggregateView
    diagnostics: list[ScanDiagnostic] = Field(default_factory=list)
    filesFound: int = 0

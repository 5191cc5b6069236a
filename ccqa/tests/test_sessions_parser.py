import json
import tempfile
import unittest
from pathlib import Path

from ccqa.models import SessionFileInfo
from ccqa.parsers.platforms.claude_code.records import read_records
from ccqa.parsers.sessions import SessionParseError, extract_session_meta, parse_session_file


class SessionParserTests(unittest.TestCase):
    def _write_jsonl(self, lines: list[dict], relative_path: str = "-Users-jane-Desktop-qa-demo/sess-1234567890.jsonl") -> SessionFileInfo:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        path = Path(tmpdir.name) / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(json.dumps(line) for line in lines), encoding="utf-8")
        return SessionFileInfo(filePath=str(path), projectDir=path.parent.name, sessionId=path.stem)

    def test_single_question_end_to_end(self) -> None:
        file_info = self._write_jsonl(
            [
                {
                    "type": "user",
                    "timestamp": "2026-02-16T10:00:00Z",
                    "cwd": "/Users/jane/Desktop/qa-demo",
                    "message": {"role": "user", "content": "Ship the release?"},
                },
                {
                    "type": "assistant",
                    "timestamp": "2026-02-16T10:00:05Z",
                    "message": {
                        "role": "assistant",
                        "content": [
                            {
                                "type": "tool_use",
                                "id": "X",
                                "name": "AskUserQuestion",
                                "input": {
                                    "questions": [
                                        {
                                            "question": "Proceed?",
                                            "header": "Release",
                                            "options": [{"label": "Yes"}, {"label": "No"}],
                                        }
                                    ]
                                },
                            }
                        ],
                    },
                },
                {
                    "type": "assistant",
                    "timestamp": "2026-02-16T10:00:06Z",
                    "message": {"role": "assistant", "content": [{"type": "thinking", "thinking": "..."}]},
                },
                {
                    "type": "user",
                    "timestamp": "2026-02-16T10:01:00Z",
                    "toolUseResult": {"answers": {"Proceed?": "Yes"}},
                    "message": {
                        "role": "user",
                        "content": [{"type": "tool_result", "tool_use_id": "X", "content": '"Proceed?"="Yes"'}],
                    },
                },
            ]
        )

        session = parse_session_file(file_info)

        self.assertIsNotNone(session)
        assert session is not None
        self.assertEqual(len(session.qaPairs), 1)
        pair = session.qaPairs[0]
        self.assertEqual(pair.answer_for(pair.questions[0]), "Yes")
        self.assertEqual(session.meta.sessionId, "sess-1234567890")
        self.assertEqual(session.meta.projectName, "Qa Demo")
        self.assertEqual(session.meta.slug, "sess-123")
        self.assertEqual(session.meta.startTime, "2026-02-16T10:00:00Z")
        self.assertEqual(session.meta.firstUserMessage, "Ship the release?")
        self.assertEqual([entry.type for entry in session.timeline], ["user_text", "ask_user_question", "user_answer"])

    def test_blank_file_yields_no_session(self) -> None:
        file_info = self._write_jsonl([])
        Path(file_info.filePath).write_text("\n  \n", encoding="utf-8")

        self.assertIsNone(parse_session_file(file_info))

    def test_file_with_only_malformed_lines_raises(self) -> None:
        file_info = self._write_jsonl([])
        Path(file_info.filePath).write_text("not json\n\n{broken", encoding="utf-8")

        with self.assertRaises(SessionParseError):
            parse_session_file(file_info)

    def test_unreadable_file_raises(self) -> None:
        file_info = self._write_jsonl([{"type": "user", "message": {"content": "hi"}}])
        Path(file_info.filePath).write_bytes(b"\xff\xfe\xfa invalid utf-8")

        with self.assertRaises(UnicodeDecodeError):
            parse_session_file(file_info)

    def test_meta_skips_command_and_tool_result_prompts(self) -> None:
        records = read_records(
            "\n".join(
                json.dumps(entry)
                for entry in [
                    {"type": "summary", "summary": "x"},
                    {"type": "user", "timestamp": "2026-02-16T09:00:00Z", "message": {"content": "<command-name>/init</command-name>"}},
                    {"type": "user", "timestamp": "2026-02-16T09:00:01Z", "message": {"content": "<system-reminder>x</system-reminder>"}},
                    {
                        "type": "user",
                        "timestamp": "2026-02-16T09:00:02Z",
                        "message": {"content": [{"type": "tool_result", "tool_use_id": "a", "content": "x"}]},
                    },
                    {
                        "type": "user",
                        "timestamp": "2026-02-16T09:00:03Z",
                        "slug": "calm-river",
                        "gitBranch": "feature/qa",
                        "message": {"content": [{"type": "text", "text": "<ide_opened_file>Fix the <b>login</b> flow</ide_opened_file>"}]},
                    },
                    {"type": "user", "timestamp": "2026-02-16T09:00:04Z", "message": {"content": "Second prompt"}},
                ]
            )
        )
        file_info = SessionFileInfo(filePath="/tmp/x.jsonl", projectDir="-home-dev-tools-ccqa", sessionId="abcdef123456")

        meta = extract_session_meta(records, file_info)

        self.assertEqual(meta.startTime, "2026-02-16T09:00:00Z")
        self.assertEqual(meta.firstUserMessage, "Fix the login flow")
        self.assertEqual(meta.slug, "calm-river")
        self.assertEqual(meta.gitBranch, "feature/qa")
        self.assertEqual(meta.projectName, "Home Dev Tools Ccqa")

    def test_first_message_is_capped(self) -> None:
        records = read_records(json.dumps({"type": "user", "timestamp": "2026-02-16T09:00:00Z", "message": {"content": "y" * 900}}))
        file_info = SessionFileInfo(filePath="/tmp/x.jsonl", projectDir="p", sessionId="s")

        self.assertEqual(len(extract_session_meta(records, file_info).firstUserMessage), 300)


if __name__ == "__main__":
    unittest.main()

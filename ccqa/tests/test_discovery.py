import tempfile
import unittest
from pathlib import Path

from ccqa.parsers.discovery import discover_session_files, project_label


class ProjectLabelTests(unittest.TestCase):
    def test_drops_path_up_to_desktop(self) -> None:
        self.assertEqual(project_label("-Users-reehan-Desktop-ticket-summarizer"), "Ticket Summarizer")

    def test_without_desktop_keeps_all_segments(self) -> None:
        self.assertEqual(project_label("-home-dev-api"), "Home Dev Api")

    def test_falls_back_to_raw_name(self) -> None:
        self.assertEqual(project_label("-Users-me-Desktop"), "-Users-me-Desktop")
        self.assertEqual(project_label("---"), "---")


class DiscoveryTests(unittest.TestCase):
    def test_lists_jsonl_files_per_project_directory(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        root = Path(tmpdir.name)
        (root / "-Users-a-Desktop-beta").mkdir()
        (root / "-Users-a-Desktop-alpha").mkdir()
        (root / "-Users-a-Desktop-beta" / "s2.jsonl").write_text("{}", encoding="utf-8")
        (root / "-Users-a-Desktop-alpha" / "s1.jsonl").write_text("{}", encoding="utf-8")
        (root / "-Users-a-Desktop-alpha" / "notes.txt").write_text("x", encoding="utf-8")
        (root / "-Users-a-Desktop-alpha" / "nested").mkdir()
        (root / "-Users-a-Desktop-alpha" / "nested" / "deep.jsonl").write_text("{}", encoding="utf-8")
        (root / "stray.jsonl").write_text("{}", encoding="utf-8")

        files = discover_session_files(root)

        self.assertEqual([info.sessionId for info in files], ["s1", "s2"])
        self.assertEqual(files[0].projectDir, "-Users-a-Desktop-alpha")
        self.assertTrue(files[0].filePath.endswith("s1.jsonl"))

    def test_missing_root_yields_empty_list(self) -> None:
        with self.assertLogs("ccqa", level="WARNING"):
            files = discover_session_files(Path("/nonexistent/ccqa/projects"))

        self.assertEqual(files, [])


if __name__ == "__main__":
    unittest.main()

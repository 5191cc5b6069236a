#!/usr/bin/env python3
"""Generate the Claude Code Q&A report.

Usage:
  python -m ccqa.scripts.qa_report
  python -m ccqa.scripts.qa_report --projects-dir ~/.claude/projects --output /tmp/qa.html
  python -m ccqa.scripts.qa_report --json
"""
from __future__ import annotations

import argparse
import json
import logging
import webbrowser
from pathlib import Path

from ccqa import config
from ccqa.render.html_report import render_report
from ccqa.services.qa_report import NoSessionFilesError, build_report

logger = logging.getLogger("ccqa")


def _open_in_browser(output_path: Path) -> None:
    logger.info("Opening in browser...")
    try:
        opened = webbrowser.open(output_path.resolve().as_uri())
    except webbrowser.Error as exc:
        logger.warning("Could not auto-open (%s). Open manually: %s", exc, output_path)
        return
    if not opened:
        logger.info("Could not auto-open. Open manually: %s", output_path)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Visualize AskUserQuestion exchanges from Claude Code sessions")
    parser.add_argument("--projects-dir", type=Path, default=config.PROJECTS_DIR)
    parser.add_argument("--output", type=Path, default=config.OUTPUT_PATH)
    parser.add_argument("--json", action="store_true", help="Print the aggregate view as JSON instead of writing HTML")
    parser.add_argument("--no-open", action="store_true", help="Do not open the report in a browser")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    logger.info("Discovering Claude Code sessions in %s", args.projects_dir)
    try:
        report = build_report(args.projects_dir.expanduser())
    except NoSessionFilesError:
        logger.error("No session files found. Is Claude Code installed?")
        return 1

    if args.json:
        payload = {
            "filesFound": report.filesFound,
            "skippedFiles": [item.model_dump(mode="json") for item in report.diagnostics],
            "view": report.view.model_dump(mode="json"),
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    output_path: Path = args.output.expanduser()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_report(report.view), encoding="utf-8")
    logger.info("Written to %s", output_path)

    if config.OPEN_BROWSER and not args.no_open:
        _open_in_browser(output_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

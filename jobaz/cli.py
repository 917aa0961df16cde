"""Command-line interface for JobAZ proofreading.

Analyses a text file, highlights issues produced elsewhere, or prints
document statistics.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from jobaz.analysis import AnalysisOptions, LLMProofreader, ProofreadingAnalysis, analyze_text
from jobaz.config import ANALYZERS, LOG_LEVELS, ProofreaderConfiguration
from jobaz.errors import ProofreadingError
from jobaz.highlight import reconcile, render_markup, render_plain
from jobaz.llm.provider import LLMProviderError
from jobaz.llm.provider_registry import create_provider_chain
from jobaz.llm.service import LLMService
from jobaz.models import ProofreadingIssue, Segment, WritingMode, issues_from_payload
from jobaz.utils.document_stats import compute_document_stats

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_PROVIDER_ERROR = 2

FORMATS = ("text", "html", "json")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="jobaz",
        description="Proofread documents and highlight suggested fixes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check a cover letter with the offline rules
  python -m jobaz check letter.txt

  # Academic mode, HTML output written to a file
  python -m jobaz check essay.txt --mode academic --format html --output essay.html

  # Ask the LLM instead (needs GEMINI_API_KEY or MISTRAL_API_KEY)
  python -m jobaz check thesis.txt --analyzer llm --mode academic_research

  # Highlight issues produced by the browser (UTF-16 offsets)
  python -m jobaz highlight letter.txt --issues issues.json --utf16

  # Word, character and page counts
  python -m jobaz stats letter.txt

Environment Variables:
  JOBAZ_WRITING_MODE, JOBAZ_ANALYZER, JOBAZ_PAGE_SIZE, JOBAZ_MAX_ISSUES,
  JOBAZ_LOG_LEVEL, LLM_PRIMARY, LLM_FALLBACK, GEMINI_API_KEY, MISTRAL_API_KEY
        """,
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: WARNING or JOBAZ_LOG_LEVEL)",
    )
    parser.add_argument("--dotenv", type=Path, help="Path to .env file for settings and API keys")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    check = subparsers.add_parser("check", help="Analyse a document and highlight issues")
    check.add_argument("file", type=Path, help="UTF-8 text file to proofread")
    check.add_argument(
        "--mode",
        choices=WritingMode.all_values(),
        help="Writing mode (default: general or JOBAZ_WRITING_MODE)",
    )
    check.add_argument(
        "--analyzer",
        choices=ANALYZERS,
        help="Issue source: offline rules or an LLM (default: rules or JOBAZ_ANALYZER)",
    )
    check.add_argument("--provider", help="Primary LLM provider (default: LLM_PRIMARY)")
    check.add_argument("--max-issues", type=_positive_int, help="Maximum issues to report")
    for family in ("spelling", "grammar", "style", "clarity"):
        check.add_argument(
            f"--no-{family}",
            dest=family,
            action="store_false",
            help=f"Skip {family} checks (rules analyzer only)",
        )
    _add_output_arguments(check)

    highlight = subparsers.add_parser(
        "highlight", help="Highlight issues from a JSON file over a document"
    )
    highlight.add_argument("file", type=Path, help="UTF-8 text file the issues refer to")
    highlight.add_argument(
        "--issues",
        type=Path,
        required=True,
        help="JSON list of issues, or an object with an 'issues' list",
    )
    highlight.add_argument(
        "--utf16",
        action="store_true",
        help="Treat startIndex/endIndex as UTF-16 offsets (as reported by browsers)",
    )
    _add_output_arguments(highlight)

    stats = subparsers.add_parser("stats", help="Print word, character and page counts")
    stats.add_argument("file", type=Path, help="UTF-8 text file")
    stats.add_argument("--page-size", type=_positive_int, help="Characters per page (default: 3500)")

    return parser.parse_args(args)


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--format", choices=FORMATS, default="text", help="Output format")
    parser.add_argument("--output", type=Path, help="Write output here instead of stdout")


def _load_config(args: argparse.Namespace) -> ProofreaderConfiguration:
    config = ProofreaderConfiguration.from_env(args.dotenv)
    overrides = {
        "mode": getattr(args, "mode", None),
        "analyzer": getattr(args, "analyzer", None),
        "llm_provider": getattr(args, "provider", None),
        "max_issues": getattr(args, "max_issues", None),
        "page_size": getattr(args, "page_size", None),
        "log_level": args.log_level,
    }
    return dataclasses.replace(
        config, **{name: value for name, value in overrides.items() if value is not None}
    )


def _segments_payload(segments: Sequence[Segment]) -> list[dict]:
    return [
        {
            "text": segment.text,
            "issue": segment.issue.to_payload() if segment.issue else None,
        }
        for segment in segments
    ]


def _describe_issue(position: int, issue: ProofreadingIssue) -> str:
    line = (
        f"{position}. [{issue.category.value}/{issue.severity.value}] "
        f"{issue.start_index}-{issue.end_index} {issue.original_text!r}"
    )
    if issue.suggestion_text:
        line += f" -> {issue.suggestion_text!r}"
    if issue.message:
        line += f": {issue.message}"
    return line


def _format_issues(text: str, issues: list[ProofreadingIssue], fmt: str) -> str:
    segments = reconcile(text, issues)
    if fmt == "html":
        return render_markup(segments)
    if fmt == "json":
        return json.dumps({"segments": _segments_payload(segments)}, indent=2, ensure_ascii=False)
    lines = [render_plain(segments), ""]
    lines.extend(_describe_issue(n, issue) for n, issue in enumerate(issues, start=1))
    return "\n".join(lines)


def _format_analysis(text: str, analysis: ProofreadingAnalysis, fmt: str) -> str:
    if fmt == "json":
        payload = analysis.to_payload()
        payload["segments"] = _segments_payload(reconcile(text, analysis.issues))
        return json.dumps(payload, indent=2, ensure_ascii=False)
    body = _format_issues(text, analysis.issues, fmt)
    if fmt == "html":
        return body
    return f"{body}\n\nScore: {analysis.score}/100. {analysis.notes}"


def _emit(output: str, destination: Path | None) -> None:
    if destination is None:
        print(output)
        return
    destination.write_text(output + "\n", encoding="utf-8")
    print(f"Wrote {destination}", file=sys.stderr)


def _run_check(args: argparse.Namespace, config: ProofreaderConfiguration) -> int:
    text = args.file.read_text(encoding="utf-8")
    if config.analyzer == "llm":
        providers = create_provider_chain(
            system_prompt=LLMProofreader.system_prompt(config.mode),
            filter_json=True,
            dotenv_path=args.dotenv,
            primary=config.llm_provider,
        )
        service = LLMService(providers)
        logger.info("Using LLM provider(s): %s", service.provider_order())
        proofreader = LLMProofreader(service, mode=config.mode, max_issues=config.max_issues)
        analysis = proofreader.analyze(text)
    else:
        options = AnalysisOptions(
            spelling=args.spelling,
            grammar=args.grammar,
            style=args.style,
            clarity=args.clarity,
        )
        analysis = analyze_text(
            text, mode=config.mode, options=options, max_issues=config.max_issues
        )
    _emit(_format_analysis(text, analysis, args.format), args.output)
    return EXIT_OK


def _run_highlight(args: argparse.Namespace) -> int:
    text = args.file.read_text(encoding="utf-8")
    payload = json.loads(args.issues.read_text(encoding="utf-8"))
    issues = issues_from_payload(payload, utf16_text=text if args.utf16 else None)
    _emit(_format_issues(text, issues, args.format), args.output)
    return EXIT_OK


def _run_stats(args: argparse.Namespace, config: ProofreaderConfiguration) -> int:
    stats = compute_document_stats(args.file.read_text(encoding="utf-8"), config.page_size)
    print(
        f"Words: {stats.word_count}\n"
        f"Characters: {stats.char_count}\n"
        f"Pages: {stats.page_count}"
    )
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (None = use sys.argv)

    Returns:
        Exit code (0 for success, 1 for bad input, 2 for LLM provider failures)
    """
    args = parse_args(argv)
    try:
        config = _load_config(args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    logging.basicConfig(
        level=config.log_level_number,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    try:
        if args.command == "check":
            return _run_check(args, config)
        if args.command == "highlight":
            return _run_highlight(args)
        return _run_stats(args, config)
    except LLMProviderError as exc:
        logger.error("LLM provider failure: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_PROVIDER_ERROR
    except (OSError, ValueError, ProofreadingError) as exc:
        # json.JSONDecodeError is a ValueError
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

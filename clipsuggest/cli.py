"""Command-line entry point: suggest clips for a transcript file.

Run as a module::

    python -m clipsuggest.cli podcast.json --prompt "funny moments" --limit 3

Use ``--help`` for full argument documentation.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict, replace

from clipsuggest.config import settings
from clipsuggest.pipeline_config import OracleProvider, SuggestionConfig
from clipsuggest.suggestion.engine import InvalidSuggestionRequest, suggest_clips
from clipsuggest.suggestion.oracle import OracleError, build_oracle
from clipsuggest.transcript.parsers import parse_transcript

FORMAT_BY_EXTENSION = {
    ".vtt": "vtt",
    ".json": "json",
}


def _exit_with_error(message: str, code: int = 1) -> None:
    print(message, file=sys.stderr)
    raise SystemExit(code)


def _detect_format(path: str) -> str:
    extension = os.path.splitext(path)[1].lower()
    fmt = FORMAT_BY_EXTENSION.get(extension)
    if fmt is None:
        _exit_with_error(f"Cannot infer transcript format from '{path}'; pass --format.")
    return fmt  # type: ignore[return-value]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clipsuggest",
        description="Suggest video clips from a transcript that match a free-text prompt.",
    )
    parser.add_argument("transcript", help="Transcript file (.vtt, whisper.cpp .json, segment .json)")
    parser.add_argument("--prompt", required=True, help="What to look for, e.g. 'funny moments'")
    parser.add_argument(
        "--format",
        choices=["vtt", "whisper", "segments", "json"],
        help="Transcript format (default: inferred from the file extension)",
    )
    parser.add_argument("--limit", type=int, default=None, help="Maximum number of suggestions")
    parser.add_argument(
        "--provider",
        choices=[p.value for p in OracleProvider],
        default=None,
        help=f"Oracle backend (default: {settings.oracle_provider})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log per-window progress")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        with open(args.transcript, encoding="utf-8") as f:
            content = f.read()
    except OSError as exc:
        _exit_with_error(f"Cannot read transcript: {exc}")

    fmt = args.format or _detect_format(args.transcript)
    try:
        segments = parse_transcript(content, fmt)
    except ValueError as exc:
        _exit_with_error(f"Failed to parse transcript: {exc}")

    app_settings = settings
    if args.provider:
        app_settings = settings.model_copy(update={"oracle_provider": args.provider})

    try:
        oracle = build_oracle(app_settings)
    except OracleError as exc:
        _exit_with_error(str(exc))

    try:
        config = SuggestionConfig.from_settings(app_settings)
        if args.limit is not None:
            config = replace(config, limit=args.limit)
    except ValueError as exc:
        _exit_with_error(f"Invalid configuration: {exc}", code=2)

    try:
        result = suggest_clips(segments, args.prompt, oracle, config)
    except InvalidSuggestionRequest as exc:
        _exit_with_error(f"Invalid request: {exc}", code=2)

    output = {
        "suggestions": [asdict(s) for s in result.suggestions],
        "windows_analyzed": result.windows_analyzed,
        "windows_failed": result.windows_failed,
    }
    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())

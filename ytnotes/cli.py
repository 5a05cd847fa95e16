"""Command-line analysis of a single YouTube video.

Entry point
-----------
Run as a module::

    python -m ytnotes.cli "https://www.youtube.com/watch?v=dQw4w9WgXcQ" \\
        --provider anthropic --detail-level high --output notes.md

The API key is read from ``--api-key`` or, if omitted, from
``OPENAI_API_KEY`` / ``ANTHROPIC_API_KEY`` according to ``--provider``.
Use ``--help`` for full argument documentation.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

from ytnotes.errors import YtNotesError
from ytnotes.export import render_markdown
from ytnotes.ingestion.youtube import fetch_transcript
from ytnotes.pipeline import analyze_transcript
from ytnotes.pipeline_config import DetailLevel, Provider

API_KEY_ENV_VARS: dict[Provider, str] = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
}


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m ytnotes.cli",
        description="Extract a title, summary, key themes and timestamps from a YouTube video.",
    )
    parser.add_argument("video_url", help="YouTube video URL.")
    parser.add_argument(
        "--provider",
        choices=[p.value for p in Provider],
        default=Provider.OPENAI.value,
        help="LLM provider to analyze with (default: openai).",
    )
    parser.add_argument(
        "--detail-level",
        choices=[d.value for d in DetailLevel],
        default=DetailLevel.MEDIUM.value,
        help="low = fewer, broader themes; high = more, finer-grained themes.",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="Provider API key. Defaults to OPENAI_API_KEY or ANTHROPIC_API_KEY.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Emit the analysis as JSON instead of markdown.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the result to this file instead of stdout.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline progress.")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    provider = Provider(args.provider)
    api_key = args.api_key or os.getenv(API_KEY_ENV_VARS[provider], "")
    if not api_key:
        parser.error(f"No API key: pass --api-key or set {API_KEY_ENV_VARS[provider]}.")

    try:
        segments = fetch_transcript(args.video_url)
        analysis = asyncio.run(
            analyze_transcript(segments, api_key, provider, DetailLevel(args.detail_level))
        )
    except YtNotesError as exc:
        print(f"ERROR: {exc.message}", file=sys.stderr)
        return 1

    if args.json:
        rendered = json.dumps(analysis.to_json_dict(), indent=2, ensure_ascii=False) + "\n"
    else:
        rendered = render_markdown(analysis)

    if args.output:
        args.output.write_text(rendered, encoding="utf-8")
        print(f"Wrote {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(rendered)
    return 0


if __name__ == "__main__":
    sys.exit(main())

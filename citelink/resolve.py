from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from citelink.analysis.match import build_author_year_index, resolve_citations
from citelink.analysis.parse.text_sampling import build_text_candidates
from citelink.cli import add_runtime_args, apply_runtime_overrides
from citelink.config import Settings
from citelink.payload import PayloadError, match_result_to_dict, parse_payload

logger = logging.getLogger(__name__)


def _read_source(path: str | None) -> str:
    if not path or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _describe_text(text: str, settings: Settings) -> list[dict]:
    candidates = build_text_candidates(
        text,
        page_steps=settings.sample_page_steps,
        max_tail_pages=settings.sample_max_tail_pages,
        char_steps=settings.sample_char_steps,
        max_tail_chars=settings.sample_max_tail_chars,
    )
    return [
        {"kind": c.kind, "value": c.value, "start_index": c.start_index, "length": len(c.text)}
        for c in candidates
    ]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Resolve author-year citations against a bibliography.")
    parser.add_argument(
        "payload",
        nargs="?",
        help='JSON file with {"entries": [...], "references": [...], "labels": [...]}; "-" reads stdin.',
    )
    parser.add_argument("--text", help="Extracted PDF text file; print the sampling windows for it.")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2).")
    add_runtime_args(parser)
    args = parser.parse_args(argv)

    load_dotenv()
    apply_runtime_overrides(args)
    try:
        settings = Settings.from_env()
    except ValueError as e:
        parser.error(str(e))

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    output: dict = {}
    if args.text:
        try:
            text = Path(args.text).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            parser.error(f"Cannot read text file {args.text!r}: {e}")
        output["text_candidates"] = _describe_text(text, settings)

    if args.payload or not args.text:
        try:
            payload = parse_payload(_read_source(args.payload))
        except OSError as e:
            parser.error(f"Cannot read payload {args.payload!r}: {e}")
        except PayloadError as e:
            parser.error(str(e))

        index = build_author_year_index(payload.references) if payload.references else None
        results = resolve_citations(payload.labels, payload.entries, author_year_index=index)
        if index is not None:
            output["index"] = {
                "keys": len(index),
                "total_references": index.total_references,
                "confidence": index.confidence,
            }
        output["results"] = {key: [match_result_to_dict(r) for r in matches] for key, matches in results.items()}

    json.dump(output, sys.stdout, indent=args.indent, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

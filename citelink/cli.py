from __future__ import annotations

import argparse
import os


def add_runtime_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level (overrides CITELINK_LOG_LEVEL).",
    )
    parser.add_argument(
        "--max-tail-pages",
        type=int,
        help="Largest page window sampled from the end of the text (overrides CITELINK_SAMPLE_MAX_TAIL_PAGES).",
    )
    parser.add_argument(
        "--max-tail-chars",
        type=int,
        help="Largest character window for text without page breaks (overrides CITELINK_SAMPLE_MAX_TAIL_CHARS).",
    )


def apply_runtime_overrides(args: argparse.Namespace) -> None:
    if getattr(args, "log_level", None):
        os.environ["CITELINK_LOG_LEVEL"] = args.log_level
    if getattr(args, "max_tail_pages", None) is not None:
        os.environ["CITELINK_SAMPLE_MAX_TAIL_PAGES"] = str(args.max_tail_pages)
    if getattr(args, "max_tail_chars", None) is not None:
        os.environ["CITELINK_SAMPLE_MAX_TAIL_CHARS"] = str(args.max_tail_chars)

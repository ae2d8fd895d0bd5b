from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal, TypeVar

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\f"

DEFAULT_PAGE_STEPS: tuple[int, ...] = (8, 16, 32, 64, 96, 120)
DEFAULT_MAX_TAIL_PAGES = 120
DEFAULT_CHAR_STEPS: tuple[int, ...] = (200_000, 400_000, 800_000, 1_600_000, 2_400_000, 3_000_000)
DEFAULT_MAX_TAIL_CHARS = 3_000_000

TextSampleKind = Literal["tailPages", "tailChars", "full"]

T = TypeVar("T")


@dataclass(frozen=True)
class TextSampleCandidate:
    kind: TextSampleKind
    # Tail pages (tailPages), tail chars (tailChars) or the full length (full).
    value: int
    start_index: int
    text: str


def _separator_offsets_from_end(text: str, max_count: int) -> list[int]:
    offsets: list[int] = []
    pos = len(text)
    while len(offsets) < max_count:
        pos = text.rfind(PAGE_SEPARATOR, 0, pos)
        if pos < 0:
            break
        offsets.append(pos)
    return offsets


def _tail_start_by_pages(offsets_from_end: list[int], tail_pages: int) -> int:
    if tail_pages <= 0 or tail_pages > len(offsets_from_end):
        return 0
    return offsets_from_end[tail_pages - 1] + 1


def _tail_start_by_chars(text_length: int, tail_chars: int) -> int:
    if tail_chars <= 0:
        return 0
    return max(0, text_length - tail_chars)


def build_text_candidates(
    full_text: str | None,
    *,
    page_steps: Sequence[int] | None = None,
    max_tail_pages: int | None = None,
    char_steps: Sequence[int] | None = None,
    max_tail_chars: int | None = None,
) -> list[TextSampleCandidate]:
    """Progressively larger tail windows of extracted PDF text.

    Page separators (form feeds) are preferred; without them the tail is cut
    by character count. The last candidate always starts at offset 0.
    """
    text = full_text or ""
    max_pages = DEFAULT_MAX_TAIL_PAGES if max_tail_pages is None else max_tail_pages
    max_chars = DEFAULT_MAX_TAIL_CHARS if max_tail_chars is None else max_tail_chars
    pages = tuple(page_steps) if page_steps else DEFAULT_PAGE_STEPS
    chars = tuple(char_steps) if char_steps else DEFAULT_CHAR_STEPS

    candidates: list[TextSampleCandidate] = []
    seen_start: set[int] = set()

    def add(kind: TextSampleKind, value: int, start_index: int) -> bool:
        if start_index in seen_start:
            return False
        seen_start.add(start_index)
        candidates.append(TextSampleCandidate(kind=kind, value=value, start_index=start_index, text=text[start_index:]))
        return start_index == 0

    if PAGE_SEPARATOR in text:
        offsets = _separator_offsets_from_end(text, max(0, max_pages))
        for step in pages:
            tail_pages = min(step, max_pages)
            if add("tailPages", tail_pages, _tail_start_by_pages(offsets, tail_pages)):
                break
    else:
        for step in chars:
            tail_chars = min(step, max_chars)
            if add("tailChars", tail_chars, _tail_start_by_chars(len(text), tail_chars)):
                break

    if 0 not in seen_start:
        candidates.append(TextSampleCandidate(kind="full", value=len(text), start_index=0, text=text))
    elif candidates[-1].kind != "full":
        candidates[-1] = TextSampleCandidate(kind="full", value=len(text), start_index=0, text=text)

    logger.debug(
        "Built %d text candidate(s) for %d chars: %s",
        len(candidates),
        len(text),
        ", ".join(f"{c.kind}={c.value}@{c.start_index}" for c in candidates),
    )
    return candidates


def parse_with_progressive_sampling(
    full_text: str | None,
    parse: Callable[[str], Sequence[T]],
    *,
    min_results: int,
    page_steps: Sequence[int] | None = None,
    max_tail_pages: int | None = None,
    char_steps: Sequence[int] | None = None,
    max_tail_chars: int | None = None,
) -> tuple[TextSampleCandidate, Sequence[T]]:
    """Run ``parse`` on growing windows until it yields ``min_results`` items.

    Returns the first sufficient (candidate, result) pair, or the full-text
    attempt when no window is sufficient.
    """
    candidates = build_text_candidates(
        full_text,
        page_steps=page_steps,
        max_tail_pages=max_tail_pages,
        char_steps=char_steps,
        max_tail_chars=max_tail_chars,
    )
    for candidate in candidates[:-1]:
        result = parse(candidate.text)
        if len(result) >= min_results:
            logger.debug(
                "Parsed %d item(s) from %s=%d window", len(result), candidate.kind, candidate.value
            )
            return candidate, result
        logger.debug(
            "Window %s=%d gave %d item(s) (< %d); growing",
            candidate.kind,
            candidate.value,
            len(result),
            min_results,
        )
    full = candidates[-1]
    return full, parse(full.text)

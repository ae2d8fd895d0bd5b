from __future__ import annotations

import logging
from collections.abc import Sequence

from citelink.analysis.match.types import (
    DEFAULT_WEIGHTS,
    CanonicalEntry,
    MatchedBy,
    MatchResult,
    ParsedReferenceRecord,
    ScoreWeights,
)
from citelink.analysis.shared.normalize import (
    extract_last_name,
    journals_similar,
    normalize_arxiv_id,
    normalize_doi,
    normalize_year,
)

logger = logging.getLogger(__name__)


def _same_number(a: str | None, b: str | None) -> bool:
    if a is None or b is None:
        return False
    a = str(a).strip()
    b = str(b).strip()
    return bool(a) and a == b


def _year_matches(entry: CanonicalEntry, target_year_base: str | None) -> bool:
    if not target_year_base or not entry.year:
        return False
    return normalize_year(entry.year) == target_year_base


def _first_author(entry: CanonicalEntry) -> str:
    if not entry.authors:
        return ""
    return extract_last_name(entry.authors[0])


def find_precise_match(
    entries: Sequence[CanonicalEntry],
    record: ParsedReferenceRecord,
    target_authors: Sequence[str],
    target_year_base: str | None,
    *,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> MatchResult | None:
    """Resolve one parsed reference record to a canonical entry by identifiers.

    Ladder: arXiv id, then DOI (both returned on first hit), then journal +
    volume (+ page), then volume + page alone when no entry at all is a
    journal candidate. Journal/volume candidates gain small bonuses for
    first-author and year agreement; the best one is accepted at
    ``weights.precise_accept``.
    """
    label = f"{target_authors[0] if target_authors else '?'} {target_year_base or '?'}"
    target_author = target_authors[0] if target_authors else ""

    record_arxiv = normalize_arxiv_id(record.arxiv_id)
    record_doi = normalize_doi(record.doi)

    best_index: int | None = None
    best_score = 0.0
    best_kind: MatchedBy | None = None
    vp_index: int | None = None
    vp_score = 0.0

    for idx, entry in enumerate(entries):
        if record_arxiv and normalize_arxiv_id(entry.arxiv_id) == record_arxiv:
            logger.debug("arXiv match %s -> entry %d", record_arxiv, idx)
            return MatchResult(
                label=label,
                entry_index=idx,
                entry_id=entry.id,
                confidence="high",
                method="exact",
                score=weights.arxiv_exact,
                matched_by="arxiv",
            )

        if record_doi and normalize_doi(entry.doi) == record_doi:
            logger.debug("DOI match %s -> entry %d", record_doi, idx)
            return MatchResult(
                label=label,
                entry_index=idx,
                entry_id=entry.id,
                confidence="high",
                method="exact",
                score=weights.doi_exact,
                matched_by="doi",
            )

        pub = entry.publication_info
        if pub is None:
            continue

        if (
            record.journal_abbrev
            and record.volume
            and journals_similar(record.journal_abbrev, pub.journal_title)
            and _same_number(pub.journal_volume, record.volume)
        ):
            score = weights.journal_volume
            if _same_number(pub.page_or_article_id, record.page_start):
                score += weights.journal_page
                kind: MatchedBy = "journal-vol-page"
            else:
                kind = "journal-vol"

            if target_author:
                first_author = _first_author(entry)
                if first_author and (
                    first_author == target_author or first_author in target_author or target_author in first_author
                ):
                    score += weights.journal_first_author
                elif entry.author_text and target_author in entry.author_text.lower():
                    score += weights.journal_author_text

            if _year_matches(entry, target_year_base):
                score += weights.journal_year

            if score > best_score:
                best_index, best_score, best_kind = idx, score, kind

        if (
            record.volume
            and record.page_start
            and _same_number(pub.journal_volume, record.volume)
            and _same_number(pub.page_or_article_id, record.page_start)
        ):
            score = weights.volume_page
            first_author = _first_author(entry) if target_author else ""
            if first_author and (first_author == target_author or target_author in first_author):
                score += weights.volume_page_first_author
            elif _year_matches(entry, target_year_base):
                score += weights.volume_page_year
            else:
                logger.debug("Volume/page coincidence with entry %d rejected: no author or year", idx)
                continue
            if score > vp_score:
                vp_index, vp_score = idx, score

    if best_index is None and vp_index is not None:
        best_index, best_score, best_kind = vp_index, vp_score, "vol-page"
    if best_index is None:
        logger.debug(
            "No entry matched journal/volume for %s %s", record.journal_abbrev or "?", record.volume or "?"
        )
        return None
    if best_score < weights.precise_accept:
        logger.debug("Best %s score %s below threshold %s", best_kind, best_score, weights.precise_accept)
        return None

    entry = entries[best_index]
    logger.debug("%s match score=%s -> entry %d", best_kind, best_score, best_index)
    return MatchResult(
        label=label,
        entry_index=best_index,
        entry_id=entry.id,
        confidence="high" if best_score >= weights.precise_high else "medium",
        method="exact",
        score=best_score,
        matched_by=best_kind,
    )

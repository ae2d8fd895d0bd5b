from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping, Sequence

from citelink.analysis.match.fuzzy import (
    rank_fuzzy_matches,
    score_fuzzy_matches,
    score_reference_records,
    select_best_reference_record,
)
from citelink.analysis.match.index import author_year_key, author_year_key_variants
from citelink.analysis.match.precise import find_precise_match
from citelink.analysis.match.types import (
    DEFAULT_WEIGHTS,
    AmbiguousCandidate,
    AuthorYearIndex,
    CanonicalEntry,
    MatchConfidence,
    MatchResult,
    ParsedReferenceRecord,
    ScoreWeights,
)
from citelink.analysis.parse.labels import (
    ParsedCitationLabel,
    has_other_initials,
    initials_match,
    parse_author_labels,
    preprocess_labels,
    split_citation_label,
)
from citelink.analysis.shared.normalize import extract_last_name

logger = logging.getLogger(__name__)


def _lookup(index: AuthorYearIndex, keys: Iterable[str]) -> tuple[str | None, list[ParsedReferenceRecord]]:
    for key in keys:
        records = index.get(key)
        if records:
            return key, records
    return None, []


def _initials_rerank_score(entry: CanonicalEntry, label: ParsedCitationLabel, weights: ScoreWeights) -> float:
    if not entry.author_text:
        return 0.0
    score = 0.0
    for author, initials in label.author_initials.items():
        if initials_match(entry.author_text, author, initials):
            score += weights.rerank_initials_match
        elif author in entry.author_text.lower() and has_other_initials(entry.author_text, author):
            score -= weights.rerank_initials_mismatch_penalty
    return score


def _pick_by_initials(
    entries: Sequence[CanonicalEntry],
    records: list[ParsedReferenceRecord],
    label: ParsedCitationLabel,
    weights: ScoreWeights,
) -> MatchResult | None:
    best: MatchResult | None = None
    best_score = 0.0
    for record in records:
        match = find_precise_match(entries, record, label.authors, label.year_base, weights=weights)
        if match is None:
            continue
        score = _initials_rerank_score(entries[match.entry_index], label, weights)
        logger.debug("Entry %d scores %s on initials", match.entry_index, score)
        if best is None or score > best_score:
            best, best_score = match, score
    if best is not None and best_score >= 0:
        return best
    return None


def _ambiguous_display_text(entry: CanonicalEntry, record: ParsedReferenceRecord) -> str:
    pub = entry.publication_info
    text = ""
    if pub is not None and pub.journal_title:
        text = pub.journal_title
        if pub.journal_volume:
            text += f" {pub.journal_volume}"
        if pub.page_start:
            text += f", {pub.page_start}"
    elif record.journal_abbrev:
        text = record.journal_abbrev
        if record.volume:
            text += f" {record.volume}"
        if record.page_start:
            text += f", {record.page_start}"
    count = entry.total_authors
    if count > 0:
        text += f" ({count} author{'s' if count > 1 else ''})"
    if len(entry.authors) >= 2:
        text += f" - {extract_last_name(entry.authors[1])}"
    return text.strip()


def _ambiguous_candidate(entry_index: int, entry: CanonicalEntry, record: ParsedReferenceRecord) -> AmbiguousCandidate:
    return AmbiguousCandidate(
        entry_index=entry_index,
        entry_id=entry.id,
        display_text=_ambiguous_display_text(entry, record),
        title=entry.title or None,
        journal=record.journal_abbrev,
        volume=record.volume,
        page=record.page_start,
        author_count=entry.total_authors,
        second_author=extract_last_name(entry.authors[1]) if len(entry.authors) >= 2 else None,
    )


def _resolve_tied(
    entries: Sequence[CanonicalEntry],
    tied: list[ParsedReferenceRecord],
    label: ParsedCitationLabel,
    weights: ScoreWeights,
) -> MatchResult | None:
    first: MatchResult | None = None
    candidates: list[AmbiguousCandidate] = []
    seen: set[int] = set()
    for record in tied:
        match = find_precise_match(entries, record, label.authors, label.year_base, weights=weights)
        if match is None or match.entry_index in seen:
            continue
        seen.add(match.entry_index)
        candidates.append(_ambiguous_candidate(match.entry_index, entries[match.entry_index], record))
        if first is None:
            first = match

    if first is None:
        return None
    if len(candidates) < 2:
        return first
    logger.info(
        "Ambiguous citation %r: %d tied candidates (%s)",
        first.label,
        len(candidates),
        "; ".join(c.display_text for c in candidates),
    )
    return dataclasses.replace(
        first,
        confidence="medium",
        is_ambiguous=True,
        ambiguous_candidates=tuple(candidates),
    )


def _match_via_index(
    entries: Sequence[CanonicalEntry],
    index: AuthorYearIndex,
    label: ParsedCitationLabel,
    weights: ScoreWeights,
) -> MatchResult | None:
    author = label.authors[0]
    year = label.year or ""
    used_key, records = _lookup(index, author_year_key_variants(author, year))

    if records:
        if label.author_initials and len(records) > 1:
            picked = _pick_by_initials(entries, records, label, weights)
            if picked is not None:
                return picked

        scored = score_reference_records(
            records, label.authors, label.is_et_al, label.author_initials, weights=weights
        )
        top = scored[0].score if scored else 0.0
        tied = [s.record for s in scored if s.score == top]
        logger.debug("%d record(s) under %r, top score=%s, tied=%d", len(records), used_key, top, len(tied))

        if len(tied) > 1:
            resolved = _resolve_tied(entries, tied, label, weights)
            if resolved is not None:
                return resolved

        record = tied[0] if tied else records[0]
        match = find_precise_match(entries, record, label.authors, label.year_base, weights=weights)
        if match is not None:
            return match
        logger.debug(
            "Record under %r (journal=%s vol=%s page=%s) did not resolve precisely",
            used_key,
            record.journal_abbrev,
            record.volume,
            record.page_start,
        )
        return None

    if label.year_base:
        base_key = author_year_key(author, label.year_base)
        if base_key != author_year_key(author, year):
            base_records = index.get(base_key)
            if base_records:
                record = select_best_reference_record(
                    base_records, label.authors, label.is_et_al, label.author_initials, weights=weights
                )
                if record is not None:
                    match = find_precise_match(entries, record, label.authors, label.year_base, weights=weights)
                    if match is not None:
                        return match
    logger.debug("No indexed record for %r", author_year_key(author, year))
    return None


def _fuzzy_hint(index: AuthorYearIndex | None, label: ParsedCitationLabel, weights: ScoreWeights) -> ParsedReferenceRecord | None:
    if index is None or not label.has_year_suffix or not label.authors or not label.year:
        return None
    base = author_year_key(label.authors[0], label.year)
    _, records = _lookup(index, dict.fromkeys([base, base.replace("ß", "ss", 1)]))
    if not records:
        return None
    return select_best_reference_record(
        records, label.authors, label.is_et_al, label.author_initials, weights=weights
    )


def _fuzzy_confidence(score: float, weights: ScoreWeights) -> MatchConfidence:
    if score >= weights.fuzzy_high:
        return "high"
    if score >= weights.fuzzy_medium:
        return "medium"
    return "low"


def _match_fuzzy(
    entries: Sequence[CanonicalEntry],
    index: AuthorYearIndex | None,
    label: ParsedCitationLabel,
    weights: ScoreWeights,
) -> list[MatchResult]:
    hint = _fuzzy_hint(index, label, weights)
    ranked = rank_fuzzy_matches(
        score_fuzzy_matches(
            entries,
            label.authors,
            label.year_base,
            label.author_initials,
            label.is_et_al,
            hint,
            weights=weights,
        )
    )
    pool = [c for c in ranked if c.year_matched] or ranked
    if not pool:
        return []

    label_text = f"{label.authors[0] if label.authors else '?'} {label.year or '?'}"
    top = pool[0].score
    results: list[MatchResult] = []
    for candidate in pool:
        if label.has_year_suffix and results and hint is None:
            logger.debug("Year %s has a suffix but no hint; keeping only the top match", label.year)
            break
        if candidate.score < top - weights.fuzzy_window:
            break
        results.append(
            MatchResult(
                label=label_text,
                entry_index=candidate.entry_index,
                entry_id=candidate.entry.id,
                confidence=_fuzzy_confidence(candidate.score, weights),
                method="fuzzy",
                score=candidate.score,
                matched_by="author-year",
            )
        )
        logger.debug(
            "Fuzzy match entry %d score=%s year_matched=%s", candidate.entry_index, candidate.score, candidate.year_matched
        )
        if len(results) >= weights.max_results:
            break
    return results


def match_author_year(
    labels: Iterable[str],
    entries: Sequence[CanonicalEntry],
    *,
    author_year_index: AuthorYearIndex | None = None,
    weights: ScoreWeights | None = None,
) -> list[MatchResult]:
    """Resolve one author-year citation to bibliography entries.

    ``labels`` is the label list of a single citation, e.g.
    ``["Guo et al. (2015)", "Guo", "2015"]``. When an author-year index is
    given, its records are tried first through the precise matcher; otherwise,
    or when that fails, entries are scored on weak signals. At most
    ``weights.max_results`` results are returned, best first.
    """
    weights = weights or DEFAULT_WEIGHTS
    entries = list(entries)
    labels = list(labels)
    label = parse_author_labels(preprocess_labels(labels))
    if label.is_empty:
        logger.debug("No author or year in labels %r", labels)
        return []
    logger.debug(
        "Resolving authors=%s year=%s et_al=%s initials=%s",
        list(label.authors),
        label.year,
        label.is_et_al,
        label.author_initials,
    )

    if author_year_index is not None and label.authors and label.year:
        match = _match_via_index(entries, author_year_index, label, weights)
        if match is not None:
            return [match]
        logger.debug("Falling back to fuzzy matching for %s %s", label.authors[0], label.year)

    return _match_fuzzy(entries, author_year_index, label, weights)


def match_citation(
    raw_label: str,
    entries: Sequence[CanonicalEntry],
    *,
    author_year_index: AuthorYearIndex | None = None,
    weights: ScoreWeights | None = None,
) -> list[MatchResult]:
    """Resolve a raw in-text citation such as "(Guo et al., 2015)"."""
    return match_author_year(
        split_citation_label(raw_label),
        entries,
        author_year_index=author_year_index,
        weights=weights,
    )


def resolve_citations(
    labels_by_key: Mapping[str, str | Sequence[str]],
    entries: Sequence[CanonicalEntry],
    *,
    author_year_index: AuthorYearIndex | None = None,
    weights: ScoreWeights | None = None,
) -> dict[str, list[MatchResult]]:
    """Resolve many citations against one bibliography.

    Values are either raw citation strings or ready-made label lists.
    """
    entries = list(entries)
    out: dict[str, list[MatchResult]] = {}
    for key, value in labels_by_key.items():
        if isinstance(value, str):
            out[key] = match_citation(value, entries, author_year_index=author_year_index, weights=weights)
        else:
            out[key] = match_author_year(value, entries, author_year_index=author_year_index, weights=weights)
    matched = sum(1 for results in out.values() if results)
    logger.info("Resolved %d/%d citations", matched, len(out))
    return out

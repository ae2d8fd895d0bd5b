from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from citelink.analysis.match.types import (
    DEFAULT_WEIGHTS,
    CanonicalEntry,
    FuzzyCandidate,
    ParsedReferenceRecord,
    ScoredRecord,
    ScoreWeights,
)
from citelink.analysis.parse.labels import has_other_initials, initials_match
from citelink.analysis.shared.normalize import authors_match, extract_last_name, normalize_year, strip_diacritics

logger = logging.getLogger(__name__)


def _year_score(entry_year: str | None, target_year_base: str | None, weights: ScoreWeights) -> tuple[float, bool]:
    if not target_year_base or not entry_year:
        return 0.0, False
    base = normalize_year(entry_year)
    target = normalize_year(target_year_base)
    if base is None or target is None:
        return 0.0, False
    if base == target:
        return weights.year_exact, True
    if abs(int(base) - int(target)) == 1:
        return weights.year_off_by_one, False
    return 0.0, False


def _overlaps(a: str, b: str) -> bool:
    if not a or not b:
        return False
    return a == b or a in b or b in a


def _author_overlap_score(
    entry_surnames: list[str], target_authors: Sequence[str], weights: ScoreWeights
) -> float:
    matched = 0.0
    for target in target_authors:
        if not target:
            continue
        if target in entry_surnames:
            matched += 1
        elif any(_overlaps(target, surname) for surname in entry_surnames):
            matched += 0.5
    if matched <= 0:
        return 0.0
    score = 0.0
    if entry_surnames and _overlaps(entry_surnames[0], target_authors[0]):
        score += weights.first_author_match
    return score + min(matched * weights.additional_multiplier, weights.max_additional)


def _author_text_score(author_text: str, target_authors: Sequence[str], weights: ScoreWeights) -> float:
    text = author_text.lower()
    hits = [i for i, target in enumerate(target_authors) if target and target in text]
    if not hits:
        return 0.0
    score = weights.first_author_in_text if hits[0] == 0 else 0.0
    return score + min(len(hits) * weights.additional_multiplier, weights.max_text_match)


def _author_count_score(
    entry: CanonicalEntry, target_count: int, is_et_al: bool, weights: ScoreWeights
) -> float:
    if not entry.authors:
        return 0.0
    if not is_et_al and target_count <= 2:
        return weights.count_match_bonus if len(entry.authors) == target_count else weights.count_mismatch_penalty
    if is_et_al:
        return weights.et_al_match_bonus if entry.total_authors > 2 else weights.et_al_mismatch_penalty
    return 0.0


def _initials_score(
    idx: int, author_text: str, target_author_initials: Mapping[str, str], weights: ScoreWeights
) -> float:
    score = 0.0
    for author, initials in target_author_initials.items():
        if initials_match(author_text, author, initials):
            logger.debug("Entry %d matches initials %s %s", idx, initials, author)
            score += weights.initials_match
        elif author in author_text.lower() and has_other_initials(author_text, author):
            logger.debug("Entry %d has different initials than %s %s", idx, initials, author)
            score -= weights.initials_mismatch_penalty
    return score


def _hint_score(idx: int, entry: CanonicalEntry, hint: ParsedReferenceRecord, weights: ScoreWeights) -> float:
    pub = entry.publication_info
    if pub is None:
        return 0.0
    score = 0.0
    if hint.volume and pub.journal_volume:
        if pub.journal_volume.strip() == hint.volume.strip():
            score += weights.hint_volume_match
        else:
            logger.debug("Entry %d volume %s != hinted %s", idx, pub.journal_volume, hint.volume)
            score -= weights.hint_volume_mismatch_penalty
    page = pub.page_or_article_id
    if hint.page_start and page and page.strip() == hint.page_start.strip():
        score += weights.hint_page_match
    return score


def score_fuzzy_matches(
    entries: Sequence[CanonicalEntry],
    target_authors: Sequence[str],
    target_year_base: str | None,
    target_author_initials: Mapping[str, str] | None = None,
    is_et_al: bool = False,
    hint: ParsedReferenceRecord | None = None,
    *,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> list[FuzzyCandidate]:
    """Score every entry on weak signals; keep those at or above ``weights.fuzzy_floor``.

    Signals: year proximity, surname overlap with the listed authors (or the
    free-text author string when that is weak), author-count plausibility,
    printed initials, and the volume/page of a hinted reference record for
    suffixed years. Results come back in entry order; see ``rank_fuzzy_matches``.
    """
    initials = target_author_initials or {}
    scored: list[FuzzyCandidate] = []

    for idx, entry in enumerate(entries):
        score, year_matched = _year_score(entry.year, target_year_base, weights)

        if target_authors and entry.authors:
            surnames = [extract_last_name(a) for a in entry.authors]
            score += _author_overlap_score(surnames, target_authors, weights)

        if target_authors and entry.author_text and score < weights.text_fallback_threshold:
            score += _author_text_score(entry.author_text, target_authors, weights)

        score += _author_count_score(entry, len(target_authors), is_et_al, weights)

        if initials and entry.author_text:
            score += _initials_score(idx, entry.author_text, initials, weights)

        if hint is not None and year_matched:
            score += _hint_score(idx, entry, hint, weights)

        if score >= weights.fuzzy_floor:
            scored.append(FuzzyCandidate(entry=entry, entry_index=idx, score=score, year_matched=year_matched))

    return scored


def rank_fuzzy_matches(candidates: Sequence[FuzzyCandidate]) -> list[FuzzyCandidate]:
    """Highest score first; equal scores keep ascending entry order."""
    return sorted(candidates, key=lambda c: (-c.score, c.entry_index))


def _author_count_filter(
    records: list[ParsedReferenceRecord], target_count: int, is_et_al: bool
) -> list[ParsedReferenceRecord]:
    if not is_et_al and target_count <= 2:
        kept = [r for r in records if len(r.all_author_last_names) in (0, target_count)]
    elif is_et_al and target_count == 1:
        kept = [r for r in records if len(r.all_author_last_names) == 0 or len(r.all_author_last_names) > 3]
    else:
        kept = records
    return kept or records


def _initials_filter(
    records: list[ParsedReferenceRecord], target_author_initials: Mapping[str, str]
) -> list[ParsedReferenceRecord]:
    if not target_author_initials:
        return records
    kept = [
        r
        for r in records
        if any(initials_match(r.raw_text, author, initials) for author, initials in target_author_initials.items())
    ]
    return kept or records


def _record_score(record: ParsedReferenceRecord, targets: list[str], weights: ScoreWeights) -> float:
    if not record.all_author_last_names:
        raw = record.raw_text.lower()
        return float(sum(1 for t in targets if t and t in raw))

    names = [strip_diacritics(n.lower()) for n in record.all_author_last_names]
    matched_targets = sum(1 for t in targets if any(authors_match(t, n) for n in names))
    matched_names = sum(1 for n in names if any(authors_match(t, n) for t in targets))

    order_bonus = 0.0
    if len(targets) >= 2 and all(authors_match(t, n) for t, n in zip(targets, names)):
        order_bonus = weights.record_order_bonus

    extra_penalty = 0 if len(targets) == 1 else len(names) - matched_names
    unmatched_targets = len(targets) - matched_targets
    return matched_targets - extra_penalty - unmatched_targets + order_bonus


def score_reference_records(
    records: Sequence[ParsedReferenceRecord],
    target_authors: Sequence[str],
    is_et_al: bool = False,
    target_author_initials: Mapping[str, str] | None = None,
    *,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> list[ScoredRecord]:
    """Rank parsed reference records that share one "surname year" key.

    A lone record scores 0. Otherwise records are narrowed by author count and
    by printed initials (each filter is dropped if it would empty the list),
    then scored on co-author agreement. Sorting is stable, highest first.
    """
    if not records:
        return []
    if len(records) == 1:
        return [ScoredRecord(record=records[0], score=0.0)]

    candidates = _author_count_filter(list(records), len(target_authors), is_et_al)
    candidates = _initials_filter(candidates, target_author_initials or {})

    if len(target_authors) == 1:
        # Same first author: co-authors are listed alphabetically by second author.
        candidates = sorted(
            candidates,
            key=lambda r: r.all_author_last_names[1].lower() if len(r.all_author_last_names) > 1 else "",
        )

    targets = [strip_diacritics(t.lower()) for t in target_authors]
    scored = [ScoredRecord(record=r, score=_record_score(r, targets, weights)) for r in candidates]
    scored.sort(key=lambda s: -s.score)
    return scored


def select_best_reference_record(
    records: Sequence[ParsedReferenceRecord],
    target_authors: Sequence[str],
    is_et_al: bool = False,
    target_author_initials: Mapping[str, str] | None = None,
    *,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> ParsedReferenceRecord | None:
    if not records:
        return None
    if len(records) == 1:
        return records[0]
    scored = score_reference_records(records, target_authors, is_et_al, target_author_initials, weights=weights)
    return scored[0].record if scored else records[0]

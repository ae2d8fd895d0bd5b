from __future__ import annotations

import logging
from collections.abc import Iterable

from citelink.analysis.match.types import AuthorYearIndex, MatchConfidence, ParsedReferenceRecord
from citelink.analysis.shared.normalize import strip_diacritics

logger = logging.getLogger(__name__)


def author_year_key(author: str, year: str) -> str:
    return f"{author} {year}".lower()


def author_year_key_variants(author: str, year: str) -> list[str]:
    """Lookup keys for one first-author surname and year, most specific first.

    The exact key is followed by its ß -> ss spelling, its diacritic-free
    spelling and, for compound surnames ("Hiller Blin"), the first word alone.
    """
    base = author_year_key(author, year)
    variants = [base, base.replace("ß", "ss", 1), strip_diacritics(base)]
    first_word = author.split()[0] if author.split() else author
    if first_word != author:
        first_word_key = author_year_key(first_word, year)
        variants.extend([first_word_key, strip_diacritics(first_word_key)])
    return list(dict.fromkeys(variants))


def _index_confidence(with_journal: int, key_count: int) -> MatchConfidence:
    if with_journal > key_count * 0.7:
        return "high"
    if with_journal > key_count * 0.4:
        return "medium"
    return "low"


def build_author_year_index(records: Iterable[ParsedReferenceRecord]) -> AuthorYearIndex:
    """Group parsed reference records under "surname year" keys.

    Records without a first-author surname or year are skipped, as are records
    carrying none of journal, DOI or arXiv id (nothing to match precisely on).
    Each record is also filed under the diacritic-free key when that differs.
    """
    by_key: dict[str, list[ParsedReferenceRecord]] = {}
    total = 0
    with_journal = 0

    for record in records:
        total += 1
        if not record.first_author_last_name or not record.year:
            continue
        if not (record.journal_abbrev or record.doi or record.arxiv_id):
            continue
        key = author_year_key(record.first_author_last_name, record.year)
        by_key.setdefault(key, []).append(record)
        key_plain = strip_diacritics(key)
        if key_plain != key:
            by_key.setdefault(key_plain, []).append(record)
        if record.journal_abbrev:
            with_journal += 1

    confidence = _index_confidence(with_journal, len(by_key))
    logger.debug(
        "Indexed %d author-year keys from %d references (%d with journal), confidence=%s",
        len(by_key),
        total,
        with_journal,
        confidence,
    )
    return AuthorYearIndex(by_key=by_key, total_references=total, confidence=confidence)

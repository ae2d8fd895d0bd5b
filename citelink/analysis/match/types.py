from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

MatchConfidence = Literal["high", "medium", "low"]
MatchMethod = Literal["exact", "fuzzy"]
MatchedBy = Literal["arxiv", "doi", "journal-vol-page", "journal-vol", "vol-page", "author-year"]


@dataclass(frozen=True)
class PublicationInfo:
    journal_title: str | None = None
    journal_volume: str | None = None
    page_start: str | None = None
    article_id: str | None = None

    @property
    def page_or_article_id(self) -> str | None:
        return self.page_start or self.article_id


@dataclass(frozen=True)
class CanonicalEntry:
    """One bibliography record of the paper being read."""

    index: int
    id: str
    authors: tuple[str, ...] = ()
    author_count: int | None = None
    year: str | None = None
    publication_info: PublicationInfo | None = None
    arxiv_id: str | None = None
    doi: str | None = None
    author_text: str | None = None
    title: str | None = None

    @property
    def total_authors(self) -> int:
        return max(self.author_count or 0, len(self.authors))


@dataclass(frozen=True)
class ParsedReferenceRecord:
    """Fields extracted from the PDF's own reference list for one item."""

    raw_text: str = ""
    arxiv_id: str | None = None
    doi: str | None = None
    journal_abbrev: str | None = None
    volume: str | None = None
    page_start: str | None = None
    issue: str | None = None
    first_author_last_name: str | None = None
    all_author_last_names: tuple[str, ...] = ()
    year: str | None = None
    is_erratum: bool = False


@dataclass(frozen=True)
class AmbiguousCandidate:
    entry_index: int
    entry_id: str
    display_text: str
    title: str | None = None
    journal: str | None = None
    volume: str | None = None
    page: str | None = None
    author_count: int = 0
    second_author: str | None = None


@dataclass(frozen=True)
class MatchResult:
    label: str
    entry_index: int
    entry_id: str
    confidence: MatchConfidence
    method: MatchMethod
    score: float
    matched_by: MatchedBy | None = None
    is_ambiguous: bool = False
    ambiguous_candidates: tuple[AmbiguousCandidate, ...] = ()


@dataclass(frozen=True)
class FuzzyCandidate:
    entry: CanonicalEntry
    entry_index: int
    score: float
    year_matched: bool


@dataclass(frozen=True)
class ScoredRecord:
    record: ParsedReferenceRecord
    score: float


@dataclass(frozen=True)
class ScoreWeights:
    """Bonus/penalty magnitudes used by the matchers.

    The acceptance thresholds are calibrated against these exact values;
    override them together or not at all.
    """

    # Precise matcher
    arxiv_exact: float = 10
    doi_exact: float = 9
    journal_volume: float = 4
    journal_page: float = 3
    journal_first_author: float = 2
    journal_author_text: float = 1
    journal_year: float = 1
    volume_page: float = 3
    volume_page_first_author: float = 2
    volume_page_year: float = 1
    precise_accept: float = 5
    precise_high: float = 7

    # Fuzzy matcher
    year_exact: float = 3
    year_off_by_one: float = 1
    first_author_match: float = 5
    first_author_in_text: float = 4
    additional_multiplier: float = 1.5
    max_additional: float = 4
    max_text_match: float = 3
    text_fallback_threshold: float = 5
    count_match_bonus: float = 3
    count_mismatch_penalty: float = -5
    et_al_match_bonus: float = 1
    et_al_mismatch_penalty: float = -3
    initials_match: float = 15
    initials_mismatch_penalty: float = 12
    hint_volume_match: float = 10
    hint_volume_mismatch_penalty: float = 8
    hint_page_match: float = 5
    fuzzy_floor: float = 4
    fuzzy_high: float = 7
    fuzzy_medium: float = 5
    fuzzy_window: float = 2

    # Orchestrator
    rerank_initials_match: float = 20
    rerank_initials_mismatch_penalty: float = 15
    record_order_bonus: float = 10
    max_results: int = 3


DEFAULT_WEIGHTS = ScoreWeights()


@dataclass(frozen=True)
class AuthorYearIndex:
    """Lower-cased "first-surname year" keys to parsed reference records."""

    by_key: dict[str, list[ParsedReferenceRecord]] = field(default_factory=dict)
    total_references: int = 0
    confidence: MatchConfidence = "low"

    def get(self, key: str) -> list[ParsedReferenceRecord]:
        return list(self.by_key.get(key) or [])

    def __len__(self) -> int:
        return len(self.by_key)

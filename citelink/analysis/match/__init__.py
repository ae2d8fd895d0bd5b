from __future__ import annotations

from citelink.analysis.match.fuzzy import score_fuzzy_matches, score_reference_records, select_best_reference_record
from citelink.analysis.match.index import build_author_year_index
from citelink.analysis.match.match import match_author_year, match_citation, resolve_citations
from citelink.analysis.match.precise import find_precise_match
from citelink.analysis.match.types import (
    AmbiguousCandidate,
    AuthorYearIndex,
    CanonicalEntry,
    MatchResult,
    ParsedReferenceRecord,
    PublicationInfo,
    ScoreWeights,
)

__all__ = [
    "AmbiguousCandidate",
    "AuthorYearIndex",
    "CanonicalEntry",
    "MatchResult",
    "ParsedReferenceRecord",
    "PublicationInfo",
    "ScoreWeights",
    "build_author_year_index",
    "find_precise_match",
    "match_author_year",
    "match_citation",
    "resolve_citations",
    "score_fuzzy_matches",
    "score_reference_records",
    "select_best_reference_record",
]

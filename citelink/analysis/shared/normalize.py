from __future__ import annotations

import re
import unicodedata

from citelink.analysis.shared.journals import (
    get_journal_abbreviations,
    get_journal_full_names,
    normalize_journal_name,
)

_DOI_RE = re.compile(r"10\.\d{4,9}/\S+", re.IGNORECASE)
_DOI_RESOLVER_RE = re.compile(r"^(?:https?://)?(?:dx\.)?(?:doi\.org/)|^doi\s*:\s*", re.IGNORECASE)

_ARXIV_URL_RE = re.compile(r"^https?://(?:www\.)?arxiv\.org/(?:abs|pdf)/", re.IGNORECASE)
_ARXIV_PREFIX_RE = re.compile(r"^arxiv\s*:\s*", re.IGNORECASE)
_ARXIV_VERSION_RE = re.compile(r"v\d{1,2}$", re.IGNORECASE)
_ARXIV_NEW_RE = re.compile(r"^\d{4}\.\d{4,5}$")
_ARXIV_OLD_RE = re.compile(r"^[a-z-]+/\d{7}$")
_ARXIV_LOOSE_RE = re.compile(r"^(?:\d{4}\.\d+|[a-z-]+/\d+)")

_YEAR_BASE_RE = re.compile(r"^\s*(\d{4})")
_PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)")

_COLLABORATION_RE = re.compile(r"\b(collaboration|collab\.?|group|team|consortium|experiment)\b", re.IGNORECASE)
_COLLABORATION_NAME_RE = re.compile(r"^([A-Za-z0-9\s-]+?)\s+(?:collaboration|collab\.?|group)", re.IGNORECASE)
_COLLABORATION_TAIL_RE = re.compile(r"\s+(collaboration|collab\.?|group|team|consortium|experiment).*$", re.IGNORECASE)

_CJK_RE = re.compile(r"^([\u4e00-\u9fff\u3400-\u4dbf])([\u4e00-\u9fff\u3400-\u4dbf]{1,3})$")
_JAPANESE_RE = re.compile(r"^([\u4e00-\u9fff]{1,3})([\u3040-\u309f\u30a0-\u30ff\u4e00-\u9fff]+)$")
_KOREAN_RE = re.compile(r"^([\uac00-\ud7af]{1,2})([\uac00-\ud7af]{1,3})$")
_SINGLE_LETTER_RE = re.compile(r"^[a-z]$", re.IGNORECASE)
_TRAILING_SEPARATOR_RE = re.compile(r"[,;]$")


def normalize_doi(raw: str | None) -> str | None:
    if not raw:
        return None
    raw = raw.strip()
    if not raw:
        return None

    candidate = _DOI_RESOLVER_RE.sub("", raw)
    match = _DOI_RE.search(candidate)
    if match:
        # Suffixes may hold any printable character (SICI DOIs use <, >, #).
        candidate = match.group(0)

    candidate = candidate.rstrip(").,;]").strip()
    return candidate.lower() or None


def normalize_arxiv_id(raw: str | None) -> str | None:
    """Canonical comparison key for an arXiv identifier.

    "arXiv:2301.12345v2" and "https://arxiv.org/abs/2301.12345" both map to
    "2301.12345"; old-style ids keep their subject class ("hep-ph/0101234").
    """
    if not raw:
        return None
    normalized = str(raw).strip().lower()
    normalized = _ARXIV_URL_RE.sub("", normalized)
    normalized = _ARXIV_PREFIX_RE.sub("", normalized)
    if normalized.endswith(".pdf"):
        normalized = normalized[: -len(".pdf")]
    normalized = _ARXIV_VERSION_RE.sub("", normalized)

    if _ARXIV_NEW_RE.match(normalized) or _ARXIV_OLD_RE.match(normalized):
        return normalized
    if _ARXIV_LOOSE_RE.match(normalized):
        return normalized
    return None


def strip_diacritics(value: str | None) -> str:
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def _germanize(value: str) -> str:
    return value.replace("ss", "ß").replace("ae", "ä").replace("oe", "ö").replace("ue", "ü")


def authors_match(name1: str | None, name2: str | None) -> bool:
    """Surname equality tolerant of accents, ß/ss and umlaut transliteration."""
    if not name1 or not name2:
        return False
    if name1 == name2:
        return True
    norm1 = strip_diacritics(name1.lower())
    norm2 = strip_diacritics(name2.lower())
    if norm1 == norm2:
        return True
    return _germanize(norm1) == norm2 or norm1 == _germanize(norm2)


def normalize_year(value: str | int | None) -> str | None:
    """Return the 4-digit base of a year token ("2011a" -> "2011")."""
    if value is None:
        return None
    match = _YEAR_BASE_RE.match(str(value))
    if not match:
        return None
    return match.group(1)


def strip_parenthetical(value: str) -> str:
    return _PARENTHETICAL_RE.sub(" ", value).strip()


def normalize_journal(value: str | None) -> str | None:
    if not value:
        return None
    normalized = normalize_journal_name(strip_parenthetical(value))
    if not normalized:
        return None
    return re.sub(r"\s+", "", normalized)


def build_journal_variants(name: str) -> set[str]:
    variants: set[str] = set()

    def add(value: str | None) -> None:
        if not value:
            return
        norm = normalize_journal_name(strip_parenthetical(value))
        if norm:
            variants.add(norm)
            variants.add(re.sub(r"\s+", "", norm))

    add(name)
    for abbr in get_journal_abbreviations(name):
        add(abbr)
        for full in get_journal_full_names(abbr):
            add(full)
    for full in get_journal_full_names(name):
        add(full)
    return variants


def _common_prefix_length(a: str, b: str) -> int:
    limit = min(len(a), len(b))
    i = 0
    while i < limit and a[i] == b[i]:
        i += 1
    return i


def journals_similar(a: str | None, b: str | None) -> bool:
    if not a or not b:
        return False
    if build_journal_variants(a) & build_journal_variants(b):
        return True

    compact_a = normalize_journal(a)
    compact_b = normalize_journal(b)
    if compact_a and compact_b:
        min_len = min(len(compact_a), len(compact_b))
        if min_len >= 6 and _common_prefix_length(compact_a, compact_b) >= min_len - 2:
            return True
    return False


def is_collaboration(author: str | None) -> bool:
    return bool(author) and _COLLABORATION_RE.search(author) is not None


def extract_collaboration_name(author: str) -> str:
    match = _COLLABORATION_NAME_RE.match(author)
    if match:
        return match.group(1).lower().strip()
    return _COLLABORATION_TAIL_RE.sub("", author.lower()).strip()


def extract_last_name(author: str | None) -> str:
    """Lower-cased family name from "Last, First", "F. Last", a collaboration or a CJK name."""
    if not author:
        return ""
    author = author.strip()
    if not author:
        return ""

    if is_collaboration(author):
        return extract_collaboration_name(author)

    for pattern in (_CJK_RE, _JAPANESE_RE, _KOREAN_RE):
        m = pattern.match(author)
        if m:
            return m.group(1).lower()

    if "," in author:
        return author.split(",", 1)[0].strip().lower().replace(".", "")

    parts = author.split()
    if len(parts) > 1:
        for part in reversed(parts):
            cleaned = _TRAILING_SEPARATOR_RE.sub("", part.replace(".", ""))
            if len(cleaned) > 1 and not _SINGLE_LETTER_RE.match(cleaned):
                return cleaned.lower()

    return _TRAILING_SEPARATOR_RE.sub("", author.lower().replace(".", ""))

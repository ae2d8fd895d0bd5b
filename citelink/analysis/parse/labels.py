from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from citelink.analysis.shared.normalize import normalize_year

logger = logging.getLogger(__name__)

_UPPER = "A-ZÀ-ÖØ-ÞĐŁŐŰİĞŞ"
_LOWER = "a-zà-öø-ÿßđłőűığş"
_NAME_CHARS = f"{_UPPER}{_LOWER}'’‘-"

# One surname, possibly compound ("Hiller Blin"); connectives never continue a name.
_SURNAME = rf"[{_UPPER}][{_NAME_CHARS}]+(?:\s+(?!(?:and|et|al)\b)[{_UPPER}][{_NAME_CHARS}]+)*"
_INITIALS = rf"[{_UPPER}]\.(?:\s*-?[{_UPPER}]\.)*"

_INITIAL_AUTHOR_RE = re.compile(rf"^({_INITIALS})\s+({_SURNAME})$", re.IGNORECASE)
_AUTHOR_YEAR_RE = re.compile(rf"^({_SURNAME})(?:\s+et\s+al\.)?\s+(\d{{4}}[a-z]?)$", re.IGNORECASE)
_TWO_AUTHORS_YEAR_RE = re.compile(rf"^({_SURNAME})\s+and\s+({_SURNAME})\s+(\d{{4}}[a-z]?)$", re.IGNORECASE)
_YEAR_RE = re.compile(r"^\d{4}[a-z]?$")
_AUTHOR_RE = re.compile(rf"^{_SURNAME}$", re.IGNORECASE)
_COMMA_AUTHORS_RE = re.compile(
    rf"^[{_UPPER}][{_NAME_CHARS}]+(?:,\s*[{_UPPER}][{_NAME_CHARS}]+)+$", re.IGNORECASE
)
_ET_AL_RE = re.compile(r"et\s+al\.?", re.IGNORECASE)
_YEAR_SUFFIX_RE = re.compile(r"\d{4}[a-z]$", re.IGNORECASE)
_PAREN_YEAR_RE = re.compile(r"\((\d{4}[a-z]?)\)")

_RAW_OUTER_RE = re.compile(r"^[\s(\[]+|[\s)\]]+$")
_RAW_YEAR_TAIL_RE = re.compile(r"^(?P<authors>.*?)[\s,]+(?P<year>\d{4}[a-z]?)$", re.IGNORECASE)
_RAW_ET_AL_RE = re.compile(r",?\s*\bet\s+al\.?", re.IGNORECASE)
_RAW_AUTHOR_SPLIT_RE = re.compile(r"\s*,\s*(?:and\s+|&\s*)?|\s+(?:and|&)\s+|\s*&\s*", re.IGNORECASE)
_RAW_INITIALS_RE = re.compile(rf"^({_INITIALS})\s*(.+)$", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedCitationLabel:
    authors: tuple[str, ...] = ()
    # surname -> printed initials, e.g. {"li": "M.-T."}
    author_initials: dict[str, str] = field(default_factory=dict)
    year: str | None = None
    is_et_al: bool = False

    @property
    def year_base(self) -> str | None:
        return normalize_year(self.year)

    @property
    def has_year_suffix(self) -> bool:
        return bool(self.year) and _YEAR_SUFFIX_RE.search(self.year) is not None

    @property
    def is_empty(self) -> bool:
        return not self.authors and not self.year


def preprocess_labels(labels: Iterable[str]) -> list[str]:
    """Turn parenthesized years into bare ones: "Guo et al. (2015)" -> "Guo et al. 2015"."""
    return [_PAREN_YEAR_RE.sub(r"\1", label) for label in labels]


def parse_author_labels(labels: Iterable[str]) -> ParsedCitationLabel:
    """Decompose the label list of one in-text citation.

    Recognized shapes, tried in order per label: "M.-T. Li", "Guo et al. 2015" /
    "Guo 2015", "Braaten and Kusunoki 2005", "2011a", "Hiller Blin" and
    "Cho, Song, Lee". Surnames are lower-cased and kept in first-seen order;
    the last year seen wins. Unrecognized labels are ignored.
    """
    authors: list[str] = []
    initials: dict[str, str] = {}
    year: str | None = None
    is_et_al = False

    def add(author: str) -> None:
        if author and author not in authors:
            authors.append(author)

    for label in labels:
        label = (label or "").strip()
        if not label:
            continue

        m = _INITIAL_AUTHOR_RE.match(label)
        if m:
            author = m.group(2).lower()
            add(author)
            initials[author] = re.sub(r"\s+", "", m.group(1))
            continue

        m = _AUTHOR_YEAR_RE.match(label)
        if m:
            add(m.group(1).lower())
            year = m.group(2)
            is_et_al = _ET_AL_RE.search(label) is not None
            continue

        m = _TWO_AUTHORS_YEAR_RE.match(label)
        if m:
            add(m.group(1).lower())
            add(m.group(2).lower())
            year = m.group(3)
            continue

        if _YEAR_RE.match(label):
            year = label
            continue

        if _AUTHOR_RE.match(label):
            add(label.lower())
            continue

        if _COMMA_AUTHORS_RE.match(label):
            for part in re.split(r",\s*", label):
                add(part.strip().lower())
            continue

        logger.debug("Ignoring unrecognized citation label %r", label)

    return ParsedCitationLabel(authors=tuple(authors), author_initials=initials, year=year, is_et_al=is_et_al)


def split_citation_label(raw: str | None) -> list[str]:
    """Expand one raw in-text citation into the label list ``parse_author_labels`` reads.

    "(Guo et al., 2015)" -> ["Guo et al. 2015", "Guo", "2015"]
    "Weinstein and Isgur (1982)" -> ["Weinstein and Isgur 1982", "Weinstein", "Isgur", "1982", "Weinstein, Isgur"]

    Only the first citation of a semicolon-separated group is used.
    """
    text = (raw or "").strip()
    if not text:
        return []
    if ";" in text:
        first, _, rest = text.partition(";")
        logger.debug("Using first citation of group %r (dropped %r)", text, rest.strip())
        text = first
    text = _PAREN_YEAR_RE.sub(r" \1", text)
    text = _RAW_OUTER_RE.sub("", text)
    text = re.sub(r"\s+", " ", text).strip()
    if not text:
        return []

    year: str | None = None
    m = _RAW_YEAR_TAIL_RE.match(text)
    if m:
        year = m.group("year")
        text = m.group("authors").strip()
    elif _YEAR_RE.match(text):
        return [text]

    is_et_al = _RAW_ET_AL_RE.search(text) is not None
    text = _RAW_ET_AL_RE.sub("", text).strip(" ,")

    authors: list[str] = []
    initials: list[str | None] = []
    for part in _RAW_AUTHOR_SPLIT_RE.split(text):
        part = part.strip(" ,")
        if not part:
            continue
        im = _RAW_INITIALS_RE.match(part)
        if im:
            initials.append(re.sub(r"\s+", "", im.group(1)))
            authors.append(im.group(2).strip())
        else:
            initials.append(None)
            authors.append(part)

    if not authors and not year:
        return []
    return list(_build_labels(authors, initials, year, is_et_al))


def _build_labels(
    authors: list[str], initials: list[str | None], year: str | None, is_et_al: bool
) -> Iterator[str]:
    seen: set[str] = set()

    def once(value: str) -> Iterator[str]:
        if value and value not in seen:
            seen.add(value)
            yield value

    if authors and year:
        if is_et_al or len(authors) > 2:
            primary = f"{authors[0]} et al. {year}"
        elif len(authors) == 2:
            primary = f"{authors[0]} and {authors[1]} {year}"
        else:
            primary = f"{authors[0]} {year}"
        yield from once(primary)
    for author in authors:
        yield from once(author)
    for author, printed in zip(authors, initials):
        if printed:
            yield from once(f"{printed} {author}")
    if year:
        yield from once(year)
    if len(authors) > 1:
        yield from once(", ".join(authors))


def _occurrences(haystack: str, needle: str) -> Iterator[int]:
    pos = haystack.find(needle)
    while pos >= 0:
        yield pos
        pos = haystack.find(needle, pos + 1)


def _skip_spaces(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def _is_initial_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def initials_match(author_text: str | None, surname: str, initials: str) -> bool:
    """True when ``author_text`` prints ``surname`` with exactly these initials.

    Both "M.-T. Li" and "Li, M.-T." forms are accepted, case-insensitively.
    """
    if not author_text or not surname or not initials:
        return False
    text = author_text.lower()
    surname = surname.lower()
    initials = initials.lower()

    for pos in _occurrences(text, initials):
        if text.startswith(surname, _skip_spaces(text, pos + len(initials))):
            return True
    anchor = f"{surname},"
    for pos in _occurrences(text, anchor):
        if text.startswith(initials, _skip_spaces(text, pos + len(anchor))):
            return True
    return False


def has_other_initials(author_text: str | None, surname: str) -> bool:
    """True when ``surname`` appears in ``author_text`` next to any printed initial.

    Callers check ``initials_match`` first; a hit here then means the entry
    names a differently-initialed author with the same surname.
    """
    if not author_text or not surname:
        return False
    text = author_text.lower()
    surname = surname.lower()

    for pos in _occurrences(text, surname):
        before = pos
        while before > 0 and text[before - 1].isspace():
            before -= 1
        if before >= 2 and text[before - 1] == "." and _is_initial_letter(text[before - 2]):
            return True
        after = pos + len(surname)
        if after < len(text) and text[after] == ",":
            nxt = _skip_spaces(text, after + 1)
            if nxt + 1 < len(text) and _is_initial_letter(text[nxt]) and text[nxt + 1] == ".":
                return True
    return False

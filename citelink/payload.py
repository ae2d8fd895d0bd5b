from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from typing import Any

from citelink.analysis.match.types import CanonicalEntry, MatchResult, ParsedReferenceRecord, PublicationInfo


class PayloadError(ValueError):
    pass


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _opt_str(value: Any, *, field: str) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise PayloadError(f"{field} must be a string or number (got {type(value).__name__})")
    text = str(value).strip()
    return text or None


def _str_tuple(value: Any, *, field: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise PayloadError(f"{field} must be a list of strings")
    out: list[str] = []
    for item in value:
        if isinstance(item, Mapping):
            # INSPIRE-style author objects
            item = _pick(item, "full_name", "fullName", "name", "last_name")
        text = _opt_str(item, field=field)
        if text:
            out.append(text)
    return tuple(out)


def _opt_int(value: Any, *, field: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise PayloadError(f"{field} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise PayloadError(f"{field} must be an integer (got {value!r})") from e


def publication_info_from_dict(data: Any) -> PublicationInfo | None:
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise PayloadError("publicationInfo must be an object")
    info = PublicationInfo(
        journal_title=_opt_str(_pick(data, "journal_title", "journalTitle"), field="journal_title"),
        journal_volume=_opt_str(_pick(data, "journal_volume", "journalVolume", "volume"), field="journal_volume"),
        page_start=_opt_str(_pick(data, "page_start", "pageStart"), field="page_start"),
        article_id=_opt_str(_pick(data, "artid", "article_id", "articleId"), field="artid"),
    )
    if info == PublicationInfo():
        return None
    return info


def canonical_entry_from_dict(data: Any, *, position: int) -> CanonicalEntry:
    if not isinstance(data, Mapping):
        raise PayloadError(f"entries[{position}] must be an object")

    arxiv = _pick(data, "arxivId", "arxiv_id", "arxiv", "arxivDetails")
    if isinstance(arxiv, Mapping):
        arxiv = arxiv.get("id")

    index = _opt_int(data.get("index"), field=f"entries[{position}].index")
    entry_id = _opt_str(_pick(data, "id", "recid"), field=f"entries[{position}].id")
    return CanonicalEntry(
        index=position if index is None else index,
        id=entry_id or str(position),
        authors=_str_tuple(data.get("authors"), field=f"entries[{position}].authors"),
        author_count=_opt_int(
            _pick(data, "authorCount", "author_count", "totalAuthors"), field=f"entries[{position}].authorCount"
        ),
        year=_opt_str(data.get("year"), field=f"entries[{position}].year"),
        publication_info=publication_info_from_dict(_pick(data, "publicationInfo", "publication_info")),
        arxiv_id=_opt_str(arxiv, field=f"entries[{position}].arxivId"),
        doi=_opt_str(data.get("doi"), field=f"entries[{position}].doi"),
        author_text=_opt_str(_pick(data, "authorText", "author_text"), field=f"entries[{position}].authorText"),
        title=_opt_str(data.get("title"), field=f"entries[{position}].title"),
    )


def reference_record_from_dict(data: Any, *, position: int) -> ParsedReferenceRecord:
    if not isinstance(data, Mapping):
        raise PayloadError(f"references[{position}] must be an object")
    where = f"references[{position}]"
    return ParsedReferenceRecord(
        raw_text=_opt_str(_pick(data, "rawText", "raw_text"), field=f"{where}.rawText") or "",
        arxiv_id=_opt_str(_pick(data, "arxivId", "arxiv_id"), field=f"{where}.arxivId"),
        doi=_opt_str(data.get("doi"), field=f"{where}.doi"),
        journal_abbrev=_opt_str(_pick(data, "journalAbbrev", "journal_abbrev", "journal"), field=f"{where}.journalAbbrev"),
        volume=_opt_str(data.get("volume"), field=f"{where}.volume"),
        page_start=_opt_str(_pick(data, "pageStart", "page_start"), field=f"{where}.pageStart"),
        issue=_opt_str(data.get("issue"), field=f"{where}.issue"),
        first_author_last_name=_opt_str(
            _pick(data, "firstAuthorLastName", "first_author_last_name"), field=f"{where}.firstAuthorLastName"
        ),
        all_author_last_names=_str_tuple(
            _pick(data, "allAuthorLastNames", "all_author_last_names"), field=f"{where}.allAuthorLastNames"
        ),
        year=_opt_str(data.get("year"), field=f"{where}.year"),
        is_erratum=bool(_pick(data, "isErratum", "is_erratum")),
    )


def labels_from_payload(value: Any) -> dict[str, str | list[str]]:
    """Accept a list (keys become positions) or an object of citations.

    Each citation is a raw string ("Guo et al. (2015)") or a list of labels.
    """
    if value is None:
        return {}
    if isinstance(value, list):
        items = [(str(i), v) for i, v in enumerate(value)]
    elif isinstance(value, Mapping):
        items = [(str(k), v) for k, v in value.items()]
    else:
        raise PayloadError("labels must be a list or an object")

    out: dict[str, str | list[str]] = {}
    for key, item in items:
        if isinstance(item, str):
            out[key] = item
        elif isinstance(item, list) and all(isinstance(x, str) for x in item):
            out[key] = list(item)
        else:
            raise PayloadError(f"labels[{key}] must be a string or a list of strings")
    return out


@dataclasses.dataclass(frozen=True)
class Payload:
    entries: list[CanonicalEntry]
    references: list[ParsedReferenceRecord]
    labels: dict[str, str | list[str]]


def parse_payload(raw: str) -> Payload:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PayloadError(f"Invalid JSON payload: {e}") from e
    if not isinstance(data, Mapping):
        raise PayloadError("Payload must be a JSON object")

    entries_raw = data.get("entries") or []
    references_raw = data.get("references") or []
    if not isinstance(entries_raw, list):
        raise PayloadError("entries must be a list")
    if not isinstance(references_raw, list):
        raise PayloadError("references must be a list")

    return Payload(
        entries=[canonical_entry_from_dict(item, position=i) for i, item in enumerate(entries_raw)],
        references=[reference_record_from_dict(item, position=i) for i, item in enumerate(references_raw)],
        labels=labels_from_payload(data.get("labels")),
    )


def match_result_to_dict(result: MatchResult) -> dict[str, Any]:
    out = dataclasses.asdict(result)
    out["ambiguous_candidates"] = [dataclasses.asdict(c) for c in result.ambiguous_candidates]
    return out

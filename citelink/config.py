from __future__ import annotations

import os
from dataclasses import dataclass

from citelink.analysis.parse.text_sampling import (
    DEFAULT_CHAR_STEPS,
    DEFAULT_MAX_TAIL_CHARS,
    DEFAULT_MAX_TAIL_PAGES,
    DEFAULT_PAGE_STEPS,
)


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value if value else default


def _env_int(name: str, default: int, *, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        value = default
    else:
        try:
            value = int(raw)
        except Exception as e:
            raise ValueError(f"Invalid integer value for {name}: {raw!r}") from e
    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value} (got {value})")
    if max_value is not None and value > max_value:
        raise ValueError(f"{name} must be <= {max_value} (got {value})")
    return value


def _env_int_list(name: str, default: tuple[int, ...], *, min_value: int | None = None) -> tuple[int, ...]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    values: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            value = int(part)
        except Exception as e:
            raise ValueError(f"Invalid integer list value for {name}: {raw!r}") from e
        if min_value is not None and value < min_value:
            raise ValueError(f"{name} entries must be >= {min_value} (got {value})")
        values.append(value)
    if not values:
        raise ValueError(f"{name} must list at least one integer (got {raw!r})")
    return tuple(values)


@dataclass(frozen=True)
class Settings:
    log_level: str
    sample_max_tail_pages: int
    sample_page_steps: tuple[int, ...]
    sample_max_tail_chars: int
    sample_char_steps: tuple[int, ...]

    @classmethod
    def from_env(cls) -> "Settings":
        log_level = _env_str("CITELINK_LOG_LEVEL", "INFO")
        sample_max_tail_pages = _env_int(
            "CITELINK_SAMPLE_MAX_TAIL_PAGES", DEFAULT_MAX_TAIL_PAGES, min_value=1, max_value=10000
        )
        sample_page_steps = _env_int_list("CITELINK_SAMPLE_PAGE_STEPS", DEFAULT_PAGE_STEPS, min_value=1)
        sample_max_tail_chars = _env_int(
            "CITELINK_SAMPLE_MAX_TAIL_CHARS", DEFAULT_MAX_TAIL_CHARS, min_value=1000, max_value=500_000_000
        )
        sample_char_steps = _env_int_list("CITELINK_SAMPLE_CHAR_STEPS", DEFAULT_CHAR_STEPS, min_value=1)

        return cls(
            log_level=log_level,
            sample_max_tail_pages=sample_max_tail_pages,
            sample_page_steps=sample_page_steps,
            sample_max_tail_chars=sample_max_tail_chars,
            sample_char_steps=sample_char_steps,
        )

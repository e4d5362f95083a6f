import uuid
from typing import Iterable, Mapping, Optional


def calculate_total_duration(songs: Iterable[Mapping]) -> int:
    """Sum of song durations in seconds."""
    return sum(int(song.get('duration') or 0) for song in songs)


def get_decade(year: int) -> str:
    return f"{(int(year) // 10) * 10}s"


def escape_like(term: str, escape: str = '\\') -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return (
        term.replace(escape, escape + escape)
        .replace('%', escape + '%')
        .replace('_', escape + '_')
    )


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if isinstance(value, str) and value == '':
        return None
    return value


def normalize_uuid(value: str) -> str:
    """Canonical lowercase, hyphenated form; raises ValueError for non-UUIDs."""
    return str(uuid.UUID(value))

"""
File names for newly created place notes.
"""
from __future__ import annotations

import re
from typing import Collection

from domain.models import Place

NOTE_EXTENSION = ".md"
MAX_NAME_LENGTH = 100
UNTITLED_NAME = "Untitled"

_ILLEGAL_RE = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_file_name(name: str) -> str:
    """Strip path-illegal characters, collapse whitespace, trim, cap at 100 chars."""
    cleaned = _ILLEGAL_RE.sub("", name)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
    return cleaned[:MAX_NAME_LENGTH]


def generate_file_name(place: Place, taken: Collection[str] = ()) -> str:
    """
    Pick a note file name that is not in `taken`.

    "Cafe.md" is used when free, else "Cafe 1.md", "Cafe 2.md", ... with the
    smallest free suffix.
    """
    safe_name = sanitize_file_name(place.name) or UNTITLED_NAME
    taken = set(taken)

    candidate = f"{safe_name}{NOTE_EXTENSION}"
    if candidate not in taken:
        return candidate

    suffix = 1
    while f"{safe_name} {suffix}{NOTE_EXTENSION}" in taken:
        suffix += 1
    return f"{safe_name} {suffix}{NOTE_EXTENSION}"

"""
Tag helpers.

Tags under the `gmap/` namespace record which saved list a place came from;
they sort ahead of freeform tags in note headers.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional

TAG_NAMESPACE = "gmap/"

_WHITESPACE_RE = re.compile(r"\s+")
_ASCII_PUNCT_RE = re.compile(r"[()\[\]{}'\"!@#$%^&*+=<>,.;:`~\\|?]")
_UNDERSCORE_RUN_RE = re.compile(r"_+")


def sanitize_tag(value: str) -> str:
    """
    Make a string usable as a note tag.

    Whitespace and ASCII punctuation become underscores; slashes, hyphens,
    non-ASCII letters and emoji are kept. May return "".
    """
    tag = _WHITESPACE_RE.sub("_", value.strip())
    tag = _ASCII_PUNCT_RE.sub("_", tag)
    tag = _UNDERSCORE_RUN_RE.sub("_", tag)
    return tag.strip("_")


def list_tag(list_name: str) -> Optional[str]:
    """Namespace tag for a saved list, e.g. "My Cafes" -> "gmap/My_Cafes"."""
    sanitized = sanitize_tag(list_name)
    return f"{TAG_NAMESPACE}{sanitized}" if sanitized else None


def unique_tags(tags: Iterable[str]) -> List[str]:
    """Drop duplicates and empty strings, keeping first-seen order."""
    seen = set()
    result = []
    for tag in tags:
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def order_tags(tags: Iterable[str]) -> List[str]:
    """Namespace tags sorted first, then freeform tags sorted; deduplicated."""
    unique = unique_tags(tags)
    namespaced = sorted(t for t in unique if t.startswith(TAG_NAMESPACE))
    freeform = sorted(t for t in unique if not t.startswith(TAG_NAMESPACE))
    return namespaced + freeform


def merge_tags(existing: Optional[Iterable[str]], incoming: Optional[Iterable[str]]) -> List[str]:
    return order_tags(list(existing or []) + list(incoming or []))

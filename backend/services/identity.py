"""
Stable identity for saved places.

Priority: cid query parameter > 0x..:0x.. place pair > name/address hash.
"""
from __future__ import annotations

import re
from typing import Optional

_CID_RE = re.compile(r"[?&]cid=(\d+)")
_PLACE_PAIR_RE = re.compile(r"(0x[a-f0-9]+:0x[a-f0-9]+)", re.IGNORECASE)


def extract_cid_from_url(url: str) -> Optional[str]:
    """Return the digits of a `cid=` query parameter, e.g. maps.google.com/?cid=12345 -> "12345"."""
    match = _CID_RE.search(url)
    return match.group(1) if match else None


def extract_id_from_url(url: Optional[str]) -> Optional[str]:
    """
    Derive a stable ID from a Google Maps URL.

    Returns "cid-<digits>", "pid-0x..:0x..", or None when the URL is empty
    or carries neither form.
    """
    if not url:
        return None

    cid = extract_cid_from_url(url)
    if cid:
        return f"cid-{cid}"

    pair = _PLACE_PAIR_RE.search(url)
    if pair:
        return f"pid-{pair.group(1)}"

    return None


def _utf16_units(text: str):
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def generate_hash_id(name: str, address: Optional[str] = None) -> str:
    """
    Deterministic fallback ID: 31x rolling hash over UTF-16 code units of
    "<name>|<address>", wrapped to signed 32-bit, rendered in hex.
    """
    h = 0
    for unit in _utf16_units(f"{name}|{address or ''}"):
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 0x100000000
    return f"hash-{abs(h):x}"

"""
DocBundle — Collision-free file naming.

A name that is already taken gets a numeric suffix before its extension:
photo.png → photo_1.png → photo_2.png, readme → readme_1.
A taken name that already carries a suffix continues that sequence
instead of stacking another one: a_1.png → a_2.png, not a_1_1.png.
"""

from __future__ import annotations

import re
from collections.abc import Container

_EXTENSION_RE = re.compile(r"\.[^/.]+$")
_COUNTER_RE = re.compile(r"^(.+)_(\d+)$")


def split_extension(name: str) -> tuple[str, str]:
    """Split off the final ``.xxx`` suffix; the extension is empty when absent."""
    match = _EXTENSION_RE.search(name)
    if match is None:
        return name, ""
    return name[: match.start()], match.group(0)


def base_stem(stem: str) -> str:
    """Strip a trailing ``_<digits>`` counter: ``a_1`` → ``a``, ``a`` → ``a``."""
    match = _COUNTER_RE.match(stem)
    return match.group(1) if match else stem


def normalize_name(candidate: str, taken: Container[str]) -> str:
    """Return *candidate* unchanged if free, else the first free ``base_N.ext``."""
    if candidate not in taken:
        return candidate

    stem, ext = split_extension(candidate)
    stem = base_stem(stem)
    counter = 1
    while True:
        attempt = f"{stem}_{counter}{ext}"
        if attempt not in taken:
            return attempt
        counter += 1

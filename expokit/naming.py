from __future__ import annotations

import re

NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def derive_slug(value: str) -> str:
    """Lowercase ``value`` and collapse every run of non ``[a-z0-9]`` characters into one hyphen.

    An input without any alphanumeric character yields an empty string.
    """
    return NON_SLUG_RE.sub("-", value.lower()).strip("-")


def derive_display_name(slug: str) -> str:
    return " ".join(segment[:1].upper() + segment[1:] for segment in slug.split("-") if segment)


def replace_all(content: str, pattern: str, replacement: str) -> tuple[str, int]:
    """Replace every literal occurrence of ``pattern`` and return the new text with the match count."""
    if not pattern:
        return content, 0
    count = content.count(pattern)
    if not count:
        return content, 0
    return content.replace(pattern, replacement), count

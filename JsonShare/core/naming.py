from __future__ import annotations

import re

UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9]")
KEY_PATTERN = re.compile(r"[A-Za-z0-9_]+\.json")
KEY_SUFFIX = ".json"


def sanitize(raw: str) -> str:
    """Replace every character outside [A-Za-z0-9] with an underscore."""
    return UNSAFE_CHARS.sub("_", raw)


def derive_key(file_name: str, author_name: str) -> str:
    return f"{sanitize(file_name)}_{sanitize(author_name)}{KEY_SUFFIX}"


def is_valid_key(key: str) -> bool:
    return KEY_PATTERN.fullmatch(key) is not None

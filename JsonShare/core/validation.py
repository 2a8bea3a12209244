from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

from .errors import PayloadTooLarge

JSON_SUFFIX = ".json"


@dataclass(frozen=True)
class JsonValidation:
    ok: bool
    reason: Optional[str] = None


def _reject_constant(name: str) -> None:
    raise ValueError(f"non-standard constant {name}")


def validate_json(content: bytes) -> JsonValidation:
    """
    Check that `content` is a complete JSON text.

    The bytes are decoded as strict UTF-8 first; the parsed value is thrown
    away so callers keep storing exactly what was uploaded.
    """
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as exc:
        return JsonValidation(ok=False, reason=f"not UTF-8 text: {exc.reason}")
    try:
        json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        # JSONDecodeError is a ValueError subclass
        return JsonValidation(ok=False, reason=str(exc))
    except RecursionError:
        return JsonValidation(ok=False, reason="nesting too deep")
    return JsonValidation(ok=True)


def is_json_filename(filename: str) -> bool:
    return filename.endswith(JSON_SUFFIX)


def check_size(content: bytes, max_bytes: int) -> None:
    if max_bytes > 0 and len(content) > max_bytes:
        raise PayloadTooLarge(f"File exceeds {max_bytes} byte limit")


def check_content_length(header: Optional[str], max_bytes: int, overhead: int) -> None:
    """Reject a declared request body that cannot fit the upload limit."""
    if max_bytes <= 0 or not header:
        return
    try:
        declared = int(header)
    except ValueError:
        return
    if declared > max_bytes + max(overhead, 0):
        raise PayloadTooLarge(f"Request body of {declared} bytes exceeds {max_bytes} byte limit")

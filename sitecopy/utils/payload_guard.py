from __future__ import annotations

from typing import Optional

from sitecopy.core.errors import PayloadTooLargeError
from sitecopy.core.settings import settings


def enforce_value_size(value: Optional[str]) -> None:
    """
    Enforces a maximum UTF-8 size (in KB) for a content value.
    Raises PayloadTooLargeError (HTTP 413) on overflow.
    """
    limit_kb = float(settings.MAX_VALUE_KB or 0)
    if limit_kb <= 0 or value is None:
        return
    kb = len(value.encode("utf-8")) / 1024.0
    if kb > limit_kb:
        raise PayloadTooLargeError(
            f"Payload too large: value is {kb:.1f}KB, limit is {limit_kb:.0f}KB",
            details={"sizeKb": round(kb, 1), "limitKb": limit_kb},
        )

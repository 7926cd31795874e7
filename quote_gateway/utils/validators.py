from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any

_LEADING_INT = re.compile(r"^[+-]?\d+")


def _clean_numeric(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().rstrip("%").strip()
    return value


def to_native_float(value: Any, default: float = 0.0) -> float:
    """Permissive float parse: absent, blank, non-finite or malformed values yield ``default``."""
    if value is None:
        return default
    try:
        casted = float(_clean_numeric(value))
    except (TypeError, ValueError):
        return default
    if not math.isfinite(casted):
        return default
    return casted


def to_native_int(value: Any, default: int = 0) -> int:
    """
    Permissive non-negative int parse.

    Strings keep only their leading digits, so ``"1234.9"`` is 1234 and
    ``"1e3"`` is 1. Negative or digit-less values yield ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        match = _LEADING_INT.match(value.strip())
        if match is None:
            return default
        casted = int(match.group())
    else:
        as_float = to_native_float(value, default=-1.0)
        casted = int(as_float)
    if casted < 0:
        return default
    return casted


def normalize_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        iso = str(value).replace("Z", "+00:00")
        dt = datetime.fromisoformat(iso)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now_iso(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = normalize_timestamp(now or datetime.now(timezone.utc))
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")

"""Generic helpers (escaping, binding access, number parsing, profiling)."""

from __future__ import annotations

import functools
import html as html_lib
import logging
import math
import re
import time
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from selectivity_explorer.config import LOG_LEVEL

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s",
)

_FLOAT_PREFIX_RE = re.compile(r"^[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def escape_html(value: Any) -> str:
    """Escape ``value`` for safe insertion into markup; ``None`` becomes ``""``."""
    if value is None:
        return ""
    return html_lib.escape(str(value), quote=True)


def binding_value(row: Optional[Dict[str, Any]], var: str) -> Optional[str]:
    """Return the ``value`` of ``var`` in a result row, or ``None`` when unbound."""
    if not isinstance(row, dict):
        return None
    cell = row.get(var)
    if not isinstance(cell, dict):
        return None
    value = cell.get("value")
    if value is None:
        return None
    return str(value)


def binding_text(row: Optional[Dict[str, Any]], var: str) -> str:
    return binding_value(row, var) or ""


def parse_float(raw: Optional[str]) -> float:
    """Parse the leading number of ``raw`` the lenient way; ``NaN`` when there is none.

    ``"2"`` -> 2.0, ``"2.5e1 nM"`` -> 25.0, ``"abc"`` / ``""`` / ``None`` -> NaN.
    """
    if raw is None:
        return math.nan
    text = str(raw).strip()
    if not text:
        return math.nan
    match = _FLOAT_PREFIX_RE.match(text)
    if not match:
        return math.nan
    token = match.group(0)
    if token.lstrip("+-") == "Infinity":
        return -math.inf if token.startswith("-") else math.inf
    try:
        return float(token)
    except ValueError:
        return math.nan


def is_http_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        logging.debug("Endpoint %r failed to parse: %s", url, exc)
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def profile_time(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        elapsed = time.time() - start_time
        logging.info("[PROFILE] Function '%s' executed in %.3f seconds", func.__name__, elapsed)
        return result

    return wrapper

"""auth_date freshness checks."""

import re
import time
from datetime import timedelta
from typing import Callable

from .errors import AuthDateInvalidError, AuthDateMissingError, ExpiredError


Clock = Callable[[], float]

_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")

# Signed 64-bit range, the widest integer Telegram sends
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def parse_timestamp(raw: str) -> int:
    """Parse a signed 64-bit base-10 integer.

    Whitespace, digit separators and out-of-range values are rejected.
    """
    if not _DECIMAL_RE.fullmatch(raw):
        raise ValueError(f"not a base-10 integer: {raw!r}")
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(f"integer out of range: {raw!r}")
    return value


def parse_auth_date(raw: str | None) -> int:
    if raw is None:
        raise AuthDateMissingError()
    try:
        return parse_timestamp(raw)
    except ValueError as exc:
        raise AuthDateInvalidError(raw) from exc


def check_auth_date(raw: str | None, max_age: timedelta, clock: Clock | None = None) -> int:
    """Raise unless auth_date + max_age is not earlier than now.

    now == auth_date + max_age is still accepted. Returns the parsed auth_date.
    """
    auth_date = parse_auth_date(raw)
    now = (clock or time.time)()
    expires_at = auth_date + max_age.total_seconds()
    if now > expires_at:
        raise ExpiredError(auth_date, expires_at, now)
    return auth_date

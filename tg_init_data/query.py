"""Query string parsing and data-check-string construction.

The data-check-string is the exact message Telegram signs: every received
field except the signature-bearing ones, sorted by key and rendered as
``key=value`` lines joined by ``\\n``.

Reference: https://core.telegram.org/bots/webapps#validating-data-received-via-the-mini-app
"""

from urllib.parse import unquote_plus


def parse_query_string(init_data: str) -> dict[str, str | None]:
    """Parse the initData query string into a flat dict.

    A segment without ``=`` maps to None, ``key=`` maps to the empty string.
    Duplicate keys keep the last occurrence.
    """
    result: dict[str, str | None] = {}
    for segment in init_data.split("&"):
        if not segment:
            continue
        key, sep, value = segment.partition("=")
        result[unquote_plus(key)] = unquote_plus(value) if sep else None
    return result


def build_data_check_string(params: dict[str, str | None]) -> str:
    """Build the sorted newline-separated data-check-string.

    A valueless entry renders as a bare ``key`` so it never signs the same
    bytes as ``key=``.
    """
    return "\n".join(
        k if v is None else f"{k}={v}" for k, v in sorted(params.items())
    )


def build_data_check_string_3rd(params: dict[str, str | None], bot_id: int) -> str:
    """Build the message signed with Telegram's Ed25519 key for a given bot."""
    return f"{bot_id}:WebAppData\n" + build_data_check_string(params)

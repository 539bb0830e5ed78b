"""Telegram Mini App initData validation and parsing.

Validates the initData string sent by the Telegram WebApp SDK to ensure
the request is authentic and not replayed, then decodes it into typed
entities. Pure functions, no I/O.

Two signature schemes are supported:

* validate_init_data: HMAC-SHA256 keyed from the bot token.
* validate_init_data_3rd: Ed25519 against Telegram's public key, for
  services that know only the bot id.

Both return None on success and raise an InitDataError otherwise.

Reference: https://core.telegram.org/bots/webapps#validating-data-received-via-the-mini-app
"""

import logging

from .config import DEFAULT_OPTIONS, ValidationOptions
from .crypto import verify_ed25519_signature, verify_hmac_hash
from .entities import ChatType, InitData
from .errors import (
    ArgumentInvalidError, AuthDateMissingError, NumericFieldInvalidError,
    SignatureInvalidError, SignatureMissingError,
)
from .expiration import check_auth_date, parse_auth_date, parse_timestamp
from .json_parser import DEFAULT_PARSER, InitDataJsonParser
from .keys import public_key_for
from .query import build_data_check_string, build_data_check_string_3rd, parse_query_string


logger = logging.getLogger(__name__)


def _require_text(value: str | None, argument: str) -> str:
    if value is None or not value.strip():
        raise ArgumentInvalidError(argument)
    return value


def validate_init_data(
    init_data: str, bot_token: str, options: ValidationOptions | None = None,
) -> None:
    """Validate initData signed with the bot token (HMAC scheme)."""
    _require_text(init_data, "init_data")
    _require_text(bot_token, "bot_token")
    options = options or DEFAULT_OPTIONS

    params = parse_query_string(init_data)
    received_hash = params.pop("hash", None)
    if received_hash is None:
        raise SignatureMissingError.of_hash()

    if options.max_age is not None:
        check_auth_date(params.get("auth_date"), options.max_age, options.clock)

    data_check_string = build_data_check_string(params)
    if not verify_hmac_hash(bot_token, data_check_string, received_hash):
        logger.debug("initData rejected: hash mismatch")
        raise SignatureInvalidError.of_hash()


def validate_init_data_3rd(
    init_data: str, bot_id: int, options: ValidationOptions | None = None,
) -> None:
    """Validate initData with Telegram's Ed25519 signature (third-party scheme)."""
    _require_text(init_data, "init_data")
    if bot_id is None or isinstance(bot_id, bool) or not isinstance(bot_id, int):
        raise ArgumentInvalidError("bot_id")
    options = options or DEFAULT_OPTIONS

    params = parse_query_string(init_data)
    params.pop("hash", None)
    signature = params.pop("signature", None)
    if signature is None:
        raise SignatureMissingError.of_signature()

    if options.max_age is not None:
        check_auth_date(params.get("auth_date"), options.max_age, options.clock)

    message = build_data_check_string_3rd(params, bot_id)
    public_key = public_key_for(options.test_environment)
    if not verify_ed25519_signature(message, signature, public_key):
        logger.debug(
            "initData rejected: Ed25519 signature not verified (test_environment=%s)",
            options.test_environment,
        )
        raise SignatureInvalidError.of_signature()


def bot_id_from_token(bot_token: str) -> int:
    """Extract the numeric bot id, the part of the token before the first ':'."""
    _require_text(bot_token, "bot_token")
    prefix, sep, _ = bot_token.partition(":")
    if not sep or not prefix.isdigit():
        raise ArgumentInvalidError("bot_token")
    return int(prefix)


def _parse_optional_int(params: dict[str, str | None], name: str) -> int | None:
    raw = params.pop(name, None)
    if raw is None:
        return None
    try:
        return parse_timestamp(raw)
    except ValueError as exc:
        raise NumericFieldInvalidError(name, raw) from exc


def parse_init_data(init_data: str, parser: InitDataJsonParser | None = None) -> InitData:
    """Decode initData into an InitData.

    Does not check the signature; call one of the validate functions first.
    Unrecognized parameters end up in InitData.extra.
    """
    _require_text(init_data, "init_data")
    parser = parser or DEFAULT_PARSER

    params = parse_query_string(init_data)
    raw_auth_date = params.pop("auth_date", None)
    if raw_auth_date is None:
        raise AuthDateMissingError()
    auth_date = parse_auth_date(raw_auth_date)
    can_send_after = _parse_optional_int(params, "can_send_after")

    chat = parser.parse_chat(params.pop("chat", None))
    chat_type = ChatType.from_value(params.pop("chat_type", None))
    chat_instance = params.pop("chat_instance", None)
    received_hash = params.pop("hash", None)
    if received_hash is None:
        raise SignatureMissingError.of_hash()
    signature = params.pop("signature", None)
    query_id = params.pop("query_id", None)
    receiver = parser.parse_user(params.pop("receiver", None))
    start_param = params.pop("start_param", None)
    user = parser.parse_user(params.pop("user", None))

    return InitData(
        auth_date=auth_date,
        hash=received_hash,
        can_send_after=can_send_after,
        chat=chat,
        chat_type=chat_type,
        chat_instance=chat_instance,
        signature=signature,
        query_id=query_id,
        receiver=receiver,
        start_param=start_param,
        user=user,
        extra=params,
    )

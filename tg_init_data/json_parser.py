"""Decoding of the JSON-encoded ``user``, ``receiver`` and ``chat`` fields.

parse_init_data() takes any object implementing InitDataJsonParser, so a
caller can plug in another JSON library. JsonInitDataParser is the default,
built on the standard json module.
"""

import json
from typing import Any, Protocol

from .entities import Chat, ChatType, PropertyBag, User
from .errors import JsonParseError, JsonPropertyMissingError
from .expiration import INT64_MAX, INT64_MIN, parse_timestamp


class InitDataJsonParser(Protocol):
    def parse_user(self, text: str | None) -> User | None: ...

    def parse_chat(self, text: str | None) -> Chat | None: ...


def _extra_to_text(value: Any) -> str:
    """Render an unrecognized JSON value as a string."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class JsonInitDataParser:
    """Strict decoder: known fields must have the documented JSON types."""

    def parse_user(self, text: str | None) -> User | None:
        node = self._load(User, text)
        if node is None:
            return None
        return User(
            id=self._require_int(User, node, "id"),
            first_name=self._require_str(User, node, "first_name"),
            last_name=self._optional(User, node, "last_name", str),
            username=self._optional(User, node, "username", str),
            language_code=self._optional(User, node, "language_code", str),
            photo_url=self._optional(User, node, "photo_url", str),
            is_bot=self._optional(User, node, "is_bot", bool),
            is_premium=self._optional(User, node, "is_premium", bool),
            allows_write_to_pm=self._optional(User, node, "allows_write_to_pm", bool),
            added_to_attachment_menu=self._optional(User, node, "added_to_attachment_menu", bool),
            extra=self._extra(User, node),
        )

    def parse_chat(self, text: str | None) -> Chat | None:
        node = self._load(Chat, text)
        if node is None:
            return None
        return Chat(
            id=self._require_int(Chat, node, "id"),
            type=ChatType.from_value(self._require_str(Chat, node, "type")),
            title=self._require_str(Chat, node, "title"),
            photo_url=self._optional(Chat, node, "photo_url", str),
            username=self._optional(Chat, node, "username", str),
            extra=self._extra(Chat, node),
        )

    @staticmethod
    def _load(entity: type, text: str | None) -> dict | None:
        if text is None or not text.strip():
            return None
        try:
            node = json.loads(text)
        except ValueError as exc:
            # JSONDecodeError, or an integer literal past the interpreter's digit limit
            raise JsonParseError(entity, str(exc)) from exc
        if not isinstance(node, dict):
            raise JsonParseError(entity, f"expected a JSON object, got {type(node).__name__}")
        return node

    @staticmethod
    def _require_int(entity: type, node: dict, name: str) -> int:
        value = node.get(name)
        if value is None:
            raise JsonPropertyMissingError(entity, name)
        if isinstance(value, bool):
            raise JsonParseError(entity, f'"{name}" must be an integer')
        if isinstance(value, int) and INT64_MIN <= value <= INT64_MAX:
            return value
        if isinstance(value, str):
            try:
                return parse_timestamp(value)
            except ValueError:
                pass
        raise JsonParseError(entity, f'"{name}" must be an integer')

    @staticmethod
    def _require_str(entity: type, node: dict, name: str) -> str:
        value = node.get(name)
        if value is None:
            raise JsonPropertyMissingError(entity, name)
        if not isinstance(value, str):
            raise JsonParseError(entity, f'"{name}" must be a string')
        return value

    @staticmethod
    def _optional(entity: type, node: dict, name: str, kind: type):
        value = node.get(name)
        if value is None:
            return None
        if not isinstance(value, kind):
            raise JsonParseError(entity, f'"{name}" must be {kind.__name__}')
        return value

    @staticmethod
    def _extra(entity: type[PropertyBag], node: dict) -> dict[str, str]:
        known = entity.known_properties()
        return {
            k: _extra_to_text(v) for k, v in node.items()
            if k not in known and v is not None
        }


DEFAULT_PARSER = JsonInitDataParser()

"""Typed views of the init data payload.

Every entity keeps a read-only ``properties`` mapping keyed by wire name:
known fields that are set, plus any unrecognized fields as strings.
Equality, hashing and repr are all defined over that mapping, so a payload
that carries an extra field never compares equal to one that doesn't.

Reference: https://core.telegram.org/bots/webapps#webappinitdata
"""

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import ClassVar, Mapping

from .errors import PropertyMissingError


class ChatType:
    """Type of the chat a Mini App was opened from.

    The named values are singletons (ChatType.GROUP, ...). Anything else
    Telegram sends resolves to ChatType.Unknown carrying the raw string, and
    is never equal to a named value.
    """
    __slots__ = ("value",)

    SENDER: ClassVar["ChatType"]
    PRIVATE: ClassVar["ChatType"]
    GROUP: ClassVar["ChatType"]
    SUPERGROUP: ClassVar["ChatType"]
    CHANNEL: ClassVar["ChatType"]
    Unknown: ClassVar[type["ChatType"]]

    def __init__(self, value: str):
        self.value = value

    @classmethod
    def from_value(cls, value: str | None) -> "ChatType | None":
        if value is None:
            return None
        known = _KNOWN_CHAT_TYPES.get(value)
        return known if known is not None else UnknownChatType(value)

    @property
    def is_known(self) -> bool:
        return not isinstance(self, UnknownChatType)

    def __eq__(self, other):
        if not isinstance(other, ChatType) or type(other) is not type(self):
            return NotImplemented
        return self.value == other.value

    def __hash__(self):
        return hash((type(self).__name__, self.value))

    def __repr__(self):
        if self.is_known:
            return f"ChatType.{self.value.upper()}"
        return f"ChatType.Unknown({self.value!r})"


class _NamedChatType(ChatType):
    __slots__ = ()


class UnknownChatType(ChatType):
    """A chat type this package does not know about yet."""
    __slots__ = ()


ChatType.Unknown = UnknownChatType

ChatType.SENDER = _NamedChatType("sender")
ChatType.PRIVATE = _NamedChatType("private")
ChatType.GROUP = _NamedChatType("group")
ChatType.SUPERGROUP = _NamedChatType("supergroup")
ChatType.CHANNEL = _NamedChatType("channel")

_KNOWN_CHAT_TYPES: dict[str, ChatType] = {
    t.value: t for t in (
        ChatType.SENDER, ChatType.PRIVATE, ChatType.GROUP,
        ChatType.SUPERGROUP, ChatType.CHANNEL,
    )
}


class PropertyBag:
    """Base for entities whose identity is their full property mapping.

    Subclasses are frozen dataclasses whose fields (apart from ``extra``)
    are named after the wire properties.
    """
    REQUIRED: ClassVar[tuple[str, ...]] = ()

    def __post_init__(self):
        for name in self.REQUIRED:
            if getattr(self, name) is None:
                raise PropertyMissingError(name)

        known = self.known_properties()
        extra = {
            k: v for k, v in (self.extra or {}).items()
            if k not in known and v is not None
        }
        props = {
            f.name: getattr(self, f.name) for f in fields(self)
            if f.name in known and getattr(self, f.name) is not None
        }
        props.update(extra)
        object.__setattr__(self, "extra", MappingProxyType(extra))
        object.__setattr__(self, "_properties", MappingProxyType(props))

    @classmethod
    def known_properties(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls) if f.name != "extra")

    @property
    def properties(self) -> Mapping[str, object]:
        return self._properties

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._properties == other._properties

    def __hash__(self):
        return hash((type(self).__name__, frozenset(self._properties.items())))

    def __repr__(self):
        return f"{type(self).__name__}({dict(self._properties)!r})"


@dataclass(frozen=True, eq=False, repr=False)
class User(PropertyBag):
    id: int
    first_name: str
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None
    photo_url: str | None = None
    is_bot: bool | None = None
    is_premium: bool | None = None
    allows_write_to_pm: bool | None = None
    added_to_attachment_menu: bool | None = None
    extra: Mapping[str, str] = field(default_factory=dict)

    REQUIRED: ClassVar[tuple[str, ...]] = ("id", "first_name")


@dataclass(frozen=True, eq=False, repr=False)
class Chat(PropertyBag):
    id: int
    type: ChatType
    title: str
    photo_url: str | None = None
    username: str | None = None
    extra: Mapping[str, str] = field(default_factory=dict)

    REQUIRED: ClassVar[tuple[str, ...]] = ("id", "type", "title")


@dataclass(frozen=True, eq=False, repr=False)
class InitData(PropertyBag):
    auth_date: int
    hash: str
    can_send_after: int | None = None
    chat: Chat | None = None
    chat_type: ChatType | None = None
    chat_instance: str | None = None
    signature: str | None = None
    query_id: str | None = None
    receiver: User | None = None
    start_param: str | None = None
    user: User | None = None
    extra: Mapping[str, str] = field(default_factory=dict)

    REQUIRED: ClassVar[tuple[str, ...]] = ("auth_date", "hash")

"""
Binary framing shared by all messages:

  [1 byte: message type][1 byte: divider "_"][content]

Outbound and inbound messages have their own type tables. Content is compact
JSON for everything but frames, which carry a small binary header followed by
the opaque frame payload.
"""
from __future__ import annotations
import abc
from enum import IntEnum
import json
from typing import Any, ClassVar, Dict, Optional

DIVIDER = b"_"


class DecodeError(ValueError):
    """Raised when inbound bytes can not be turned into a message."""
    pass


class OutMessageType(IntEnum):
    CONNECT = 1
    DISCONNECT = 2
    UPDATE_SETTINGS = 3
    UPDATE_SLOS = 4
    METRICS = 5


class InMessageType(IntEnum):
    CONNECT = 1
    DISCONNECT = 2
    ERROR = 3
    FRAME = 4
    SUGGEST_SETTINGS = 5


def encode_json(data: Dict[str, Any]) -> bytes:
    return json.dumps(data, separators=(",", ":")).encode("utf-8")


def decode_json(content: bytes) -> Optional[Dict[str, Any]]:
    """Parse a JSON object, None if content is not one."""
    try:
        data = json.loads(content)
    except (UnicodeDecodeError, ValueError, RecursionError):
        return None

    if not isinstance(data, dict):
        return None

    return data


class Message(abc.ABC):
    TYPE: ClassVar[IntEnum]

    @abc.abstractmethod
    def encode_content(self) -> bytes:
        pass

    def to_bytes(self) -> bytes:
        return bytes([int(self.TYPE)]) + DIVIDER + self.encode_content()

    @property
    def type(self) -> str:
        return self.__class__.__name__


class OutMessage(Message):
    """Messages sent from the client to the server."""
    TYPE: ClassVar[OutMessageType]


class InMessage(Message):
    """Messages sent from the server to the client."""
    TYPE: ClassVar[InMessageType]

    _registry: ClassVar[Dict[InMessageType, type[InMessage]]] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Automatically register subclasses using their message type."""
        super().__init_subclass__(**kwargs)
        InMessage._registry[cls.TYPE] = cls

    @classmethod
    @abc.abstractmethod
    def from_content(cls, content: bytes) -> InMessage:
        pass

    @classmethod
    def from_bytes(cls, data: bytes) -> InMessage:
        """Deserialize bytes into the matching message class."""
        if len(data) < 2:
            raise DecodeError(f"Message too short: {len(data)} bytes")

        if data[1:2] != DIVIDER:
            raise DecodeError("Missing divider after message type")

        try:
            msg_type = InMessageType(data[0])
        except ValueError as e:
            raise DecodeError(f"Unknown message type: {data[0]}") from e

        if msg_type not in cls._registry:
            raise DecodeError(f"Unhandled message type: {msg_type.name}")

        return cls._registry[msg_type].from_content(data[2:])

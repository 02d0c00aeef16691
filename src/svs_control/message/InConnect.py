from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .Message import InMessage, InMessageType, decode_json, encode_json


@dataclass(frozen=True)
class InConnect(InMessage):
    """Server accepted the session."""
    TYPE = InMessageType.CONNECT

    stream_settings_id: Optional[int] = None

    @classmethod
    def from_content(cls, content: bytes) -> InConnect:
        data = decode_json(content) or {}
        settings_id = data.get("stream_settings_id")
        if not isinstance(settings_id, int) or isinstance(settings_id, bool):
            settings_id = None

        return cls(settings_id)

    def encode_content(self) -> bytes:
        return encode_json({"stream_settings_id": self.stream_settings_id})

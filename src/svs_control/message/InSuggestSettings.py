from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from svs_model import StreamSettings

from .Message import InMessage, InMessageType, decode_json, encode_json


@dataclass(frozen=True)
class InSuggestSettings(InMessage):
    """Server proposes new settings, None if the proposal was unreadable."""
    TYPE = InMessageType.SUGGEST_SETTINGS

    settings: Optional[StreamSettings] = None

    @classmethod
    def from_content(cls, content: bytes) -> InSuggestSettings:
        data = decode_json(content) or {}
        settings = data.get("stream_settings")
        if not isinstance(settings, dict):
            return cls()

        return cls(StreamSettings.from_dict(settings))

    def encode_content(self) -> bytes:
        settings = self.settings.to_dict() if self.settings else None
        return encode_json({"stream_settings": settings})

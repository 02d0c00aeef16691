from __future__ import annotations
from dataclasses import dataclass

from .Message import InMessage, InMessageType


@dataclass(frozen=True)
class InDisconnect(InMessage):
    TYPE = InMessageType.DISCONNECT

    @classmethod
    def from_content(cls, content: bytes) -> InDisconnect:
        return cls()

    def encode_content(self) -> bytes:
        return b""

"""
Frame content has its own binary layout:

  [1 byte: stream index][divider][8 bytes: setting id, signed big endian]
  [divider][frame payload]

Fields are read at fixed offsets, divider bytes inside the setting id or the
payload are of no concern.
"""
from __future__ import annotations
from dataclasses import dataclass
import struct

from .Message import DIVIDER, DecodeError, InMessage, InMessageType


@dataclass(frozen=True)
class InFrame(InMessage):
    TYPE = InMessageType.FRAME

    HEADER = struct.Struct(">Bcqc")

    stream: int
    setting_id: int
    frame: bytes

    @classmethod
    def from_content(cls, content: bytes) -> InFrame:
        if len(content) < cls.HEADER.size:
            raise DecodeError(f"Frame too short: {len(content)} bytes")

        stream, divider_1, setting_id, divider_2 = cls.HEADER.unpack_from(content)
        if divider_1 != DIVIDER or divider_2 != DIVIDER:
            raise DecodeError("Malformed frame header")

        return cls(stream, setting_id, bytes(content[cls.HEADER.size:]))

    def encode_content(self) -> bytes:
        header = self.HEADER.pack(self.stream, DIVIDER, self.setting_id, DIVIDER)
        return header + self.frame

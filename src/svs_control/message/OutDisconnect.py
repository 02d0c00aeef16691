from dataclasses import dataclass

from .Message import OutMessage, OutMessageType


@dataclass(frozen=True)
class OutDisconnect(OutMessage):
    TYPE = OutMessageType.DISCONNECT

    def encode_content(self) -> bytes:
        return b""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum

from .Message import InMessage, InMessageType, decode_json, encode_json


class ErrorCode(IntEnum):
    GENERIC = 1
    WRONG_MESSAGE = 2


@dataclass(frozen=True)
class InError(InMessage):
    """
    Protocol level error reported by the server. Unparsable content falls
    back to a generic error with an empty message, unknown codes to generic.
    """
    TYPE = InMessageType.ERROR

    code: ErrorCode = ErrorCode.GENERIC
    message: str = ""

    @classmethod
    def from_content(cls, content: bytes) -> InError:
        data = decode_json(content)
        if data is None:
            return cls()

        code = data.get("code")
        message = data.get("message")
        if (
            not isinstance(code, int) or
            isinstance(code, bool) or
            not isinstance(message, str)
        ):
            return cls()

        try:
            error_code = ErrorCode(code)
        except ValueError:
            error_code = ErrorCode.GENERIC

        return cls(error_code, message)

    def encode_content(self) -> bytes:
        return encode_json({"code": int(self.code), "message": self.message})

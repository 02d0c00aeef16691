from typing import Union

from .Message import (
    DIVIDER,
    DecodeError,
    InMessage,
    InMessageType,
    Message,
    OutMessage,
    OutMessageType,
)
from .OutConnect import OutConnect
from .OutDisconnect import OutDisconnect
from .OutUpdateSettings import OutUpdateSettings
from .OutUpdateSlos import OutUpdateSlos
from .OutMetrics import OutMetrics
from .InConnect import InConnect
from .InDisconnect import InDisconnect
from .InError import InError, ErrorCode
from .InFrame import InFrame
from .InSuggestSettings import InSuggestSettings

OutboundMessage = Union[
    OutConnect,
    OutDisconnect,
    OutUpdateSettings,
    OutUpdateSlos,
    OutMetrics,
]

InboundMessage = Union[
    InConnect,
    InDisconnect,
    InError,
    InFrame,
    InSuggestSettings,
]

__all__ = [
  "DIVIDER",
  "DecodeError",
  "Message",
  "OutMessage",
  "OutMessageType",
  "InMessage",
  "InMessageType",
  "OutConnect",
  "OutDisconnect",
  "OutUpdateSettings",
  "OutUpdateSlos",
  "OutMetrics",
  "InConnect",
  "InDisconnect",
  "InError",
  "ErrorCode",
  "InFrame",
  "InSuggestSettings",
  "OutboundMessage",
  "InboundMessage",
]

from .Session import Session
from .State import State
from .StreamView import StreamView
from .Transmitter import Transmitter
from .Transport import (
    Transport,
    TransportClosed,
    TransportError,
    WebSocketTransport,
)

__all__ = [
    "Session",
    "State",
    "StreamView",
    "Transmitter",
    "Transport",
    "TransportClosed",
    "TransportError",
    "WebSocketTransport",
]

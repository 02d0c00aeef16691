"""
Duplex message transport the session talks through.

Any object implementing the Transport protocol can be used, the default is a
WebSocket connection. All transport failures surface as TransportError, an
orderly close by the peer as TransportClosed.
"""
import logging
from typing import Optional, Protocol, Union, runtime_checkable

from websockets.exceptions import (
    ConnectionClosed,
    ConnectionClosedOK,
    InvalidHandshake,
    InvalidURI,
)
from websockets.sync.client import ClientConnection, connect


class TransportError(Exception):
    """Raised when the transport fails."""
    pass


class TransportClosed(TransportError):
    """Raised when the transport has been closed."""
    pass


@runtime_checkable
class Transport(Protocol):
    def open(self, url: str) -> None:
        ...

    def send(self, data: bytes) -> None:
        ...

    def receive(self) -> Union[bytes, str]:
        """Block until the next message arrives."""
        ...

    def close(self, code: int = 1000, reason: str = "") -> None:
        ...


class WebSocketTransport:
    def __init__(self, open_timeout: float = 10) -> None:
        self.open_timeout = open_timeout
        self._connection: Optional[ClientConnection] = None

    def open(self, url: str) -> None:
        try:
            self._connection = connect(url, open_timeout=self.open_timeout)
        except (InvalidURI, InvalidHandshake, OSError) as e:
            raise TransportError(f"Failed to connect to {url}: {e}") from e

    def send(self, data: bytes) -> None:
        connection = self._get_connection()
        try:
            connection.send(data)
        except ConnectionClosed as e:
            raise TransportClosed(str(e)) from e
        except OSError as e:
            raise TransportError(str(e)) from e

    def receive(self) -> Union[bytes, str]:
        connection = self._get_connection()
        try:
            return connection.recv()
        except ConnectionClosedOK as e:
            raise TransportClosed(str(e)) from e
        except ConnectionClosed as e:
            raise TransportError(str(e)) from e
        except OSError as e:
            raise TransportError(str(e)) from e

    def close(self, code: int = 1000, reason: str = "") -> None:
        if self._connection is None:
            return

        try:
            self._connection.close(code, reason)
        except OSError as e:
            logging.debug(f"Error while closing connection: {e}")
        finally:
            self._connection = None

    def _get_connection(self) -> ClientConnection:
        if self._connection is None:
            raise TransportError("Transport is not open")

        return self._connection

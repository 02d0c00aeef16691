import importlib
import unittest
from unittest.mock import MagicMock, patch

from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK, InvalidURI
from websockets.frames import Close

from svs_control import Transport, TransportClosed, TransportError, WebSocketTransport

# The package exports a class of the same name, patch the module itself
transport_module = importlib.import_module("svs_control.Transport")

URL = "ws://test.invalid:8888"


def closed_ok() -> ConnectionClosedOK:
    return ConnectionClosedOK(Close(1000, "bye"), Close(1000, "bye"), rcvd_then_sent=True)


def closed_error() -> ConnectionClosedError:
    return ConnectionClosedError(None, None)


class TestWebSocketTransport(unittest.TestCase):
    def setUp(self) -> None:
        self.connection = MagicMock()
        self.transport = WebSocketTransport(open_timeout=3)

    def open(self) -> None:
        with patch.object(transport_module, "connect", return_value=self.connection) as mock_connect:
            self.transport.open(URL)
        mock_connect.assert_called_once_with(URL, open_timeout=3)

    def test_satisfies_protocol(self) -> None:
        self.assertIsInstance(self.transport, Transport)

    def test_open_failures(self) -> None:
        for error in (InvalidURI("nope", "invalid"), ConnectionRefusedError("refused")):
            with patch.object(transport_module, "connect", side_effect=error):
                with self.assertRaises(TransportError):
                    self.transport.open(URL)

    def test_not_open(self) -> None:
        with self.assertRaises(TransportError):
            self.transport.send(b"data")
        with self.assertRaises(TransportError):
            self.transport.receive()

    def test_send_and_receive(self) -> None:
        self.open()
        self.connection.recv.return_value = b"\x01_"

        self.transport.send(b"\x02_")

        self.connection.send.assert_called_once_with(b"\x02_")
        self.assertEqual(self.transport.receive(), b"\x01_")

    def test_send_on_closed_connection(self) -> None:
        self.open()
        self.connection.send.side_effect = closed_error()

        with self.assertRaises(TransportClosed):
            self.transport.send(b"data")

    def test_send_os_error(self) -> None:
        self.open()
        self.connection.send.side_effect = BrokenPipeError("pipe")

        with self.assertRaises(TransportError) as ctx:
            self.transport.send(b"data")
        self.assertNotIsInstance(ctx.exception, TransportClosed)

    def test_receive_after_orderly_close(self) -> None:
        self.open()
        self.connection.recv.side_effect = closed_ok()

        with self.assertRaises(TransportClosed):
            self.transport.receive()

    def test_receive_after_abnormal_close(self) -> None:
        self.open()
        self.connection.recv.side_effect = closed_error()

        with self.assertRaises(TransportError) as ctx:
            self.transport.receive()
        self.assertNotIsInstance(ctx.exception, TransportClosed)

    def test_close(self) -> None:
        self.open()

        self.transport.close(1001, "going away")

        self.connection.close.assert_called_once_with(1001, "going away")
        with self.assertRaises(TransportError):
            self.transport.send(b"data")

    def test_close_swallows_os_errors(self) -> None:
        self.open()
        self.connection.close.side_effect = OSError("gone")

        self.transport.close()

        with self.assertRaises(TransportError):
            self.transport.receive()

    def test_close_without_connection(self) -> None:
        self.transport.close()

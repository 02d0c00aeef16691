"""
The session moves through its states as follows:

1. DISCONNECTED: Nothing going on. connect() opens a transport, sends the
  current settings and objectives and starts listening.
2. CONNECTING: Waiting for the server to accept. A failing transport or a
  failing connect message ends up in CONNECTION_FAILED.
3. CONNECTED: Frames are flowing, one StreamView per stream index. The server
  may suggest new settings at any time.
4. DISCONNECTING: disconnect() has been called, waiting for the server to
  confirm. If it does not within the grace period, the transport is closed
  anyway.
5. CONNECTION_FAILED: Stays like this until reset_error() is called, there is
  no automatic reconnect.

Losing the transport while receiving leads to DISCONNECTED, or to
CONNECTION_FAILED if the session was still CONNECTING.

Every change to settings, streams, state and the metrics engine happens while
holding the session lock, no matter if it was triggered by the receive thread
or by the owner of the session.
"""
from __future__ import annotations
from collections import defaultdict
import logging
import threading
from typing import Callable, Dict, List, Optional, Sequence

from svs_metrics import MetricsBatcher, MetricsEngine, ResourceSampler
from svs_model import Metrics, ServiceLevelObjectives, StreamSettings

from .message import (
    DecodeError,
    InConnect,
    InDisconnect,
    InError,
    InFrame,
    InMessage,
    InSuggestSettings,
    OutConnect,
    OutDisconnect,
    OutMessage,
    OutMetrics,
    OutUpdateSettings,
    OutUpdateSlos,
)
from .State import State
from .StreamView import DisplaySink, StreamView
from .Transmitter import ErrorHandler, Transmitter
from .Transport import Transport, TransportError, WebSocketTransport


class Session:
    DISCONNECT_TIMEOUT = 5.0

    def __init__(
        self,
        url: str,
        stream_settings: StreamSettings,
        slos: ServiceLevelObjectives,
        sampler: ResourceSampler,
        transport_factory: Callable[[], Transport] = WebSocketTransport,
        display_sink: Optional[DisplaySink] = None,
        batch_size: int = 32,
        metrics_window: float = 1.0,
        disconnect_timeout: float = DISCONNECT_TIMEOUT
    ) -> None:
        self.url = url
        self.stream_settings = stream_settings
        self.slos = slos
        self.display_sink = display_sink
        self.disconnect_timeout = disconnect_timeout

        self.state = State.DISCONNECTED
        self.state_handlers: Dict[State, List[Callable[[], None]]] = defaultdict(list)
        self.streams: Dict[int, StreamView] = {}

        self._lock = threading.RLock()
        self._transport_factory = transport_factory
        self._transport: Optional[Transport] = None
        self._receiver: Optional[threading.Thread] = None
        self._disconnect_timer: Optional[threading.Timer] = None

        self.transmitter = Transmitter(lambda: self._transport)
        self.batcher = MetricsBatcher(self._send_metrics, batch_size, metrics_window)
        self.metrics = MetricsEngine(sampler, self.batcher.add)
        self.metrics.set_settings(stream_settings)

    @property
    def transport(self) -> Optional[Transport]:
        return self._transport

    def start(self) -> None:
        """Start the send and metrics threads."""
        self.transmitter.start()
        self.batcher.start()

    def stop(self) -> None:
        with self._lock:
            transport = self._transport

        if transport is not None:
            self._cancel_transport(transport)

        if self._disconnect_timer is not None:
            self._disconnect_timer.cancel()

        self.batcher.stop()
        self.transmitter.stop()

    def on(self, state: State, handler: Callable[[], None]) -> None:
        self.state_handlers[state].append(handler)

    def handle_state_change(self, new_state: State) -> None:
        logging.debug(f"State changed from '{self.state.name}' to '{new_state.name}'")
        self.state = new_state

        for fn in self.state_handlers[new_state]:
            fn()

    def connect(self) -> None:
        with self._lock:
            if self.state != State.DISCONNECTED:
                return

            self.handle_state_change(State.CONNECTING)

            transport = self._transport_factory()
            self._transport = transport

        self._receiver = threading.Thread(
            target=self._listen,
            args=(transport,),
            daemon=True
        )
        self._receiver.start()

    def disconnect(self) -> None:
        with self._lock:
            if self.state != State.CONNECTED:
                return

            transport = self._transport
            if transport is None:
                logging.warning("No transport found to disconnect")
                self.handle_state_change(State.DISCONNECTED)
                return

            self.handle_state_change(State.DISCONNECTING)

        self._send(OutDisconnect())

        # Force close if the server does not confirm in time
        self._disconnect_timer = threading.Timer(
            self.disconnect_timeout,
            self._cancel_transport,
            args=(transport,)
        )
        self._disconnect_timer.daemon = True
        self._disconnect_timer.start()

    def reset_error(self) -> None:
        with self._lock:
            if self.state == State.CONNECTION_FAILED:
                self.handle_state_change(State.DISCONNECTED)

    def notify_stream_sizes_changed(self, sizes: Sequence[float]) -> None:
        with self._lock:
            self.metrics.set_stream_sizes(sizes)

    def update_settings(
        self,
        number_of_streams: int,
        fps: int,
        resolution: int
    ) -> Optional[StreamSettings]:
        """Change settings locally, None if nothing changed."""
        with self._lock:
            current = self.stream_settings
            if (
                current.number_of_streams == number_of_streams and
                current.fps == fps and
                current.resolution == resolution
            ):
                return None

            settings = StreamSettings.with_id(number_of_streams, fps, resolution)
            self._apply_settings(settings)

        self._send(OutUpdateSettings(settings))

        return settings

    def update_slos(self, slos: ServiceLevelObjectives) -> None:
        with self._lock:
            self.slos = slos

        self._send(OutUpdateSlos(slos))

    def handle_message(self, message: InMessage) -> None:
        match message:
            case InConnect():
                self._handle_connect(message)
            case InDisconnect():
                self._handle_disconnect(message)
            case InError():
                self._handle_error(message)
            case InFrame():
                self._handle_frame(message)
            case InSuggestSettings():
                self._handle_suggest_settings(message)
            case _:
                logging.warning(f"Unhandled message: {message}")

    def _listen(self, transport: Transport) -> None:
        try:
            transport.open(self.url)
        except TransportError as e:
            logging.error(f"Failed to open transport: {e}")
            self._cancel_transport(transport, failed=True)
            return

        # Cancelled while opening
        if transport is not self._transport:
            try:
                transport.close()
            except TransportError as e:
                logging.debug(f"Error while closing transport: {e}")
            return

        with self._lock:
            connect = OutConnect(self.stream_settings, self.slos)

        self._send(
            connect,
            on_error=lambda e: self._cancel_transport(transport, failed=True)
        )

        self.receive_loop(transport)

    def receive_loop(self, transport: Transport) -> None:
        while True:
            try:
                data = transport.receive()
            except TransportError as e:
                with self._lock:
                    failed = self.state == State.CONNECTING

                if transport is self._transport:
                    logging.error(f"Transport failed while receiving: {e}")

                self._cancel_transport(transport, failed=failed)
                return

            if not isinstance(data, bytes):
                logging.warning(f"Unsupported text message: {data!r}")
                continue

            try:
                message = InMessage.from_bytes(data)
            except DecodeError as e:
                logging.warning(f"Failed to decode an inbound message: {e}")
                continue

            try:
                self.handle_message(message)
            except Exception as e:
                logging.error(f"Error handling {message.type}: {e}", exc_info=True)

    def _handle_connect(self, message: InConnect) -> None:
        with self._lock:
            if self.state != State.CONNECTING:
                logging.warning(f"Unexpected state for connect: {self.state.name}")
                return

            self.streams = {
                stream: StreamView(stream, self.display_sink)
                for stream in range(self.stream_settings.number_of_streams)
            }
            self.handle_state_change(State.CONNECTED)

    def _handle_disconnect(self, message: InDisconnect) -> None:
        with self._lock:
            if self.state not in (State.CONNECTED, State.DISCONNECTING):
                logging.warning(f"Unexpected state for disconnect: {self.state.name}")
                return

            transport = self._transport

        if transport is not None:
            self._cancel_transport(transport)

    def _handle_error(self, message: InError) -> None:
        logging.error(f"Server error: code={message.code.name}, message={message.message}")

    def _handle_frame(self, message: InFrame) -> None:
        with self._lock:
            stream = self.streams.get(message.stream)
            if stream is None:
                return

            self.metrics.add_frame(message.stream, message.setting_id, len(message.frame))

        stream.update(message.frame)

    def _handle_suggest_settings(self, message: InSuggestSettings) -> None:
        suggested = message.settings
        if suggested is None:
            return

        with self._lock:
            if suggested.equal_without_id(self.stream_settings):
                return

            settings = suggested.copy_with_id()
            self._apply_settings(settings)

        logging.info(f"Accepted suggested settings: {settings}")
        self._send(OutUpdateSettings(settings))

    def _apply_settings(self, settings: StreamSettings) -> None:
        previous = self.stream_settings.number_of_streams
        current = settings.number_of_streams

        # Streams only exist once the server accepted the session
        if self.streams:
            for stream in range(current, previous):
                self.streams.pop(stream, None)

            for stream in range(previous, current):
                self.streams[stream] = StreamView(stream, self.display_sink)

        self.stream_settings = settings
        self.metrics.set_settings(settings)

    def _send_metrics(self, batch: List[Metrics]) -> None:
        self._send(OutMetrics(tuple(batch)))

    def _send(self, message: OutMessage, on_error: Optional[ErrorHandler] = None) -> None:
        transport = self._transport
        if transport is None:
            logging.debug(f"Not sending {message.type}, no transport")
            return

        self.transmitter.add(transport, message, on_error)

    def _cancel_transport(
        self,
        transport: Transport,
        failed: bool = False,
        code: int = 1000
    ) -> None:
        with self._lock:
            if transport is not self._transport:
                return

            self._transport = None
            self.streams = {}
            self.handle_state_change(
                State.CONNECTION_FAILED if failed else State.DISCONNECTED
            )

        try:
            transport.close(code)
        except TransportError as e:
            logging.debug(f"Error while closing transport: {e}")

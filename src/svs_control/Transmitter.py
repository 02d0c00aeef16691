"""
Send messages that are being added to the queue.

Sending happens on a thread of its own so nobody has to wait for the network.
Every queued message remembers the transport it was meant for, if that
transport is no longer the active one by the time the message is up, the
message is dropped.

tx = Transmitter(lambda: session.transport)
tx.start()
tx.add(transport, message)
...
tx.stop()
"""
import logging
from queue import Empty, Queue
import threading
from typing import Callable, NamedTuple, Optional

from .message import OutMessage
from .Transport import Transport, TransportError

ErrorHandler = Callable[[TransportError], None]


class Outgoing(NamedTuple):
    transport: Transport
    message: OutMessage
    on_error: Optional[ErrorHandler]


class Transmitter(threading.Thread):
    def __init__(self, current_transport: Callable[[], Optional[Transport]]) -> None:
        super().__init__(daemon=True)

        self.current_transport = current_transport
        self.queue: Queue[Outgoing] = Queue()

        self._running = threading.Event()

    def add(
        self,
        transport: Transport,
        message: OutMessage,
        on_error: Optional[ErrorHandler] = None
    ) -> None:
        self.queue.put(Outgoing(transport, message, on_error))

    def send_pending(self) -> None:
        """Send everything that is queued up in the calling thread."""
        while True:
            try:
                outgoing = self.queue.get_nowait()
            except Empty:
                return

            self._process(outgoing)
            self.queue.task_done()

    def run(self) -> None:
        self._running.set()
        while self._running.is_set():
            try:
                outgoing = self.queue.get(timeout=1)
            except Empty:
                continue

            self._process(outgoing)
            self.queue.task_done()

    def _process(self, outgoing: Outgoing) -> None:
        transport, message, on_error = outgoing
        if transport is not self.current_transport():
            logging.debug(f"Dropping {message.type}, transport is gone")
            return

        try:
            transport.send(message.to_bytes())
        except TransportError as e:
            logging.warning(f"Failed to send a message: error={e}, message={message.type}")
            if on_error:
                on_error(e)
        except Exception as e:
            logging.error(f"Unexpected transmit error: {e}", exc_info=True)

    def is_running(self) -> bool:
        return self._running.is_set()

    def stop(self) -> None:
        if self._running.is_set():
            self._running.clear()
            self.join()

from enum import IntEnum


class State(IntEnum):
    """Connection lifecycle, ordered so UIs can gate on ranges of states."""
    DISCONNECTED = 0
    CONNECTING = 1
    CONNECTION_FAILED = 2
    CONNECTED = 3
    DISCONNECTING = 4

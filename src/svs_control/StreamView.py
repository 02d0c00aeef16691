from typing import Callable, Optional

DisplaySink = Callable[[int, bytes], None]


class StreamView:
    """Display state of a single stream, forwards frames to the display sink."""

    def __init__(self, stream: int, sink: Optional[DisplaySink] = None) -> None:
        self.stream = stream
        self.sink = sink

        self.frame: Optional[bytes] = None
        self.frame_count = 0

    def update(self, frame: bytes) -> None:
        self.frame = frame
        self.frame_count += 1

        if self.sink:
            self.sink(self.stream, frame)

    def __repr__(self) -> str:
        return f"StreamView(stream={self.stream}, frames={self.frame_count})"

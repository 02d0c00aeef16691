"""
Stream quality settings negotiated with the server.

Settings are never mutated. Whenever the content changes a new instance is
created with a fresh id, the id is what frames and metrics are tagged with so
that data belonging to an older configuration can be told apart.
"""
from __future__ import annotations
from dataclasses import dataclass
import itertools
import threading
from typing import Any, Dict, Optional

# Frames address streams with a single byte
MAX_STREAMS = 256

_id_counter = itertools.count(1)
_id_lock = threading.Lock()


def next_id() -> int:
    """Process wide, strictly increasing settings id."""
    with _id_lock:
        return next(_id_counter)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class StreamSettings:
    id: int
    number_of_streams: int
    fps: int
    resolution: int

    @classmethod
    def with_id(
        cls,
        number_of_streams: int,
        fps: int,
        resolution: int
    ) -> StreamSettings:
        return cls(next_id(), number_of_streams, fps, resolution)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional[StreamSettings]:
        """Parse wire settings, keeping the id they were sent with."""
        try:
            values = (data["id"], data["n_streams"], data["fps"], data["resolution"])
        except (KeyError, TypeError):
            return None

        if not all(_is_int(value) for value in values):
            return None

        if not 1 <= values[1] <= MAX_STREAMS:
            return None

        return cls(*values)

    def copy_with_id(self) -> StreamSettings:
        return StreamSettings.with_id(
            self.number_of_streams,
            self.fps,
            self.resolution
        )

    def equal_without_id(self, other: StreamSettings) -> bool:
        return (
            self.number_of_streams == other.number_of_streams and
            self.fps == other.fps and
            self.resolution == other.resolution
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "id": self.id,
            "n_streams": self.number_of_streams,
            "fps": self.fps,
            "resolution": self.resolution,
        }

from dataclasses import dataclass
from typing import Tuple

from svs_model import Metrics

from .Message import OutMessage, OutMessageType, encode_json


@dataclass(frozen=True)
class OutMetrics(OutMessage):
    """A batch of window-reduced metrics."""
    TYPE = OutMessageType.METRICS

    metrics: Tuple[Metrics, ...]

    def encode_content(self) -> bytes:
        return encode_json({
            "metrics": [m.to_dict() for m in self.metrics],
        })

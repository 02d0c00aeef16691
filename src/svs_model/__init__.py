from .StreamSettings import MAX_STREAMS, StreamSettings, next_id
from .ServiceLevelObjectives import ServiceLevelObjectives
from .dataclasses import (
    ThermalState,
    Metrics,
    StreamStatistic,
)

__all__ = [
    "StreamSettings",
    "next_id",
    "MAX_STREAMS",
    "ServiceLevelObjectives",
    "ThermalState",
    "Metrics",
    "StreamStatistic",
]

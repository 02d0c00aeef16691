"""Metric value types with serialization support."""
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict


class ThermalState(IntEnum):
    """Device thermal pressure, ordered by severity."""
    NOMINAL = 0
    FAIR = 1
    SERIOUS = 2
    CRITICAL = 3


@dataclass(frozen=True)
class StreamStatistic:
    """Arrival of a single frame on one stream."""
    timestamp: float
    frame_size: int


@dataclass(frozen=True)
class Metrics:
    """One aligned metrics sample, or the reduction of several."""
    setting_id: int
    cpu_usage: float
    memory_usage: float
    network_usage: float
    average_actual_fps: float
    average_render_scale_factor: float
    thermal_state: ThermalState

    def to_dict(self) -> Dict[str, Any]:
        return {
            "setting_id": self.setting_id,
            "cpu_usage": self.cpu_usage,
            "memory_usage": self.memory_usage,
            "network_usage": self.network_usage,
            "avg_actual_fps": self.average_actual_fps,
            "avg_render_scale_factor": self.average_render_scale_factor,
            "thermal_state": int(self.thermal_state),
        }

from dataclasses import dataclass
from typing import Any, Dict

from .dataclasses import ThermalState


@dataclass(frozen=True)
class ServiceLevelObjectives:
    """Bounds the server uses when deciding on settings suggestions."""
    max_network_usage: int
    min_average_fps: float
    min_streams: int
    max_average_render_scale_factor: float
    max_thermal_state: ThermalState

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_network_usage": self.max_network_usage,
            "min_avg_fps": self.min_average_fps,
            "min_streams": self.min_streams,
            "max_avg_render_scale_factor": self.max_average_render_scale_factor,
            "max_thermal_state": int(self.max_thermal_state),
        }

from typing import Dict, Any
from pathlib import Path
import copy

import tomllib
import tomli_w

from svs_model import ServiceLevelObjectives, StreamSettings, ThermalState


class Settings:
    DEFAULTS: Dict[str, Any] = {
        "backend_url": "ws://0.0.0.0:8888",
        "resources": {
            "max_cpu_usage": 2.0,
            "max_memory_usage": 200 * 1024 * 1024,
        },
        "stream": {
            "n_streams": 5,
            "fps": 15,
            "resolution": 720,
        },
        "slos": {
            "max_network_usage": 10 * 1024 * 1024,
            "min_avg_fps": 15.0,
            "min_streams": 5,
            "max_avg_render_scale_factor": 1.6,
            "max_thermal_state": "fair",
        },
        "metrics": {
            # 32 for active inference, 1 for reinforcement learning
            "batch_size": 32,
            "window": 1.0,
        },
        "session": {
            "disconnect_timeout": 5.0,
        },
        "log": "ERROR",
    }

    def __init__(self, path: str) -> None:
        self.path = Path(path)
        self.settings: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        if self.path.exists():
            with self.path.open("rb") as file:
                loaded = tomllib.load(file)
                self.settings = self._merge(copy.deepcopy(self.DEFAULTS), loaded)
        else:
            self.settings = copy.deepcopy(self.DEFAULTS)

    def save(self) -> None:
        with self.path.open("wb") as f:
            f.write(tomli_w.dumps(self.settings).encode("utf-8"))

    def get(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.settings[key] = value

    def delete(self, key: str) -> None:
        if key in self.settings:
            del self.settings[key]

    def stream_settings(self) -> StreamSettings:
        """Initial stream settings, every call hands out a new id."""
        stream = self.settings["stream"]
        return StreamSettings.with_id(
            int(stream["n_streams"]),
            int(stream["fps"]),
            int(stream["resolution"]),
        )

    def slos(self) -> ServiceLevelObjectives:
        slos = self.settings["slos"]
        return ServiceLevelObjectives(
            max_network_usage=int(slos["max_network_usage"]),
            min_average_fps=float(slos["min_avg_fps"]),
            min_streams=int(slos["min_streams"]),
            max_average_render_scale_factor=float(slos["max_avg_render_scale_factor"]),
            max_thermal_state=self._thermal_state(slos["max_thermal_state"]),
        )

    def _thermal_state(self, name: str) -> ThermalState:
        try:
            return ThermalState[str(name).upper()]
        except KeyError:
            raise ValueError(f"Invalid thermal state in config: {name}")

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        for key, value in override.items():
            if (
                key in base
                and isinstance(base[key], dict)
                and isinstance(value, dict)
            ):
                base[key] = self._merge(base[key], value)
            else:
                base[key] = value
        return base

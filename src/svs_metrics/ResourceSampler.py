"""Local resource sampling."""
import logging
from typing import Optional, Protocol, runtime_checkable

import psutil

from svs_model import ThermalState


@runtime_checkable
class ResourceSampler(Protocol):
    """Protocol for resource samplers.

    Every call returns a single fresh sample. CPU and memory are normalized
    against the configured ceilings, so 1.0 means "at the preferred maximum".
    """

    def sample_cpu(self) -> float:
        ...

    def sample_memory(self) -> float:
        ...

    def sample_thermal_state(self) -> ThermalState:
        ...


class PsutilSampler:
    # Degrees below a sensor's "high" mark that already count as fair
    FAIR_MARGIN = 10.0

    def __init__(
        self,
        max_cpu_usage: float = 2.0,
        max_memory_usage: int = 200 * 1024 * 1024,
        process: Optional[psutil.Process] = None
    ) -> None:
        self.max_cpu_usage = max_cpu_usage
        self.max_memory_usage = max_memory_usage

        self._process = process or psutil.Process()
        # Prime the counter, the first cpu_percent() call always returns 0.0
        self._process.cpu_percent(interval=None)

    def sample_cpu(self) -> float:
        cores = self._process.cpu_percent(interval=None) / 100

        return cores / self.max_cpu_usage

    def sample_memory(self) -> float:
        try:
            rss = self._process.memory_info().rss
        except psutil.Error as e:
            logging.warning(f"Failed reading memory usage: {e}")
            return 0.0

        return rss / self.max_memory_usage

    def sample_thermal_state(self) -> ThermalState:
        # Not available on every platform
        sensors_temperatures = getattr(psutil, "sensors_temperatures", None)
        if sensors_temperatures is None:
            return ThermalState.NOMINAL

        try:
            sensors = sensors_temperatures()
        except (OSError, RuntimeError) as e:
            logging.debug(f"Failed reading temperature sensors: {e}")
            return ThermalState.NOMINAL

        state = ThermalState.NOMINAL
        for entries in sensors.values():
            for entry in entries:
                state = max(state, self._classify(entry.current, entry.high, entry.critical))

        return state

    def _classify(
        self,
        current: float,
        high: Optional[float],
        critical: Optional[float]
    ) -> ThermalState:
        if critical and current >= critical:
            return ThermalState.CRITICAL

        if high:
            if current >= high:
                return ThermalState.SERIOUS
            if current >= high - self.FAIR_MARGIN:
                return ThermalState.FAIR

        return ThermalState.NOMINAL

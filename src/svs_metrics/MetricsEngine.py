"""
Aligns frame arrivals of all streams into one metrics record per timestep.

Every stream buffers the arrival time and size of its frames. A timestep is
the n-th frame of every stream, so a record for timestep n can only be
computed once the slowest stream has delivered its n-th frame. Resource usage
(CPU, memory, thermal state) is sampled once per timestep, at the moment the
first stream reaches it.

The head of every buffer is the baseline of the last consumed timestep, it is
kept around so the next timestep has something to compute the frame interval
against. This means a pass needs two entries per stream to get going and one
entry per stream for every following timestep.

Settings changes that alter the stream content invalidate everything that is
buffered, a new id with the same content does not.

NOTE: Not thread safe, the owner has to serialize calls.
"""
from collections import defaultdict, deque
import logging
import math
from statistics import fmean
import time
from typing import Callable, Deque, Dict, List, Optional, Sequence

from svs_model import Metrics, StreamSettings, StreamStatistic, ThermalState

from .ResourceSampler import ResourceSampler


class MetricsEngine:
    def __init__(
        self,
        sampler: ResourceSampler,
        on_metrics: Callable[[Metrics], None],
        clock: Callable[[], float] = time.time
    ) -> None:
        self._sampler = sampler
        self._on_metrics = on_metrics
        self._clock = clock

        self.settings: Optional[StreamSettings] = None
        self.average_render_scale_factor: Optional[float] = None

        self._stream_statistics: Dict[int, Deque[StreamStatistic]] = defaultdict(deque)

        # Number of timesteps sampled, relative to the current buffer heads
        self.latest_time_step = 0
        self._cpu_usages: Deque[float] = deque()
        self._memory_usages: Deque[float] = deque()
        self._thermal_states: Deque[ThermalState] = deque()

    def set_settings(self, settings: StreamSettings) -> None:
        # Flush whatever is computable with the old settings first
        self._compute_metrics()

        if self.settings is not None and not self.settings.equal_without_id(settings):
            self._clear()

        streams_differ = (
            self.settings is None or
            settings.number_of_streams != self.settings.number_of_streams or
            settings.resolution != self.settings.resolution
        )

        self.settings = settings

        if streams_differ:
            self.average_render_scale_factor = None

    def set_stream_sizes(self, sizes: Sequence[float]) -> None:
        """Rendered edge length of every stream, in the order of the indices."""
        if self.settings is None:
            logging.debug("Ignoring stream sizes, no settings yet")
            return

        if len(sizes) != self.settings.number_of_streams or not sizes:
            logging.debug(
                f"Ignoring stream sizes: got {len(sizes)}, "
                f"expected {self.settings.number_of_streams}"
            )
            return

        resolution = float(self.settings.resolution)
        factors = [
            math.sqrt((size * size) / (resolution * resolution))
            for size in sizes
        ]
        self.average_render_scale_factor = fmean(factors)

        self._compute_metrics()

    def add_frame(
        self,
        stream: int,
        setting_id: int,
        frame_size: int,
        timestamp: Optional[float] = None
    ) -> None:
        settings = self.settings
        if settings is None or settings.id != setting_id:
            return

        if not 0 <= stream < settings.number_of_streams:
            logging.debug(f"Ignoring frame for unknown stream {stream}")
            return

        if timestamp is None:
            timestamp = self._clock()

        statistics = self._stream_statistics[stream]
        statistics.append(StreamStatistic(timestamp, frame_size))

        # First stream to reach a new timestep samples the resources for it
        time_step = len(statistics)
        if self.latest_time_step < time_step:
            self.latest_time_step = time_step
            self._cpu_usages.append(self._sampler.sample_cpu())
            self._memory_usages.append(self._sampler.sample_memory())
            self._thermal_states.append(self._sampler.sample_thermal_state())

        self._compute_metrics()

    def buffered(self, stream: int) -> int:
        return len(self._stream_statistics.get(stream, ()))

    def _clear(self) -> None:
        self.latest_time_step = 0
        self._stream_statistics.clear()
        self._cpu_usages.clear()
        self._memory_usages.clear()
        self._thermal_states.clear()

    def _compute_metrics(self) -> None:
        settings = self.settings
        average_render_scale_factor = self.average_render_scale_factor
        if (
            settings is None or
            average_render_scale_factor is None or
            settings.number_of_streams < 1
        ):
            return

        streams = range(settings.number_of_streams)
        buffers = [self._stream_statistics[stream] for stream in streams]

        time_step = 0
        previous: Optional[List[StreamStatistic]] = None

        while True:
            required = 2 if time_step == 0 else 1
            if any(len(buffer) < required for buffer in buffers):
                break

            current = [buffer[0] for buffer in buffers]

            if previous is not None:
                all_fps = [
                    self._fps(before, after)
                    for before, after in zip(previous, current)
                ]
                network_usage = sum(
                    fps * statistic.frame_size
                    for fps, statistic in zip(all_fps, current)
                )

                self._on_metrics(Metrics(
                    setting_id=settings.id,
                    cpu_usage=self._cpu_usages[0],
                    memory_usage=self._memory_usages[0],
                    network_usage=network_usage,
                    average_actual_fps=fmean(all_fps),
                    average_render_scale_factor=average_render_scale_factor,
                    thermal_state=self._thermal_states[0],
                ))

            previous = current

            # Keep the baseline if any stream has nothing newer yet
            if any(len(buffer) == 1 for buffer in buffers):
                break

            for buffer in buffers:
                buffer.popleft()

            self._cpu_usages.popleft()
            self._memory_usages.popleft()
            self._thermal_states.popleft()

            time_step += 1

        self.latest_time_step -= time_step

    @staticmethod
    def _fps(before: StreamStatistic, after: StreamStatistic) -> float:
        interval = after.timestamp - before.timestamp
        if interval <= 0:
            return 0.0

        return 1 / interval

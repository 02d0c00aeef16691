"""
Collect metrics records in fixed time windows and hand them off in batches.

Records of one window are split into runs of the same setting id and every run
is reduced to a single record. This way a settings change never gets averaged
into the metrics of the previous settings. Windows without records are skipped.
Once batch_size windows have been reduced, their records are passed to the
batch handler as one flat batch.

batcher = MetricsBatcher(send_batch)
batcher.start()
batcher.add(metrics)
...
batcher.stop()
"""
import logging
import queue
import threading
from statistics import fmean
from typing import Callable, List

from svs_model import Metrics


def split_by_setting(records: List[Metrics]) -> List[List[Metrics]]:
    """Split into contiguous runs sharing the same setting id."""
    runs: List[List[Metrics]] = []
    for record in records:
        if runs and runs[-1][-1].setting_id == record.setting_id:
            runs[-1].append(record)
        else:
            runs.append([record])

    return runs


def reduce_run(run: List[Metrics]) -> Metrics:
    return Metrics(
        setting_id=run[-1].setting_id,
        cpu_usage=fmean(m.cpu_usage for m in run),
        memory_usage=fmean(m.memory_usage for m in run),
        network_usage=fmean(m.network_usage for m in run),
        average_actual_fps=fmean(m.average_actual_fps for m in run),
        average_render_scale_factor=fmean(m.average_render_scale_factor for m in run),
        thermal_state=max(m.thermal_state for m in run),
    )


def reduce_window(records: List[Metrics]) -> List[Metrics]:
    return [reduce_run(run) for run in split_by_setting(records)]


class MetricsBatcher(threading.Thread):
    def __init__(
        self,
        on_batch: Callable[[List[Metrics]], None],
        batch_size: int = 32,
        window: float = 1.0,
        max_queued: int = 1024
    ) -> None:
        super().__init__(daemon=True)

        self.on_batch = on_batch
        self.batch_size = max(1, batch_size)
        self.window = window

        # Reduced records, one list per window
        self.pending: List[List[Metrics]] = []

        self._queue: queue.Queue[Metrics] = queue.Queue(maxsize=max_queued)
        self._stop_event = threading.Event()

    def add(self, metrics: Metrics) -> None:
        try:
            self._queue.put_nowait(metrics)
        except queue.Full:
            logging.warning("Metrics queue full, dropping record")

    def collect_window(self) -> None:
        """Reduce everything that arrived since the last window."""
        records: List[Metrics] = []
        while True:
            try:
                records.append(self._queue.get_nowait())
            except queue.Empty:
                break

        if not records:
            return

        self.pending.append(reduce_window(records))

        if len(self.pending) >= self.batch_size:
            batch = [metrics for window in self.pending for metrics in window]
            self.pending = []

            logging.debug(f"Flushing batch of {len(batch)} metrics")
            try:
                self.on_batch(batch)
            except Exception as e:
                logging.error(f"Error in batch handler: {e}", exc_info=True)

    def run(self) -> None:
        while not self._stop_event.wait(self.window):
            self.collect_window()

    def is_running(self) -> bool:
        return self.is_alive() and not self._stop_event.is_set()

    def stop(self) -> None:
        self._stop_event.set()
        if self.is_alive():
            self.join()

from .MetricsEngine import MetricsEngine
from .MetricsBatcher import (
    MetricsBatcher,
    reduce_run,
    reduce_window,
    split_by_setting,
)
from .ResourceSampler import ResourceSampler, PsutilSampler

__all__ = [
    "MetricsEngine",
    "MetricsBatcher",
    "reduce_run",
    "reduce_window",
    "split_by_setting",
    "ResourceSampler",
    "PsutilSampler",
]

"""
Rolling history of evaluations and descriptive statistics over it.

The engine is stateless; callers keep a bounded, first-in-first-out record
of the snapshots they have computed and summarise it for reports.
"""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Deque, Iterator, Optional, Sequence

import numpy as np

from .config import HISTORY_CAPACITY, ParameterVector
from .engine import EquilibriumSnapshot
from .exceptions import InsufficientDataError

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    timestamp: datetime
    params: ParameterVector
    snapshot: EquilibriumSnapshot


class SnapshotHistory:
    """Bounded FIFO of evaluations; the oldest entry is evicted first.

    Not thread-safe: callers sharing one history across threads must lock
    around it themselves.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._entries: Deque[HistoryEntry] = deque(maxlen=capacity)

    def append(
        self,
        params: ParameterVector,
        snapshot: EquilibriumSnapshot,
        timestamp: Optional[datetime] = None,
    ) -> HistoryEntry:
        entry = HistoryEntry(timestamp or datetime.now(), params, snapshot)
        if len(self._entries) == self.capacity:
            _LOG.info("history full (%d); evicting entry from %s",
                      self.capacity, self._entries[0].timestamp.isoformat())
        self._entries.append(entry)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    @property
    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[-1] if self._entries else None

    def series(self, metric: str) -> np.ndarray:
        """One snapshot attribute across the history, oldest first."""
        return np.array([getattr(h.snapshot, metric) for h in self._entries], dtype=float)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]


@dataclass(frozen=True)
class SeriesStats:
    mean: float
    variance: float  # population variance
    std_dev: float
    min: float
    max: float


def calculate_stats(values: Sequence[float]) -> SeriesStats:
    data = np.asarray(values, dtype=float)
    if data.size == 0:
        raise InsufficientDataError("cannot summarise an empty series")
    variance = float(np.var(data))
    return SeriesStats(
        mean=float(np.mean(data)),
        variance=variance,
        std_dev=float(np.sqrt(variance)),
        min=float(np.min(data)),
        max=float(np.max(data)),
    )


def calculate_trend(values: Sequence[float], periods: int = 5) -> float:
    """Percent change of the last ``periods`` points over the ``periods`` before.

    Returns 0.0 with fewer than ``2 * periods`` points, or when the earlier
    window averages to zero.
    """
    data = np.asarray(values, dtype=float)
    if periods < 1 or data.size < 2 * periods:
        return 0.0
    recent_avg = float(np.mean(data[-periods:]))
    earlier_avg = float(np.mean(data[-2 * periods:-periods]))
    if earlier_avg == 0:
        return 0.0
    return (recent_avg - earlier_avg) / earlier_avg * 100


@dataclass(frozen=True)
class HistoryAnalysis:
    profit: SeriesStats
    welfare: SeriesStats
    rider_utility: SeriesStats
    efficiency: SeriesStats
    gini: SeriesStats
    sustainability: SeriesStats
    profit_trend: float
    welfare_trend: float
    rider_utility_trend: float


def analyze_history(history: SnapshotHistory, periods: int = 5) -> Optional[HistoryAnalysis]:
    """Summary statistics for reporting; None when the history is empty."""
    if len(history) == 0:
        return None
    profits = history.series("platform_profit")
    welfare = history.series("social_welfare")
    rider_utility = history.series("rider_utility")
    return HistoryAnalysis(
        profit=calculate_stats(profits),
        welfare=calculate_stats(welfare),
        rider_utility=calculate_stats(rider_utility),
        efficiency=calculate_stats(history.series("market_efficiency")),
        gini=calculate_stats(history.series("gini_coefficient")),
        sustainability=calculate_stats(history.series("sustainability_index")),
        profit_trend=calculate_trend(profits, periods),
        welfare_trend=calculate_trend(welfare, periods),
        rider_utility_trend=calculate_trend(rider_utility, periods),
    )

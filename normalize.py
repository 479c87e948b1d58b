"""Bounded-history running statistics with z-score normalization."""

from collections import deque
from dataclasses import dataclass, field

import numpy as np

from config import Config


@dataclass(frozen=True)
class WindowConfig:
    """Window sizes for a StreamingStatistic, in samples."""

    history_window: int = field(default_factory=lambda: Config.HISTORY_WINDOW)
    moving_average_window: int = field(
        default_factory=lambda: Config.MOVING_AVERAGE_WINDOW)

    def __post_init__(self):
        if self.history_window < 1:
            raise ValueError("history_window must be at least 1")
        if self.moving_average_window < 2:
            raise ValueError("moving_average_window must be at least 2")


def mean(values) -> float | None:
    """Arithmetic mean, None for an empty sequence."""
    if len(values) == 0:
        return None
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def std_deviation(values, mean: float | None) -> float | None:
    """
    Population standard deviation of `values` around a precomputed `mean`
    (squared differences divided by N, not N - 1).
    """
    if mean is None or len(values) == 0:
        return None
    diff = np.asarray(values, dtype=np.float64) - mean
    with np.errstate(over="ignore", invalid="ignore"):
        return float(np.sqrt(np.mean(diff * diff)))


class StreamingStatistic:
    """
    Turns a live scalar stream into a z-score, calibrating itself from the
    first `history_window` accepted samples.

    Only finite values that differ from the previous accepted value are
    recorded. Mean and deviation are recomputed from the full history on
    every accepted value.
    """

    def __init__(self, windows: WindowConfig | None = None):
        self.windows = windows or WindowConfig()
        self._current = None
        self._min = None
        self._max = None
        self._mean = None
        self._deviation = None
        self._history = deque()
        self._ma_history = deque()

    # ── accessors ────────────────────────────────────────────────────────── #

    @property
    def current(self) -> float | None:
        return self._current

    @property
    def min(self) -> float | None:
        return self._min

    @property
    def max(self) -> float | None:
        return self._max

    @property
    def history(self) -> tuple:
        return tuple(self._history)

    @property
    def moving_average_history(self) -> tuple:
        return tuple(self._ma_history)

    def mean(self) -> float | None:
        return self._mean

    def deviation(self) -> float | None:
        return self._deviation

    # ── stream input ─────────────────────────────────────────────────────── #

    def observe(self, value: float) -> bool:
        """
        Record `value` if it is finite and a change from the current value.
        Returns True if accepted; a rejected value leaves all state untouched.
        """
        value = float(value)
        if not np.isfinite(value):
            return False
        if self._current is not None and value == self._current:
            return False

        self._current = value
        if self._max is None or value > self._max:
            self._max = value
        if self._min is None or value < self._min:
            self._min = value

        self._history.append(value)
        if len(self._history) > self.windows.history_window:
            self._history.popleft()
        self._mean = mean(self._history)
        self._deviation = std_deviation(self._history, self._mean)

        # evicts at >=, so a warm window holds moving_average_window - 1
        self._ma_history.append(value)
        if len(self._ma_history) >= self.windows.moving_average_window:
            self._ma_history.popleft()

        return True

    # ── derived values ───────────────────────────────────────────────────── #

    def moving_average(self) -> float | None:
        return mean(self._ma_history)

    def normalize(self, value: float | None) -> float | None:
        """
        z-score of `value` against the calibration history.

        None while no statistics exist. A zero deviation is not guarded:
        the result is then +/-inf or nan and callers must check it.
        """
        if value is None or self._mean is None or self._deviation is None:
            return None
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(np.float64(value - self._mean) / np.float64(self._deviation))

    def percent_complete(self) -> float:
        """Fraction of the calibration window filled, 0.0 to 1.0."""
        return len(self._history) / self.windows.history_window

    def is_calibrated(self) -> bool:
        return len(self._history) >= self.windows.history_window

    def percent(self) -> float | None:
        """Position of the current value between min and max, 0 to 100."""
        if self._current is None:
            return None
        with np.errstate(divide="ignore", invalid="ignore"):
            r = np.float64(self._current - self._min) * 100 / np.float64(self._max - self._min)
        return float(r) if np.isfinite(r) else 0.0

    def __repr__(self):
        return (f"StreamingStatistic(current={self._current}, mean={self._mean}, "
                f"deviation={self._deviation}, n={len(self._history)})")

"""Valence and arousal from four-channel Muse band powers."""

import numpy as np

from normalize import StreamingStatistic, WindowConfig

# Muse electrode index in every band array
TP9, AF7, AF8, TP10 = 0, 1, 2, 3


def _channels(values) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape != (4,):
        raise ValueError(f"Expected 4 channel values (TP9, AF7, AF8, TP10), got shape {arr.shape}")
    return arr


def front_asymmetry(alpha) -> np.float64:
    """e ** (alpha AF7 - alpha AF8). Higher values mean a more positive mood."""
    alpha = _channels(alpha)
    with np.errstate(over="ignore", invalid="ignore"):
        return np.exp(alpha[AF7] - alpha[AF8])


def valence(alpha, theta) -> float:
    """
    Positive/negative balance of emotion: front asymmetry divided by the
    mean frontal theta power.

    A zero or non-finite frontal theta gives inf or nan, which is returned
    as is.
    """
    theta = _channels(theta)
    front_theta = (theta[AF7] + theta[AF8]) / 2.0
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return float(front_asymmetry(alpha) / front_theta)


def arousal(alpha, theta) -> float:
    """Emotional intensity: e ** (posterior alpha - posterior theta)."""
    alpha = _channels(alpha)
    theta = _channels(theta)
    posterior_alpha = (alpha[TP9] + alpha[TP10]) / 2.0
    # TP9 + AF7 is the pairing the installation was tuned with
    posterior_theta = (theta[TP9] + theta[AF7]) / 2.0
    with np.errstate(over="ignore", invalid="ignore"):
        return float(np.exp(posterior_alpha - posterior_theta))


class AffectEngine:
    """
    Holds the latest band powers and one StreamingStatistic each for
    valence and arousal.

    Call `update()` with every band of a batch, then `sample()` once for
    that batch. Not thread-safe: feed it from a single consumer.
    """

    def __init__(self, windows: WindowConfig | None = None):
        windows = windows or WindowConfig()
        self.valence_statistic = StreamingStatistic(windows)
        self.arousal_statistic = StreamingStatistic(windows)
        self._alpha = np.zeros(4)  # 7.5-13 Hz
        self._beta = np.zeros(4)   # 13-30 Hz
        self._gamma = np.zeros(4)  # 30-44 Hz
        self._delta = np.zeros(4)  # 1-4 Hz
        self._theta = np.zeros(4)  # 4-8 Hz

    # Copies, so the display layer cannot alter engine state
    @property
    def alpha(self) -> np.ndarray:
        return self._alpha.copy()

    @property
    def beta(self) -> np.ndarray:
        return self._beta.copy()

    @property
    def gamma(self) -> np.ndarray:
        return self._gamma.copy()

    @property
    def delta(self) -> np.ndarray:
        return self._delta.copy()

    @property
    def theta(self) -> np.ndarray:
        return self._theta.copy()

    def update(self, alpha, beta, gamma, delta, theta):
        """Store all five band arrays verbatim."""
        self._alpha = _channels(alpha)
        self._beta = _channels(beta)
        self._gamma = _channels(gamma)
        self._delta = _channels(delta)
        self._theta = _channels(theta)

    def set_band(self, band: str, values):
        """Replace a single band array, e.g. when one OSC message arrives."""
        if band not in ("alpha", "beta", "gamma", "delta", "theta"):
            raise ValueError(f"Unknown band {band!r}")
        setattr(self, f"_{band}", _channels(values))

    def absolute_valence(self) -> float:
        return valence(self._alpha, self._theta)

    def absolute_arousal(self) -> float:
        return arousal(self._alpha, self._theta)

    def sample(self) -> tuple[float | None, float | None]:
        """
        Feed the current raw valence and arousal into their statistics and
        return the smoothed, normalized pair. None means still calibrating.
        """
        self.valence_statistic.observe(self.absolute_valence())
        self.arousal_statistic.observe(self.absolute_arousal())

        v = self.valence_statistic
        a = self.arousal_statistic
        return v.normalize(v.moving_average()), a.normalize(a.moving_average())

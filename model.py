"""Snapshot of the latest Muse values, driven one batch of messages per tick."""

from config import Config
from affect import AffectEngine
from logs import BandLogger
from muse import MuseMessage
from normalize import WindowConfig


class MuseModel:
    """
    Applies batches of MuseMessages to an AffectEngine.

    Band messages replace the stored band arrays; `sample()` runs once per
    batch that carried at least one band. Blink, jaw clench and headband
    off-forehead events start short countdowns that `count_down()` expires.
    """

    def __init__(self, logger: BandLogger | None = None, windows: WindowConfig | None = None):
        self.engine = AffectEngine(windows)
        self.logger = logger
        self.most_recent_message_time = 0.0
        self.accelerometer = (0.0, 0.0, 0.0)
        self.gyro = (0.0, 0.0, 0.0)
        self.horseshoe = (0.0, 0.0, 0.0, 0.0)
        self.battery = None
        self.blink_countdown = 0
        self.jaw_clench_countdown = 0
        self.touching_forehead_countdown = 0

    # ── artifact state ───────────────────────────────────────────────────── #

    def is_blink(self) -> bool:
        return self.blink_countdown > 0

    def is_jaw_clench(self) -> bool:
        return self.jaw_clench_countdown > 0

    def is_touching_forehead(self) -> bool:
        """True for a few ticks after the headband reported losing contact."""
        return self.touching_forehead_countdown > 0

    def count_down(self):
        """Called once per tick so temporary display states time out."""
        if self.blink_countdown > 0:
            self.blink_countdown -= 1
        if self.jaw_clench_countdown > 0:
            self.jaw_clench_countdown -= 1
        if self.touching_forehead_countdown > 0:
            self.touching_forehead_countdown -= 1

    # ── message handling ─────────────────────────────────────────────────── #

    def handle_message(self, message: MuseMessage) -> bool:
        """Update state from one message. Returns True if it was a band."""
        t, kind, values = message

        if message.is_band:
            self.engine.set_band(kind, values)
            if self.logger:
                self.logger.log_channels(kind, t, values)
            return True

        if kind == "eeg":
            if self.logger:
                self.logger.log_channels("eeg", t, values)
        elif kind == "acc":
            self.accelerometer = values
        elif kind == "gyro":
            self.gyro = values
            self._log_other(t, "Gyro, " + ", ".join(repr(v) for v in values))
        elif kind == "horseshoe":
            self.horseshoe = values
            self._log_other(t, "Horseshoe, " + ", ".join(repr(v) for v in values))
        elif kind == "batt":
            self.battery = values[0]
            self._log_other(t, f"Battery, {values[0]!r}")
        elif kind == "touching_forehead":
            if not values[0]:
                self.touching_forehead_countdown = Config.FOREHEAD_COUNTDOWN
            self._log_other(t, f"TouchingForehead, {int(values[0])}")
        elif kind == "blink":
            if values[0]:
                self.blink_countdown = Config.BLINK_COUNTDOWN
            self._log_other(t, f"Blink, {int(values[0])}")
        elif kind == "jaw_clench":
            if values[0]:
                self.jaw_clench_countdown = Config.CLENCH_COUNTDOWN
            self._log_other(t, f"Clench, {int(values[0])}")
        return False

    def _log_other(self, t: float, record: str):
        if self.logger:
            self.logger.log_other(t, record)

    def apply_batch(self, messages) -> tuple[float | None, float | None]:
        """
        Apply every message of one batch, then sample the engine once if any
        band changed. Returns (None, None) when no band arrived.
        """
        updated = False
        for message in messages:
            updated = self.handle_message(message) or updated
            self.most_recent_message_time = message.time

        if not updated:
            return None, None
        return self.engine.sample()

    def calibration_progress(self) -> float:
        """Fraction of the slower of the two calibration windows filled."""
        return min(self.engine.valence_statistic.percent_complete(),
                   self.engine.arousal_statistic.percent_complete())

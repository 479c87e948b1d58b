"""CSV logs of every band, raw EEG and other Muse message as it arrives."""

import csv
from pathlib import Path

from config import Config


class BandLogger:
    """
    One CSV file per band plus `eeg.csv` and `other.csv` under `log_dir`.
    Rows are `Time, TP9, AF7, AF8, TP10` prefixed with the band name in the
    header, e.g. `Alpha TP9`.
    """

    def __init__(self, log_dir: str | Path = Config.LOG_DIR):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._files = {}
        self._writers = {}

        self._open("eeg", ["Time", *Config.CHANNELS])
        for band in Config.BANDS:
            self._open(band, ["Time"] + [f"{band.capitalize()} {ch}" for ch in Config.CHANNELS])
        self._open("other", ["Time", "Record"])

    def _open(self, name: str, header: list[str]):
        f = (self.log_dir / f"{name}.csv").open("w", newline="")
        self._files[name] = f
        self._writers[name] = csv.writer(f)
        self._writers[name].writerow(header)

    def log_channels(self, name: str, time: float, values):
        """Append a four-channel row to `<name>.csv` (a band or "eeg")."""
        self._writers[name].writerow([repr(time), *(repr(float(v)) for v in values)])

    def log_other(self, time: float, record: str):
        self._writers["other"].writerow([repr(time), record])

    def flush_all(self):
        for f in self._files.values():
            f.flush()

    def close(self):
        for f in self._files.values():
            f.close()
        self._files.clear()
        self._writers.clear()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

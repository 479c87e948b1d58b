"""Acquisition threads: Mind Monitor OSC, BrainFlow live Muse **or** CSV playback."""

import csv
import logging
import threading
import time
from collections import deque
from pathlib import Path

import numpy as np
from brainflow.board_shim import BoardShim, BrainFlowInputParams
from brainflow.data_filter import DataFilter
from pythonosc import dispatcher, osc_server

from config import Config
from muse import MuseMessage, band_messages, parse_message

log = logging.getLogger(__name__)


# ────────────────────────── Shared infrastructure ────────────────────────── #

class MessageQueue:
    """
    Hand-off between producer threads and the single model tick.
    Oldest messages are dropped once `max_len` is reached.
    """

    def __init__(self, max_len: int = Config.QUEUE_MAXLEN):
        self.max_len = max_len
        self.buffer = deque(maxlen=max_len)
        self.lock = threading.Lock()

    def push(self, message: MuseMessage):
        with self.lock:
            self.buffer.append(message)

    def extend(self, messages):
        """Push a batch atomically so a tick never sees half of it."""
        with self.lock:
            self.buffer.extend(messages)

    def drain(self) -> list[MuseMessage]:
        """Return and remove everything queued, oldest first."""
        with self.lock:
            messages = list(self.buffer)
            self.buffer.clear()
        return messages

    def __len__(self):
        with self.lock:
            return len(self.buffer)


# ─────────────────────────── Mind Monitor (OSC) ───────────────────────────── #

class OscAcquisitionThread(threading.Thread):
    """
    Listens for Mind Monitor OSC packets on UDP and queues parsed messages.
    The socket is bound at construction so a busy port fails early.

    Band messages are held back until all five bands of a snapshot have
    arrived, then queued together. Datagrams are handled in arrival order
    on this thread.
    """

    def __init__(self, queue: MessageQueue, host: str = Config.OSC_HOST,
                 port: int = Config.OSC_PORT):
        super().__init__(daemon=True)
        self.queue = queue
        self._pending = {}
        disp = dispatcher.Dispatcher()
        disp.set_default_handler(self._on_message)
        try:
            self.server = osc_server.BlockingOSCUDPServer((host, port), disp)
        except OSError as e:
            raise OSError(
                f"Can not bind to {host}:{port} - is another copy of this app already running?"
            ) from e

    @property
    def address(self) -> tuple:
        return self.server.server_address

    def _on_message(self, address: str, *args):
        message = parse_message(address, *args)
        if message is None:
            return
        if not message.is_band:
            self.queue.push(message)
            return

        # a repeated band before the snapshot completes replaces the older one
        self._pending[message.kind] = message
        if len(self._pending) == len(Config.BANDS):
            self.queue.extend(self._pending[band] for band in Config.BANDS)
            self._pending.clear()

    def run(self):
        log.info("Listening for Muse OSC on %s:%s", *self.address)
        try:
            self.server.serve_forever()
        finally:
            self.server.server_close()

    def stop(self):
        if self.is_alive():
            self.server.shutdown()
        else:
            self.server.server_close()


# ───────────────────────────────── Live board ─────────────────────────────── #

class AcquisitionThread(threading.Thread):
    """
    Pulls raw EEG from a Muse through BrainFlow and queues one batch of
    band powers (alpha, beta, gamma, delta, theta per channel) per interval.
    """

    def __init__(self, queue: MessageQueue, interval: float = 0.25):
        super().__init__(daemon=True)
        self.queue = queue
        self.interval = interval
        self._stop_event = threading.Event()

        params = BrainFlowInputParams()
        params.serial_port = Config.SERIAL_PORT
        params.mac_address = Config.MAC_ADDRESS
        self.board = BoardShim(Config.BOARD_ID, params)
        self.eeg_ch = BoardShim.get_eeg_channels(Config.BOARD_ID)
        self.sample_rate = BoardShim.get_sampling_rate(Config.BOARD_ID)

    def run(self):
        window = int(Config.BAND_WINDOW_SEC * self.sample_rate)
        self.board.prepare_session()
        self.board.start_stream()
        try:
            while not self._stop_event.is_set():
                data = self.board.get_current_board_data(window)
                if data.shape[1] >= window:
                    bands = bandpowers(data, self.eeg_ch, self.sample_rate)
                    self.queue.extend(band_messages(bands, time.time()))
                time.sleep(self.interval)
        finally:
            self.board.stop_stream()
            self.board.release_session()

    def stop(self):
        self._stop_event.set()


def bandpowers(data: np.ndarray, channels, sample_rate: int) -> dict:
    """
    Return {band: array of 4 channel powers} for TP9, AF7, AF8, TP10.
    BrainFlow needs a C-contiguous row-major float64 matrix.
    """
    data = np.ascontiguousarray(data, dtype=np.float64)
    powers = np.zeros((len(channels), 5), dtype=np.float64)

    for i, ch in enumerate(channels):
        band_avg, _ = DataFilter.get_avg_band_powers(data, [ch], sample_rate, True)
        powers[i] = band_avg          # δ θ α β γ

    delta, theta, alpha, beta, gamma = powers.T
    return {"alpha": alpha, "beta": beta, "gamma": gamma, "delta": delta, "theta": theta}


# ───────────────────────────── CSV playback ───────────────────────────────── #

class FileAcquisitionThread(threading.Thread):
    """
    Replays a Mind Monitor CSV export (`Alpha_TP9`, ..., `Theta_TP10`) as if
    it were arriving live: one batch of five band messages per row.
    """

    def __init__(
        self,
        queue: MessageQueue,
        filepath: str | Path,
        loop: bool = False,
        interval: float | None = None,
        realtime: bool = True,
    ):
        super().__init__(daemon=True)
        self.queue = queue
        self.filepath = Path(filepath)
        self.loop = loop
        self.interval = Config.PLAYBACK_INTERVAL if interval is None else interval
        self.realtime = realtime
        self._stop_event = threading.Event()

    # ── internal helpers ──────────────────────────────────────────────────── #

    def _read_header(self, reader) -> dict:
        """
        Return {band: [column index per channel]}; raise if any is missing.
        """
        header = next(reader, None) or []
        index = {col.strip().lower(): idx for idx, col in enumerate(header)}
        columns = {}
        for band in Config.BANDS:
            names = [f"{band}_{ch}".lower() for ch in Config.CHANNELS]
            missing = [n for n in names if n not in index]
            if missing:
                raise ValueError(f"CSV header is missing band columns: {missing}")
            columns[band] = [index[n] for n in names]
        return columns

    def _stream_once(self):
        with self.filepath.open(newline="") as f:
            reader = csv.reader(f)
            columns = self._read_header(reader)

            for row in reader:
                if self._stop_event.is_set():
                    break
                try:
                    bands = {
                        band: [float(row[i]) for i in idx]
                        for band, idx in columns.items()
                    }
                except (ValueError, IndexError):
                    continue  # event rows (blink, marker) carry no band values
                self.queue.extend(band_messages(bands, time.time()))
                if self.realtime:
                    time.sleep(self.interval)

    # ── public thread interface ───────────────────────────────────────────── #

    def run(self):
        while not self._stop_event.is_set():
            self._stream_once()
            if not self.loop:
                break

    def stop(self):
        self._stop_event.set()

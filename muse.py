"""Typed Muse messages for the Mind Monitor OSC address space."""

import logging
import time as _time
from typing import NamedTuple

from config import Config

log = logging.getLogger(__name__)

BAND_ADDRESSES = {
    f"/muse/elements/{band}_absolute": band for band in Config.BANDS
}

# address -> (kind, number of float arguments)
VECTOR_ADDRESSES = {
    "/muse/eeg": ("eeg", 4),
    "/muse/acc": ("acc", 3),
    "/muse/gyro": ("gyro", 3),
    "/muse/elements/horseshoe": ("horseshoe", 4),
}

FLAG_ADDRESSES = {
    "/muse/elements/touching_forehead": "touching_forehead",
    "/muse/elements/blink": "blink",
    "/muse/elements/jaw_clench": "jaw_clench",
}

BATTERY_ADDRESS = "/muse/batt"


class MuseMessage(NamedTuple):
    time: float          # seconds since the UNIX epoch, at receipt
    kind: str            # band name, "eeg", "acc", "blink", ...
    values: tuple

    @property
    def is_band(self) -> bool:
        return self.kind in Config.BANDS


def _floats(address: str, args: tuple, count: int) -> tuple | None:
    if len(args) < count:
        log.warning("%s: expected %d values, got %d", address, count, len(args))
        return None
    try:
        return tuple(float(a) for a in args[:count])
    except (TypeError, ValueError):
        log.warning("%s: non-numeric arguments %r", address, args)
        return None


def parse_message(address: str, *args, time: float | None = None) -> MuseMessage | None:
    """
    Turn one OSC message into a MuseMessage.

    Returns None for unknown addresses and malformed arguments; both are
    logged and never raise.
    """
    t = _time.time() if time is None else time

    if address in BAND_ADDRESSES:
        values = _floats(address, args, 4)
        return MuseMessage(t, BAND_ADDRESSES[address], values) if values else None

    if address in VECTOR_ADDRESSES:
        kind, count = VECTOR_ADDRESSES[address]
        values = _floats(address, args, count)
        return MuseMessage(t, kind, values) if values else None

    if address in FLAG_ADDRESSES:
        values = _floats(address, args, 1)
        if values is None:
            return None
        return MuseMessage(t, FLAG_ADDRESSES[address], (values[0] != 0,))

    if address == BATTERY_ADDRESS:
        values = _floats(address, args, 1)
        return MuseMessage(t, "batt", values) if values else None

    log.debug("Unparsed OSC message: %s %r", address, args)
    return None


def band_messages(bands: dict, time: float | None = None) -> list[MuseMessage]:
    """One message per band from a {band: [TP9, AF7, AF8, TP10]} mapping."""
    t = _time.time() if time is None else time
    return [
        MuseMessage(t, band, tuple(float(v) for v in bands[band]))
        for band in Config.BANDS
        if band in bands
    ]

"""Entry point: wires acquisition, the Muse model and the console display."""

import argparse
import logging
import math
import time

from config import Config
from acquire import (
    MessageQueue,
    OscAcquisitionThread,   # Mind Monitor
    AcquisitionThread,      # BrainFlow live
    FileAcquisitionThread,  # file
    )
from logs import BandLogger
from model import MuseModel
from normalize import WindowConfig


def describe(value: float | None) -> str:
    """Console form of one normalized signal."""
    if value is None:
        return "calibrating"
    if not math.isfinite(value):
        return "no update"
    return f"{value:+.3f}"


def main():
    parser = argparse.ArgumentParser(description="Muse EEG → valence / arousal")
    parser.add_argument("--mode", choices=("osc", "brainflow", "file"), default="osc",
                        help="osc = Mind Monitor over UDP (default); "
                             "brainflow = Muse via BrainFlow; "
                             "file = replay Mind Monitor CSV")
    parser.add_argument("--port", type=int, default=Config.OSC_PORT,
                        help="UDP port for --mode osc")
    parser.add_argument("--serial", default=Config.SERIAL_PORT,
                        help="BLED112 port for --mode brainflow")
    parser.add_argument("--mac", default=Config.MAC_ADDRESS,
                        help="Muse MAC address for --mode brainflow")
    parser.add_argument("--input", help="CSV file path when --mode file")
    parser.add_argument("--loop", action="store_true",
                        help="Loop the CSV endlessly")
    parser.add_argument("--history", type=int, default=Config.HISTORY_WINDOW,
                        help="calibration window in samples")
    parser.add_argument("--smoothing", type=int, default=Config.MOVING_AVERAGE_WINDOW,
                        help="moving average window in samples")
    parser.add_argument("--log-dir", default=Config.LOG_DIR,
                        help="directory for the CSV logs")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        windows = WindowConfig(args.history, args.smoothing)
    except ValueError as e:
        parser.error(str(e))

    # ── choose acquisition source ────────────────────────────────────────── #
    queue = MessageQueue()

    if args.mode == "osc":
        acq = OscAcquisitionThread(queue, port=args.port)
    elif args.mode == "brainflow":
        Config.SERIAL_PORT = args.serial
        Config.MAC_ADDRESS = args.mac
        acq = AcquisitionThread(queue)
    else:  # file
        if not args.input:
            parser.error("--input required when --mode file")
        acq = FileAcquisitionThread(queue, filepath=args.input, loop=args.loop)

    logger = BandLogger(args.log_dir)
    model = MuseModel(logger, windows)

    # ── kick everything off ──────────────────────────────────────────────── #
    print("Starting acquisition…")
    acq.start()

    tick = 1.0 / Config.TICK_RATE
    print("Receiving EEG…  Press Ctrl-C to quit.")
    try:
        while acq.is_alive() or len(queue):
            batch = queue.drain()
            if batch:
                valence, arousal = model.apply_batch(batch)
                progress = model.calibration_progress()
                status = "" if progress >= 1.0 else f"  [calibrating {progress:4.0%}]"
                artifacts = " ".join(name for name, on in (
                    ("blink", model.is_blink()),
                    ("clench", model.is_jaw_clench()),
                    ("forehead", model.is_touching_forehead()),
                ) if on)
                print(f"valence {describe(valence):>12}  arousal {describe(arousal):>12}"
                      f"{status}  {artifacts}")
            model.count_down()
            time.sleep(tick)
    except KeyboardInterrupt:
        print("Stopping…")
    finally:
        acq.stop()
        acq.join()
        logger.flush_all()
        logger.close()


if __name__ == "__main__":
    main()

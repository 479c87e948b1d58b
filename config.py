"""
All project-wide constants live here.
Feel free to edit OSC_PORT, SERIAL_PORT, window sizes, etc.
"""

class Config:
    # ── Muse via Mind Monitor (OSC over UDP) ──────────────────────
    OSC_HOST = "0.0.0.0"
    OSC_PORT = 34254             # set the same port in Mind Monitor

    # ── Muse via BrainFlow ────────────────────────────────────────
    BOARD_ID    = 38             # 38 = Muse 2 (BoardIds.MUSE_2_BOARD)
    SERIAL_PORT = ""             # BLED112 dongle port, empty for native BLE
    MAC_ADDRESS = ""             # optional, speeds up discovery
    BAND_WINDOW_SEC = 2          # seconds of EEG per band power estimate

    # ── Electrode order (fixed by the headset) ────────────────────
    CHANNELS = ("TP9", "AF7", "AF8", "TP10")
    BANDS    = ("alpha", "beta", "gamma", "delta", "theta")

    # ── Normalization ─────────────────────────────────────────────
    HISTORY_WINDOW        = 120  # samples in the calibration window
    MOVING_AVERAGE_WINDOW = 10   # smoothing window before normalization

    # ── Artifact countdowns (ticks) ───────────────────────────────
    BLINK_COUNTDOWN    = 5
    CLENCH_COUNTDOWN   = 5
    FOREHEAD_COUNTDOWN = 5

    # ── Runtime ───────────────────────────────────────────────────
    TICK_RATE    = 60            # model updates per second
    PLAYBACK_INTERVAL = 0.1      # s between rows when replaying a CSV
    LOG_DIR      = "logs"
    QUEUE_MAXLEN = 2048

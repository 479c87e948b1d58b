# tests/test_model.py
import csv

import pytest

from config import Config
from logs import BandLogger
from model import MuseModel
from muse import MuseMessage, band_messages


def test_band_batch_samples_once(bands):
    model = MuseModel()
    model.apply_batch(band_messages(bands, time=1.0))
    assert len(model.engine.valence_statistic.history) == 1
    assert len(model.engine.arousal_statistic.history) == 1
    assert model.most_recent_message_time == 1.0


def test_partial_batch_still_samples_once():
    model = MuseModel()
    batch = [
        MuseMessage(1.0, "alpha", (1.0, 2.0, 2.0, 1.0)),
        MuseMessage(1.0, "theta", (1.0, 1.0, 1.0, 1.0)),
    ]
    model.apply_batch(batch)
    assert model.engine.valence_statistic.history == (1.0,)
    assert model.engine.arousal_statistic.history == (1.0,)


def test_non_band_batch_does_not_sample():
    model = MuseModel()
    result = model.apply_batch([
        MuseMessage(2.0, "gyro", (1.0, 2.0, 3.0)),
        MuseMessage(2.0, "batt", (55.0,)),
        MuseMessage(2.0, "acc", (0.0, 0.0, 1.0)),
    ])
    assert result == (None, None)
    assert model.engine.arousal_statistic.current is None
    assert model.gyro == (1.0, 2.0, 3.0)
    assert model.accelerometer == (0.0, 0.0, 1.0)
    assert model.battery == 55.0


def test_empty_batch():
    assert MuseModel().apply_batch([]) == (None, None)


def test_blink_countdown():
    model = MuseModel()
    model.apply_batch([MuseMessage(0.0, "blink", (True,))])
    for _ in range(Config.BLINK_COUNTDOWN):
        assert model.is_blink()
        model.count_down()
    assert not model.is_blink()
    model.count_down()
    assert model.blink_countdown == 0


def test_released_flags_do_not_start_countdowns():
    model = MuseModel()
    model.apply_batch([
        MuseMessage(0.0, "blink", (False,)),
        MuseMessage(0.0, "jaw_clench", (False,)),
        MuseMessage(0.0, "touching_forehead", (True,)),
    ])
    assert not model.is_blink()
    assert not model.is_jaw_clench()
    assert not model.is_touching_forehead()


def test_jaw_clench_and_forehead():
    model = MuseModel()
    model.apply_batch([
        MuseMessage(0.0, "jaw_clench", (True,)),
        MuseMessage(0.0, "touching_forehead", (False,)),
    ])
    assert model.is_jaw_clench()
    assert model.is_touching_forehead()


def test_calibration_progress(bands):
    model = MuseModel()
    assert model.calibration_progress() == 0.0
    model.apply_batch(band_messages(bands, time=0.0))
    assert model.calibration_progress() == pytest.approx(1 / 120)


def _rows(path):
    with path.open(newline="") as f:
        return list(csv.reader(f))


def test_logs_every_message(tmp_path, bands):
    with BandLogger(tmp_path) as logger:
        model = MuseModel(logger)
        model.apply_batch(band_messages(bands, time=1.5) + [
            MuseMessage(1.5, "eeg", (800.0, 801.0, 802.0, 803.0)),
            MuseMessage(1.5, "blink", (True,)),
        ])
        logger.flush_all()

    alpha = _rows(tmp_path / "alpha.csv")
    assert alpha[0] == ["Time", "Alpha TP9", "Alpha AF7", "Alpha AF8", "Alpha TP10"]
    assert alpha[1] == ["1.5", "1.0", "2.0", "2.0", "1.0"]
    assert _rows(tmp_path / "theta.csv")[0][1] == "Theta TP9"
    assert _rows(tmp_path / "eeg.csv") == [
        ["Time", "TP9", "AF7", "AF8", "TP10"],
        ["1.5", "800.0", "801.0", "802.0", "803.0"],
    ]
    assert _rows(tmp_path / "other.csv") == [["Time", "Record"], ["1.5", "Blink, 1"]]

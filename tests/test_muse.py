# tests/test_muse.py
import pytest

from muse import MuseMessage, band_messages, parse_message


@pytest.mark.parametrize("band", ["alpha", "beta", "gamma", "delta", "theta"])
def test_band_message(band):
    m = parse_message(f"/muse/elements/{band}_absolute", 1.0, 2.0, 3.0, 4.0, time=12.5)
    assert m == MuseMessage(12.5, band, (1.0, 2.0, 3.0, 4.0))
    assert m.is_band


def test_eeg_takes_each_channel():
    m = parse_message("/muse/eeg", 800.0, 810.0, 820.0, 830.0, 0.0, time=0.0)
    assert m.kind == "eeg"
    assert m.values == (800.0, 810.0, 820.0, 830.0)
    assert not m.is_band


def test_vectors():
    assert parse_message("/muse/acc", 0.1, 0.2, 0.3, time=1.0).values == (0.1, 0.2, 0.3)
    assert parse_message("/muse/gyro", 1, 2, 3, time=1.0).values == (1.0, 2.0, 3.0)
    assert parse_message("/muse/elements/horseshoe", 1, 1, 2, 4, time=1.0).kind == "horseshoe"


@pytest.mark.parametrize("address, kind", [
    ("/muse/elements/blink", "blink"),
    ("/muse/elements/jaw_clench", "jaw_clench"),
    ("/muse/elements/touching_forehead", "touching_forehead"),
])
def test_flags(address, kind):
    assert parse_message(address, 1, time=0.0) == MuseMessage(0.0, kind, (True,))
    assert parse_message(address, 0, time=0.0) == MuseMessage(0.0, kind, (False,))


def test_battery():
    m = parse_message("/muse/batt", 87.0, time=0.0)
    assert m.kind == "batt"
    assert m.values == (87.0,)


def test_unknown_address_is_dropped():
    assert parse_message("/muse/algorithm/mellow", 0.3) is None


def test_malformed_arguments_are_dropped(caplog):
    assert parse_message("/muse/elements/alpha_absolute", 0.5) is None
    assert parse_message("/muse/elements/alpha_absolute", "a", "b", "c", "d") is None
    assert "expected 4 values" in caplog.text


def test_receipt_time_defaults_to_now():
    m = parse_message("/muse/elements/blink", 1)
    assert m.time > 0


def test_band_messages_in_band_order(bands):
    messages = band_messages(bands, time=3.0)
    assert [m.kind for m in messages] == ["alpha", "beta", "gamma", "delta", "theta"]
    assert messages[0].values == (1.0, 2.0, 2.0, 1.0)
    assert all(m.time == 3.0 for m in messages)

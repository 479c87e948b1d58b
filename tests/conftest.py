# tests/conftest.py
import os
import sys

# Ensure project root is importable (flat layout: config, normalize, ... live there)
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import pytest


@pytest.fixture
def statistic_factory():
    from normalize import StreamingStatistic, WindowConfig
    def make(history_window=120, moving_average_window=10):
        return StreamingStatistic(WindowConfig(history_window, moving_average_window))
    return make


@pytest.fixture
def bands():
    # TP9, AF7, AF8, TP10
    return {
        "alpha": [1.0, 2.0, 2.0, 1.0],
        "beta":  [0.5, 0.5, 0.5, 0.5],
        "gamma": [0.1, 0.1, 0.1, 0.1],
        "delta": [0.9, 0.9, 0.9, 0.9],
        "theta": [1.0, 1.0, 1.0, 1.0],
    }

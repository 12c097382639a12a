"""Shared fixtures: small synthetic recordings."""

import numpy as np
import pytest

from visual_reject.dataset import TrialData


def make_data(spans=((0.0, 1.0), (0.5, 1.5), (0.0, 2.0)), labels=("Fz", "Cz", "EOGv"), sfreq=10.0, **kw):
    """One trial per (begin, end) span; channel i holds the value i+1 everywhere."""
    times = [np.arange(b, e + 1e-9, 1.0 / sfreq) for b, e in spans]
    trials = [np.vstack([np.full(t.size, i + 1.0) for i in range(len(labels))]) for t in times]
    return TrialData(label=list(labels), time=times, trial=trials, fsample=sfreq, **kw)


@pytest.fixture
def data():
    return make_data(ch_types=["eeg", "eeg", "eog"])


@pytest.fixture
def random_data():
    rng = np.random.default_rng(7)
    times = [np.linspace(-0.2, 0.8, 101) for _ in range(4)]
    trials = [rng.standard_normal((4, 101)) for _ in range(4)]
    return TrialData(
        label=["Fp1", "Cz", "HEOG", "ECG"],
        time=times,
        trial=trials,
        fsample=100.0,
        ch_types=["eeg", "eeg", "eog", "ecg"],
    )

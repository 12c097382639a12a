# visual_reject/io.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import mne
import numpy as np

from .dataset import TrialData


@dataclass
class LoadedEpochs:
    epochs: mne.BaseEpochs
    source_path: Path
    source_type: str  # "fif" or "eeglab"


def load_epochs(path: str | Path, preload: bool = True) -> LoadedEpochs:
    """
    Load epochs from either:
      - MNE FIF epochs: *.fif (expects *-epo.fif)
      - EEGLAB epochs: *.set

    Returns a LoadedEpochs wrapper including source info.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Epochs file not found: {p}")

    suf = p.suffix.lower()
    if suf == ".fif":
        epochs = mne.read_epochs(p, preload=preload, verbose="error")
        return LoadedEpochs(epochs=epochs, source_path=p, source_type="fif")

    if suf == ".set":
        epochs = mne.read_epochs_eeglab(p, verbose="error")
        if preload:
            epochs.load_data()
        return LoadedEpochs(epochs=epochs, source_path=p, source_type="eeglab")

    raise ValueError(f"Unsupported epochs format: {p.suffix} (expected .fif or .set)")


def from_epochs(epochs: mne.BaseEpochs) -> TrialData:
    """Epochs -> TrialData; every trial shares the epochs time axis."""
    data = epochs.get_data(copy=True)  # (n_epochs, n_ch, n_times)
    times = np.asarray(epochs.times, dtype=float)
    return TrialData(
        label=list(epochs.ch_names),
        time=[times.copy() for _ in range(data.shape[0])],
        trial=[data[i] for i in range(data.shape[0])],
        fsample=float(epochs.info["sfreq"]),
        ch_types=list(epochs.get_channel_types()),
    )


def trl_from_epochs(epochs: mne.BaseEpochs) -> np.ndarray:
    """
    Interval table [begin_sample, end_sample, offset] of each epoch in the
    continuous recording, derived from the events array.
    """
    sfreq = float(epochs.info["sfreq"])
    offset = int(round(float(epochs.tmin) * sfreq))
    n_times = len(epochs.times)
    begin = epochs.events[:, 0].astype(int) + offset
    end = begin + n_times - 1
    return np.column_stack([begin, end, np.full(begin.shape, offset)]).astype(int)


def to_epochs(
    data: TrialData,
    info: Optional[mne.Info] = None,
    events: Optional[np.ndarray] = None,
) -> mne.EpochsArray:
    """
    TrialData -> mne.EpochsArray. Needs trials of equal length; the time
    axis of the first trial gives tmin.
    """
    if data.n_trials == 0:
        raise ValueError("Cannot build epochs from a dataset without trials.")
    lengths = {x.shape[1] for x in data.trial}
    if len(lengths) != 1:
        raise ValueError(f"Cannot build epochs from trials of different lengths: {sorted(lengths)}")

    if info is None:
        if data.fsample is None:
            raise ValueError("fsample is required to build epochs without an mne.Info.")
        ch_types = data.ch_types if data.ch_types is not None else "misc"
        info = mne.create_info(ch_names=list(data.label), sfreq=float(data.fsample), ch_types=ch_types)
    else:
        info = mne.pick_info(info, [info["ch_names"].index(ch) for ch in data.label])

    arr = np.stack([np.asarray(x, dtype=float) for x in data.trial])
    return mne.EpochsArray(arr, info, events=events, tmin=float(data.time[0][0]), verbose=False)

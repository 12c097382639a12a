# visual_reject/dataset.py
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

import numpy as np


@dataclass
class TrialData:
    """
    Multi-trial, multi-channel recording.

      label : channel labels shared by every trial (unique, ordered)
      time  : one time vector (seconds) per trial
      trial : one (n_channels, n_samples) matrix per trial

    Trials may differ in length and onset. `offset` is legacy per-trial
    metadata from old datasets; `cfg` carries the lineage of the data.
    """
    label: list[str]
    time: list[np.ndarray]
    trial: list[np.ndarray]
    fsample: Optional[float] = None
    ch_types: Optional[list[str]] = None
    offset: Optional[np.ndarray] = None
    cfg: Optional[dict[str, Any]] = field(default=None, repr=False)

    def __post_init__(self):
        self.label = [str(x) for x in self.label]
        self.time = [np.asarray(t, dtype=float).ravel() for t in self.time]
        self.trial = [np.asarray(x) for x in self.trial]
        if self.ch_types is not None:
            self.ch_types = [str(x) for x in self.ch_types]
        self._check()

    def _check(self) -> None:
        if len(self.time) != len(self.trial):
            raise ValueError(
                f"Number of time vectors ({len(self.time)}) != number of trials ({len(self.trial)})"
            )
        if len(set(self.label)) != len(self.label):
            dup = sorted({x for x in self.label if self.label.count(x) > 1})
            raise ValueError(f"Channel labels must be unique, duplicated: {dup}")
        if self.ch_types is not None and len(self.ch_types) != len(self.label):
            raise ValueError(
                f"ch_types has {len(self.ch_types)} entries for {len(self.label)} channels"
            )
        n_ch = len(self.label)
        for i, (t, x) in enumerate(zip(self.time, self.trial)):
            if x.ndim != 2:
                raise ValueError(f"Trial {i} must be 2D (channels x samples), got shape={x.shape}")
            if x.shape[0] != n_ch:
                raise ValueError(f"Trial {i} has {x.shape[0]} rows for {n_ch} channel labels")
            if x.shape[1] != t.size:
                raise ValueError(
                    f"Trial {i} has {x.shape[1]} samples but its time vector has {t.size}"
                )

    @property
    def n_trials(self) -> int:
        return len(self.trial)

    @property
    def n_channels(self) -> int:
        return len(self.label)

    def copy(self) -> "TrialData":
        return TrialData(
            label=list(self.label),
            time=[t.copy() for t in self.time],
            trial=[x.copy() for x in self.trial],
            fsample=self.fsample,
            ch_types=None if self.ch_types is None else list(self.ch_types),
            offset=None if self.offset is None else np.array(self.offset, copy=True),
            cfg=copy.deepcopy(self.cfg),
        )

    def select_trials(self, indices: Sequence[int]) -> "TrialData":
        """Return a new dataset holding the given trials, in the given order."""
        idx = [int(i) for i in indices]
        bad = [i for i in idx if i < 0 or i >= self.n_trials]
        if bad:
            raise ValueError(f"Trial indices out of range (n_trials={self.n_trials}): {bad}")

        offset = None
        if self.offset is not None:
            offset = np.asarray(self.offset)[idx]

        return TrialData(
            label=list(self.label),
            time=[self.time[i].copy() for i in idx],
            trial=[self.trial[i].copy() for i in idx],
            fsample=self.fsample,
            ch_types=None if self.ch_types is None else list(self.ch_types),
            offset=offset,
            cfg=copy.deepcopy(self.cfg),
        )

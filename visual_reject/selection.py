# visual_reject/selection.py
from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional

import numpy as np

from .dataset import TrialData


class SelectionMethod(str, Enum):
    SUMMARY = "summary"   # one metric value per channel and trial
    CHANNEL = "channel"   # per channel, all trials at once
    TRIAL = "trial"       # per trial, all channels at once

    @classmethod
    def parse(cls, value: Any) -> "SelectionMethod":
        try:
            return cls(str(getattr(value, "value", value)).strip().lower())
        except ValueError:
            names = " | ".join(m.value for m in cls)
            raise ValueError(f"Unknown method '{value}'. Use one of: {names}.") from None


class SummaryMetric(str, Enum):
    VAR = "var"
    MIN = "min"
    MAX = "max"
    MAXABS = "maxabs"
    RANGE = "range"
    KURTOSIS = "kurtosis"


# (cfg, data) -> (chansel, trlsel, cfg); None means the user cancelled
SelectionStrategy = Callable[[dict, TrialData], Optional[tuple]]


@dataclass
class Strategies:
    """The selection collaborators, one per method."""
    summary: Optional[SelectionStrategy] = None
    channel: Optional[SelectionStrategy] = None
    trial: Optional[SelectionStrategy] = None

    @classmethod
    def for_all(cls, strategy: SelectionStrategy) -> "Strategies":
        return cls(summary=strategy, channel=strategy, trial=strategy)

    def get(self, method: SelectionMethod) -> SelectionStrategy:
        name = SelectionMethod.parse(method).value
        strategy = getattr(self, name)
        if strategy is None:
            raise ValueError(f"No selection strategy registered for method '{name}'.")
        return strategy


@dataclass
class Selection:
    chansel: np.ndarray
    trlsel: np.ndarray
    cfg: dict


_MODE_TEXT = {
    SelectionMethod.CHANNEL: "the {what} per channel, all trials at once",
    SelectionMethod.TRIAL: "the {what} per trial, all channels at once",
    SelectionMethod.SUMMARY: "a summary of the {what} for all channels and trials",
}


def _as_mask(mask: Any, n: int, what: str) -> np.ndarray:
    arr = np.asarray(mask).ravel()
    if arr.size != n:
        raise ValueError(f"{what} mask has {arr.size} entries, expected {n}")
    return arr.astype(bool)


def dispatch(
    method: Any,
    cfg: dict,
    data: TrialData,
    strategies: Strategies,
    scaled: bool = False,
) -> Selection:
    """
    Route to the strategy for `method` and normalize what it returns.

    `data` is the dataset shown to the user (scaled, if scaling was applied).
    A strategy returning None (cancelled) selects everything.
    """
    method = SelectionMethod.parse(method)
    strategy = strategies.get(method)

    what = "scaled data" if scaled else "data"
    print(f"showing {_MODE_TEXT[method].format(what=what)}")
    if method is SelectionMethod.SUMMARY:
        print(f"summary metric: {cfg.get('metric', SummaryMetric.VAR.value)}")

    answer = strategy(copy.deepcopy(cfg), data)
    if answer is None:
        print("[WARN] selection was cancelled; keeping all channels and trials")
        return Selection(
            chansel=np.ones(data.n_channels, dtype=bool),
            trlsel=np.ones(data.n_trials, dtype=bool),
            cfg=cfg,
        )

    chansel, trlsel, new_cfg = answer
    return Selection(
        chansel=_as_mask(chansel, data.n_channels, "Channel"),
        trlsel=_as_mask(trlsel, data.n_trials, "Trial"),
        cfg=cfg if new_cfg is None else dict(new_cfg),
    )


class PresetSelection:
    """
    Non-interactive strategy marking fixed trials and channels as bad.

    Trial positions refer to the dataset handed to the strategy (after any
    trial subset). When not given explicitly, the bad trials/channels are
    read from cfg["reject"]. Unknown channel labels are ignored.
    """

    def __init__(self, bad_trials: Optional[Iterable[int]] = None, bad_channels: Optional[Iterable[str]] = None):
        self.bad_trials = None if bad_trials is None else [int(i) for i in bad_trials]
        self.bad_channels = None if bad_channels is None else [str(c) for c in bad_channels]

    def __call__(self, cfg: dict, data: TrialData):
        reject = cfg.get("reject") or {}
        bad_trials = self.bad_trials if self.bad_trials is not None else [int(i) for i in reject.get("trials", [])]
        bad_channels = self.bad_channels if self.bad_channels is not None else [str(c) for c in reject.get("channels", [])]

        out_of_range = [i for i in bad_trials if i < 0 or i >= data.n_trials]
        if out_of_range:
            raise ValueError(f"Bad trial positions out of range (n_trials={data.n_trials}): {out_of_range}")

        trlsel = np.ones(data.n_trials, dtype=bool)
        trlsel[np.asarray(bad_trials, dtype=int)] = False
        bad_set = set(bad_channels)
        chansel = np.array([lab not in bad_set for lab in data.label], dtype=bool)
        return chansel, trlsel, cfg

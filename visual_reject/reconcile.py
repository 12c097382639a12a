# visual_reject/reconcile.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from .dataset import TrialData
from .report import report_removed_channels, report_removed_trials

KEEPCHANNEL_POLICIES = ("no", "yes", "nan")


@dataclass
class Reconciled:
    data: TrialData
    artifact: np.ndarray          # (n_bad, 2) begin/end samples of rejected trials
    trl: np.ndarray               # rows of the retained trials
    trlold: np.ndarray            # interval table as supplied
    removed_trials: list[int] = field(default_factory=list)
    removed_channels: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _empty_table() -> np.ndarray:
    return np.zeros((0, 2), dtype=int)


def split_trl(
    trl: np.ndarray,
    trlsel: np.ndarray,
    trials: Optional[Sequence[int]] = None,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Partition an interval table by the trial mask.

    If a trial subset was selected earlier, the table is first reduced to
    those rows so it lines up with the trials the mask refers to.
    Returns (artifact, retained): begin/end of the bad rows, full good rows.
    """
    trl = np.asarray(trl)
    if trl.ndim != 2 or trl.shape[1] < 2:
        raise ValueError(f"trl must be a 2D table with at least 2 columns, got shape={trl.shape}")
    if trials is not None:
        idx = np.asarray(list(trials), dtype=int)
        if idx.size and (idx.min() < 0 or idx.max() >= trl.shape[0]):
            raise ValueError(f"Trial indices out of range for trl with {trl.shape[0]} rows")
        trl = trl[idx]

    trlsel = np.asarray(trlsel, dtype=bool)
    if trl.shape[0] != trlsel.size:
        raise ValueError(f"trl has {trl.shape[0]} rows but the trial mask has {trlsel.size} entries")

    return trl[~trlsel, :2], trl[trlsel, :]


def reconcile(
    data: TrialData,
    chansel: np.ndarray,
    trlsel: np.ndarray,
    trl: Optional[np.ndarray] = None,
    trials: Optional[Sequence[int]] = None,
    keepchannel: str = "no",
) -> Reconciled:
    """
    Apply a channel and a trial selection to the original (unscaled) data.

    keepchannel decides what happens to deselected channels:
      no  : drop them
      nan : keep them, filled with NaN
      yes : keep them unchanged
    The input dataset is not modified; a filtered copy is returned together
    with the artifact and retained-interval tables derived from `trl`.
    """
    keepchannel = str(keepchannel).lower()
    if keepchannel not in KEEPCHANNEL_POLICIES:
        raise ValueError(f"keepchannel must be one of: {' | '.join(KEEPCHANNEL_POLICIES)}, got '{keepchannel}'")

    chansel = np.asarray(chansel, dtype=bool).ravel()
    trlsel = np.asarray(trlsel, dtype=bool).ravel()
    if chansel.size != data.n_channels:
        raise ValueError(f"Channel mask has {chansel.size} entries, expected {data.n_channels}")
    if trlsel.size != data.n_trials:
        raise ValueError(f"Trial mask has {trlsel.size} entries, expected {data.n_trials}")

    warnings: list[str] = []

    if trl is not None and np.asarray(trl).size > 0:
        trlold = np.asarray(trl)
        artifact, retained = split_trl(trlold, trlsel, trials)
    else:
        msg = "could not locate the trial definition 'trl'; artifact and trl tables will be empty"
        print("[WARN]", msg)
        warnings.append(msg)
        trlold, artifact, retained = _empty_table(), _empty_table(), _empty_table()

    removed_trials = [int(i) for i in np.flatnonzero(~trlsel)]
    report_removed_trials(removed_trials)

    keep = np.flatnonzero(trlsel)
    out = data.select_trials(keep)
    out.offset = None

    removed_channels: list[str] = []
    if not chansel.all() and keepchannel != "yes":
        removed_channels = [lab for lab, good in zip(data.label, chansel) if not good]

        if keepchannel == "no":
            out.trial = [x[chansel, :] for x in out.trial]
            out.label = [lab for lab, good in zip(out.label, chansel) if good]
            if out.ch_types is not None:
                out.ch_types = [kind for kind, good in zip(out.ch_types, chansel) if good]
        elif keepchannel == "nan":
            filled = []
            for x in out.trial:
                if not np.issubdtype(x.dtype, np.floating):
                    x = x.astype(float)
                x[~chansel, :] = np.nan
                filled.append(x)
            out.trial = filled

        report_removed_channels(removed_channels, keepchannel)

    return Reconciled(
        data=out,
        artifact=artifact,
        trl=retained,
        trlold=trlold,
        removed_trials=removed_trials,
        removed_channels=removed_channels,
        warnings=warnings,
    )

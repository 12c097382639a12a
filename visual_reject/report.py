# visual_reject/report.py
from __future__ import annotations

import copy
from typing import Any, Iterable, Optional

import numpy as np
import pandas as pd

from . import __version__

TOOL_NAME = "visual_reject.rejectvisual"


def format_removed(items: Iterable[Any]) -> str:
    return ", ".join(str(x) for x in items)


def report_selection(chansel: np.ndarray, trlsel: np.ndarray) -> None:
    trlsel = np.asarray(trlsel, dtype=bool)
    chansel = np.asarray(chansel, dtype=bool)
    print(f"{int(trlsel.sum())} trials marked as GOOD, {int((~trlsel).sum())} trials marked as BAD")
    print(f"{int(chansel.sum())} channels marked as GOOD, {int((~chansel).sum())} channels marked as BAD")


def report_removed_trials(removed: list[int]) -> None:
    if removed:
        print(f"the following trials were removed: {format_removed(removed)}")
    else:
        print("no trials were removed")


def report_removed_channels(removed: list[str], keepchannel: str) -> None:
    if not removed:
        return
    if keepchannel == "no":
        print(f"the following channels were removed: {format_removed(removed)}")
    elif keepchannel == "nan":
        print(f"the following channels were filled with NANs: {format_removed(removed)}")


def stamp_version(cfg: dict, previous: Optional[dict] = None) -> dict:
    """Add tool identity and chain the configuration of the input data, if any."""
    cfg = dict(cfg)
    cfg["version"] = {"name": TOOL_NAME, "id": __version__}
    if previous is not None:
        cfg["previous"] = copy.deepcopy(previous)
    return cfg


def artifact_frame(artifact: np.ndarray) -> pd.DataFrame:
    """Artifact table as [begin_sample, end_sample] rows."""
    arr = np.asarray(artifact, dtype=int).reshape(-1, 2)
    return pd.DataFrame(arr, columns=["begin_sample", "end_sample"])


def selection_summary(
    *,
    name: str,
    chansel: np.ndarray,
    trlsel: np.ndarray,
    removed_channels: list[str],
    removed_trials: list[int],
    keepchannel: str,
    method: str,
    latency: tuple[float, float],
    warnings: list[str],
) -> dict:
    """One QC row describing a rejection run."""
    trlsel = np.asarray(trlsel, dtype=bool)
    chansel = np.asarray(chansel, dtype=bool)
    n_trials = int(trlsel.size)
    return {
        "name": name,
        "method": method,
        "latency_begin": float(latency[0]),
        "latency_end": float(latency[1]),
        "keepchannel": keepchannel,
        "n_trials_good": int(trlsel.sum()),
        "n_trials_bad": int((~trlsel).sum()),
        "trial_reject_rate": float((~trlsel).sum() / n_trials) if n_trials else 0.0,
        "n_channels_good": int(chansel.sum()),
        "n_channels_bad": int((~chansel).sum()),
        "removed_trials": " ".join(map(str, removed_trials)),
        "removed_channels": " ".join(removed_channels),
        "status": "OK" if not warnings else "WARN",
        "warning": "; ".join(warnings),
    }


def write_qc_summary(rows: list[dict], out_csv):
    df = pd.DataFrame(rows)
    df.to_csv(out_csv, index=False)
    return df

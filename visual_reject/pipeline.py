# visual_reject/pipeline.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np

from .channels import channel_selection
from .config import channel_scales, normalize_config
from .dataset import TrialData
from .latency import resolve_latency
from .reconcile import Reconciled, reconcile
from .report import report_selection, stamp_version
from .scaling import scale_channel_groups
from .selection import Selection, Strategies, dispatch


@dataclass
class RejectResult:
    data: TrialData
    cfg: Dict[str, Any]
    selection: Selection
    reconciled: Reconciled


def run_rejectvisual(
    cfg: Optional[Dict[str, Any]],
    data: TrialData,
    strategies: Strategies,
    trl: Optional[np.ndarray] = None,
) -> RejectResult:
    """
    Visual trial/channel rejection.

    Steps:
      1) normalize the configuration (errors abort before touching data)
      2) select the trials of interest (cfg["trials"])
      3) resolve the latency window shared by the trials
      4) scale channel groups on a copy, for display only
      5) let the strategy for cfg["method"] mark channels and trials
      6) apply the selection to the unscaled data and split `trl` into
         artifact / retained rows
      7) stamp version and lineage on the output configuration

    `trl` is the interval table of the trials in their original order
    (before cfg["trials"] is applied). Without it the artifact table is empty.
    The input data and cfg are left untouched.
    """
    cfg = normalize_config(cfg)

    trials = None
    work = data
    if cfg["trials"] != "all":
        trials = list(cfg["trials"])
        print(f"selecting {len(trials)} trials")
        work = data.select_trials(trials)

    cfg["latency"] = list(resolve_latency(work.time, cfg["latency"]))
    cfg["channel"] = channel_selection(cfg["channel"], work.label, work.ch_types)

    shown, scaled = scale_channel_groups(work, channel_scales(cfg))
    selection = dispatch(cfg["method"], cfg, shown, strategies, scaled=scaled)
    cfg = selection.cfg

    report_selection(selection.chansel, selection.trlsel)

    rec = reconcile(
        work,
        selection.chansel,
        selection.trlsel,
        trl=trl,
        trials=trials,
        keepchannel=cfg.get("keepchannel", "no"),
    )

    cfg["artifact"] = rec.artifact
    cfg["trl"] = rec.trl
    cfg["trlold"] = rec.trlold
    cfg = stamp_version(cfg, data.cfg)

    out = rec.data
    out.cfg = cfg
    return RejectResult(data=out, cfg=cfg, selection=selection, reconciled=rec)


def rejectvisual(
    cfg: Optional[Dict[str, Any]],
    data: TrialData,
    strategies: Strategies,
    trl: Optional[np.ndarray] = None,
) -> TrialData:
    """Run the rejection and return the cleaned data; its `.cfg` holds the result configuration."""
    return run_rejectvisual(cfg, data, strategies, trl=trl).data

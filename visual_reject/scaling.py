# visual_reject/scaling.py
from __future__ import annotations

from typing import Callable, Mapping, Optional, Sequence

import numpy as np

from .channels import CHANNEL_GROUPS, channels_in_group
from .dataset import TrialData

Classifier = Callable[[str, Sequence[str], Optional[Sequence[str]]], list]


def scale_order(groups: Sequence[str]) -> list[str]:
    """Fixed application order: EEG, EOG, ECG, MEG, then any other group sorted by name."""
    known = [g for g in CHANNEL_GROUPS if g in groups]
    other = sorted(g for g in groups if g not in CHANNEL_GROUPS)
    return known + other


def scale_channel_groups(
    data: TrialData,
    scales: Mapping[str, Optional[float]],
    classify: Classifier = channels_in_group,
) -> tuple[TrialData, bool]:
    """
    Multiply the channels of each group by its scale factor, on a copy.

    Used to bring channel types to a comparable range for display (e.g. fT and uV).
    The input dataset is never modified. Returns (scaled_copy, applied) where
    applied is True if any group had a factor set. A group that matches no
    channels is a no-op.
    """
    scaled = data.copy()
    scales = {str(k).upper(): v for k, v in (scales or {}).items()}
    applied = False

    for group in scale_order(list(scales)):
        factor = scales[group]
        if factor is None:
            continue
        applied = True

        members = set(classify(group, scaled.label, scaled.ch_types))
        rows = np.array([i for i, lab in enumerate(scaled.label) if lab in members], dtype=int)
        if rows.size == 0:
            continue

        for i, x in enumerate(scaled.trial):
            # promote integer data so the factor is not truncated
            if not np.issubdtype(x.dtype, np.inexact):
                x = x.astype(float)
            x[rows, :] = x[rows, :] * float(factor)
            scaled.trial[i] = x

    return scaled, applied

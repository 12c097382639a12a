# visual_reject/channels.py
from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Optional, Sequence, Union

import mne

CHANNEL_GROUPS = ("EEG", "EOG", "ECG", "MEG")

# MNE channel types belonging to each group
_GROUP_CH_TYPES = {
    "EEG": {"eeg"},
    "EOG": {"eog"},
    "ECG": {"ecg"},
    "MEG": {"mag", "grad", "ref_meg"},
}

_MEG_LABEL = re.compile(r"^(MEG\s?\d{3,4}|M[LRZ][A-Z]\d{2})", re.IGNORECASE)


@lru_cache(maxsize=1)
def _eeg_label_set() -> frozenset:
    montage = mne.channels.make_standard_montage("standard_1005")
    return frozenset(ch.lower() for ch in montage.ch_names)


def _group_by_label(group: str, label: str) -> bool:
    up = label.upper()
    if group == "EOG":
        return "EOG" in up
    if group == "ECG":
        return "ECG" in up or "EKG" in up
    if group == "MEG":
        return bool(_MEG_LABEL.match(label))
    if group == "EEG":
        return label.lower() in _eeg_label_set()
    return False


def channels_in_group(
    group: str,
    labels: Sequence[str],
    ch_types: Optional[Sequence[str]] = None,
) -> list[str]:
    """
    Labels that belong to a sensor group (EEG | EOG | ECG | MEG).

    Uses MNE channel types when they are known; otherwise falls back to label
    conventions (EOG/ECG by name, MEG by CTF/Neuromag names, EEG by membership
    of the standard_1005 montage). Unknown groups select nothing.
    """
    g = str(group).strip().upper()
    if g not in _GROUP_CH_TYPES:
        return []
    if ch_types is not None:
        wanted = _GROUP_CH_TYPES[g]
        return [lab for lab, kind in zip(labels, ch_types) if str(kind).lower() in wanted]
    return [lab for lab in labels if _group_by_label(g, lab)]


def channel_selection(
    spec: Union[str, Iterable[str], None],
    labels: Sequence[str],
    ch_types: Optional[Sequence[str]] = None,
) -> list[str]:
    """
    Resolve a channel specifier against the available labels.

    Accepts "all", a group name, explicit labels, and negations ("-Cz",
    "-EOG"). Items are combined in order; a specifier made only of negations
    starts from all channels. The result follows the order of `labels` and
    silently ignores labels that are not present.
    """
    labels = list(labels)
    if spec is None:
        return labels
    items = [spec] if isinstance(spec, str) else list(spec)
    items = [str(x).strip() for x in items if str(x).strip()]

    if items and all(x.startswith("-") for x in items):
        selected = set(labels)
    else:
        selected = set()

    for item in items:
        negate = item.startswith("-")
        name = item[1:].strip() if negate else item

        if name.lower() == "all":
            hit = set(labels)
        elif name.upper() in CHANNEL_GROUPS:
            hit = set(channels_in_group(name, labels, ch_types))
        else:
            hit = {name} if name in labels else set()

        if negate:
            selected -= hit
        else:
            selected |= hit

    return [lab for lab in labels if lab in selected]

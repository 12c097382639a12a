# visual_reject/latency.py
from __future__ import annotations

from typing import Sequence, Union

import numpy as np

LATENCY_POLICIES = ("minperlength", "maxperlength", "prestim", "poststim")

Latency = Union[str, Sequence[float]]


def trial_spans(times: Sequence[np.ndarray]) -> tuple[np.ndarray, np.ndarray]:
    """First and last timestamp of every trial (seconds)."""
    if len(times) == 0:
        raise ValueError("Cannot determine a latency window without any trials.")
    begins = np.array([float(np.min(t)) for t in times])
    ends = np.array([float(np.max(t)) for t in times])
    return begins, ends


def resolve_latency(times: Sequence[np.ndarray], latency: Latency = "maxperlength") -> tuple[float, float]:
    """
    Resolve a latency window that can be used across all trials.

      minperlength : window covered by every trial (intersection)
      maxperlength : window covered by any trial (envelope)
      prestim      : [envelope begin, 0]
      poststim     : [0, envelope end]
      [begin, end] : explicit window, passed through

    Raises ValueError for unknown policies and for windows with begin > end,
    e.g. minperlength on trials that do not overlap.
    """
    if isinstance(latency, str):
        policy = latency.strip().lower()
        if policy not in LATENCY_POLICIES:
            raise ValueError(
                f"Unknown latency '{latency}'. Use one of: {' | '.join(LATENCY_POLICIES)} or [begin, end]."
            )

        begins, ends = trial_spans(times)
        minperlength = (float(begins.max()), float(ends.min()))
        maxperlength = (float(begins.min()), float(ends.max()))

        if policy == "minperlength":
            window = minperlength
        elif policy == "maxperlength":
            window = maxperlength
        elif policy == "prestim":
            window = (maxperlength[0], 0.0)
        else:
            window = (0.0, maxperlength[1])
    else:
        try:
            pair = [float(v) for v in latency]
        except (TypeError, ValueError) as e:
            raise ValueError(f"latency must be a policy name or a [begin, end] pair, got {latency!r}") from e
        if len(pair) != 2:
            raise ValueError(f"latency must be a 2-item list: [begin, end], got {latency!r}")
        window = (pair[0], pair[1])

    if not window[0] <= window[1]:
        raise ValueError(
            f"Latency window is empty: begin={window[0]:g} > end={window[1]:g} "
            f"(latency={latency!r}). Trials may not overlap in time."
        )
    return window

"""
visual_reject package.

Trial/channel rejection for multi-trial, multi-channel recordings: resolve a
common latency window, optionally rescale channel groups for display, let a
selection strategy mark bad trials and channels, and apply that selection
to the data and its trial definition (trl).

Run via:
  python run_visual_reject.py --epochs ... --out_dir ...
"""
__version__ = "0.1.0"

from .dataset import TrialData  # noqa: E402
from .pipeline import RejectResult, rejectvisual, run_rejectvisual  # noqa: E402
from .selection import PresetSelection, SelectionMethod, Strategies, SummaryMetric  # noqa: E402

__all__ = [
    "TrialData",
    "RejectResult",
    "rejectvisual",
    "run_rejectvisual",
    "PresetSelection",
    "SelectionMethod",
    "Strategies",
    "SummaryMetric",
]

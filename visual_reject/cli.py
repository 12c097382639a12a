# visual_reject/cli.py
from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np

from .config import load_config, normalize_config
from .io import from_epochs, load_epochs, to_epochs, trl_from_epochs
from .pipeline import run_rejectvisual
from .report import artifact_frame, selection_summary, write_qc_summary
from .selection import PresetSelection, Strategies


def _parse_latency(values):
    """One policy name, or two numbers (begin end)."""
    if values is None:
        return None
    if len(values) == 1:
        return values[0]
    if len(values) == 2:
        return [float(values[0]), float(values[1])]
    raise ValueError(f"--latency takes a policy name or two numbers, got {values}")


def _stem(p: Path) -> str:
    # e.g., s203-epo.fif -> s203 ; s203.set -> s203
    stem = p.stem
    if stem.endswith("-epo"):
        stem = stem[:-4]
    return stem


def build_cfg(args) -> dict:
    cfg = load_config(args.config) if args.config else normalize_config({})

    for key in ("method", "metric", "keepchannel"):
        val = getattr(args, key)
        if val is not None:
            cfg[key] = val

    latency = _parse_latency(args.latency)
    if latency is not None:
        cfg["latency"] = latency
    if args.trials:
        cfg["trials"] = list(args.trials)
    if args.bad_trials is not None:
        cfg["reject"]["trials"] = list(args.bad_trials)
    if args.bad_channels is not None:
        cfg["reject"]["channels"] = list(args.bad_channels)

    return normalize_config(cfg)


def run(args) -> dict:
    epochs_path = Path(args.epochs)
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    name = _stem(epochs_path)

    cfg = build_cfg(args)

    print(f"\n=== {name} ===")
    loaded = load_epochs(epochs_path)
    epochs = loaded.epochs
    data = from_epochs(epochs)
    trl = trl_from_epochs(epochs)
    print(f"Loaded {data.n_trials} trials x {data.n_channels} channels ({loaded.source_type})")

    result = run_rejectvisual(cfg, data, Strategies.for_all(PresetSelection()), trl=trl)
    rec = result.reconciled

    artifact_csv = out_dir / f"{name}_artifact.csv"
    artifact_frame(rec.artifact).to_csv(artifact_csv, index=False)
    print(f"Saved artifact table -> {artifact_csv}")

    if result.data.n_trials == 0:
        print("[WARN] All trials rejected; no cleaned epochs written.")
    else:
        subset = np.arange(data.n_trials) if result.cfg["trials"] == "all" else np.asarray(result.cfg["trials"])
        kept = subset[result.selection.trlsel]
        clean = to_epochs(result.data, info=epochs.info, events=epochs.events[kept])
        clean_path = out_dir / f"{name}-clean-epo.fif"
        clean.save(clean_path, overwrite=True)
        print(f"Saved cleaned epochs -> {clean_path}")

    row = selection_summary(
        name=name,
        chansel=result.selection.chansel,
        trlsel=result.selection.trlsel,
        removed_channels=rec.removed_channels,
        removed_trials=rec.removed_trials,
        keepchannel=result.cfg["keepchannel"],
        method=result.cfg["method"],
        latency=tuple(result.cfg["latency"]),
        warnings=rec.warnings,
    )
    write_qc_summary([row], out_dir / "qc_summary.csv")
    print(f"Saved QC summary -> {out_dir / 'qc_summary.csv'}")
    return row


def build_arg_parser():
    ap = argparse.ArgumentParser(description="Reject trials and channels from epoched data.")
    ap.add_argument("--config", default=None, help="Path to YAML/JSON config file")
    ap.add_argument("--epochs", required=True, help="Epochs file (*-epo.fif or EEGLAB *.set)")
    ap.add_argument("--out_dir", required=True, help="Output folder")

    ap.add_argument("--method", default=None, choices=["summary", "channel", "trial"], help="Selection mode")
    ap.add_argument(
        "--metric",
        default=None,
        choices=["var", "min", "max", "maxabs", "range", "kurtosis"],
        help="Summary metric (summary mode only)",
    )
    ap.add_argument("--keepchannel", default=None, choices=["no", "yes", "nan"], help="What to do with bad channels")
    ap.add_argument(
        "--latency",
        nargs="+",
        default=None,
        help="minperlength | maxperlength | prestim | poststim, or two numbers: begin end (s)",
    )
    ap.add_argument("--trials", nargs="*", type=int, default=None, help="Trial indices to consider (default: all)")
    ap.add_argument(
        "--bad_trials",
        nargs="*",
        type=int,
        default=None,
        help="Trial positions to reject (relative to --trials selection).",
    )
    ap.add_argument("--bad_channels", nargs="*", default=None, help="Channel labels to reject")
    return ap


def main(argv=None):
    ap = build_arg_parser()
    args = ap.parse_args(argv)
    run(args)

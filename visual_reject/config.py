# visual_reject/config.py
from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .latency import LATENCY_POLICIES
from .reconcile import KEEPCHANNEL_POLICIES
from .selection import SelectionMethod, SummaryMetric

SCALE_KEYS = {"eegscale": "EEG", "eogscale": "EOG", "ecgscale": "ECG", "megscale": "MEG"}

# metric names that older configs passed through `method`
_LEGACY_METHOD_METRICS = {"var", "min", "max", "maxabs", "range"}


# ----------------------------
# Public API
# ----------------------------
def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a config file (YAML preferred; JSON supported) and validate/normalize it.

    YAML requires PyYAML:
      pip install pyyaml

    Returns a plain dict with defaults filled and types normalized.
    Raises ValueError with a readable message on validation failure.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    cfg = _read_config_file(path)
    if cfg is None:
        cfg = {}
    if not isinstance(cfg, dict):
        raise ValueError("Top-level config must be a mapping/dict.")

    return normalize_config(cfg)


def normalize_config(cfg: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Defaults + backward compatibility + type normalization + validation, on a copy."""
    cfg = copy.deepcopy(cfg) if cfg else {}
    cfg = _apply_defaults(cfg)
    cfg = _rename_legacy(cfg)
    _validate_config(cfg)
    return _normalize_config(cfg)


def config_get(cfg: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """Simple dotted-path getter: config_get(cfg, 'reject.channels')."""
    cur: Any = cfg
    for part in key_path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def channel_scales(cfg: Dict[str, Any]) -> Dict[str, Optional[float]]:
    """{'EEG': factor-or-None, ...} from the *scale options."""
    return {group: cfg.get(key) for key, group in SCALE_KEYS.items()}


# ----------------------------
# Reading
# ----------------------------
def _read_config_file(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()

    if suffix in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except Exception as e:
            raise ImportError(
                "YAML config requires PyYAML. Install with: pip install pyyaml"
            ) from e
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data or {}

    if suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)

    raise ValueError(f"Unsupported config extension '{suffix}'. Use .yml/.yaml or .json")


# ----------------------------
# Defaults
# ----------------------------
def _apply_defaults(cfg: Dict[str, Any]) -> Dict[str, Any]:
    # Only set defaults where missing; do not overwrite user values.
    def set_default(d: Dict[str, Any], path: str, value: Any):
        parts = path.split(".")
        cur = d
        for p in parts[:-1]:
            if p not in cur or not isinstance(cur[p], dict):
                cur[p] = {}
            cur = cur[p]
        cur.setdefault(parts[-1], value)

    set_default(cfg, "channel", "all")
    set_default(cfg, "trials", "all")
    set_default(cfg, "latency", "maxperlength")
    set_default(cfg, "keepchannel", "no")
    set_default(cfg, "feedback", "textbar")
    set_default(cfg, "method", "summary")
    set_default(cfg, "alim", None)

    for key in SCALE_KEYS:
        set_default(cfg, key, None)

    # preprocessing options are handed to the selection strategies untouched
    set_default(cfg, "preproc", {})

    # fixed selection for non-interactive runs
    set_default(cfg, "reject.trials", [])
    set_default(cfg, "reject.channels", [])

    return cfg


def _rename_legacy(cfg: Dict[str, Any]) -> Dict[str, Any]:
    # YAML 1.1 reads bare yes/no as booleans
    if isinstance(cfg.get("keepchannel"), bool):
        cfg["keepchannel"] = "yes" if cfg["keepchannel"] else "no"

    for key in ("metric", "method"):
        if isinstance(cfg.get(key), str) and cfg[key].strip().lower() == "absmax":
            cfg[key] = "maxabs"

    method = str(cfg.get("method", "")).strip().lower()
    if "metric" not in cfg and method in _LEGACY_METHOD_METRICS:
        cfg["metric"] = method
        cfg["method"] = SelectionMethod.SUMMARY.value

    cfg.setdefault("metric", SummaryMetric.VAR.value)
    return cfg


# ----------------------------
# Validation
# ----------------------------
def _validate_config(cfg: Dict[str, Any]) -> None:
    errors: List[str] = []

    methods = {m.value for m in SelectionMethod}
    if str(cfg["method"]).strip().lower() not in methods:
        errors.append(f"method must be one of: {' | '.join(sorted(methods))} (got '{cfg['method']}').")

    metrics = {m.value for m in SummaryMetric}
    if str(cfg["metric"]).strip().lower() not in metrics:
        errors.append(f"metric must be one of: {' | '.join(sorted(metrics))} (got '{cfg['metric']}').")

    if str(cfg["keepchannel"]).strip().lower() not in KEEPCHANNEL_POLICIES:
        errors.append(f"keepchannel must be one of: {' | '.join(KEEPCHANNEL_POLICIES)} (got '{cfg['keepchannel']}').")

    latency = cfg["latency"]
    if isinstance(latency, str):
        if latency.strip().lower() not in LATENCY_POLICIES:
            errors.append(
                f"latency must be [begin, end] or one of: {' | '.join(LATENCY_POLICIES)} (got '{latency}')."
            )
    elif not (isinstance(latency, (list, tuple)) and len(latency) == 2):
        errors.append("latency must be a 2-item list: [begin, end].")
    else:
        try:
            [float(v) for v in latency]
        except (TypeError, ValueError):
            errors.append("latency [begin, end] must be numbers.")

    trials = cfg["trials"]
    if not (isinstance(trials, str) and trials.strip().lower() == "all"):
        try:
            idx = _as_int_list(trials)
            if any(i < 0 for i in idx):
                errors.append("trials must be non-negative indices.")
        except (TypeError, ValueError):
            errors.append("trials must be 'all' or a list of integer indices.")

    for key in SCALE_KEYS:
        val = cfg.get(key)
        if val is None or val == []:
            continue
        try:
            float(val)
        except (TypeError, ValueError):
            errors.append(f"{key} must be a number (got {val!r}).")

    try:
        _as_int_list(config_get(cfg, "reject.trials", []))
    except (TypeError, ValueError):
        errors.append("reject.trials must be integers.")

    if errors:
        msg = "Config validation failed:\n  - " + "\n  - ".join(errors)
        raise ValueError(msg)


# ----------------------------
# Normalization (types + conveniences)
# ----------------------------
def _normalize_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    cfg["method"] = str(cfg["method"]).strip().lower()
    cfg["metric"] = str(cfg["metric"]).strip().lower()
    cfg["keepchannel"] = str(cfg["keepchannel"]).strip().lower()

    if isinstance(cfg["latency"], str):
        cfg["latency"] = cfg["latency"].strip().lower()
    else:
        cfg["latency"] = [float(cfg["latency"][0]), float(cfg["latency"][1])]

    if isinstance(cfg["trials"], str) and cfg["trials"].strip().lower() == "all":
        cfg["trials"] = "all"
    else:
        cfg["trials"] = _as_int_list(cfg["trials"])

    if isinstance(cfg["channel"], str):
        cfg["channel"] = "all" if cfg["channel"].strip().lower() == "all" else [cfg["channel"]]
    else:
        cfg["channel"] = [str(c) for c in cfg["channel"]]

    for key in SCALE_KEYS:
        val = cfg.get(key)
        cfg[key] = None if val is None or val == [] else float(val)

    cfg["reject"]["trials"] = _as_int_list(cfg["reject"].get("trials", []))
    cfg["reject"]["channels"] = [str(c) for c in (cfg["reject"].get("channels") or [])]

    return cfg


def _as_int_list(x: Any) -> List[int]:
    if x is None:
        return []
    if isinstance(x, (tuple, list)):
        return [int(v) for v in x]
    if hasattr(x, "tolist"):
        return _as_int_list(x.tolist())
    return [int(x)]

"""Tests for configuration loading and normalization."""

import json

import pytest

from visual_reject.config import channel_scales, config_get, load_config, normalize_config


def test_defaults():
    cfg = normalize_config({})
    assert cfg["channel"] == "all"
    assert cfg["trials"] == "all"
    assert cfg["latency"] == "maxperlength"
    assert cfg["method"] == "summary"
    assert cfg["metric"] == "var"
    assert cfg["keepchannel"] == "no"
    assert cfg["reject"] == {"trials": [], "channels": []}
    assert channel_scales(cfg) == {"EEG": None, "EOG": None, "ECG": None, "MEG": None}


def test_input_not_mutated():
    raw = {"method": "TRIAL"}
    normalize_config(raw)
    assert raw == {"method": "TRIAL"}


def test_normalization_is_idempotent():
    cfg = normalize_config({"latency": [0, "0.5"], "trials": [2, 0], "eegscale": "2", "channel": "Cz"})
    assert cfg["latency"] == [0.0, 0.5]
    assert cfg["trials"] == [2, 0]
    assert cfg["eegscale"] == 2.0
    assert cfg["channel"] == ["Cz"]
    assert normalize_config(cfg) == cfg


def test_legacy_absmax_renamed():
    assert normalize_config({"metric": "absmax"})["metric"] == "maxabs"


@pytest.mark.parametrize("legacy", ["var", "range", "absmax"])
def test_legacy_metric_in_method(legacy):
    cfg = normalize_config({"method": legacy})
    assert cfg["method"] == "summary"
    assert cfg["metric"] == ("maxabs" if legacy == "absmax" else legacy)


def test_validation_collects_errors():
    with pytest.raises(ValueError) as exc:
        normalize_config({"method": "browse", "keepchannel": "maybe", "latency": "middle", "megscale": "big"})
    msg = str(exc.value)
    assert msg.startswith("Config validation failed")
    for key in ("method", "keepchannel", "latency", "megscale"):
        assert key in msg


@pytest.mark.parametrize("latency", [[1.0], ["a", "b"]])
def test_bad_latency_pair(latency):
    with pytest.raises(ValueError, match="latency"):
        normalize_config({"latency": latency})


def test_bad_trials():
    with pytest.raises(ValueError, match="trials"):
        normalize_config({"trials": [-1]})


def test_load_yaml(tmp_path):
    p = tmp_path / "reject.yml"
    p.write_text("method: channel\nkeepchannel: nan\nreject:\n  channels: [Fp1]\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg["method"] == "channel"
    assert cfg["keepchannel"] == "nan"
    assert config_get(cfg, "reject.channels") == ["Fp1"]
    assert config_get(cfg, "reject.trials") == []
    assert config_get(cfg, "reject.nothing.here", 5) == 5


def test_load_json(tmp_path):
    p = tmp_path / "reject.json"
    p.write_text(json.dumps({"latency": "prestim", "eogscale": 0.5}), encoding="utf-8")
    cfg = load_config(p)
    assert cfg["latency"] == "prestim"
    assert channel_scales(cfg)["EOG"] == 0.5


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yml")


def test_unsupported_extension(tmp_path):
    p = tmp_path / "reject.ini"
    p.write_text("", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported"):
        load_config(p)


@pytest.mark.parametrize("text, expected", [("keepchannel: no\n", "no"), ("keepchannel: yes\n", "yes"), ("keepchannel: nan\n", "nan")])
def test_yaml_keepchannel_booleans(tmp_path, text, expected):
    p = tmp_path / "reject.yaml"
    p.write_text(text, encoding="utf-8")
    assert load_config(p)["keepchannel"] == expected

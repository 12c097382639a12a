"""Tests for applying channel/trial selections and deriving artifact tables."""

import numpy as np
import pytest

from visual_reject.reconcile import reconcile, split_trl

from conftest import make_data

TRL = np.array([[0, 99], [100, 199], [200, 299]])


def test_artifact_and_retained_tables(data):
    rec = reconcile(data, np.ones(3, bool), np.array([True, False, True]), trl=TRL)
    assert rec.artifact.tolist() == [[100, 199]]
    assert rec.trl.tolist() == [[0, 99], [200, 299]]
    assert rec.trlold.tolist() == TRL.tolist()
    assert rec.warnings == []


def test_retained_rows_keep_extra_columns():
    trl = np.array([[0, 9, -2, 7], [10, 19, -2, 8]])
    artifact, retained = split_trl(trl, np.array([False, True]))
    assert artifact.tolist() == [[0, 9]]
    assert retained.tolist() == [[10, 19, -2, 8]]


def test_trl_is_reduced_to_trial_subset():
    d = make_data(spans=((0, 1), (0, 1)))
    trl = np.array([[0, 9], [10, 19], [20, 29], [30, 39]])
    rec = reconcile(d, np.ones(3, bool), np.array([False, True]), trl=trl, trials=[3, 1])
    assert rec.artifact.tolist() == [[30, 39]]
    assert rec.trl.tolist() == [[10, 19]]
    assert rec.trlold.shape == (4, 2)


def test_missing_trl_warns(data, capsys):
    rec = reconcile(data, np.ones(3, bool), np.array([True, False, True]), trl=None)
    assert rec.artifact.shape == (0, 2)
    assert rec.trl.shape == (0, 2)
    assert rec.trlold.size == 0
    assert len(rec.warnings) == 1
    assert "[WARN]" in capsys.readouterr().out
    assert rec.data.n_trials == 2


def test_trl_row_mismatch_raises(data):
    with pytest.raises(ValueError, match="rows"):
        reconcile(data, np.ones(3, bool), np.ones(3, bool), trl=TRL[:2])


@pytest.mark.parametrize("mask", [[True, True, True], [False, True, False], [False, False, False], [True, False, True]])
def test_trial_filtering_preserves_order(data, mask):
    rec = reconcile(data, np.ones(3, bool), np.array(mask), trl=TRL)
    kept = [i for i, m in enumerate(mask) if m]
    assert rec.data.n_trials == sum(mask)
    for out_t, i in zip(rec.data.time, kept):
        assert np.array_equal(out_t, data.time[i])
    assert rec.removed_trials == [i for i, m in enumerate(mask) if not m]


def test_keepchannel_no_drops_rows(data, capsys):
    rec = reconcile(data, np.array([True, False, True]), np.ones(3, bool), trl=TRL, keepchannel="no")
    assert rec.data.label == ["Fz", "EOGv"]
    assert rec.data.ch_types == ["eeg", "eog"]
    assert all(x.shape[0] == 2 for x in rec.data.trial)
    assert np.allclose(rec.data.trial[0][1], 3.0)
    assert rec.removed_channels == ["Cz"]
    assert "the following channels were removed: Cz" in capsys.readouterr().out


def test_keepchannel_nan_fills_rows(data, capsys):
    rec = reconcile(data, np.array([False, True, False]), np.array([True, False, True]), trl=TRL, keepchannel="nan")
    assert rec.data.label == data.label
    assert rec.data.n_trials == 2
    for x in rec.data.trial:
        assert x.shape[0] == 3
        assert np.isnan(x[0]).all() and np.isnan(x[2]).all()
        assert np.allclose(x[1], 2.0)
    assert "filled with NANs: Fz, EOGv" in capsys.readouterr().out


def test_keepchannel_yes_is_silent_noop(data, capsys):
    rec = reconcile(data, np.array([False, False, True]), np.ones(3, bool), trl=TRL, keepchannel="yes")
    assert rec.data.label == data.label
    for x, y in zip(rec.data.trial, data.trial):
        assert np.array_equal(x, y)
    assert rec.removed_channels == []
    assert "channels" not in capsys.readouterr().out


def test_all_channels_rejected(data):
    rec = reconcile(data, np.zeros(3, bool), np.ones(3, bool), trl=TRL)
    assert rec.data.label == []
    assert all(x.shape == (0, y.shape[1]) for x, y in zip(rec.data.trial, data.trial))


def test_identity_selection_drops_offset_only():
    d = make_data(offset=np.array([1, 2, 3]))
    rec = reconcile(d, np.ones(3, bool), np.ones(3, bool), trl=TRL)
    assert rec.data.offset is None
    assert rec.data.label == d.label
    for x, y in zip(rec.data.trial, d.trial):
        assert np.array_equal(x, y)
    assert rec.artifact.shape == (0, 2)


def test_input_not_mutated(data):
    before = [x.copy() for x in data.trial]
    reconcile(data, np.array([True, False, True]), np.array([True, False, True]), trl=TRL, keepchannel="nan")
    assert data.n_trials == 3
    for x, y in zip(data.trial, before):
        assert np.array_equal(x, y)


def test_unknown_keepchannel_raises(data):
    with pytest.raises(ValueError, match="keepchannel"):
        reconcile(data, np.ones(3, bool), np.ones(3, bool), keepchannel="maybe")

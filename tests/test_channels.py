"""Tests for channel classification and selection."""

from visual_reject.channels import channel_selection, channels_in_group

LABELS = ["Fp1", "Cz", "VEOG", "ECG1", "MLC11", "MEG0113", "Trigger"]


def test_groups_by_label_conventions():
    assert channels_in_group("EEG", LABELS) == ["Fp1", "Cz"]
    assert channels_in_group("EOG", LABELS) == ["VEOG"]
    assert channels_in_group("ECG", LABELS) == ["ECG1"]
    assert channels_in_group("MEG", LABELS) == ["MLC11", "MEG0113"]


def test_groups_prefer_channel_types():
    labels = ["A", "B", "C", "D"]
    types = ["eeg", "eog", "mag", "grad"]
    assert channels_in_group("eeg", labels, types) == ["A"]
    assert channels_in_group("EOG", labels, types) == ["B"]
    assert channels_in_group("MEG", labels, types) == ["C", "D"]


def test_unknown_group_is_empty():
    assert channels_in_group("EMG", LABELS) == []


def test_selection_all_and_none():
    assert channel_selection("all", LABELS) == LABELS
    assert channel_selection(None, LABELS) == LABELS


def test_selection_explicit_keeps_label_order():
    assert channel_selection(["Cz", "Fp1", "missing"], LABELS) == ["Fp1", "Cz"]


def test_selection_negation_only_starts_from_all():
    assert channel_selection(["-Cz", "-MEG"], LABELS) == ["Fp1", "VEOG", "ECG1", "Trigger"]


def test_selection_group_minus_label():
    assert channel_selection(["EEG", "-Fp1"], LABELS) == ["Cz"]

"""Tests for condition extraction and label formatting."""
import pytest
from ..conditions import (
    and_conditions, describe_conditions, extract_conditions, format_condition_list,
    format_time, format_voltage, non_zero_conditions, or_conditions, setting_label,
    target_conditions,
)


def test_extracts_condition_lists():
    item = {"cdn_and": ["ign", "mov"], "cdn_or": ["can"], "cdn_targ": ["ign"]}
    assert and_conditions(item) == ["ign", "mov"]
    assert or_conditions(item) == ["can"]
    assert target_conditions(item) == ["ign"]


def test_missing_or_non_list_fields_become_empty():
    item = {"cdn_and": "ign", "cdn_or": None, "extra": [1, 2]}
    assert and_conditions(item) == []
    assert or_conditions(item) == []
    assert target_conditions(item) == []


def test_non_mapping_condition_object_becomes_empty():
    for item in (None, [], "cdn_and", 3):
        assert and_conditions(item) == []
        assert or_conditions(item) == []
        assert target_conditions(item) == []


def test_extracted_lists_are_copies():
    """Mutating the result must not reach back into the document."""
    item = {"cdn_and": ["ign"]}
    result = and_conditions(item)
    result.append("mov")
    assert item["cdn_and"] == ["ign"]


@pytest.mark.parametrize("ms, expected", [
    (5400000, "1.5 hrs"),
    (3600000, "1hrs"),
    (86400000, "24hrs"),
    (90000, "1.5 m"),
    (120000, "2m"),
    (2000, "2s"),
    (1500, "1.5s"),
    (1250, "1.25s"),
    (4500000, "1.25 hrs"),
])
def test_format_time(ms, expected):
    assert format_time(ms) == expected


def test_format_time_unit_boundaries():
    assert format_time(59999) == "60s"
    assert format_time(60000) == "1m"
    assert format_time(3599000) == "59.98 m"


@pytest.mark.parametrize("raw, expected", [
    (132000, "13.2 V"),
    (120000, "12 V"),
    (33000, "3.3 V"),
    (123456, "12.3456 V"),
    (5, "0.0005 V"),
])
def test_format_voltage_drops_trailing_zeros(raw, expected):
    assert format_voltage(raw) == expected


def test_setting_labels():
    assert setting_label("hysteresis") == "Hysteresis"
    assert setting_label("mov_timeout") == "Movement Timeout"
    assert setting_label("state_timeout") == "State Timeout"
    assert setting_label("vbat_v") == "Vehicle Battery"
    assert setting_label("vin_v") == "Voltage"
    assert setting_label("ain0_v") == "Analog Input 0"
    assert setting_label("ain1_v") == "Analog Input 1"


def test_unnamed_setting_label_is_title_cased():
    assert setting_label("wake_up_delay") == "Wake Up Delay"


@pytest.mark.parametrize("settings, expected", [
    ({"hysteresis": 5400000}, ["Hysteresis: 1.5 hrs"]),
    ({"mov_timeout": 90000}, ["Movement Timeout: 1.5 m"]),
    ({"state_timeout": 2000}, ["State Timeout: 2s"]),
    ({"vbat_v": 132000}, ["Vehicle Battery: 13.2 V"]),
])
def test_non_zero_condition_labels(settings, expected):
    assert non_zero_conditions(settings) == expected


def test_all_zero_settings_give_no_labels():
    settings = {key: 0 for key in (
        "ain0_v", "ain1_v", "vbat_v", "vin_v", "hysteresis", "mov_timeout", "state_timeout"
    )}
    assert non_zero_conditions(settings) == []


def test_non_zero_labels_follow_allow_list_order():
    """Output order is fixed, whatever order the document lists keys in."""
    settings = {"state_timeout": 2000, "hysteresis": 1000, "vin_v": 120000, "ain0_v": 33000}
    assert non_zero_conditions(settings) == [
        "Analog Input 0: 3.3 V",
        "Voltage: 12 V",
        "Hysteresis: 1s",
        "State Timeout: 2s",
    ]


def test_non_allow_listed_and_non_numeric_settings_are_skipped():
    settings = {"spare": 7, "vbat_v": "132000", "vin_v": True, "hysteresis": None,
                "mov_timeout": float("nan"), "state_timeout": 2000}
    assert non_zero_conditions(settings) == ["State Timeout: 2s"]


def test_out_of_range_settings_are_skipped():
    settings = {"hysteresis": 10 ** 400, "vbat_v": 10 ** 400, "vin_v": float("inf"),
                "ain0_v": float("-inf"), "state_timeout": 2000}
    assert non_zero_conditions(settings) == ["State Timeout: 2s"]


def test_non_mapping_settings_give_no_labels():
    assert non_zero_conditions(None) == []
    assert non_zero_conditions([("vbat_v", 1)]) == []


def test_extract_conditions_payload():
    payload = extract_conditions(
        {"cdn_and": ["ign"], "cdn_targ": ["ign"]},
        {"vbat_v": 132000},
    )
    assert payload == {
        "and": ["ign"],
        "or": [],
        "targ": ["ign"],
        "nonZero": ["Vehicle Battery: 13.2 V"],
    }


def test_format_condition_list_tags_targets():
    assert format_condition_list(["a", "b"], "or", ["b"]) == "a : 0 or b : 1"
    assert format_condition_list([], "or", ["b"]) == ""


def test_describe_and_only():
    assert describe_conditions(["x", "y"], [], ["x"]) == "x : 1 and y : 0"


def test_describe_or_only():
    assert describe_conditions([], ["mov", "can"], ["mov"]) == "mov : 1 or can : 0"


def test_describe_and_with_or_group():
    assert (describe_conditions(["ign"], ["can", "mov"], ["mov"])
            == "ign : 0 and {can : 0 or mov : 1}")


def test_describe_empty_is_none():
    assert describe_conditions([], []) == "NONE"
    assert describe_conditions([], [], ["x"]) == "NONE"


def test_unknown_target_names_are_ignored():
    """Target names outside the and/or lists are silently dropped."""
    assert describe_conditions(["x"], [], ["z"]) == "x : 0"

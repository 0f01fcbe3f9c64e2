"""Condition extraction and label formatting for transition nodes.

A transition's condition object looks like::

    {"cdn_and": ["ign"], "cdn_or": ["can", "mov"], "cdn_targ": ["ign"]}

and its settings object is a flat mapping of setting name to raw number.
Everything here is total: malformed input degrades to empty lists, never
an exception.
"""
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional

# Output order of non-zero labels follows this tuple, not the input mapping
ALLOWED_SETTINGS = (
    "ain0_v",
    "ain1_v",
    "vbat_v",
    "vin_v",
    "hysteresis",
    "mov_timeout",
    "state_timeout",
)

TIME_SETTINGS = frozenset({"hysteresis", "mov_timeout", "state_timeout"})
VOLTAGE_SETTINGS = frozenset({"vbat_v", "vin_v", "ain0_v", "ain1_v"})

SETTING_LABELS = {
    "hysteresis": "Hysteresis",
    "mov_timeout": "Movement Timeout",
    "state_timeout": "State Timeout",
    "vbat_v": "Vehicle Battery",
    "vin_v": "Voltage",
    "ain0_v": "Analog Input 0",
    "ain1_v": "Analog Input 1",
}

# Raw voltage readings are in 1/10000 V
VOLTAGE_SCALE = 10000

NONE_LABEL = "NONE"


def _string_list(item: Any, field: str) -> List[str]:
    if not isinstance(item, Mapping):
        return []
    values = item.get(field)
    if not isinstance(values, list):
        return []
    return list(values)


def and_conditions(item: Any) -> List[str]:
    """Return the AND group of a condition object."""
    return _string_list(item, "cdn_and")


def or_conditions(item: Any) -> List[str]:
    """Return the OR group of a condition object."""
    return _string_list(item, "cdn_or")


def target_conditions(item: Any) -> List[str]:
    """Return the names marked target-satisfied in a condition object."""
    return _string_list(item, "cdn_targ")


def _trim(text: str) -> str:
    return text.rstrip("0").rstrip(".")


def format_time(milliseconds: float) -> str:
    """Format a millisecond duration as hours, minutes or seconds.

    Whole values drop the decimals and the space (``2s``, ``1hrs``);
    fractional ones keep up to two decimals (``1.5 hrs``, ``1.5 m``, ``1.25s``).
    """
    seconds = milliseconds / 1000
    if seconds >= 3600:
        amount, unit, spaced = seconds / 3600, "hrs", True
    elif seconds >= 60:
        amount, unit, spaced = seconds / 60, "m", True
    else:
        amount, unit, spaced = seconds, "s", False

    text = f"{amount:.2f}"
    if text.endswith(".00"):
        return f"{int(float(text))}{unit}"
    text = _trim(text)
    return f"{text} {unit}" if spaced else f"{text}{unit}"


def format_voltage(raw: float) -> str:
    """Format a raw 1/10000 V reading, e.g. 132000 -> '13.2 V'."""
    volts = raw / VOLTAGE_SCALE
    text = f"{volts:.4f}"
    if "." in text:
        text = _trim(text)
    return f"{text} V"


def setting_label(key: str) -> str:
    """Human name for a setting key; unnamed keys are title-cased."""
    if key in SETTING_LABELS:
        return SETTING_LABELS[key]
    return " ".join(word[:1].upper() + word[1:] for word in key.split("_"))


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def format_setting(key: str, value: float) -> str:
    if key in TIME_SETTINGS:
        display = format_time(value)
    elif key in VOLTAGE_SETTINGS:
        display = format_voltage(value)
    else:
        display = f"{value}"
    return f"{setting_label(key)}: {display}"


def non_zero_conditions(settings: Any) -> List[str]:
    """Return display strings for every allow-listed, non-zero setting."""
    if not isinstance(settings, Mapping):
        return []

    labels = []
    for key in ALLOWED_SETTINGS:
        value = settings.get(key)
        if not _is_number(value) or value == 0:
            continue
        labels.append(format_setting(key, value))
    return labels


def extract_conditions(condition: Any, settings: Any) -> Dict[str, List[str]]:
    """Build the condition-node payload for one transition."""
    return {
        "and": and_conditions(condition),
        "or": or_conditions(condition),
        "targ": target_conditions(condition),
        "nonZero": non_zero_conditions(settings),
    }


def format_condition_list(conditions: Iterable[str], separator: str,
                          targets: Optional[Iterable[str]] = None) -> str:
    """Join condition names with ``separator``, tagging each ``: 1`` or ``: 0``.

    A name is tagged ``: 1`` only when it appears in ``targets``. Target
    names that are not in ``conditions`` are ignored.
    """
    targets = list(targets or ())
    parts = []
    for name in conditions:
        suffix = " : 1" if name in targets else " : 0"
        parts.append(f"{name}{suffix}")
    return f" {separator} ".join(parts)


def describe_conditions(and_list: List[str], or_list: List[str],
                        targ_list: Optional[List[str]] = None) -> str:
    """Compose the one-line description shown on a condition node."""
    if and_list and or_list:
        return (f"{format_condition_list(and_list, 'and', targ_list)}"
                f" and {{{format_condition_list(or_list, 'or', targ_list)}}}")
    if or_list:
        return format_condition_list(or_list, "or", targ_list)
    if and_list:
        return format_condition_list(and_list, "and", targ_list)
    return NONE_LABEL

import configparser
from pathlib import Path

from discover_ui.ui_config import (
    ADVANCE_DELAY_MS,
    BATCH_SIZE,
    DIFFICULTY_ORDER,
    MAX_VISIBLE_ORDER,
    SWIPE_THRESHOLD_RATIO,
    THEME_ORDER,
    VELOCITY_THRESHOLD,
)

SETTINGS_PATH = Path(__file__).with_name("settings.ini")

DEFAULT_SETTINGS = {
    "theme_name": "Paprika",
    "max_visible": "3",
    "batch_size": str(BATCH_SIZE),
    "difficulty": "any",
    "threshold_ratio": str(SWIPE_THRESHOLD_RATIO),
    "velocity_threshold": str(VELOCITY_THRESHOLD),
    "advance_delay_ms": str(ADVANCE_DELAY_MS),
}
UI_KEYS = ("theme_name", "max_visible", "batch_size", "difficulty")
SWIPE_KEYS = ("threshold_ratio", "velocity_threshold", "advance_delay_ms")


def _clamped_float(raw, default, low, high):
    try:
        value = float(raw)
    except Exception:
        value = float(default)
    return min(high, max(low, value))


def _clamped_int(raw, default, low, high):
    try:
        value = int(raw)
    except Exception:
        value = int(default)
    return min(high, max(low, value))


def _sanitize(settings):
    data = dict(DEFAULT_SETTINGS)
    data.update({k: str(v) for k, v in settings.items() if k in DEFAULT_SETTINGS})

    if data["theme_name"] not in THEME_ORDER:
        data["theme_name"] = DEFAULT_SETTINGS["theme_name"]
    if data["difficulty"] != "any" and data["difficulty"] not in DIFFICULTY_ORDER:
        data["difficulty"] = DEFAULT_SETTINGS["difficulty"]

    max_visible = _clamped_int(data["max_visible"], DEFAULT_SETTINGS["max_visible"], 1, MAX_VISIBLE_ORDER[-1])
    data["max_visible"] = str(max_visible)
    data["batch_size"] = str(_clamped_int(data["batch_size"], DEFAULT_SETTINGS["batch_size"], 1, 100))
    data["threshold_ratio"] = str(
        _clamped_float(data["threshold_ratio"], DEFAULT_SETTINGS["threshold_ratio"], 0.05, 0.9)
    )
    data["velocity_threshold"] = str(
        _clamped_float(data["velocity_threshold"], DEFAULT_SETTINGS["velocity_threshold"], 0.0, 5000.0)
    )
    data["advance_delay_ms"] = str(
        _clamped_int(data["advance_delay_ms"], DEFAULT_SETTINGS["advance_delay_ms"], 0, 1000)
    )
    return data


def load_settings():
    parser = configparser.ConfigParser()
    if not SETTINGS_PATH.exists():
        return dict(DEFAULT_SETTINGS)
    try:
        parser.read(SETTINGS_PATH, encoding="utf-8")
    except Exception:
        return dict(DEFAULT_SETTINGS)
    raw = {}
    if "ui" in parser:
        for key in UI_KEYS:
            raw[key] = parser["ui"].get(key, DEFAULT_SETTINGS[key])
    if "swipe" in parser:
        for key in SWIPE_KEYS:
            raw[key] = parser["swipe"].get(key, DEFAULT_SETTINGS[key])
    return _sanitize(raw)


def save_settings(settings):
    data = _sanitize(settings)
    parser = configparser.ConfigParser()
    parser["ui"] = {key: data[key] for key in UI_KEYS}
    parser["swipe"] = {key: data[key] for key in SWIPE_KEYS}
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with SETTINGS_PATH.open("w", encoding="utf-8") as f:
        parser.write(f)

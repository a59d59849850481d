import json
import logging
import math
from datetime import date
from pathlib import Path

from swipe.resolver import DIRECTIONS

logger = logging.getLogger(__name__)

STATS_PATH = Path(__file__).with_name("stats.json")

SCORE_CAP = 20
RECENCY_PENALTY_PER_DAY = 2


def _default_stats():
    return {
        "total_swipes": 0,
        "right_swipes": 0,
        "left_swipes": 0,
        "up_swipes": 0,
        "down_swipes": 0,
        "matches": 0,
        "recipes_cooked": 0,
        "total_cook_time": 0,
        "last_active": "",
        "daily_streak": 0,
        "longest_streak": 0,
        "engagement_score": 0,
    }


def _as_int(value, default=0):
    try:
        return int(value)
    except Exception:
        return int(default)


def _as_date(value):
    try:
        return date.fromisoformat(str(value))
    except Exception:
        return None


def _sanitize(data):
    out = _default_stats()
    if not isinstance(data, dict):
        return out
    for key, default in out.items():
        if key == "last_active":
            parsed = _as_date(data.get(key))
            out[key] = parsed.isoformat() if parsed else ""
            continue
        out[key] = max(0, _as_int(data.get(key), default))
    out["longest_streak"] = max(out["longest_streak"], out["daily_streak"])
    return out


def load_stats():
    if not STATS_PATH.exists():
        return _default_stats()
    try:
        return _sanitize(json.loads(STATS_PATH.read_text(encoding="utf-8")))
    except Exception:
        logger.exception("Could not read stats %s", STATS_PATH)
        return _default_stats()


def save_stats(stats):
    STATS_PATH.parent.mkdir(parents=True, exist_ok=True)
    STATS_PATH.write_text(json.dumps(_sanitize(stats), ensure_ascii=False, indent=2), encoding="utf-8")


def _days_since_active(stats, today: date):
    last = _as_date(stats["last_active"])
    if last is None:
        return None
    return (today - last).days


def update_streak(stats, today: date):
    """Consecutive-day activity: same day keeps the streak, next day extends it, a gap restarts it."""
    stats = _sanitize(stats)
    days = _days_since_active(stats, today)
    if days is None or days > 1 or stats["daily_streak"] == 0:
        stats["daily_streak"] = 1
    elif days == 1:
        stats["daily_streak"] += 1
    stats["longest_streak"] = max(stats["longest_streak"], stats["daily_streak"])
    stats["last_active"] = today.isoformat()
    return stats


def record_swipe(stats, direction, today: date):
    if direction not in DIRECTIONS:
        raise ValueError(f"unknown swipe direction {direction!r}")
    stats = update_streak(stats, today)
    stats["total_swipes"] += 1
    stats[f"{direction}_swipes"] += 1
    return stats


def record_match(stats, today: date):
    stats = update_streak(stats, today)
    stats["matches"] += 1
    return stats


def record_cooked_recipe(stats, today: date, cook_time: int = 0):
    stats = update_streak(stats, today)
    stats["recipes_cooked"] += 1
    stats["total_cook_time"] += max(0, int(cook_time))
    return stats


def match_rate(stats) -> float:
    total = stats["total_swipes"]
    return stats["matches"] / total * 100.0 if total > 0 else 0.0


def like_rate(stats) -> float:
    total = stats["total_swipes"]
    return stats["right_swipes"] / total * 100.0 if total > 0 else 0.0


def calculate_engagement_score(stats, today: date):
    stats = _sanitize(stats)
    swipe_score = min(stats["total_swipes"] / 100, SCORE_CAP)
    match_score = min(stats["matches"] / 10, SCORE_CAP)
    cook_score = min(stats["recipes_cooked"] / 5, SCORE_CAP)
    streak_score = min(stats["daily_streak"] / 7, SCORE_CAP)
    days = _days_since_active(stats, today)
    recency_score = 0 if days is None else max(SCORE_CAP - max(0, days) * RECENCY_PENALTY_PER_DAY, 0)
    # Halves round up.
    stats["engagement_score"] = math.floor(swipe_score + match_score + cook_score + streak_score + recency_score + 0.5)
    return stats

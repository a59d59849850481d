import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from swipe.resolver import DIRECTIONS, RIGHT

logger = logging.getLogger(__name__)

SWIPES_PATH = Path(__file__).with_name("swipes.json")
FAVORITE_DIRECTIONS = (RIGHT,)
MATCH_DIRECTIONS = (RIGHT,)


def _default_data():
    return {"swipes": [], "favorites": []}


def _sanitize(data):
    out = _default_data()
    if not isinstance(data, dict):
        return out
    seen = set()
    for row in data.get("swipes") or []:
        if not isinstance(row, dict):
            continue
        recipe_id = str(row.get("recipe_id", "")).strip()
        direction = row.get("direction")
        if not recipe_id or direction not in DIRECTIONS or recipe_id in seen:
            continue
        seen.add(recipe_id)
        out["swipes"].append(
            {
                "recipe_id": recipe_id,
                "direction": direction,
                "timestamp": str(row.get("timestamp", "")),
                "session_id": str(row.get("session_id", "")),
            }
        )
    favorites = []
    for recipe_id in data.get("favorites") or []:
        recipe_id = str(recipe_id).strip()
        if recipe_id and recipe_id not in favorites:
            favorites.append(recipe_id)
    out["favorites"] = favorites
    return out


def load_swipes():
    if not SWIPES_PATH.exists():
        return _default_data()
    try:
        return _sanitize(json.loads(SWIPES_PATH.read_text(encoding="utf-8")))
    except Exception:
        logger.exception("Could not read swipe history %s", SWIPES_PATH)
        return _default_data()


def save_swipes(data):
    SWIPES_PATH.parent.mkdir(parents=True, exist_ok=True)
    SWIPES_PATH.write_text(json.dumps(_sanitize(data), ensure_ascii=False, indent=2), encoding="utf-8")


def has_swiped(data, recipe_id) -> bool:
    recipe_id = str(recipe_id)
    return any(row["recipe_id"] == recipe_id for row in data["swipes"])


def swiped_ids(data) -> set[str]:
    return {row["recipe_id"] for row in data["swipes"]}


def record_swipe(data, recipe_id, direction, session_id="", now: datetime | None = None):
    """Append a swipe; a recipe can only be swiped once. Right swipes become favorites."""
    if direction not in DIRECTIONS:
        raise ValueError(f"unknown swipe direction {direction!r}")
    data = _sanitize(data)
    recipe_id = str(recipe_id)
    if has_swiped(data, recipe_id):
        raise ValueError(f"recipe {recipe_id} has already been swiped")
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    data["swipes"].append(
        {"recipe_id": recipe_id, "direction": direction, "timestamp": stamp, "session_id": str(session_id)}
    )
    if direction in FAVORITE_DIRECTIONS and recipe_id not in data["favorites"]:
        data["favorites"].append(recipe_id)
    return data


def swipe_history(data, limit: int = 20, direction: str | None = None) -> list[dict]:
    rows = [row for row in data["swipes"] if direction is None or row["direction"] == direction]
    rows.sort(key=lambda row: row["timestamp"], reverse=True)
    return rows[:max(0, limit)]


def swipe_counts(data) -> dict:
    counts = {d: 0 for d in DIRECTIONS}
    for row in data["swipes"]:
        counts[row["direction"]] += 1
    counts["total"] = len(data["swipes"])
    return counts


def matched_ids(data) -> list[str]:
    return [row["recipe_id"] for row in data["swipes"] if row["direction"] in MATCH_DIRECTIONS]


def add_favorite(data, recipe_id):
    data = _sanitize(data)
    recipe_id = str(recipe_id)
    if recipe_id not in data["favorites"]:
        data["favorites"].append(recipe_id)
    return data


def remove_favorite(data, recipe_id):
    data = _sanitize(data)
    data["favorites"] = [r for r in data["favorites"] if r != str(recipe_id)]
    return data


def list_favorites(data, recipes: list[dict]) -> list[dict]:
    by_id = {r["id"]: r for r in recipes}
    return [by_id[r] for r in data["favorites"] if r in by_id]


def export_user_data(swipes, stats, settings, path: Path, now: datetime | None = None) -> Path:
    clean = _sanitize(swipes)
    payload = {
        "exported_at": (now or datetime.now(timezone.utc)).isoformat(),
        "swipes": clean["swipes"],
        "favorites": clean["favorites"],
        "stats": stats,
        "settings": settings,
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("Exported user data to %s", path)
    return path


def delete_user_data(*paths: Path) -> bool:
    ok = True
    for path in (SWIPES_PATH,) + paths:
        try:
            if path.exists():
                path.unlink()
        except Exception:
            logger.exception("Could not delete %s", path)
            ok = False
    return ok

import json
import logging
import random
from pathlib import Path

from discover_ui.ui_config import DIFFICULTY_ORDER

logger = logging.getLogger(__name__)

RECIPES_PATH = Path(__file__).with_name("recipes.json")


def _as_int(value, default=0):
    try:
        return int(value)
    except Exception:
        return int(default)


def _as_str_list(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if str(v).strip()]


def _sanitize_recipe(raw):
    if not isinstance(raw, dict):
        return None
    recipe_id = str(raw.get("id", "")).strip()
    title = str(raw.get("title", "")).strip()
    if not recipe_id or not title:
        return None
    recipe = dict(raw)
    recipe["id"] = recipe_id
    recipe["title"] = title
    recipe["description"] = str(raw.get("description", ""))
    difficulty = str(raw.get("difficulty", "easy")).lower()
    recipe["difficulty"] = difficulty if difficulty in DIFFICULTY_ORDER else "easy"
    recipe["likes"] = max(0, _as_int(raw.get("likes"), 0))
    recipe["dislikes"] = max(0, _as_int(raw.get("dislikes"), 0))
    for key in ("tags", "dietary_tags", "cuisine"):
        recipe[key] = _as_str_list(raw.get(key))
    recipe["is_active"] = bool(raw.get("is_active", True))
    return recipe


def load_recipes(path: Path | None = None) -> list[dict]:
    path = path or RECIPES_PATH
    if not path.exists():
        logger.warning("Recipe catalogue %s not found", path)
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        logger.exception("Could not read recipe catalogue %s", path)
        return []
    raw_list = data.get("recipes") if isinstance(data, dict) else data
    if not isinstance(raw_list, list):
        return []

    recipes = []
    seen = set()
    for raw in raw_list:
        recipe = _sanitize_recipe(raw)
        if recipe is None or recipe["id"] in seen:
            continue
        seen.add(recipe["id"])
        recipes.append(recipe)
    return recipes


def save_recipes(recipes: list[dict], path: Path | None = None):
    path = path or RECIPES_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"recipes": recipes}, ensure_ascii=False, indent=2), encoding="utf-8")


def get_recipe(recipes: list[dict], recipe_id: str) -> dict | None:
    for recipe in recipes:
        if recipe["id"] == recipe_id:
            return recipe
    return None


def filter_recipes(recipes: list[dict], difficulty: str | None = None, cuisine: str | None = None) -> list[dict]:
    out = []
    for recipe in recipes:
        if not recipe.get("is_active", True):
            continue
        if difficulty and recipe.get("difficulty") != difficulty:
            continue
        if cuisine and cuisine.lower() not in (c.lower() for c in recipe.get("cuisine", [])):
            continue
        out.append(recipe)
    return out


def next_batch(
    recipes: list[dict],
    exclude_ids=(),
    limit: int = 10,
    difficulty: str | None = None,
    cuisine: str | None = None,
    rng: random.Random | None = None,
) -> list[dict]:
    """Random sample of active recipes the user has not swiped yet."""
    excluded = set(exclude_ids)
    options = [r for r in filter_recipes(recipes, difficulty, cuisine) if r["id"] not in excluded]
    if not options or limit <= 0:
        return []
    pick_rng = rng if rng is not None else random
    return [dict(r) for r in pick_rng.sample(options, min(limit, len(options)))]


def apply_reaction(recipe: dict, direction: str) -> dict:
    if direction == "right":
        recipe["likes"] = recipe.get("likes", 0) + 1
    elif direction == "left":
        recipe["dislikes"] = recipe.get("dislikes", 0) + 1
    return recipe

from discover_ui.ui_config import BACKGROUND_OPACITY, OVERLAYS, OVERLAY_MIN_TRAVEL_RATIO, STACK_OFFSET_Y, STACK_SCALE_STEP
from discover_ui.view_model import CardLayer, OverlayView, RecipeCardView, StackViewModel
from swipe.bridge import GestureBridge
from swipe.cursor import CardStackCursor
from swipe.resolver import DOWN, LEFT, RIGHT, UP

DEFAULT_RATING = 4.0


def format_cook_time(recipe: dict) -> str:
    if recipe.get("cookTime"):
        return str(recipe["cookTime"])
    minutes = recipe.get("cook_time")
    if isinstance(minutes, (int, float)) and minutes > 0:
        minutes = int(minutes)
        if minutes < 60:
            return f"{minutes}min"
        hours, mins = divmod(minutes, 60)
        return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"
    return "30min"


def calculate_rating(recipe: dict) -> float:
    if recipe.get("rating"):
        return float(recipe["rating"])
    likes = recipe.get("likes")
    dislikes = recipe.get("dislikes")
    if likes is not None and dislikes is not None:
        total = likes + dislikes
        if total == 0:
            return 0.0
        return likes / total * 5
    return DEFAULT_RATING


def display_tags(recipe: dict, limit: int = 3) -> tuple[str, ...]:
    tags = []
    for key in ("tags", "dietary_tags", "cuisine"):
        value = recipe.get(key) or []
        tags.extend(str(v) for v in value)
    return tuple(tags[:limit])


def overlay_opacity(travel: float, min_travel: float, threshold: float) -> float:
    """0 until ``min_travel``, 1 at and beyond ``threshold``, linear between."""
    if travel <= min_travel:
        return 0.0
    if travel >= threshold or threshold <= min_travel:
        return 1.0
    return (travel - min_travel) / (threshold - min_travel)


def background_offset(index: int) -> tuple[float, float]:
    return 1.0 - STACK_SCALE_STEP * index, float(STACK_OFFSET_Y * index)


class StackAdapter:
    """Turns cursor and gesture state into a renderer-friendly model."""

    @staticmethod
    def recipe_to_card(recipe: dict) -> RecipeCardView:
        return RecipeCardView(
            id=str(recipe.get("id", "")),
            title=str(recipe.get("title", "Untitled recipe")),
            description=str(recipe.get("description", "")),
            cook_time=format_cook_time(recipe),
            difficulty=str(recipe.get("difficulty", "easy")),
            rating=round(calculate_rating(recipe), 1),
            tags=display_tags(recipe),
            image_path=recipe.get("image_path") or None,
        )

    @staticmethod
    def snapshot(cursor: CardStackCursor, bridge: GestureBridge) -> StackViewModel:
        window = cursor.visible_window()
        channels = bridge.channels
        layers = []
        for index in range(len(window) - 1, -1, -1):
            card = StackAdapter.recipe_to_card(window[index])
            if index == 0 and channels is not None:
                layers.append(
                    CardLayer(
                        card=card,
                        index=0,
                        translate_x=channels.translate_x,
                        translate_y=channels.translate_y,
                        rotation=channels.rotation,
                        scale=channels.scale,
                        opacity=channels.opacity,
                        is_top=True,
                    )
                )
                continue
            scale, offset_y = background_offset(index)
            layers.append(
                CardLayer(
                    card=card,
                    index=index,
                    translate_x=0.0,
                    translate_y=offset_y,
                    rotation=0.0,
                    scale=scale,
                    opacity=BACKGROUND_OPACITY,
                    is_top=False,
                )
            )

        return StackViewModel(
            head=cursor.head,
            remaining=cursor.remaining,
            exhausted=not cursor.has_more(),
            gesture_state=bridge.state,
            layers=tuple(layers),
            overlays=StackAdapter.overlays(bridge),
        )

    @staticmethod
    def overlays(bridge: GestureBridge) -> tuple[OverlayView, ...]:
        channels = bridge.channels
        if channels is None:
            return ()
        threshold = bridge.thresholds.position_threshold
        min_travel = threshold * OVERLAY_MIN_TRAVEL_RATIO
        travel = {
            RIGHT: channels.translate_x,
            LEFT: -channels.translate_x,
            # Vertical channel is damped on screen; undo it to compare with the raw threshold.
            DOWN: channels.translate_y / bridge.vertical_damping if bridge.vertical_damping else 0.0,
            UP: -channels.translate_y / bridge.vertical_damping if bridge.vertical_damping else 0.0,
        }
        return tuple(
            OverlayView(
                direction=direction,
                label=OVERLAYS[direction]["label"],
                opacity=overlay_opacity(travel[direction], min_travel, threshold),
            )
            for direction in (RIGHT, LEFT, UP, DOWN)
        )

from dataclasses import dataclass


@dataclass(frozen=True)
class RecipeCardView:
    id: str
    title: str
    description: str
    cook_time: str
    difficulty: str
    rating: float
    tags: tuple[str, ...]
    image_path: str | None = None


@dataclass(frozen=True)
class CardLayer:
    card: RecipeCardView
    index: int
    translate_x: float
    translate_y: float
    rotation: float
    scale: float
    opacity: float
    is_top: bool


@dataclass(frozen=True)
class OverlayView:
    direction: str
    label: str
    opacity: float


@dataclass(frozen=True)
class StackViewModel:
    head: int
    remaining: int
    exhausted: bool
    gesture_state: str
    # Bottom-most layer first, so drawing in order leaves the top card last.
    layers: tuple[CardLayer, ...]
    overlays: tuple[OverlayView, ...]

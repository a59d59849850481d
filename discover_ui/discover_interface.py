import argparse
import logging
import time
import uuid
from datetime import date
from pathlib import Path
from tkinter import BOTH, Canvas, Tk, messagebox

from PIL import ImageTk

from discover_ui import recipe_store, stats_store, swipe_store
from discover_ui.adapter import StackAdapter
from discover_ui.card_face import RecipeCardRenderer
from discover_ui.settings_store import load_settings, save_settings
from discover_ui.ui_config import (
    CARD_HEIGHT_RATIO,
    CARD_WIDTH_RATIO,
    DIRECTION_ACTIONS,
    DISCOVER,
    FAVORITES,
    FPS_MS,
    KEY_DIRECTIONS,
    OVERLAYS,
    STATS,
    THEMES,
    THEME_ORDER,
    TOP_MARGIN_RATIO,
)
from swipe.bridge import DRAGGING, IDLE, GestureBridge
from swipe.cursor import CardStackCursor
from swipe.resolver import SwipeThresholds, Vector
from swipe.velocity import VelocityTracker

logger = logging.getLogger(__name__)

EXPORT_PATH = Path(__file__).with_name("user_data_export.json")


def blend(color_a: str, color_b: str, t: float) -> str:
    t = min(1.0, max(0.0, t))
    a = [int(color_a[i:i + 2], 16) for i in (1, 3, 5)]
    b = [int(color_b[i:i + 2], 16) for i in (1, 3, 5)]
    r, g, bb = (int(round(x + (y - x) * t)) for x, y in zip(a, b))
    return f"#{r:02x}{g:02x}{bb:02x}"


class DiscoverTkInterface:
    def __init__(self, width=900, height=760, recipes_path=None, batch_size=None):
        self.width = width
        self.height = height
        self.root = None
        self.canvas = None
        self.stage = DISCOVER
        self.message = ""

        self.settings = load_settings()
        self.theme_name = self.settings["theme_name"]
        self.max_visible = int(self.settings["max_visible"])
        self.batch_size = int(batch_size or self.settings["batch_size"])
        self.difficulty = None if self.settings["difficulty"] == "any" else self.settings["difficulty"]

        self.recipes_path = Path(recipes_path) if recipes_path else None
        self.recipes = recipe_store.load_recipes(self.recipes_path)
        self.swipes = swipe_store.load_swipes()
        self.stats = stats_store.load_stats()
        self.session_id = uuid.uuid4().hex[:12]

        self.clock = time.monotonic
        self.cursor = None
        self.bridge = None
        self.drag_anchor = (0.0, 0.0)
        self.tracker = VelocityTracker(clock=self.clock)
        self.selected_favorite = 0

        self.card_renderer = RecipeCardRenderer()
        self.runtime_tk_images = []
        self.needs_redraw = True

    @property
    def theme(self):
        return THEMES[self.theme_name]

    def run(self):
        self.root = Tk()
        self.root.title("Recipe Swipe")
        self.root.resizable(True, True)
        self.canvas = Canvas(self.root, width=self.width, height=self.height, highlightthickness=0, bd=0)
        self.canvas.pack(expand=1, fill=BOTH)

        self.root.bind("<Configure>", self.on_resize)
        self.root.bind("<Button-1>", self.on_press)
        self.root.bind("<B1-Motion>", self.on_drag)
        self.root.bind("<ButtonRelease-1>", self.on_release)
        self.root.bind("<FocusOut>", self.on_interrupt)
        self.root.bind("<Key>", self.on_key)
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

        self.start_discovery()
        self.tick()
        self.root.mainloop()

    def request_redraw(self):
        self.needs_redraw = True

    def build_thresholds(self):
        return SwipeThresholds.for_screen(
            self.width,
            ratio=float(self.settings["threshold_ratio"]),
            velocity_threshold=float(self.settings["velocity_threshold"]),
        )

    def swiped_ids(self):
        return swipe_store.swiped_ids(self.swipes)

    def fetch_batch(self):
        return recipe_store.next_batch(
            self.recipes, exclude_ids=self.swiped_ids(), limit=self.batch_size, difficulty=self.difficulty
        )

    def start_discovery(self):
        deck = self.fetch_batch()
        if self.cursor is None:
            self.cursor = CardStackCursor(
                deck,
                on_swipe=self.on_swipe,
                max_visible=self.max_visible,
                scheduler=self.root,
                advance_delay_ms=int(self.settings["advance_delay_ms"]),
                on_exhausted=self.on_stack_empty,
            )
            self.bridge = GestureBridge(
                self.cursor, self.root, self.width, self.height, self.build_thresholds(), clock=self.clock
            )
            self.bridge.on_change = self.request_redraw
        else:
            self.cursor.replace_deck(deck)
        self.stage = DISCOVER
        if deck:
            self.message = "Drag a card: right to like, left to pass, up to super like, down for later."
        else:
            self.message = "No more recipes! Check back later for new recipes."
        self.request_redraw()

    def on_swipe(self, card, direction):
        recipe_id = card["id"]
        logger.info("Swiped %s on recipe %s (%s)", direction, recipe_id, card.get("title"))
        today = date.today()
        if swipe_store.has_swiped(self.swipes, recipe_id):
            logger.warning("Recipe %s was already swiped, not recording again", recipe_id)
            return
        self.swipes = swipe_store.record_swipe(self.swipes, recipe_id, direction, session_id=self.session_id)
        self.stats = stats_store.record_swipe(self.stats, direction, today)
        if direction in swipe_store.MATCH_DIRECTIONS:
            self.stats = stats_store.record_match(self.stats, today)
        self.stats = stats_store.calculate_engagement_score(self.stats, today)

        recipe = recipe_store.get_recipe(self.recipes, recipe_id)
        if recipe is not None:
            recipe_store.apply_reaction(recipe, direction)
        self.message = f"Recipe {DIRECTION_ACTIONS[direction]}: {card.get('title', recipe_id)}"
        self.persist()

    def persist(self):
        swipe_store.save_swipes(self.swipes)
        stats_store.save_stats(self.stats)
        if self.recipes_path is not None:
            recipe_store.save_recipes(self.recipes, self.recipes_path)

    def on_stack_empty(self):
        logger.info("Deck exhausted after %d cards", len(self.cursor.deck))
        if self.root is not None:
            self.root.after(0, self.refill_deck)
        else:
            self.refill_deck()

    def refill_deck(self):
        if self.cursor is None or self.cursor.has_more():
            return
        deck = self.fetch_batch()
        if not deck:
            self.message = "No more recipes! Check back later for new recipes."
            self.request_redraw()
            return
        self.cursor.replace_deck(deck)
        self.message = f"Loaded {len(deck)} more recipes."
        self.request_redraw()

    def on_resize(self, event):
        if event.widget != self.root:
            return
        if event.width == self.width and event.height == self.height:
            return
        self.width = max(320, event.width)
        self.height = max(320, event.height)
        if self.bridge is not None:
            self.bridge.resize(self.width, self.height, self.build_thresholds())
        self.card_renderer.clear()
        self.request_redraw()

    def on_close(self):
        if not messagebox.askyesno("Quit", "Quit Recipe Swipe?"):
            return
        if self.bridge is not None:
            self.bridge.close()
        self.persist()
        save_settings(self.settings)
        self.root.destroy()

    # Pointer input

    def on_press(self, event):
        if self.stage != DISCOVER:
            self.stage = DISCOVER
            self.request_redraw()
            return
        if self.bridge is None or not self.is_point_in_top_card(event.x, event.y):
            return
        if not self.bridge.begin():
            return
        self.drag_anchor = (event.x, event.y)
        self.tracker.reset()
        self.tracker.add(event.x, event.y)

    def on_drag(self, event):
        if self.bridge is None or self.bridge.state != DRAGGING:
            return
        ax, ay = self.drag_anchor
        self.tracker.add(event.x, event.y)
        self.bridge.update(Vector(event.x - ax, event.y - ay))

    def on_release(self, event):
        if self.bridge is None or self.bridge.state != DRAGGING:
            return
        self.tracker.add(event.x, event.y)
        ax, ay = self.drag_anchor
        self.bridge.update(Vector(event.x - ax, event.y - ay))
        self.bridge.end(self.tracker.velocity())
        self.tracker.reset()

    def on_interrupt(self, _event=None):
        if self.bridge is not None:
            self.bridge.cancel()
        self.tracker.reset()

    def on_key(self, event):
        key = event.keysym
        if key == "Escape":
            self.on_interrupt()
            return
        if self.stage == FAVORITES and self.on_favorites_key(event):
            return
        if key in KEY_DIRECTIONS and self.stage == DISCOVER and self.bridge is not None:
            self.bridge.swipe(KEY_DIRECTIONS[key])
            return
        lower = key.lower()
        if lower == "f":
            self.stage = FAVORITES
            self.selected_favorite = 0
        elif lower == "s":
            self.stage = STATS
        elif lower == "d":
            self.stage = DISCOVER
        elif lower == "r":
            self.start_discovery()
        elif lower == "t":
            idx = THEME_ORDER.index(self.theme_name)
            self.theme_name = THEME_ORDER[(idx + 1) % len(THEME_ORDER)]
            self.settings["theme_name"] = self.theme_name
            save_settings(self.settings)
            self.card_renderer.clear()
        elif lower == "e":
            swipe_store.export_user_data(self.swipes, self.stats, self.settings, EXPORT_PATH)
            self.message = f"Exported your data to {EXPORT_PATH.name}."
        elif lower == "x" and self.stage == STATS:
            self.delete_user_data()
        self.request_redraw()

    def on_favorites_key(self, event) -> bool:
        favorites = swipe_store.list_favorites(self.swipes, self.recipes)
        key = event.keysym
        if key.isdigit():
            self.selected_favorite = min(max(0, int(key) - 1), max(0, len(favorites) - 1))
        elif key.lower() == "c" and favorites:
            recipe = favorites[self.selected_favorite]
            self.stats = stats_store.record_cooked_recipe(self.stats, date.today(), recipe.get("cook_time") or 0)
            self.stats = stats_store.calculate_engagement_score(self.stats, date.today())
            stats_store.save_stats(self.stats)
            self.message = f"Marked as cooked: {recipe['title']}"
        elif key == "BackSpace" and favorites:
            recipe = favorites[self.selected_favorite]
            self.swipes = swipe_store.remove_favorite(self.swipes, recipe["id"])
            swipe_store.save_swipes(self.swipes)
            self.selected_favorite = max(0, self.selected_favorite - 1)
            self.message = f"Removed from favorites: {recipe['title']}"
        else:
            return False
        self.request_redraw()
        return True

    def delete_user_data(self):
        if self.root is not None and not messagebox.askyesno("Delete data", "Delete all swipes and statistics?"):
            return
        swipe_store.delete_user_data(stats_store.STATS_PATH)
        self.swipes = swipe_store.load_swipes()
        self.stats = stats_store.load_stats()
        self.message = "Your swipes and statistics were deleted."
        self.start_discovery()

    # Frame loop

    def tick(self):
        if self.needs_redraw or (self.bridge is not None and self.bridge.state != IDLE):
            self.draw()
            self.needs_redraw = False
        self.root.after(FPS_MS, self.tick)

    def card_size(self):
        return self.width * CARD_WIDTH_RATIO, self.height * CARD_HEIGHT_RATIO

    def card_center(self):
        _, ch = self.card_size()
        return self.width * 0.5, self.height * TOP_MARGIN_RATIO + ch * 0.5

    def is_point_in_top_card(self, x, y):
        cw, ch = self.card_size()
        cx, cy = self.card_center()
        return abs(x - cx) <= cw * 0.5 and abs(y - cy) <= ch * 0.5

    def draw(self):
        if self.canvas is None:
            return
        c = self.canvas
        c.delete("all")
        self.runtime_tk_images = []
        self.draw_background(c)
        if self.stage == FAVORITES:
            self.draw_favorites(c)
        elif self.stage == STATS:
            self.draw_stats(c)
        else:
            self.draw_discover(c)
        self.draw_hud(c)

    def draw_background(self, c):
        theme = self.theme
        c.create_rectangle(0, 0, self.width, self.height, fill=theme["bg_base"], width=0)
        band_h = max(10, self.height // 18)
        for i in range(0, self.height + band_h, band_h):
            color = theme["bg_band_a"] if (i // band_h) % 2 == 0 else theme["bg_band_b"]
            c.create_rectangle(0, i, self.width, i + band_h, fill=color, width=0)

    def draw_discover(self, c):
        if self.cursor is None or self.bridge is None:
            return
        vm = StackAdapter.snapshot(self.cursor, self.bridge)
        theme = self.theme
        cx, cy = self.card_center()
        if vm.exhausted:
            c.create_text(cx, cy - 12, text="No more recipes!", fill=theme["hud_text"], font="Helvetica 22 bold")
            c.create_text(cx, cy + 20, text="Check back later for new recipes", fill=theme["hud_subtext"], font="Helvetica 13")
            return

        cw, ch = self.card_size()
        for layer in vm.layers:
            face = self.card_renderer.face(layer.card, int(cw), int(ch), theme, self.theme_name)
            sprite = self.card_renderer.sprite(face, layer.rotation, layer.scale, layer.opacity)
            tk_img = ImageTk.PhotoImage(sprite)
            self.runtime_tk_images.append(tk_img)
            c.create_image(cx + layer.translate_x, cy + layer.translate_y, image=tk_img)

        top = vm.layers[-1] if vm.layers else None
        if top is None or not top.is_top:
            return
        anchors = {
            "right": (-0.28, -0.38),
            "left": (0.28, -0.38),
            "up": (0.0, -0.44),
            "down": (0.0, 0.3),
        }
        for overlay in vm.overlays:
            if overlay.opacity <= 0.01:
                continue
            style = OVERLAYS[overlay.direction]
            ox, oy = anchors[overlay.direction]
            color = blend(theme["card_front"], style["color"], overlay.opacity * top.opacity)
            c.create_text(
                cx + top.translate_x + ox * cw,
                cy + top.translate_y + oy * ch,
                text=overlay.label,
                fill=color,
                angle=style["angle"] - top.rotation,
                font="Helvetica 30 bold",
            )

    def draw_favorites(self, c):
        theme = self.theme
        favorites = swipe_store.list_favorites(self.swipes, self.recipes)
        c.create_text(40, 40, anchor="nw", text="Your favorites", fill=theme["hud_text"], font="Helvetica 22 bold")
        if not favorites:
            c.create_text(40, 90, anchor="nw", text="Swipe right on a recipe to save it here.", fill=theme["hud_subtext"], font="Helvetica 13")
            return
        y = 90
        for i, recipe in enumerate(favorites[:9]):
            card = StackAdapter.recipe_to_card(recipe)
            marker = ">" if i == self.selected_favorite else " "
            line = f"{marker} {i + 1}. {card.title}  ({card.cook_time}, {card.difficulty}, ★ {card.rating:.1f})"
            c.create_text(40, y, anchor="nw", text=line, fill=theme["hud_text"], font="Helvetica 14")
            y += 30
        c.create_text(
            40, y + 10, anchor="nw", text="1-9 select | C cooked | Backspace remove | D discover",
            fill=theme["hud_subtext"], font="Helvetica 11",
        )

    def draw_stats(self, c):
        theme = self.theme
        stats = self.stats
        lines = [
            f"Swipes: {stats['total_swipes']}  (right {stats['right_swipes']}, left {stats['left_swipes']}, "
            f"up {stats['up_swipes']}, down {stats['down_swipes']})",
            f"Matches: {stats['matches']}  |  Match rate {stats_store.match_rate(stats):.1f}%",
            f"Cooked: {stats['recipes_cooked']}  |  Cook time {stats['total_cook_time']} min",
            f"Streak: {stats['daily_streak']} days (best {stats['longest_streak']})",
            f"Engagement score: {stats['engagement_score']}",
        ]
        c.create_text(40, 40, anchor="nw", text="Your stats", fill=theme["hud_text"], font="Helvetica 22 bold")
        y = 90
        for line in lines:
            c.create_text(40, y, anchor="nw", text=line, fill=theme["hud_text"], font="Helvetica 14")
            y += 28
        y += 12
        c.create_text(40, y, anchor="nw", text="Recent swipes", fill=theme["hud_subtext"], font="Helvetica 14 bold")
        for row in swipe_store.swipe_history(self.swipes, limit=8):
            y += 24
            recipe = recipe_store.get_recipe(self.recipes, row["recipe_id"])
            title = recipe["title"] if recipe else row["recipe_id"]
            c.create_text(40, y, anchor="nw", text=f"{row['direction']:>5}  {title}", fill=theme["hud_text"], font="Helvetica 12")
        c.create_text(
            40, self.height - 60, anchor="nw", text="E export data | X delete data | D discover",
            fill=theme["hud_subtext"], font="Helvetica 11",
        )

    def draw_hud(self, c):
        theme = self.theme
        left = self.cursor.remaining if self.cursor is not None else 0
        status = f"{left} left  |  score {self.stats['engagement_score']}  |  F favorites  S stats  R refresh  T theme"
        c.create_text(16, self.height - 30, anchor="w", text=self.message, fill=theme["hud_text"], font="Helvetica 12")
        c.create_text(self.width - 16, self.height - 30, anchor="e", text=status, fill=theme["hud_subtext"], font="Helvetica 11")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Swipe through recipes.")
    parser.add_argument("--recipes", type=str, default="", help="Recipe catalogue json path.")
    parser.add_argument("--batch-size", type=int, default=0, help="Cards per discovery batch.")
    parser.add_argument("--width", type=int, default=900, help="Window width.")
    parser.add_argument("--height", type=int, default=760, help="Window height.")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ui = DiscoverTkInterface(
        width=args.width,
        height=args.height,
        recipes_path=args.recipes or None,
        batch_size=args.batch_size or None,
    )
    started = time.perf_counter()
    ui.run()
    logger.info("Session %s closed after %.1f s", ui.session_id, time.perf_counter() - started)


if __name__ == "__main__":
    main()

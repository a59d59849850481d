DISCOVER = 1
FAVORITES = 2
STATS = 3

FPS_MS = 16
CARD_WIDTH_RATIO = 0.42
CARD_HEIGHT_RATIO = 0.7
TOP_MARGIN_RATIO = 0.1
STACK_SCALE_STEP = 0.05
STACK_OFFSET_Y = 8
BACKGROUND_OPACITY = 0.95

SWIPE_THRESHOLD_RATIO = 0.25
VELOCITY_THRESHOLD = 400.0
OVERLAY_MIN_TRAVEL_RATIO = 0.2
ADVANCE_DELAY_MS = 50
BATCH_SIZE = 10

MAX_VISIBLE_ORDER = (1, 2, 3, 4, 5)
THEME_ORDER = ("Paprika", "Basil", "Blueberry")
DIFFICULTY_ORDER = ("easy", "medium", "hard")

OVERLAYS = {
    "right": {"label": "LIKE", "color": "#22c55e", "angle": -15},
    "left": {"label": "NOPE", "color": "#ef4444", "angle": 15},
    "up": {"label": "SUPER!", "color": "#3b82f6", "angle": 0},
    "down": {"label": "LATER", "color": "#a855f7", "angle": 0},
}
DIRECTION_ACTIONS = {"right": "liked", "left": "passed", "up": "super liked", "down": "noted"}
KEY_DIRECTIONS = {"Left": "left", "Right": "right", "Up": "up", "Down": "down"}

THEMES = {
    "Paprika": {
        "bg_base": "#fff7ed",
        "bg_band_a": "#ffedd5",
        "bg_band_b": "#fef3e2",
        "hud_text": "#431407",
        "hud_subtext": "#9a3412",
        "card_front": "#ffffff",
        "card_border": "#fdba74",
        "card_shadow": "#e7cfb4",
        "accent": "#ea580c",
        "tag_fill": "#ffedd5",
        "tag_text": "#9a3412",
        "text_main": "#1f2937",
        "text_muted": "#6b7280",
    },
    "Basil": {
        "bg_base": "#ecfdf5",
        "bg_band_a": "#d1fae5",
        "bg_band_b": "#e6fbf1",
        "hud_text": "#064e3b",
        "hud_subtext": "#047857",
        "card_front": "#ffffff",
        "card_border": "#6ee7b7",
        "card_shadow": "#bfe6d3",
        "accent": "#059669",
        "tag_fill": "#d1fae5",
        "tag_text": "#065f46",
        "text_main": "#1f2937",
        "text_muted": "#6b7280",
    },
    "Blueberry": {
        "bg_base": "#0f172a",
        "bg_band_a": "#1e293b",
        "bg_band_b": "#172033",
        "hud_text": "#e2e8f0",
        "hud_subtext": "#93c5fd",
        "card_front": "#f8fafc",
        "card_border": "#60a5fa",
        "card_shadow": "#020617",
        "accent": "#2563eb",
        "tag_fill": "#dbeafe",
        "tag_text": "#1e3a8a",
        "text_main": "#0f172a",
        "text_muted": "#475569",
    },
}

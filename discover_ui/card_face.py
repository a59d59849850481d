import logging
import textwrap
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont, ImageOps

from discover_ui.view_model import RecipeCardView

logger = logging.getLogger(__name__)

RESAMPLE = Image.Resampling.LANCZOS
ROTATE_RESAMPLE = Image.Resampling.BICUBIC
ANGLE_STEP = 1.0
CACHE_LIMIT = 600
DIFFICULTY_COLORS = {"easy": "#16a34a", "medium": "#d97706", "hard": "#dc2626"}


class RecipeCardRenderer:
    """Draws recipe card faces with Pillow and caches transformed sprites for the canvas."""

    def __init__(self):
        self.face_cache = {}
        self.sprite_cache = {}
        self.fonts = {}

    def clear(self):
        self.face_cache.clear()
        self.sprite_cache.clear()

    def font(self, size: int):
        font = self.fonts.get(size)
        if font is None:
            font = ImageFont.load_default(size=size)
            self.fonts[size] = font
        return font

    def face(self, card: RecipeCardView, width: int, height: int, theme: dict, theme_name: str = "") -> Image.Image:
        key = (card, width, height, theme_name)
        img = self.face_cache.get(key)
        if img is None:
            img = self.draw_face(card, width, height, theme)
            if len(self.face_cache) > CACHE_LIMIT:
                # Sprites are keyed by face identity.
                self.clear()
            self.face_cache[key] = img
        return img

    def draw_face(self, card: RecipeCardView, width: int, height: int, theme: dict) -> Image.Image:
        width = max(40, int(width))
        height = max(60, int(height))
        img = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(img)
        radius = max(8, width // 14)
        draw.rounded_rectangle(
            (0, 0, width - 1, height - 1), radius=radius, fill=theme["card_front"], outline=theme["card_border"], width=2
        )

        photo_h = int(height * 0.48)
        photo = self.load_photo(card.image_path, width - 4, photo_h)
        if photo is not None:
            mask = Image.new("L", photo.size, 0)
            ImageDraw.Draw(mask).rounded_rectangle((0, 0, photo.size[0] - 1, photo.size[1] + radius), radius=radius, fill=255)
            img.paste(photo, (2, 2), mask)
        else:
            draw.rounded_rectangle((2, 2, width - 3, photo_h), radius=radius, fill=theme["accent"])
            initial = card.title[:1].upper() or "?"
            draw.text((width / 2, photo_h / 2), initial, fill="#ffffff", font=self.font(max(24, photo_h // 2)), anchor="mm")

        pad = max(10, width // 18)
        y = photo_h + pad
        title_font = self.font(max(14, width // 16))
        for line in textwrap.wrap(card.title, width=max(12, width // 16))[:2]:
            draw.text((pad, y), line, fill=theme["text_main"], font=title_font)
            y += title_font.size + 4

        meta_font = self.font(max(11, width // 26))
        y += 2
        draw.text((pad, y), f"{card.cook_time}  |  ★ {card.rating:.1f}", fill=theme["text_muted"], font=meta_font)
        diff_color = DIFFICULTY_COLORS.get(card.difficulty, theme["accent"])
        draw.text((width - pad, y), card.difficulty.capitalize(), fill=diff_color, font=meta_font, anchor="ra")
        y += meta_font.size + 10

        body_font = self.font(max(11, width // 28))
        for line in textwrap.wrap(card.description, width=max(16, width // 9))[:4]:
            draw.text((pad, y), line, fill=theme["text_main"], font=body_font)
            y += body_font.size + 4

        tag_font = self.font(max(10, width // 30))
        x = pad
        tag_y = height - pad - tag_font.size - 8
        for tag in card.tags:
            tw = draw.textlength(tag, font=tag_font) + 16
            if x + tw > width - pad:
                break
            draw.rounded_rectangle((x, tag_y, x + tw, tag_y + tag_font.size + 8), radius=8, fill=theme["tag_fill"])
            draw.text((x + 8, tag_y + 4), tag, fill=theme["tag_text"], font=tag_font)
            x += tw + 6
        return img

    @staticmethod
    def load_photo(image_path, width: int, height: int):
        if not image_path:
            return None
        path = Path(image_path)
        if not path.exists():
            return None
        try:
            with Image.open(path) as src:
                return ImageOps.fit(src.convert("RGBA"), (max(1, width), max(1, height)), RESAMPLE)
        except Exception:
            logger.warning("Could not load recipe image %s", path)
            return None

    def sprite(self, face: Image.Image, rotation: float, scale: float, opacity: float) -> Image.Image:
        """Face scaled, faded and rotated (degrees, clockwise) for drawing on a canvas."""
        angle_q = round(rotation / ANGLE_STEP) * ANGLE_STEP
        scale_q = round(max(0.01, scale), 2)
        alpha_q = round(min(1.0, max(0.0, opacity)), 2)
        key = (id(face), angle_q, scale_q, alpha_q)
        img = self.sprite_cache.get(key)
        if img is not None:
            return img

        img = face
        if scale_q != 1.0:
            size = (max(1, int(face.size[0] * scale_q)), max(1, int(face.size[1] * scale_q)))
            img = img.resize(size, RESAMPLE)
        if alpha_q < 1.0:
            alpha = img.getchannel("A").point(lambda a: int(a * alpha_q))
            img = img.copy()
            img.putalpha(alpha)
        if angle_q:
            img = img.rotate(-angle_q, resample=ROTATE_RESAMPLE, expand=True)
        if len(self.sprite_cache) > CACHE_LIMIT:
            self.sprite_cache.clear()
        self.sprite_cache[key] = img
        return img

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Dict, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFilter, ImageFont, ImageOps

from .view import (
    PAGE_PADDING,
    REGION_TITLE_HEIGHT,
    TILE_GAP,
    TILE_SIZE,
    TITLE_HEIGHT,
    Page,
    Tile,
)

# --- visuals ---
FG = (241, 245, 249, 255)
FG_SUB = (148, 163, 184, 255)
TILE_BG = (42, 42, 42, 255)
TILE_BG_OBTAINED = (64, 52, 20, 255)
BADGE_BG = (231, 76, 60, 255)
BAR_BG = (17, 24, 39, 230)
BADGE_R = 12
BLUR_RADIUS = 6

_tile_cache: Dict[Tuple[str, bool], Optional[Image.Image]] = {}


def _font() -> ImageFont.ImageFont:
    return ImageFont.load_default()


def _px(value: Optional[str]) -> Optional[int]:
    if not value or not value.endswith("px"):
        return None
    try:
        return int(float(value[:-2]))
    except ValueError:
        return None


def tile_image(tile: Tile, size: int = TILE_SIZE) -> Optional[Image.Image]:
    """Load the sprite for ``tile``, greyed out when the tile is desaturated.

    Returns ``None`` when the asset file is missing or unreadable.
    """

    key = (tile.image, tile.desaturated)
    if key in _tile_cache:
        return _tile_cache[key]
    path = Path(tile.image)
    img: Optional[Image.Image] = None
    if path.exists():
        try:
            with Image.open(path) as src:
                img = src.convert("RGBA")
            img.thumbnail((size, size))
            if tile.desaturated:
                alpha = img.getchannel("A")
                img = ImageOps.grayscale(img).convert("RGBA")
                img.putalpha(alpha)
        except OSError:
            img = None
    _tile_cache[key] = img
    return img


def _draw_tile(canvas: Image.Image, draw: ImageDraw.ImageDraw, tile: Tile, x: int, y: int) -> None:
    font = _font()
    bg = TILE_BG_OBTAINED if tile.obtained and not tile.desaturated else TILE_BG
    draw.rounded_rectangle((x, y, x + TILE_SIZE, y + TILE_SIZE), radius=8, fill=bg)
    sprite = tile_image(tile)
    if sprite is not None:
        ox = x + (TILE_SIZE - sprite.width) // 2
        oy = y + (TILE_SIZE - sprite.height) // 2
        canvas.alpha_composite(sprite, (ox, oy))
    else:
        draw.text((x + 8, y + TILE_SIZE // 2 - 6), tile.item_id, fill=FG_SUB, font=font)
    if tile.badge_visible:
        cx, cy = x + TILE_SIZE - BADGE_R - 2, y + BADGE_R + 2
        draw.ellipse((cx - BADGE_R, cy - BADGE_R, cx + BADGE_R, cy + BADGE_R), fill=BADGE_BG)
        tw = draw.textlength(tile.badge_text, font=font)
        draw.text((cx - tw / 2, cy - 6), tile.badge_text, fill=FG, font=font)


def _draw_stats_bar(canvas: Image.Image, page: Page, width: int, height: int) -> None:
    bar = page.stats_bar
    if bar is None or bar.hidden:
        return
    style = bar.style or {}
    if style.get("position") == "absolute" and _px(style.get("top")) is not None:
        top = _px(style["top"])
    else:
        # fixed to the bottom of the viewport
        top = height - bar.height
    box = (0, top, width, top + bar.height)
    if style.get("backdrop-filter") != "none":
        behind = canvas.crop(box).filter(ImageFilter.GaussianBlur(BLUR_RADIUS))
        canvas.paste(behind, box[:2])
    overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    draw.rectangle(box, fill=BAR_BG)
    parts = []
    if bar.total_progress is not None:
        parts.append(f"Progress: {bar.total_progress.text}")
    if bar.total_count is not None:
        parts.append(f"Shiny total: {bar.total_count.text}")
    if bar.percentage is not None:
        parts.append(f"Complete: {bar.percentage.text}")
    draw.text((PAGE_PADDING, top + bar.height // 2 - 6), "    ".join(parts), fill=FG, font=_font())
    canvas.alpha_composite(overlay)


def render_png(page: Page, width: int, height: int, background: str = "#1a1a1a") -> bytes:
    """Rasterize ``page`` into a PNG of ``width`` x ``height`` pixels."""

    canvas = Image.new("RGBA", (int(width), int(height)), ImageColor.getcolor(background, "RGBA"))
    draw = ImageDraw.Draw(canvas)
    font = _font()

    y = PAGE_PADDING
    draw.text((PAGE_PADDING, y + TITLE_HEIGHT // 3), page.title, fill=FG, font=font)
    y += TITLE_HEIGHT

    bar = page.options_bar
    if bar is not None and not bar.hidden:
        label = "Grey out single count: {}".format("on" if bar.toggle_checked else "off")
        if bar.save_button is not None:
            label += f"    [{bar.save_button.label}]"
        draw.text((PAGE_PADDING, y + bar.height // 3), label, fill=FG_SUB, font=font)
        y += bar.height

    if page.error is not None:
        draw.text((PAGE_PADDING, y + 12), page.error, fill=BADGE_BG, font=font)
        y += REGION_TITLE_HEIGHT

    columns = page.columns
    for region in page.regions:
        draw.text((PAGE_PADDING, y + 12), region.name, fill=FG, font=font)
        tw = draw.textlength(region.progress, font=font)
        draw.text((width - PAGE_PADDING - tw, y + 12), region.progress, fill=FG_SUB, font=font)
        y += REGION_TITLE_HEIGHT
        for idx, tile in enumerate(region.tiles):
            row, col = divmod(idx, columns)
            tx = PAGE_PADDING + col * (TILE_SIZE + TILE_GAP)
            ty = y + row * (TILE_SIZE + TILE_GAP)
            _draw_tile(canvas, draw, tile, tx, ty)
        y += page.region_height(region) - REGION_TITLE_HEIGHT

    _draw_stats_bar(canvas, page, int(width), int(height))

    buf = BytesIO()
    canvas.convert("RGB").save(buf, format="PNG")
    return buf.getvalue()

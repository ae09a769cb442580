from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from luvatrix_charts.geometry import HAlign, VAlign
from luvatrix_charts.raster.canvas import RGBA


LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "DejaVu Sans"
FONT_FALLBACK_PATTERNS = (
    "dejavusans",
    "helvetica",
    "arial",
    "liberationsans",
    "menlo",
    "dejavusansmono",
)
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def draw_text(
    dst: np.ndarray,
    x: float,
    y: float,
    text: str,
    color: RGBA,
    *,
    font_size_px: float = 10.0,
    h_align: HAlign = "left",
    v_align: VAlign = "top",
    font_family: str = DEFAULT_FONT_FAMILY,
) -> None:
    if not text:
        return
    font = _load_font(font_family, font_size_px)
    mask = _render_mask(text, font)
    h, w = mask.shape
    left = x - (w / 2.0 if h_align == "center" else w if h_align == "right" else 0.0)
    top = y - (h / 2.0 if v_align == "middle" else h if v_align == "bottom" else 0.0)
    _blend_mask(dst, int(round(left)), int(round(top)), mask, color)


def text_size(text: str, *, font_size_px: float = 10.0, font_family: str = DEFAULT_FONT_FAMILY) -> tuple[int, int]:
    font = _load_font(font_family, font_size_px)
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = font.getbbox(text)
    return (max(0, int(right - left)), max(1, int(bottom - top)))


def _blend_mask(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    h, w = mask.shape
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return
    cov = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    alpha = (color[3] / 255.0) * cov[:, :, None]
    if not np.any(alpha > 0):
        return
    patch = dst[y0:y1, x0:x1]
    src = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    patch[:, :, :3] = np.clip(src * alpha + patch[:, :, :3].astype(np.float32) * (1.0 - alpha), 0, 255).astype(np.uint8)
    patch[:, :, 3] = 255


@lru_cache(maxsize=128)
def _render_mask(text: str, font: Font) -> np.ndarray:
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=64)
def _load_font(font_family: str, font_size_px: float) -> Font:
    size = max(1, int(round(font_size_px)))
    font_path = _resolve_font_path(font_family)
    if font_path is None:
        LOGGER.debug("no font file found for %r; using the Pillow default font", font_family)
        return ImageFont.load_default()
    try:
        return ImageFont.truetype(str(font_path), size=size)
    except OSError:
        LOGGER.warning("failed to load font %s; using the Pillow default font", font_path)
        return ImageFont.load_default()


@lru_cache(maxsize=16)
def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower().replace(" ", "") or DEFAULT_FONT_FAMILY.lower().replace(" ", "")
    candidates: list[Path] = []
    for base in FONT_DIRS:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(base.rglob(ext))
    for pattern in (wanted, *FONT_FALLBACK_PATTERNS):
        for path in candidates:
            if pattern in path.name.lower().replace(" ", ""):
                return path
    return None

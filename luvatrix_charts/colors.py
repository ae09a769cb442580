from __future__ import annotations

from types import MappingProxyType

import numpy as np


Color = tuple[float, float, float, float]

BLACK: Color = (0.0, 0.0, 0.0, 1.0)
WHITE: Color = (1.0, 1.0, 1.0, 1.0)
GRID_GREY: Color = (0.85, 0.85, 0.85, 1.0)
AXIS_GREY: Color = (0.3, 0.3, 0.3, 1.0)
TEXT_GREY: Color = (0.2, 0.2, 0.2, 1.0)

NAMED_COLORS = MappingProxyType(
    {
        "blue": (0.12, 0.47, 0.71, 1.0),
        "orange": (1.0, 0.5, 0.05, 1.0),
        "green": (0.17, 0.63, 0.17, 1.0),
        "red": (0.84, 0.15, 0.16, 1.0),
        "purple": (0.58, 0.40, 0.74, 1.0),
        "brown": (0.55, 0.34, 0.29, 1.0),
        "pink": (0.89, 0.47, 0.76, 1.0),
        "grey": (0.5, 0.5, 0.5, 1.0),
    }
)

DEFAULT_PALETTE: tuple[Color, ...] = tuple(NAMED_COLORS.values())


def palette_color(index: int, palette: tuple[Color, ...] = DEFAULT_PALETTE) -> Color:
    if not palette:
        return NAMED_COLORS["grey"]
    return palette[index % len(palette)]


def coerce_color(value: object, field_name: str = "color") -> Color:
    if isinstance(value, str):
        return hex_color(value)
    if not isinstance(value, (tuple, list)) or len(value) not in (3, 4):
        raise ValueError(f"{field_name} must be an RGB/RGBA sequence or hex string")
    channels = [float(c) for c in value]
    if any(c < 0.0 or c > 1.0 for c in channels):
        raise ValueError(f"{field_name} channels must be within [0, 1]")
    if len(channels) == 3:
        channels.append(1.0)
    return (channels[0], channels[1], channels[2], channels[3])


def hex_color(text: str, alpha: float = 1.0) -> Color:
    raw = text.strip().lstrip("#")
    if len(raw) != 6:
        raise ValueError(f"expected #rrggbb color, got {text!r}")
    try:
        r, g, b = (int(raw[i : i + 2], 16) / 255.0 for i in (0, 2, 4))
    except ValueError as exc:
        raise ValueError(f"expected #rrggbb color, got {text!r}") from exc
    return (r, g, b, alpha)


def with_alpha(color: Color, alpha: float) -> Color:
    return (color[0], color[1], color[2], alpha)


def lerp_color(a: Color, b: Color, t: float) -> Color:
    return (
        a[0] + (b[0] - a[0]) * t,
        a[1] + (b[1] - a[1]) * t,
        a[2] + (b[2] - a[2]) * t,
        a[3] + (b[3] - a[3]) * t,
    )


def darken(color: Color, amount: float) -> Color:
    return (
        max(color[0] * (1.0 - amount), 0.0),
        max(color[1] * (1.0 - amount), 0.0),
        max(color[2] * (1.0 - amount), 0.0),
        color[3],
    )


def luminance(color: Color) -> float:
    return 0.299 * color[0] + 0.587 * color[1] + 0.114 * color[2]


def contrast_text_color(background: Color) -> Color:
    return BLACK if luminance(background) > 0.5 else WHITE


def to_rgba8(color: Color) -> tuple[int, int, int, int]:
    arr = np.clip(np.rint(np.asarray(color, dtype=np.float64) * 255.0), 0, 255).astype(np.int32)
    return (int(arr[0]), int(arr[1]), int(arr[2]), int(arr[3]))

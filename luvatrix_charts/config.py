from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import tomllib

from luvatrix_charts.colors import DEFAULT_PALETTE, Color, coerce_color


@dataclass(frozen=True)
class Margins:
    left: float = 50.0
    top: float = 30.0
    right: float = 20.0
    bottom: float = 30.0


DEFAULT_MARGINS = Margins()


@dataclass(frozen=True)
class ChartConfig:
    margins: Margins = field(default_factory=Margins)
    palette: tuple[Color, ...] = DEFAULT_PALETTE
    colormap: str = "viridis"
    tick_count: int = 5
    contour_levels: int = 10
    hex_radius: float = 14.0
    hex_padding: float = 30.0
    gauge_arc_width: float = 20.0
    zoom: float = 1.0
    font_size: float = 10.0

    def __post_init__(self) -> None:
        if self.tick_count <= 0:
            raise ValueError("tick_count must be > 0")
        if self.contour_levels < 0:
            raise ValueError("contour_levels must be >= 0")
        if self.hex_radius <= 0:
            raise ValueError("hex_radius must be > 0")
        if self.zoom <= 0:
            raise ValueError("zoom must be > 0")
        if not self.palette:
            raise ValueError("palette must not be empty")


DEFAULT_CONFIG = ChartConfig()


def resolve_config(config: ChartConfig | None) -> ChartConfig:
    return DEFAULT_CONFIG if config is None else config


def load_chart_config(path: str | Path) -> ChartConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    return chart_config_from_dict(raw)


def chart_config_from_dict(raw: dict[str, object]) -> ChartConfig:
    margins = _coerce_margins(raw.get("margins", {}))
    kwargs: dict[str, object] = {"margins": margins}
    if "palette" in raw:
        kwargs["palette"] = _coerce_palette(raw["palette"])
    if "colormap" in raw:
        kwargs["colormap"] = _coerce_str(raw["colormap"], "colormap")
    for name in ("tick_count", "contour_levels"):
        if name in raw:
            kwargs[name] = _coerce_int(raw[name], name)
    for name in ("hex_radius", "hex_padding", "gauge_arc_width", "zoom", "font_size"):
        if name in raw:
            kwargs[name] = _coerce_float(raw[name], name)
    return ChartConfig(**kwargs)  # type: ignore[arg-type]


def _coerce_margins(value: object) -> Margins:
    if not isinstance(value, dict):
        raise ValueError("margins must be a table")
    base = DEFAULT_MARGINS
    return Margins(
        left=_coerce_float(value.get("left", base.left), "margins.left"),
        top=_coerce_float(value.get("top", base.top), "margins.top"),
        right=_coerce_float(value.get("right", base.right), "margins.right"),
        bottom=_coerce_float(value.get("bottom", base.bottom), "margins.bottom"),
    )


def _coerce_palette(value: object) -> tuple[Color, ...]:
    if not isinstance(value, list):
        raise ValueError("palette must be a list")
    return tuple(coerce_color(item, "palette entry") for item in value)


def _coerce_str(value: object, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    return value


def _coerce_int(value: object, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")
    return value


def _coerce_float(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number")
    return float(value)

from .normalize import coerce_1d, coerce_grid, coerce_optional_1d, coerce_xy

__all__ = [
    "coerce_1d",
    "coerce_grid",
    "coerce_optional_1d",
    "coerce_xy",
]

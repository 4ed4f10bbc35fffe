"""Render configuration shared by a whole export run."""

import math
import os
from dataclasses import dataclass

from PIL import Image

from .constants import (
    DEFAULT_DEVICE_PIXEL_RATIO,
    DEFAULT_RESAMPLE,
    ENV_DEVICE_PIXEL_RATIO,
    ENV_MAX_SURFACE_SIZE,
    ENV_RESAMPLE,
    MAX_SURFACE_SIZE,
    MIN_RESOLUTION,
)
from .errors import ConfigError

_RESAMPLE_FILTERS: dict[str, Image.Resampling] = {
    "nearest": Image.Resampling.NEAREST,
    "bilinear": Image.Resampling.BILINEAR,
    "bicubic": Image.Resampling.BICUBIC,
}


def _read_env(name: str, convert, expected: str):
    raw = os.environ[name]
    try:
        return convert(raw)
    except ValueError as e:
        raise ConfigError(f"Invalid value {raw!r} for {name}: expected {expected}") from e


def supported_resample_names() -> tuple[str, ...]:
    """Return supported resampling filter names."""
    return tuple(_RESAMPLE_FILTERS.keys())


@dataclass(frozen=True)
class RenderConfig:
    """
    Process-wide rendering settings.

    Built once at startup and passed into the export pipeline; never mutated
    during a run.

    Attributes:
        device_pixel_ratio: Display density of the host (1.0 for a plain screen)
        min_resolution: Lower bound applied to the device pixel ratio
        max_surface_size: Largest allowed offscreen surface edge in pixels
        resample: Name of the Pillow filter used when transforming textures
    """

    device_pixel_ratio: float = DEFAULT_DEVICE_PIXEL_RATIO
    min_resolution: float = MIN_RESOLUTION
    max_surface_size: int = MAX_SURFACE_SIZE
    resample: str = DEFAULT_RESAMPLE

    def __post_init__(self) -> None:
        if not math.isfinite(self.device_pixel_ratio) or self.device_pixel_ratio <= 0:
            raise ValueError(f"Device pixel ratio must be positive, got {self.device_pixel_ratio}")
        if self.max_surface_size <= 0:
            raise ValueError(f"Max surface size must be positive, got {self.max_surface_size}")
        if self.resample not in _RESAMPLE_FILTERS:
            available = ", ".join(supported_resample_names())
            raise ValueError(f"Unknown resample filter '{self.resample}'. Available: {available}")

    @property
    def resolution(self) -> float:
        """Device-pixel multiplier used for every surface of the run."""
        return max(self.device_pixel_ratio, self.min_resolution)

    @property
    def resample_filter(self) -> Image.Resampling:
        return _RESAMPLE_FILTERS[self.resample]

    @classmethod
    def from_env(cls, **overrides: object) -> "RenderConfig":
        """
        Build a config from environment variables; keyword overrides win.

        Raises:
            ConfigError: If a numeric variable cannot be parsed
            ValueError: If the resulting settings are invalid
        """
        values: dict[str, object] = {}
        if ENV_DEVICE_PIXEL_RATIO in os.environ:
            values["device_pixel_ratio"] = _read_env(ENV_DEVICE_PIXEL_RATIO, float, "a number")
        if ENV_MAX_SURFACE_SIZE in os.environ:
            values["max_surface_size"] = _read_env(ENV_MAX_SURFACE_SIZE, int, "an integer")
        if ENV_RESAMPLE in os.environ:
            values["resample"] = os.environ[ENV_RESAMPLE].lower()
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)  # type: ignore[arg-type]

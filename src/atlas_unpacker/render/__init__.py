"""Offscreen rendering of atlas regions."""

from .frame_compositor import compose_frame
from .region_renderer import render_region
from .renderer import PillowRenderer, Renderer
from .surface import OffscreenSurface

__all__ = [
    "OffscreenSurface",
    "PillowRenderer",
    "Renderer",
    "compose_frame",
    "render_region",
]

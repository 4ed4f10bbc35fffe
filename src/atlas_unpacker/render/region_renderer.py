"""Rendering of a single atlas region on an isolated copy of the scene."""

import logging

from PIL import Image

from ..config import RenderConfig
from ..descriptor import Rect
from ..errors import RegionRenderError, SurfaceAllocationError
from ..scene.cloner import cloned_scene
from ..scene.nodes import SceneNode
from .renderer import Renderer
from .surface import OffscreenSurface

logger = logging.getLogger(__name__)


def render_region(
    scene: SceneNode,
    rect: Rect,
    renderer: Renderer,
    config: RenderConfig,
    name: str = "",
) -> Image.Image:
    """
    Render one rectangle of the scene into its own image.

    The scene is cloned, the clone is shifted so the rectangle's top-left
    corner sits at the origin, and the clone is drawn onto a surface of
    ``rect.width * r`` by ``rect.height * r`` pixels. The clone and the
    surface are released before returning, whatever the outcome.

    Args:
        scene: Source scene, never modified
        rect: Region in atlas pixel space
        renderer: Rendering capability
        config: Run configuration providing the resolution
        name: Region name for error messages

    Returns:
        RGBA image of the region

    Raises:
        RegionRenderError: If the surface cannot be allocated or the renderer fails
    """
    resolution = config.resolution
    surface = OffscreenSurface.allocate(
        name, rect.width, rect.height, resolution, config.max_surface_size
    )
    try:
        with cloned_scene(scene) as clone:
            clone.x -= rect.x
            clone.y -= rect.y
            try:
                renderer.render(clone, surface)
                image = renderer.extract_image(surface)
            except RegionRenderError:
                raise
            except MemoryError as e:
                raise SurfaceAllocationError(name, f"out of memory while rendering: {e}") from e
            except Exception as e:
                raise RegionRenderError(name, f"render failed: {e}") from e
    finally:
        surface.destroy()

    logger.debug("Rendered region '%s' at %sx as %dx%d", name, resolution, *image.size)
    return image

"""Renderers that rasterize scene graphs onto offscreen surfaces using Pillow."""

import math
from abc import ABC, abstractmethod

from PIL import Image

from ..scene.nodes import GroupNode, ImageNode, SceneNode
from .surface import TRANSPARENT, OffscreenSurface

# 2x3 affine matrix (a, b, c, d, e, f): x' = a*x + b*y + c, y' = d*x + e*y + f
Affine = tuple[float, float, float, float, float, float]

IDENTITY: Affine = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0)


def local_transform(node: SceneNode) -> Affine:
    """Matrix of a node relative to its parent: translate, then rotate, then scale."""
    cos = math.cos(node.rotation)
    sin = math.sin(node.rotation)
    return (
        cos * node.scale_x,
        -sin * node.scale_y,
        node.x,
        sin * node.scale_x,
        cos * node.scale_y,
        node.y,
    )


def multiply(parent: Affine, child: Affine) -> Affine:
    """Compose two affine matrices so that ``child`` is applied first."""
    a1, b1, c1, d1, e1, f1 = parent
    a2, b2, c2, d2, e2, f2 = child
    return (
        a1 * a2 + b1 * d2,
        a1 * b2 + b1 * e2,
        a1 * c2 + b1 * f2 + c1,
        d1 * a2 + e1 * d2,
        d1 * b2 + e1 * e2,
        d1 * c2 + e1 * f2 + f1,
    )


def invert(matrix: Affine) -> Affine | None:
    """Inverse of an affine matrix, or None when it collapses the plane."""
    a, b, c, d, e, f = matrix
    det = a * e - b * d
    if abs(det) < 1e-12:
        return None
    return (
        e / det,
        -b / det,
        (b * f - e * c) / det,
        -d / det,
        a / det,
        (d * c - a * f) / det,
    )


class Renderer(ABC):
    """Rendering capability used by the region renderer."""

    @abstractmethod
    def render(self, scene: SceneNode, target: OffscreenSurface) -> None:
        """
        Rasterize a scene onto a surface.

        Args:
            scene: Root of the scene to draw
            target: Surface receiving the pixels
        """
        raise NotImplementedError

    @abstractmethod
    def extract_image(self, target: OffscreenSurface) -> Image.Image:
        """
        Read the surface back as an independent image.

        Args:
            target: Surface previously rendered to

        Returns:
            RGBA image with the surface's pixel size
        """
        raise NotImplementedError


class PillowRenderer(Renderer):
    """Software renderer compositing affine-transformed textures with Pillow."""

    def __init__(self, resample: Image.Resampling = Image.Resampling.NEAREST):
        """
        Initialize renderer.

        Args:
            resample: Filter used when sampling textures
        """
        self.resample = resample

    def render(self, scene: SceneNode, target: OffscreenSurface) -> None:
        canvas = target.require_image()
        root = (target.resolution, 0.0, 0.0, 0.0, target.resolution, 0.0)
        self._draw_node(scene, root, canvas)

    def extract_image(self, target: OffscreenSurface) -> Image.Image:
        return target.require_image().copy()

    def _draw_node(self, node: SceneNode, parent: Affine, canvas: Image.Image) -> None:
        world = multiply(parent, local_transform(node))
        if isinstance(node, GroupNode):
            for child in node.children:
                self._draw_node(child, world, canvas)
        elif isinstance(node, ImageNode):
            self._draw_image(node, world, canvas)
        else:
            raise TypeError(f"Unsupported scene node: {type(node).__name__}")

    def _draw_image(self, node: ImageNode, world: Affine, canvas: Image.Image) -> None:
        if node.texture is None:
            return
        # Pillow maps output pixels back to input pixels, so it takes the inverse
        inverse = invert(world)
        if inverse is None:
            return
        texture = node.texture if node.texture.mode == "RGBA" else node.texture.convert("RGBA")
        layer = texture.transform(
            canvas.size,
            Image.Transform.AFFINE,
            inverse,
            resample=self.resample,
            fillcolor=TRANSPARENT,
        )
        canvas.alpha_composite(layer)

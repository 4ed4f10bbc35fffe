"""Scene graph node types."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Union

from PIL import Image


@dataclass(eq=False)
class ImageNode:
    """
    Leaf node drawing a texture.

    The texture is shared between a node and all its clones and must be
    treated as read-only.
    """

    texture: Image.Image | None
    x: float = 0.0
    y: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    rotation: float = 0.0  # Radians, clockwise on screen


@dataclass(eq=False)
class GroupNode:
    """Container node owning an ordered list of children."""

    children: list["SceneNode"] = field(default_factory=list)
    x: float = 0.0
    y: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    rotation: float = 0.0

    def add_child(self, child: "SceneNode") -> "SceneNode":
        self.children.append(child)
        return child


SceneNode = Union[ImageNode, GroupNode]


def iter_scene_nodes(root: SceneNode) -> Iterator[SceneNode]:
    """Yield nodes depth-first in painter order from back to front."""
    yield root
    if isinstance(root, GroupNode):
        for child in root.children:
            yield from iter_scene_nodes(child)
    elif not isinstance(root, ImageNode):
        raise TypeError(f"Unsupported scene node: {type(root).__name__}")


def build_atlas_scene(texture: Image.Image) -> GroupNode:
    """Build the scene for a whole atlas: one group holding the atlas image at the origin."""
    return GroupNode(children=[ImageNode(texture)])

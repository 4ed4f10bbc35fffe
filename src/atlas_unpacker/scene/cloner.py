"""Deep cloning of scene graphs for isolated per-region rendering."""

from collections.abc import Iterator
from contextlib import contextmanager

from .nodes import GroupNode, ImageNode, SceneNode


def clone_scene(root: SceneNode) -> SceneNode:
    """
    Create a structural deep copy of a scene tree.

    Every node is copied with its transform; image nodes keep a reference to
    the same texture so pixel data is never duplicated. The source tree is
    left untouched. Trees are assumed to be acyclic.

    Args:
        root: Root of the tree to copy

    Returns:
        A new tree owning its own node objects

    Raises:
        TypeError: If the tree contains an unsupported node type
    """
    if isinstance(root, ImageNode):
        return ImageNode(
            texture=root.texture,
            x=root.x,
            y=root.y,
            scale_x=root.scale_x,
            scale_y=root.scale_y,
            rotation=root.rotation,
        )
    if isinstance(root, GroupNode):
        return GroupNode(
            children=[clone_scene(child) for child in root.children],
            x=root.x,
            y=root.y,
            scale_x=root.scale_x,
            scale_y=root.scale_y,
            rotation=root.rotation,
        )
    raise TypeError(f"Unsupported scene node: {type(root).__name__}")


def release_scene(root: SceneNode) -> None:
    """Tear down a cloned tree: detach children and drop texture references."""
    if isinstance(root, GroupNode):
        for child in root.children:
            release_scene(child)
        root.children.clear()
    elif isinstance(root, ImageNode):
        # Shared texture stays open; only this node's reference goes away
        root.texture = None
    else:
        raise TypeError(f"Unsupported scene node: {type(root).__name__}")


@contextmanager
def cloned_scene(root: SceneNode) -> Iterator[SceneNode]:
    """Yield a disposable clone of ``root`` that is released on exit."""
    clone = clone_scene(root)
    try:
        yield clone
    finally:
        release_scene(clone)

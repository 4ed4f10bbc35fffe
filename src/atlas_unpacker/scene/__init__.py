"""Scene graph model and cloning."""

from .cloner import clone_scene, cloned_scene, release_scene
from .nodes import GroupNode, ImageNode, SceneNode, build_atlas_scene, iter_scene_nodes

__all__ = [
    "GroupNode",
    "ImageNode",
    "SceneNode",
    "build_atlas_scene",
    "clone_scene",
    "cloned_scene",
    "iter_scene_nodes",
    "release_scene",
]

"""Shared fixtures for atlas-unpacker tests."""

import pytest
from PIL import Image

from atlas_unpacker.config import RenderConfig
from atlas_unpacker.scene import GroupNode, build_atlas_scene

from atlas_helpers import make_atlas_texture


@pytest.fixture
def atlas_texture() -> Image.Image:
    return make_atlas_texture()


@pytest.fixture
def atlas_scene(atlas_texture: Image.Image) -> GroupNode:
    return build_atlas_scene(atlas_texture)


@pytest.fixture
def default_config() -> RenderConfig:
    """Default configuration: device pixel ratio 1 raised to the 2x minimum."""
    return RenderConfig()


@pytest.fixture
def unscaled_config() -> RenderConfig:
    """Configuration rendering at exactly 1x for pixel-exact assertions."""
    return RenderConfig(min_resolution=1.0)

"""Texture atlas unpacking: render every atlas region to PNG and pack them into one archive."""

from .config import RenderConfig
from .descriptor import AtlasDescriptor, Rect, RegionRecord, parse_atlas, parse_regions
from .export_pipeline import (
    ExportReport,
    ExportResult,
    ExtractedImage,
    RegionFailure,
    export_regions,
    iter_extracted_images,
    unpack_atlas,
)
from .scene import GroupNode, ImageNode, SceneNode, clone_scene

__all__ = [
    "AtlasDescriptor",
    "ExportReport",
    "ExportResult",
    "ExtractedImage",
    "GroupNode",
    "ImageNode",
    "Rect",
    "RegionFailure",
    "RegionRecord",
    "RenderConfig",
    "SceneNode",
    "clone_scene",
    "export_regions",
    "iter_extracted_images",
    "parse_atlas",
    "parse_regions",
    "unpack_atlas",
]

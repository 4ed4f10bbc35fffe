"""Shared export orchestration used by CLI and web app entry points."""

import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import Iterable, Iterator

from PIL import Image

from .config import RenderConfig
from .constants import DEFAULT_ARCHIVE_NAME
from .descriptor import RegionRecord, parse_regions
from .errors import DuplicateEntryError, RegionRenderError, SurfaceAllocationError
from .output import resolve_output_provider
from .output.base import OutputProvider
from .render.frame_compositor import compose_frame
from .render.region_renderer import render_region
from .render.renderer import PillowRenderer, Renderer
from .scene.nodes import SceneNode, build_atlas_scene

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractedImage:
    """A rendered region encoded as PNG."""

    name: str
    data: bytes
    size: tuple[int, int]
    region_name: str = ""


@dataclass(frozen=True)
class RegionFailure:
    """A region left out of the archive and the reason why."""

    region_name: str
    reason: str


@dataclass
class ExportReport:
    """
    Per-region outcome of an export run.

    Failures are kept in descriptor order, one per region, so regions that
    share a name are each counted.
    """

    exported: list[str] = field(default_factory=list)
    failed: list[RegionFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.exported) + len(self.failed)


@dataclass(frozen=True)
class ExportResult:
    archive: bytes
    report: ExportReport


def load_atlas_image(data: bytes) -> Image.Image:
    """Decode atlas image bytes into a fully loaded RGBA image."""
    with Image.open(BytesIO(data)) as image:
        return image.convert("RGBA")


def encode_png(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format="png")
    return buffer.getvalue()


def extract_region(
    scene: SceneNode,
    region: RegionRecord,
    renderer: Renderer,
    config: RenderConfig,
) -> ExtractedImage:
    """
    Render, frame and encode one region.

    Raises:
        RegionRenderError: If any step for this region fails
    """
    image = render_region(scene, region.rectangle, renderer, config, name=region.name)
    try:
        if region.frame is not None:
            trimmed = image
            try:
                image = compose_frame(
                    trimmed, region.frame, config.resolution, config.max_surface_size,
                    name=region.name,
                )
            finally:
                trimmed.close()
        try:
            data = encode_png(image)
        except MemoryError as e:
            raise SurfaceAllocationError(region.name, f"out of memory while encoding: {e}") from e
        except (OSError, ValueError) as e:
            raise RegionRenderError(region.name, f"PNG encoding failed: {e}") from e
        size = image.size
    finally:
        image.close()
    return ExtractedImage(name=region.entry_name, data=data, size=size, region_name=region.name)


def iter_extracted_images(
    scene: SceneNode,
    regions: Iterable[RegionRecord],
    renderer: Renderer,
    config: RenderConfig,
    failures: list[RegionFailure] | None = None,
) -> Iterator[ExtractedImage]:
    """
    Yield extracted images one region at a time, in descriptor order.

    A failing region is logged, recorded in ``failures`` and skipped; it never
    stops the regions after it.
    """
    for region in regions:
        try:
            yield extract_region(scene, region, renderer, config)
        except RegionRenderError as e:
            logger.warning("Skipping region '%s': %s", region.name, e.reason)
            if failures is not None:
                failures.append(RegionFailure(region.name, e.reason))


def export_regions(
    scene: SceneNode,
    regions: Iterable[RegionRecord],
    *,
    config: RenderConfig,
    provider: OutputProvider,
    renderer: Renderer | None = None,
) -> ExportResult:
    """
    Export every region of a scene into a single archive.

    Args:
        scene: Source scene, never modified
        regions: Regions to export
        config: Run configuration
        provider: Empty archive provider, finalized by this call
        renderer: Rendering capability (defaults to PillowRenderer)

    Returns:
        ExportResult with archive bytes and the per-region report

    Raises:
        ArchiveFinalizeError: If the archive cannot be serialized
    """
    target_renderer = renderer or PillowRenderer(config.resample_filter)
    report = ExportReport()
    for extracted in iter_extracted_images(scene, regions, target_renderer, config, report.failed):
        try:
            provider.add_entry(extracted.name, extracted.data)
        except DuplicateEntryError as e:
            logger.warning("Skipping region '%s': %s", extracted.region_name, e)
            report.failed.append(RegionFailure(extracted.region_name, str(e)))
            continue
        report.exported.append(extracted.name)
        logger.info("Exported %s (%dx%d)", extracted.name, *extracted.size)

    archive = provider.finalize()
    logger.info(
        "Packed %d of %d regions into %s archive",
        len(report.exported),
        report.total,
        provider.output_format,
    )
    return ExportResult(archive=archive, report=report)


def unpack_atlas(
    image_data: bytes,
    descriptor: str | bytes,
    *,
    config: RenderConfig,
    output_path: str = DEFAULT_ARCHIVE_NAME,
    provider: OutputProvider | None = None,
    renderer: Renderer | None = None,
) -> ExportResult:
    """Parse a descriptor, build the atlas scene and export all of its regions."""
    regions = parse_regions(descriptor)
    target_provider = provider or resolve_output_provider(output_path)
    scene = build_atlas_scene(load_atlas_image(image_data))
    return export_regions(
        scene,
        regions,
        config=config,
        provider=target_provider,
        renderer=renderer,
    )

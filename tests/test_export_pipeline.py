"""Tests for the end-to-end export pipeline."""

import io
import logging
import zipfile

import pytest
from PIL import Image

from atlas_unpacker.config import RenderConfig
from atlas_unpacker.descriptor import parse_regions
from atlas_unpacker.errors import ArchiveFinalizeError
from atlas_unpacker.export_pipeline import (
    ExportReport,
    RegionFailure,
    export_regions,
    iter_extracted_images,
    load_atlas_image,
    unpack_atlas,
)
from atlas_unpacker.output import ZipOutputProvider
from atlas_unpacker.render.renderer import PillowRenderer
from atlas_unpacker.render.surface import OffscreenSurface
from atlas_unpacker.scene import GroupNode, SceneNode

from atlas_helpers import make_atlas_texture, pixel_color, png_bytes, subtexture_xml

ICON = '<SubTexture name="icon" x="0" y="0" width="32" height="32"/>'
SWORD = (
    '<SubTexture name="sword" x="10" y="20" width="16" height="64" '
    'frameX="4" frameY="0" frameWidth="24" frameHeight="64"/>'
)
BROKEN = '<SubTexture name="broken" x="0" y="0" width="abc" height="16"/>'


class SurfaceTrackingRenderer(PillowRenderer):
    """Renderer recording every surface and failing for chosen surface widths."""

    def __init__(self, fail_width: int | None = None):
        super().__init__()
        self.fail_width = fail_width
        self.surfaces: list[OffscreenSurface] = []

    def render(self, scene: SceneNode, target: OffscreenSurface) -> None:
        self.surfaces.append(target)
        if target.size[0] == self.fail_width:
            raise MemoryError("no texture memory")
        super().render(scene, target)


class ReadbackFailingRenderer(PillowRenderer):
    """Renderer whose readback fails with a host error for one surface width."""

    def __init__(self, fail_width: int):
        super().__init__()
        self.fail_width = fail_width

    def extract_image(self, target: OffscreenSurface) -> Image.Image:
        if target.size[0] == self.fail_width:
            raise RuntimeError("extract readback lost")
        return super().extract_image(target)


class ImageTrackingRenderer(PillowRenderer):
    """Renderer keeping every image it reads back."""

    def __init__(self):
        super().__init__()
        self.images: list[Image.Image] = []

    def extract_image(self, target: OffscreenSurface) -> Image.Image:
        image = super().extract_image(target)
        self.images.append(image)
        return image


def _archive_images(archive: bytes) -> dict[str, Image.Image]:
    images = {}
    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        for name in zf.namelist():
            with Image.open(io.BytesIO(zf.read(name))) as image:
                images[name] = image.convert("RGBA")
    return images


def _unpack(document: str, config: RenderConfig, **kwargs):
    return unpack_atlas(png_bytes(make_atlas_texture()), document, config=config, **kwargs)


def test_single_region_export(default_config: RenderConfig):
    """One 32x32 region becomes icon.png at 64x64 with the 2x minimum resolution."""
    result = _unpack(subtexture_xml(ICON), default_config)

    images = _archive_images(result.archive)
    assert list(images) == ["icon.png"]
    assert images["icon.png"].size == (64, 64)
    assert images["icon.png"].getpixel((63, 63)) == pixel_color(31, 31)
    assert result.report.exported == ["icon.png"]
    assert result.report.failed == []


def test_trimmed_region_is_framed(default_config: RenderConfig):
    """The sword region is placed inside its 24x64 frame at offset (-4, 0)."""
    result = _unpack(subtexture_xml(SWORD), default_config)

    sword = _archive_images(result.archive)["sword.png"]
    assert sword.size == (48, 128)
    # Atlas x = 10 + 4 at frame pixel 0 after shifting by -4 * r
    assert sword.getpixel((0, 0)) == pixel_color(14, 20)
    assert sword.getpixel((24, 0)) == (0, 0, 0, 0)


def test_higher_device_pixel_ratio_is_used():
    """A device pixel ratio above 2 raises the export resolution."""
    result = _unpack(subtexture_xml(ICON), RenderConfig(device_pixel_ratio=3))

    assert _archive_images(result.archive)["icon.png"].size == (96, 96)


def test_broken_region_does_not_stop_the_run(default_config: RenderConfig, caplog):
    """A zero-width region is skipped and logged; the others are still exported."""
    with caplog.at_level(logging.WARNING, logger="atlas_unpacker.export_pipeline"):
        result = _unpack(subtexture_xml(ICON, BROKEN, SWORD), default_config)

    assert sorted(_archive_images(result.archive)) == ["icon.png", "sword.png"]
    assert result.report.exported == ["icon.png", "sword.png"]
    assert [failure.region_name for failure in result.report.failed] == ["broken"]
    assert "Skipping region 'broken'" in caplog.text


def test_allocation_failure_is_isolated(atlas_scene: GroupNode, default_config: RenderConfig):
    """An out-of-memory render skips its region and every surface is still destroyed."""
    regions = parse_regions(
        subtexture_xml(
            '<SubTexture name="a" width="4" height="4"/>',
            '<SubTexture name="big" width="20" height="4"/>',
            '<SubTexture name="b" x="8" width="4" height="4"/>',
        )
    )
    renderer = SurfaceTrackingRenderer(fail_width=40)

    result = export_regions(
        atlas_scene, regions, config=default_config, provider=ZipOutputProvider(), renderer=renderer
    )

    assert result.report.exported == ["a.png", "b.png"]
    assert [failure.region_name for failure in result.report.failed] == ["big"]
    assert "no texture memory" in result.report.failed[0].reason
    assert len(renderer.surfaces) == 3
    assert all(surface.destroyed for surface in renderer.surfaces)


def test_unexpected_renderer_error_is_isolated(
    atlas_scene: GroupNode, default_config: RenderConfig
):
    """Any host renderer exception only drops its own region from the archive."""
    regions = parse_regions(
        subtexture_xml(
            '<SubTexture name="a" width="4" height="4"/>',
            '<SubTexture name="big" width="20" height="4"/>',
            '<SubTexture name="b" x="8" width="4" height="4"/>',
        )
    )

    result = export_regions(
        atlas_scene,
        regions,
        config=default_config,
        provider=ZipOutputProvider(),
        renderer=ReadbackFailingRenderer(fail_width=40),
    )

    assert result.report.exported == ["a.png", "b.png"]
    assert [failure.region_name for failure in result.report.failed] == ["big"]
    assert "extract readback lost" in result.report.failed[0].reason
    assert sorted(_archive_images(result.archive)) == ["a.png", "b.png"]


def test_unnamed_regions_are_each_reported(default_config: RenderConfig):
    """Regions sharing the default name are counted once each."""
    result = _unpack(
        subtexture_xml(
            '<SubTexture width="4" height="4"/>',
            '<SubTexture x="4" width="4" height="4"/>',
            '<SubTexture x="8" width="4" height="4"/>',
        ),
        default_config,
    )

    assert result.report.exported == ["unknown.png"]
    assert [failure.region_name for failure in result.report.failed] == ["unknown", "unknown"]
    assert result.report.total == 3


def test_trimmed_render_is_closed_after_framing(
    atlas_scene: GroupNode, default_config: RenderConfig
):
    """The rendered region is released once it has been placed in its frame."""
    regions = parse_regions(subtexture_xml(SWORD))
    renderer = ImageTrackingRenderer()

    result = export_regions(
        atlas_scene, regions, config=default_config, provider=ZipOutputProvider(), renderer=renderer
    )

    assert result.report.exported == ["sword.png"]
    assert len(renderer.images) == 1
    with pytest.raises(ValueError):
        renderer.images[0].getpixel((0, 0))


def test_duplicate_region_names_are_skipped(default_config: RenderConfig):
    """Only the first region of a name is packed; entry names stay unique."""
    result = _unpack(
        subtexture_xml(
            '<SubTexture name="dup" width="4" height="4"/>',
            '<SubTexture name="dup" x="4" width="4" height="4"/>',
        ),
        default_config,
    )

    assert list(_archive_images(result.archive)) == ["dup.png"]
    assert result.report.failed[0].region_name == "dup"
    assert "Duplicate archive entry" in result.report.failed[0].reason


def test_entry_count_matches_successful_regions(default_config: RenderConfig):
    """Archive entries equal the exported regions, all with unique names."""
    result = _unpack(subtexture_xml(ICON, BROKEN, SWORD, "<SubTexture/>"), default_config)

    names = list(_archive_images(result.archive))
    assert len(names) == len(result.report.exported) == 2
    assert len(set(names)) == len(names)
    assert result.report.total == 4


def test_pipeline_is_idempotent(default_config: RenderConfig):
    """Running twice on the same inputs yields byte-identical archives."""
    document = subtexture_xml(ICON, SWORD)

    first = _unpack(document, default_config)
    second = _unpack(document, default_config)

    assert first.archive == second.archive


def test_region_order_does_not_change_images(default_config: RenderConfig):
    """Reversing the descriptor order produces the same image for every region."""
    forward = _archive_images(_unpack(subtexture_xml(ICON, SWORD), default_config).archive)
    backward = _archive_images(_unpack(subtexture_xml(SWORD, ICON), default_config).archive)

    for name in ("icon.png", "sword.png"):
        assert forward[name].tobytes() == backward[name].tobytes()


def test_iter_extracted_images_is_lazy(atlas_scene: GroupNode, default_config: RenderConfig):
    """Regions are rendered one at a time as the caller pulls images."""
    regions = parse_regions(subtexture_xml(ICON, SWORD))
    renderer = SurfaceTrackingRenderer()
    failures: list[RegionFailure] = []

    images = iter_extracted_images(atlas_scene, regions, renderer, default_config, failures)
    assert renderer.surfaces == []

    first = next(images)
    assert first.name == "icon.png"
    assert first.region_name == "icon"
    assert len(renderer.surfaces) == 1
    assert [image.name for image in images] == ["sword.png"]
    assert failures == []


def test_finalize_failure_propagates(atlas_scene: GroupNode, default_config: RenderConfig):
    """A failing archive serialization aborts the run."""

    class BrokenProvider(ZipOutputProvider):
        def serialize(self, entries):
            raise ValueError("bad archive")

    regions = parse_regions(subtexture_xml(ICON))
    with pytest.raises(ArchiveFinalizeError):
        export_regions(atlas_scene, regions, config=default_config, provider=BrokenProvider())


def test_load_atlas_image_converts_to_rgba():
    """Atlas images are decoded into RGBA regardless of their stored mode."""
    image = load_atlas_image(png_bytes(Image.new("RGB", (3, 2), (1, 2, 3))))

    assert image.mode == "RGBA"
    assert image.size == (3, 2)


def test_export_report_total():
    """total counts exported and failed regions."""
    report = ExportReport(exported=["a.png"], failed=[RegionFailure("b", "empty surface")])

    assert report.total == 2

"""Restores the untrimmed frame of trimmed sprites."""

from PIL import Image

from ..descriptor import Rect
from ..errors import RegionRenderError, SurfaceAllocationError
from .surface import OffscreenSurface


def frame_offset(frame: Rect, resolution: float) -> tuple[int, int]:
    """Pixel position of the trimmed image inside the full frame."""
    return round(-frame.x * resolution), round(-frame.y * resolution)


def compose_frame(
    trimmed: Image.Image,
    frame: Rect,
    resolution: float,
    max_size: int,
    name: str = "",
) -> Image.Image:
    """
    Place a trimmed image inside its original, untrimmed bounding box.

    The result is ``frame.width * r`` by ``frame.height * r`` pixels with the
    trimmed pixels at ``(-frame.x, -frame.y) * r``; everything else stays
    transparent and pixels falling outside the frame are clipped.

    Args:
        trimmed: Rendered region, already at ``resolution``
        frame: Untrimmed bounding box from the descriptor
        resolution: Device-pixel multiplier of ``trimmed``
        max_size: Largest allowed pixel edge
        name: Region name for error messages

    Raises:
        RegionRenderError: If the frame surface cannot be allocated or filled
    """
    surface = OffscreenSurface.allocate(name, frame.width, frame.height, resolution, max_size)
    try:
        canvas = surface.require_image()
        # Fresh canvas is fully transparent, so a plain paste equals source-over
        canvas.paste(trimmed, frame_offset(frame, resolution))
        return surface.detach()
    except MemoryError as e:
        raise SurfaceAllocationError(name, f"out of memory while framing: {e}") from e
    except (OSError, ValueError) as e:
        raise RegionRenderError(name, f"framing failed: {e}") from e
    finally:
        surface.destroy()

"""Offscreen rendering surfaces."""

import math

from PIL import Image

from ..errors import DegenerateRegionError, SurfaceAllocationError

TRANSPARENT = (0, 0, 0, 0)


def surface_pixel_size(width: float, height: float, resolution: float) -> tuple[int, int]:
    """Pixel size of a surface covering ``width x height`` logical units."""
    return math.ceil(width * resolution), math.ceil(height * resolution)


class OffscreenSurface:
    """A transparent RGBA render target that is never shown on screen."""

    def __init__(self, image: Image.Image, resolution: float):
        self.image: Image.Image | None = image
        self.resolution = resolution

    @classmethod
    def allocate(
        cls,
        name: str,
        width: float,
        height: float,
        resolution: float,
        max_size: int,
    ) -> "OffscreenSurface":
        """
        Allocate a surface for ``width x height`` logical units.

        Args:
            name: Region name, used in error messages
            width: Logical width
            height: Logical height
            resolution: Device-pixel multiplier
            max_size: Largest allowed pixel edge

        Raises:
            DegenerateRegionError: If the surface would have no pixels
            SurfaceAllocationError: If the surface is too large or allocation fails
        """
        pixel_width, pixel_height = surface_pixel_size(width, height, resolution)
        if pixel_width <= 0 or pixel_height <= 0:
            raise DegenerateRegionError(name, f"empty surface {pixel_width}x{pixel_height}")
        if pixel_width > max_size or pixel_height > max_size:
            raise SurfaceAllocationError(
                name, f"surface {pixel_width}x{pixel_height} exceeds limit {max_size}"
            )
        try:
            image = Image.new("RGBA", (pixel_width, pixel_height), TRANSPARENT)
        except (MemoryError, ValueError) as e:
            raise SurfaceAllocationError(name, f"cannot allocate surface: {e}") from e
        return cls(image, resolution)

    @property
    def size(self) -> tuple[int, int]:
        return self.require_image().size

    @property
    def destroyed(self) -> bool:
        return self.image is None

    def require_image(self) -> Image.Image:
        if self.image is None:
            raise RuntimeError("Surface has been destroyed")
        return self.image

    def destroy(self) -> None:
        """Release the pixel buffer. Safe to call more than once."""
        if self.image is not None:
            self.image.close()
            self.image = None

    def detach(self) -> Image.Image:
        """Hand the pixel buffer to the caller; the surface is destroyed afterwards."""
        image = self.require_image()
        self.image = None
        return image

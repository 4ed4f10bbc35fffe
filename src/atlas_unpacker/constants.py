"""Global constants for the application."""

# Descriptor format (Sparrow / Starling TextureAtlas)
SUBTEXTURE_TAG = "SubTexture"
DEFAULT_REGION_NAME = "unknown"  # Used when a SubTexture has no name attribute

# Rendering settings
MIN_RESOLUTION = 2.0  # Exports are never rendered below 2x device pixels
DEFAULT_DEVICE_PIXEL_RATIO = 1.0
MAX_SURFACE_SIZE = 16384  # Largest offscreen surface edge in pixels
DEFAULT_RESAMPLE = "nearest"

# Archive settings
DEFAULT_ARCHIVE_NAME = "unpacked.zip"
ENTRY_EXTENSION = ".png"
ARCHIVE_TIMESTAMP = (1980, 1, 1, 0, 0, 0)  # Fixed entry time keeps archives reproducible

# Environment variables read by RenderConfig.from_env
ENV_DEVICE_PIXEL_RATIO = "ATLAS_UNPACKER_DEVICE_PIXEL_RATIO"
ENV_MAX_SURFACE_SIZE = "ATLAS_UNPACKER_MAX_SURFACE_SIZE"
ENV_RESAMPLE = "ATLAS_UNPACKER_RESAMPLE"

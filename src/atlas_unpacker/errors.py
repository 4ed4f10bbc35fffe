"""Exception hierarchy for atlas unpacking."""


class AtlasUnpackerError(Exception):
    """Base exception for all atlas unpacking failures."""
    pass


class DescriptorParseError(AtlasUnpackerError, ValueError):
    """Raised when an atlas descriptor is not well-formed XML."""
    pass


class ConfigError(AtlasUnpackerError, ValueError):
    """An environment setting could not be read."""
    pass


class RegionRenderError(AtlasUnpackerError):
    """A single region could not be rendered. Never aborts an export run."""

    def __init__(self, region_name: str, reason: str):
        super().__init__(f"Region '{region_name}': {reason}")
        self.region_name = region_name
        self.reason = reason


class SurfaceAllocationError(RegionRenderError):
    """The offscreen surface for a region could not be allocated."""
    pass


class DegenerateRegionError(RegionRenderError):
    """The region has no drawable area (zero or negative size)."""
    pass


class ArchiveError(AtlasUnpackerError):
    """Base exception for archive packaging errors."""
    pass


class DuplicateEntryError(ArchiveError, ValueError):
    """An entry with the same name was already added to the archive."""
    pass


class ArchiveFinalizedError(ArchiveError):
    """The archive was already finalized and is now immutable."""
    pass


class ArchiveFinalizeError(ArchiveError):
    """Serializing the completed archive failed."""
    pass

"""Parser for Sparrow/Starling texture atlas descriptors."""

import logging
import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from .constants import DEFAULT_REGION_NAME, ENTRY_EXTENSION, SUBTEXTURE_TAG
from .errors import DescriptorParseError

logger = logging.getLogger(__name__)

# Leading decimal literal, the same prefix a browser's parseFloat accepts
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in atlas pixel space."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class RegionRecord:
    """
    One named region of the atlas.

    Attributes:
        name: Region name, used for the archive entry
        rectangle: Packed (possibly trimmed) area inside the atlas image
        frame: Untrimmed bounding box, or None when the region is used as-is
    """

    name: str
    rectangle: Rect
    frame: Rect | None = None

    @property
    def entry_name(self) -> str:
        return f"{self.name}{ENTRY_EXTENSION}"


@dataclass(frozen=True)
class AtlasDescriptor:
    """Parsed descriptor document."""

    image_path: str | None
    regions: list[RegionRecord]


def parse_number(value: str | None) -> float:
    """
    Parse a numeric attribute leniently.

    Accepts a leading decimal prefix (``"12px"`` gives 12.0). Missing,
    unparsable or non-finite values give 0.0 instead of raising.
    """
    if value is None:
        return 0.0
    match = _NUMBER_PREFIX.match(value.lstrip())
    if match is None:
        logger.debug("Unparsable numeric attribute %r, using 0", value)
        return 0.0
    number = float(match.group(0))
    if not math.isfinite(number):
        logger.debug("Non-finite numeric attribute %r, using 0", value)
        return 0.0
    return number


def parse_region(element: ET.Element) -> RegionRecord:
    """Build a region record from a single SubTexture element."""
    name = element.get("name") or DEFAULT_REGION_NAME
    x = parse_number(element.get("x"))
    y = parse_number(element.get("y"))
    width = parse_number(element.get("width"))
    height = parse_number(element.get("height"))

    # Missing or zero frame size falls back to the packed size
    frame_x = parse_number(element.get("frameX"))
    frame_y = parse_number(element.get("frameY"))
    frame_width = parse_number(element.get("frameWidth")) or width
    frame_height = parse_number(element.get("frameHeight")) or height

    frame = None
    if frame_width and frame_height:
        frame = Rect(frame_x, frame_y, frame_width, frame_height)

    return RegionRecord(name=name, rectangle=Rect(x, y, width, height), frame=frame)


def parse_atlas(document: str | bytes) -> AtlasDescriptor:
    """
    Parse an atlas descriptor document.

    Args:
        document: XML text of the descriptor

    Returns:
        AtlasDescriptor with the image path and every SubTexture region in
        document order

    Raises:
        DescriptorParseError: If the document is not well-formed XML
    """
    try:
        root = ET.fromstring(document)
    except ET.ParseError as e:
        raise DescriptorParseError(f"Invalid atlas descriptor: {e}") from e

    regions = [parse_region(element) for element in root.iter(SUBTEXTURE_TAG)]
    logger.info("Parsed %d regions from atlas descriptor", len(regions))
    return AtlasDescriptor(image_path=root.get("imagePath"), regions=regions)


def parse_regions(document: str | bytes) -> list[RegionRecord]:
    """Parse only the region list of an atlas descriptor."""
    return parse_atlas(document).regions

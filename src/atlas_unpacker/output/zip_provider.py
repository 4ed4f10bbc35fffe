"""ZIP archive output provider."""

import zipfile
from io import BytesIO
from typing import Iterable

from ..constants import ARCHIVE_TIMESTAMP
from .base import OutputProvider


class ZipOutputProvider(OutputProvider):
    """Output provider for DEFLATE-compressed ZIP archives."""

    @property
    def output_format(self) -> str:
        return "zip"

    def serialize(self, entries: Iterable[tuple[str, bytes]]) -> bytes:
        buffer = BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            for name, data in entries:
                # Fixed timestamp and mode so equal inputs give equal archives
                info = zipfile.ZipInfo(name, date_time=ARCHIVE_TIMESTAMP)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = 0o644 << 16
                zf.writestr(info, data)
        return buffer.getvalue()

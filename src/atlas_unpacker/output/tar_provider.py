"""Gzip-compressed tar archive output provider."""

import gzip
import tarfile
from io import BytesIO
from typing import Iterable

from .base import OutputProvider


class TarGzOutputProvider(OutputProvider):
    """Output provider for ``.tar.gz`` archives."""

    @property
    def output_format(self) -> str:
        return "tar.gz"

    def serialize(self, entries: Iterable[tuple[str, bytes]]) -> bytes:
        buffer = BytesIO()
        # mtime=0 keeps the gzip header stable across runs
        with gzip.GzipFile(fileobj=buffer, mode="wb", mtime=0) as gz:
            with tarfile.open(fileobj=gz, mode="w", format=tarfile.PAX_FORMAT) as tar:
                for name, data in entries:
                    info = tarfile.TarInfo(name)
                    info.size = len(data)
                    info.mtime = 0
                    info.mode = 0o644
                    tar.addfile(info, BytesIO(data))
        return buffer.getvalue()

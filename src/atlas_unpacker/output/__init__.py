"""Output providers for different archive formats."""

from dataclasses import dataclass

from .base import OutputProvider
from .tar_provider import TarGzOutputProvider
from .zip_provider import ZipOutputProvider


@dataclass(frozen=True)
class OutputFormatSpec:
    extension: str
    media_type: str
    provider_class: type[OutputProvider]


_OUTPUT_FORMATS: dict[str, OutputFormatSpec] = {
    "zip": OutputFormatSpec(
        extension=".zip",
        media_type="application/zip",
        provider_class=ZipOutputProvider,
    ),
    "tar.gz": OutputFormatSpec(
        extension=".tar.gz",
        media_type="application/gzip",
        provider_class=TarGzOutputProvider,
    ),
}


def resolve_output_provider(file_path: str) -> OutputProvider:
    """
    Resolve the appropriate output provider based on file extension.

    Args:
        file_path: Output file path (extension determines format)

    Returns:
        An OutputProvider instance

    Raises:
        ValueError: If file extension is not supported
    """
    spec = _output_spec_from_path(file_path)
    return spec.provider_class(file_path)


def create_output_provider(output_format: str, file_path: str = "") -> OutputProvider:
    """Create a provider for a format name, independent of the path's extension."""
    spec = _output_spec_from_format(output_format)
    return spec.provider_class(file_path)


def supported_output_formats() -> tuple[str, ...]:
    """Return supported output format names."""
    return tuple(_OUTPUT_FORMATS.keys())


def media_type_for_output_format(output_format: str) -> str:
    """Resolve media type for a supported output format."""
    spec = _output_spec_from_format(output_format)
    return spec.media_type


def output_path_for_format(output_format: str, base_name: str = "unpacked") -> str:
    """Build an output file name from an output format name."""
    spec = _output_spec_from_format(output_format)
    return f"{base_name}{spec.extension}"


def _output_spec_from_path(file_path: str) -> OutputFormatSpec:
    lowered = file_path.lower()
    for spec in _OUTPUT_FORMATS.values():
        if lowered.endswith(spec.extension):
            return spec
    supported = ", ".join(spec.extension for spec in _OUTPUT_FORMATS.values())
    raise ValueError(f"Unsupported output format: {file_path}. Supported formats: {supported}")


def _output_spec_from_format(output_format: str) -> OutputFormatSpec:
    spec = _OUTPUT_FORMATS.get(output_format.lower())
    if spec is not None:
        return spec
    supported = ", ".join(supported_output_formats())
    raise ValueError(f"Invalid format. Choose from: {supported}")


__all__ = [
    "OutputFormatSpec",
    "OutputProvider",
    "TarGzOutputProvider",
    "ZipOutputProvider",
    "create_output_provider",
    "resolve_output_provider",
    "supported_output_formats",
    "media_type_for_output_format",
    "output_path_for_format",
]

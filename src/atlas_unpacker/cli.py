"""CLI interface for atlas-unpacker."""

import logging
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from .config import RenderConfig, supported_resample_names
from .console_printer import RegionConsolePrinter
from .constants import DEFAULT_ARCHIVE_NAME
from .descriptor import AtlasDescriptor, parse_atlas
from .errors import AtlasUnpackerError, DescriptorParseError
from .export_pipeline import export_regions, load_atlas_image
from .output import create_output_provider, resolve_output_provider, supported_output_formats
from .output.base import OutputProvider
from .scene.nodes import build_atlas_scene

# Load environment variables from .env file
load_dotenv()

console = Console()
err_console = Console(stderr=True)
SUPPORTED_OUTPUT_FORMATS_TEXT = ", ".join(supported_output_formats())


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""
    pass


def main(
    descriptor: str = typer.Argument(None, help="Atlas descriptor XML file"),
    image: str = typer.Option(
        None,
        "--image",
        "-i",
        help="Atlas image (defaults to the descriptor's imagePath)",
    ),
    out: str = typer.Option(
        DEFAULT_ARCHIVE_NAME,
        "--output",
        "-out",
        "-o",
        help="Archive to write",
    ),
    output_format: str = typer.Option(
        None,
        "--format",
        "-f",
        help=f"Archive format ({SUPPORTED_OUTPUT_FORMATS_TEXT}); defaults to the output extension",
    ),
    device_pixel_ratio: float = typer.Option(
        None,
        "--device-pixel-ratio",
        "--dpr",
        help="Device pixel ratio; exports never render below 2x",
    ),
    resample: str = typer.Option(
        None,
        "--resample",
        help=f"Texture sampling filter ({', '.join(supported_resample_names())})",
    ),
    show_regions: bool = typer.Option(
        True,
        "--show-regions/--hide-regions",
        help="Print the parsed region table",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log every exported region",
    ),
) -> None:
    """
    Unpack every region of a texture atlas into an archive of PNG files.

    Examples:
      # Unpack next to the descriptor's image into unpacked.zip
      atlas-unpacker sheet.xml

      # Explicit image, 3x resolution, tar.gz output
      atlas-unpacker sheet.xml --image sheet.png --dpr 3 -o sprites.tar.gz
    """
    _configure_logging(verbose)
    try:
        if not descriptor:
            raise CLIError("Descriptor file is required")

        config = _build_config(device_pixel_ratio, resample)
        provider = _resolve_provider(out, output_format)

        atlas = _load_descriptor(descriptor)
        image_path = _resolve_image_path(descriptor, image, atlas)

        if show_regions:
            RegionConsolePrinter(console).display_regions(atlas.regions)

        _generate_archive(atlas, image_path, provider, config)

    except CLIError as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    except Exception as e:
        err_console.print(f"[bold red]Unexpected error:[/bold red] {e}")
        sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _build_config(device_pixel_ratio: float | None, resample: str | None) -> RenderConfig:
    try:
        return RenderConfig.from_env(device_pixel_ratio=device_pixel_ratio, resample=resample)
    except ValueError as e:
        raise CLIError(f"Invalid render settings: {e}")


def _resolve_provider(out: str, output_format: str | None) -> OutputProvider:
    try:
        if output_format:
            return create_output_provider(output_format, out)
        return resolve_output_provider(out)
    except ValueError as e:
        raise CLIError(str(e))


def _load_descriptor(file_path: str) -> AtlasDescriptor:
    """Load and parse an atlas descriptor file."""
    console.print(f"[bold blue]Loading descriptor {file_path}...[/bold blue]")
    try:
        return parse_atlas(Path(file_path).read_bytes())
    except FileNotFoundError:
        raise CLIError(f"File '{file_path}' not found")
    except DescriptorParseError as e:
        raise CLIError(str(e))


def _resolve_image_path(descriptor_path: str, image: str | None, atlas: AtlasDescriptor) -> Path:
    """Use the explicit image path, or the descriptor's imagePath relative to it."""
    if image:
        return Path(image)
    if not atlas.image_path:
        raise CLIError("Descriptor has no imagePath; pass the atlas image with --image")
    return Path(descriptor_path).parent / atlas.image_path


def _generate_archive(
    atlas: AtlasDescriptor,
    image_path: Path,
    provider: OutputProvider,
    config: RenderConfig,
) -> None:
    """Render all regions, write the archive and print the summary."""
    try:
        texture = load_atlas_image(image_path.read_bytes())
    except FileNotFoundError:
        raise CLIError(f"Image '{image_path}' not found")
    except OSError as e:
        raise CLIError(f"Cannot read image '{image_path}': {e}")

    console.print(
        f"\n[bold blue]Rendering {len(atlas.regions)} regions at {config.resolution:g}x...[/bold blue]"
    )
    try:
        result = export_regions(
            build_atlas_scene(texture),
            atlas.regions,
            config=config,
            provider=provider,
        )
        console.print(f"[bold blue]Saving to {provider.path}...[/bold blue]")
        provider.write(result.archive)
    except (AtlasUnpackerError, OSError) as e:
        raise CLIError(f"Failed to generate archive: {e}")

    RegionConsolePrinter(console).display_report(result.report)
    console.print(f"[green]✓[/green] {provider.output_format.upper()} saved to {provider.path}")


app = typer.Typer()
app.command()(main)

if __name__ == "__main__":
    app()

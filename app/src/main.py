"""FastAPI web app for atlas-unpacker archive downloads."""

from urllib.parse import quote

from dotenv import load_dotenv
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from atlas_unpacker.config import RenderConfig
from atlas_unpacker.errors import ArchiveFinalizeError, DescriptorParseError
from atlas_unpacker.export_pipeline import unpack_atlas
from atlas_unpacker.output import (
    create_output_provider,
    media_type_for_output_format,
    output_path_for_format,
)

load_dotenv()

app = FastAPI(title="Atlas Unpacker")

# Read once at startup and shared read-only by every request.
# A malformed environment value raises ConfigError naming the variable.
render_config = RenderConfig.from_env()


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback name and the exact UTF-8 name."""
    fallback = "".join(
        char if char.isascii() and char.isprintable() and char not in '"\\' else "_"
        for char in filename
    )
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@app.post("/api/unpack")
def unpack(
    image: UploadFile = File(..., description="Atlas image"),
    descriptor: UploadFile = File(..., description="Atlas descriptor XML"),
    filename: str | None = Form(None, description="Suggested archive file name"),
    output_format: str = Form("zip", alias="format", description="Archive format: zip or tar.gz"),
):
    """Unpack an uploaded atlas and return the archive as a download."""
    try:
        provider = create_output_provider(output_format)
        media_type = media_type_for_output_format(output_format)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not filename:
        filename = output_path_for_format(output_format)

    image_data = image.file.read()
    descriptor_data = descriptor.file.read()

    try:
        result = unpack_atlas(
            image_data,
            descriptor_data,
            config=render_config,
            provider=provider,
        )
    except DescriptorParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ArchiveFinalizeError as e:
        raise HTTPException(status_code=500, detail=f"Failed to build archive: {e}")
    except OSError as e:
        raise HTTPException(status_code=400, detail=f"Invalid atlas image: {e}")

    return Response(
        content=result.archive,
        media_type=media_type,
        headers={
            "Content-Disposition": content_disposition(filename),
            "X-Regions-Exported": str(len(result.report.exported)),
            "X-Regions-Failed": str(len(result.report.failed)),
        },
    )

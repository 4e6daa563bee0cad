"""Upload helpers shared by the PDF tool and document AI routes."""

from fastapi import HTTPException, UploadFile, status

from src.parsing.pdf_parser import MAX_FILE_SIZE

MAX_UPLOAD_SIZE = MAX_FILE_SIZE


def validate_file_extension(filename: str | None) -> str:
    """Validate that file has .pdf extension.

    Args:
        filename: The uploaded filename.

    Returns:
        The validated filename.

    Raises:
        HTTPException: 400 if extension is invalid.
    """
    if not filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )

    if not filename.lower().endswith(".pdf"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are accepted",
        )

    return filename


async def read_and_validate_size(file: UploadFile) -> bytes:
    """Read file content and validate size.

    Raises:
        HTTPException: 413 if file exceeds size limit.
    """
    content = await file.read()

    if len(content) > MAX_UPLOAD_SIZE:
        size_mb = len(content) / (1024 * 1024)
        limit_mb = MAX_UPLOAD_SIZE // (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size ({size_mb:.1f}MB) exceeds maximum allowed ({limit_mb}MB)",
        )

    return content


async def read_pdf_upload(file: UploadFile) -> tuple[str, bytes]:
    """Validate an uploaded PDF and return its filename and bytes."""
    filename = validate_file_extension(file.filename)
    content = await read_and_validate_size(file)
    return filename, content


def output_filename(filename: str, suffix: str, extension: str = "pdf") -> str:
    """Build a download name such as ``report-merged.pdf``."""
    stem = filename.rsplit(".", 1)[0] if "." in filename else filename
    return f"{stem}-{suffix}.{extension}"


def pdf_response_headers(filename: str) -> dict[str, str]:
    # Header values must be latin-1; drop anything else.
    safe = filename.encode("ascii", "ignore").decode("ascii").replace('"', "") or "document.pdf"
    return {"Content-Disposition": f'attachment; filename="{safe}"'}

"""Validation helpers for uploaded image content."""

import io
import os

from fastapi import HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif"}

ALLOWED_IMAGE_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
}


def sniff_image_mime(raw: bytes) -> str:
    """Return the MIME type Pillow detects for ``raw``.

    Raises:
        ValueError: If the bytes are empty or not a readable image.
    """
    if not raw:
        raise ValueError("Image content is required.")
    try:
        with Image.open(io.BytesIO(raw)) as image:
            image_format = image.format
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ValueError("Bytes are not a supported image format.") from exc
    mime_type = Image.MIME.get(image_format or "")
    if not mime_type:
        raise ValueError(f"Unknown image format: {image_format}")
    return mime_type


def validate_image_file(image_file: UploadFile) -> None:
    """Check that both the extension and the declared content type are allowed images."""
    if not image_file.filename:
        raise HTTPException(status_code=400, detail="Please select an image file! (jpeg, jpg, png, gif)")
    extension = os.path.splitext(image_file.filename)[1].lower()
    content_type = (image_file.content_type or "").lower().split(";", 1)[0].strip()
    if extension not in ALLOWED_IMAGE_EXTENSIONS or content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=415,
            detail="Please select an image file! (jpeg, jpg, png, gif)",
        )


async def read_image_upload(image_file: UploadFile) -> bytes:
    """Read validated image bytes, ensuring the upload is a non-empty decodable image."""
    validate_image_file(image_file)
    image_bytes = await image_file.read()
    if not image_bytes:
        raise HTTPException(status_code=400, detail="Uploaded image is empty.")
    try:
        sniff_image_mime(image_bytes)
    except ValueError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    return image_bytes

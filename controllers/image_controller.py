import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request, UploadFile

from services.catalog.catalog_service import CatalogService
from services.catalog.errors import CatalogError
from services.image_storage import ImageStorage
from utils.media_validation import read_image_upload

LOGGER = logging.getLogger(__name__)


def _get_catalog(request: Request) -> CatalogService:
    """Retrieve the shared catalog service from the app state."""
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise HTTPException(status_code=500, detail="Image catalog not initialized.")
    return catalog


def _get_storage(request: Request) -> ImageStorage:
    """Retrieve the shared image storage from the app state."""
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise HTTPException(status_code=500, detail="Image storage not initialized.")
    return storage


def _to_http_exception(exc: CatalogError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.to_payload())


async def _discard_upload(storage: ImageStorage, storage_path: str) -> None:
    """Remove a file written for an add that did not commit."""
    try:
        await storage.delete(storage_path)
    except OSError as exc:
        LOGGER.warning("Could not remove orphaned upload %s: %s", storage_path, exc)


async def add_image(request: Request, file: UploadFile, password: Optional[str] = None) -> Dict[str, Any]:
    """Handle image upload, keyword generation, and catalog registration.

    Args:
        request: FastAPI Request object (used to access app.state for shared services).
        file: Uploaded JPEG, PNG or GIF image.
        password: Optional password required later to delete the image.

    Returns:
        A dict containing: message, passwordEnabled, fileName, filePath, keywords
    """
    image_bytes = await read_image_upload(file)
    catalog = _get_catalog(request)
    storage = _get_storage(request)

    stored = await storage.save(file.filename, image_bytes)
    try:
        record = await catalog.add_image(
            image_bytes,
            file.filename,
            stored.identity,
            stored.storage_path,
            password=password,
        )
    except Exception as exc:
        await _discard_upload(storage, stored.storage_path)
        if isinstance(exc, CatalogError):
            raise _to_http_exception(exc) from exc
        raise

    return {
        "message": "File Uploaded",
        "passwordEnabled": record.password_enabled,
        "fileName": record.identity,
        "filePath": storage.public_url(record.storage_path),
        "keywords": list(record.keywords),
    }


async def delete_image(request: Request, name: str, password: Optional[str] = None) -> Dict[str, Any]:
    """Delete an image from the catalog and its file from storage.

    A failed file removal does not undo the delete; it is reported in
    ``storageCleanupError``.
    """
    catalog = _get_catalog(request)
    try:
        result = await catalog.delete_image(name, password)
    except CatalogError as exc:
        raise _to_http_exception(exc) from exc

    body: Dict[str, Any] = {"message": "image has been deleted successfully"}
    if result.cleanup_error is not None:
        body["storageCleanupError"] = result.cleanup_error.message
    return body


async def search_by_name(request: Request, name: str) -> List[str]:
    """Return public paths of images named `name` or tagged with it."""
    catalog = _get_catalog(request)
    storage = _get_storage(request)
    return [storage.public_url(path) for path in catalog.search_by_keyword(name)]


async def search_by_image(request: Request, file: UploadFile) -> List[str]:
    """Return public paths of images sharing keywords with the uploaded query image."""
    image_bytes = await read_image_upload(file)
    catalog = _get_catalog(request)
    storage = _get_storage(request)
    try:
        paths = await catalog.search_by_image(image_bytes)
    except CatalogError as exc:
        raise _to_http_exception(exc) from exc
    return [storage.public_url(path) for path in paths]


def health(request: Request) -> Dict[str, Any]:
    """Report catalog size and collaborator availability."""
    catalog = getattr(request.app.state, "catalog", None)
    stats = catalog.stats() if catalog is not None else {"images": 0, "keywords": 0}
    has_openai = getattr(request.app.state, "openai_client", None) is not None
    return {"ok": catalog is not None, **stats, "openai_available": has_openai}

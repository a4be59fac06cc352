"""Error taxonomy raised by the image catalog.

Every error carries a stable ``code`` and the HTTP status the transport
layer reports it with, so controllers can translate them without a lookup
table of their own.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for failures surfaced by catalog operations."""

    code = "catalog_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        """Return the structured error body sent back to clients."""
        return {"error": True, "code": self.code, "message": self.message}


class DuplicateIdentity(CatalogError):
    """An identity was stored twice. Indicates a server fault, not a user error."""

    code = "duplicate_identity"
    status_code = 500


class NotFound(CatalogError):
    code = "not_found"
    status_code = 404


class PasswordRequired(CatalogError):
    code = "password_required"
    status_code = 401


class InvalidPassword(CatalogError):
    code = "invalid_password"
    status_code = 403


class LabelDetectionFailed(CatalogError):
    """The label source could not describe an uploaded image."""

    code = "label_detection_failed"
    status_code = 502


class InvalidQueryImage(CatalogError):
    """The label source could not describe a search-by-image query."""

    code = "invalid_query_image"
    status_code = 422


class StorageCleanupFailed(CatalogError):
    """Physical removal of an image failed after the catalog dropped it.

    Never raised out of a delete; it is attached to the delete result so the
    caller can report it while the catalog state stays authoritative.
    """

    code = "storage_cleanup_failed"
    status_code = 500

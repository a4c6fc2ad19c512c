"""Partner document uploads, kept in Django's default storage.

The partner row stores only the storage key; URLs are resolved when a
partner is serialized.
"""

import logging
import os
import uuid

from django.conf import settings
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".pdf"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "application/pdf"}

# multipart field name -> model field
UPLOAD_FIELDS = {
    "profilePhoto": "profile_photo",
    "aadharDocument": "aadhar_document",
    "licenseDocument": "license_document",
    "vehicleRCDocument": "vehicle_rc_document",
    "insuranceDocument": "insurance_document",
    "pollutionCertDocument": "pollution_cert_document",
    "idProofDocument": "id_proof_document",
}


class DocumentError(Exception): pass


def _max_size() -> int:
    return getattr(settings, "PARTNER_DOCUMENT_MAX_SIZE", 10 * 1024 * 1024)


def check_document(upload) -> None:
    ext = os.path.splitext(upload.name or "")[1].lower()
    content_type = (getattr(upload, "content_type", "") or "").lower()
    if ext not in ALLOWED_EXTENSIONS or content_type not in ALLOWED_CONTENT_TYPES:
        raise DocumentError("Only image files (jpeg, jpg, png) and PDF files are allowed")
    if upload.size > _max_size():
        raise DocumentError(f"File {upload.name} exceeds the maximum size of {_max_size() // (1024 * 1024)}MB")


def save_partner_documents(files, folder: str) -> dict:
    """Store every recognised upload in ``files`` under ``delivery-partners/<folder>/``.

    Returns ``{model_field: storage_key}``. All files are checked before any
    is written; if a write fails halfway the ones already stored are removed.
    """
    uploads = {field: files[key] for key, field in UPLOAD_FIELDS.items() if key in files}
    for upload in uploads.values():
        check_document(upload)

    saved = {}
    try:
        for field, upload in uploads.items():
            ext = os.path.splitext(upload.name)[1].lower()
            key = f"delivery-partners/{folder}/{field}-{uuid.uuid4().hex}{ext}"
            saved[field] = default_storage.save(key, upload)
    except Exception:
        delete_documents(saved.values())
        raise
    return saved


def delete_documents(keys) -> None:
    for key in keys:
        if not key:
            continue
        try:
            default_storage.delete(key)
        except Exception:
            logger.exception("Failed to delete partner document %s", key)


def document_url(key: str):
    if not key:
        return None
    return default_storage.url(key)

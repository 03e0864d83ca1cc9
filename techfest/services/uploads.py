"""Image upload helper backed by a local blob folder."""

from __future__ import annotations

import os
import time
from pathlib import Path

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from techfest.errors import UploadError, ValidationError

ALLOWED_MIME_TYPES = {'image/jpeg', 'image/jpg', 'image/png', 'image/gif', 'image/webp'}
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB
STATIC_UPLOAD_SUBDIR = 'uploads'
PUBLIC_PREFIX = '/uploads/'


def upload_root() -> Path:
    """Return (and ensure) the blob storage root."""
    configured = current_app.config.get('UPLOAD_FOLDER')
    root = Path(configured) if configured else Path(current_app.static_folder) / STATIC_UPLOAD_SUBDIR
    root.mkdir(parents=True, exist_ok=True)
    return root


def _ensure_within_root(path: Path, root: Path) -> None:
    resolved_root = root.resolve()
    if resolved_root not in path.resolve().parents:
        raise ValidationError('Invalid upload path')


def _determine_size(file: FileStorage) -> int:
    stream = file.stream
    current = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(current)
    return size


def validate_image(file: FileStorage | None) -> int:
    """Check type and size; return the size in bytes."""
    if file is None or not file.filename:
        raise ValidationError('No file provided')
    if (file.mimetype or '').lower() not in ALLOWED_MIME_TYPES:
        raise ValidationError('Invalid file type. Please upload an image (JPEG, PNG, GIF, or WebP).')
    size = _determine_size(file)
    max_size = current_app.config.get('MAX_IMAGE_SIZE', MAX_FILE_SIZE)
    if size > max_size:
        raise ValidationError('File size must be less than 5MB')
    return size


def storage_key(folder: str, filename: str, now_ms: int | None = None) -> str:
    """Build ``<folder>/<epoch-millis>_<sanitized name>``."""
    safe_folder = secure_filename(folder or '') or 'general'
    safe_name = secure_filename(filename or '') or 'image'
    millis = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{safe_folder}/{millis}_{safe_name}"


def validate_and_upload(file: FileStorage | None, folder: str = 'events') -> str:
    """Validate an image, store it and return its public URL.

    Raises:
        ValidationError: wrong type, too large, or no file
        UploadError: the blob store could not be written
    """
    size = validate_image(file)
    key = storage_key(folder, file.filename)
    root = upload_root()
    target = root / key
    _ensure_within_root(target, root)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        file.stream.seek(0)
        file.save(str(target))
    except OSError as e:
        current_app.logger.error(f"Failed to store upload {key}: {e}")
        raise UploadError('Failed to upload image') from e

    current_app.logger.info(f"Stored upload {key} ({size} bytes)")
    return f"{PUBLIC_PREFIX}{key}"


__all__ = [
    'validate_and_upload',
    'validate_image',
    'storage_key',
    'upload_root',
    'ALLOWED_MIME_TYPES',
    'MAX_FILE_SIZE',
]

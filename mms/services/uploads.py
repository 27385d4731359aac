"""Receipt image validation and local storage."""

from __future__ import annotations

import os
import time
from pathlib import Path

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from mms.services.errors import ValidationError

ALLOWED_MIME_TYPES = {'image/jpeg', 'image/png', 'image/webp'}
ALLOWED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp'}
FILE_SIGNATURES = {
    'image/jpeg': [b'\xff\xd8\xff'],
    'image/png': [b'\x89PNG\r\n\x1a\n'],
    'image/webp': [b'RIFF'],
}
# RIFF is a generic container; WebP also carries its tag at offset 8.
RIFF_FORMS = {
    'image/webp': b'WEBP',
}
RECEIPT_SUBDIR = 'receipts'


def _determine_size(file: FileStorage) -> int:
    stream = file.stream
    current = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(current)
    return size


def _read_header(file: FileStorage, length: int = 16) -> bytes:
    stream = file.stream
    stream.seek(0)
    header = stream.read(length)
    stream.seek(0)
    return header


def _extension(filename: str) -> str:
    return Path(filename).suffix.lower()


class UploadService:
    """Checks uploaded images and keeps them under UPLOAD_FOLDER."""

    def validate_image(self, file: FileStorage | None) -> None:
        """
        Reject anything that is not a small JPEG, PNG or WebP image.

        Args:
            file: The uploaded file from the multipart request

        Raises:
            ValidationError: If type, extension, content signature or size is wrong
        """
        if file is None or not file.filename:
            raise ValidationError('Receipt file is required')

        mimetype = (file.mimetype or '').lower()
        if mimetype not in ALLOWED_MIME_TYPES:
            current_app.logger.warning(f"Upload rejected: invalid MIME type {mimetype!r} for {file.filename!r}")
            raise ValidationError('Only JPEG, PNG, and WebP images are allowed')

        extension = _extension(file.filename)
        if extension not in ALLOWED_EXTENSIONS:
            current_app.logger.warning(f"Upload rejected: invalid extension {extension!r} for {file.filename!r}")
            raise ValidationError('Invalid file extension')

        header = _read_header(file)
        form = RIFF_FORMS.get(mimetype)
        if not any(header.startswith(sig) for sig in FILE_SIGNATURES[mimetype]) or (
            form is not None and header[8:12] != form
        ):
            current_app.logger.warning(f"Upload rejected: signature mismatch for {file.filename!r}")
            raise ValidationError('File content does not match the declared type')

        max_size = current_app.config.get('MAX_FILE_SIZE', 5 * 1024 * 1024)
        if _determine_size(file) > max_size:
            current_app.logger.warning(f"Upload rejected: {file.filename!r} exceeds {max_size} bytes")
            raise ValidationError(f"File too large. Maximum size is {max_size // (1024 * 1024)}MB")

    def _receipt_root(self) -> Path:
        root = Path(current_app.config['UPLOAD_FOLDER']) / RECEIPT_SUBDIR
        root.mkdir(parents=True, exist_ok=True)
        return root

    def store_receipt(self, file: FileStorage) -> str:
        """Validate and save a receipt, returning its public URL."""
        self.validate_image(file)

        name = secure_filename(file.filename) or f"receipt{_extension(file.filename)}"
        filename = f"{int(time.time() * 1000)}-{name}"
        target = self._receipt_root() / filename

        file.stream.seek(0)
        file.save(str(target))
        current_app.logger.info(f"Stored receipt {filename}")

        base_url = current_app.config.get('PUBLIC_UPLOAD_URL', '/uploads').rstrip('/')
        return f"{base_url}/{RECEIPT_SUBDIR}/{filename}"

    def delete_receipt(self, url: str | None) -> bool:
        """
        Delete a stored receipt given its public URL.

        Returns:
            True if a file was removed, False otherwise
        """
        if not url:
            return False

        filename = secure_filename(url.rsplit('/', 1)[-1])
        if not filename:
            return False

        target = self._receipt_root() / filename
        if target.is_file():
            target.unlink()
            return True
        return False

    def resolve_receipt(self, filename: str) -> Path | None:
        """Map a served receipt name back to its file on disk."""
        safe = secure_filename(filename)
        if not safe:
            return None
        target = self._receipt_root() / safe
        return target if target.is_file() else None


upload_service = UploadService()

__all__ = [
    "ALLOWED_MIME_TYPES",
    "ALLOWED_EXTENSIONS",
    "FILE_SIGNATURES",
    "UploadService",
    "upload_service",
]

# mr_core/documents/uploads.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, Sequence

from django.conf import settings
from django.core.files.uploadedfile import UploadedFile

from mr_core.common.api.exceptions import FileTooLarge, TooManyFiles, UnsupportedFileType


@dataclass(frozen=True)
class UploadRules:
    max_file_size: int
    max_files: int
    allowed_mime_types: frozenset[str]
    allowed_extensions: frozenset[str]

    @classmethod
    def from_settings(cls, *, max_files: int | None = None) -> "UploadRules":
        raw = getattr(settings, "UPLOADS", {}) or {}
        return cls(
            max_file_size=int(raw.get("MAX_FILE_SIZE", 10 * 1024 * 1024)),
            max_files=max_files if max_files is not None else int(raw.get("MAX_DIAGNOSTIC_FILES", 5)),
            allowed_mime_types=frozenset(m.lower() for m in raw.get("ALLOWED_MIME_TYPES", ())),
            allowed_extensions=frozenset(e.lower() for e in raw.get("ALLOWED_EXTENSIONS", ())),
        )

    @property
    def max_file_size_mb(self) -> int:
        return self.max_file_size // (1024 * 1024)


def extension_of(name: str) -> str:
    return os.path.splitext(name or "")[1].lower()


def validate_upload(upload: UploadedFile, rules: UploadRules) -> None:
    mime = (upload.content_type or "").lower()
    if mime not in rules.allowed_mime_types or extension_of(upload.name) not in rules.allowed_extensions:
        raise UnsupportedFileType(
            {"detail": f"Tipo no permitido. Solo PDF/JPG/PNG. Recibido: {upload.content_type}", "filename": upload.name}
        )
    if upload.size is not None and upload.size > rules.max_file_size:
        raise FileTooLarge(
            {"detail": f"El archivo excede {rules.max_file_size_mb}MB", "filename": upload.name, "size": upload.size}
        )


def validate_uploads(uploads: Sequence[UploadedFile] | Iterable[UploadedFile], rules: UploadRules) -> list[UploadedFile]:
    """
    Checks count, type (MIME and extension) and size of every file.
    Runs before anything is written to storage or the database.
    """
    files = list(uploads or [])
    if len(files) > rules.max_files:
        raise TooManyFiles(
            {"detail": f"Máximo {rules.max_files} archivo(s) por solicitud", "received": len(files)}
        )
    for f in files:
        validate_upload(f, rules)
    return files

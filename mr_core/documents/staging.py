# mr_core/documents/staging.py
from __future__ import annotations

import logging
import re
import secrets
import time
from dataclasses import dataclass
from typing import Optional

from django.core.files.storage import FileSystemStorage, Storage
from django.core.files.uploadedfile import UploadedFile

from mr_core.documents.uploads import extension_of

logger = logging.getLogger(__name__)

DIAGNOSTICS_DIR = "patients/diagnostics"
DOCUMENTS_DIR = "patients/documents"
PRESCRIPTIONS_DIR = "patients/prescriptions"

_UNSAFE = re.compile(r"[^a-zA-Z0-9_-]")


def sanitize_owner_id(value) -> str:
    return _UNSAFE.sub("", str(value or "")) or "unknown"


def stored_name(owner_id, original_name: str) -> str:
    """`document-{owner}-{epoch ms}-{random}{ext}`"""
    millis = int(time.time() * 1000)
    suffix = secrets.randbelow(10**9)
    return f"document-{sanitize_owner_id(owner_id)}-{millis}-{suffix}{extension_of(original_name)}"


@dataclass(frozen=True)
class StagedFile:
    original_name: str
    stored_name: str
    # Relative to the storage root
    path: str
    mime_type: str
    size: int

    @property
    def file_type(self) -> str:
        return extension_of(self.original_name).lstrip(".")


class FileStaging:
    """
    Writes uploads to storage and removes them again unless `commit()` is called.

        with FileStaging(DIAGNOSTICS_DIR) as staging:
            staged = [staging.stage(f, owner_id=patient_id) for f in uploads]
            with transaction.atomic():
                ...  # rows referencing staged paths
            staging.commit()

    Any exception (or a missing commit) deletes every staged file on exit.
    Failing to delete a file is logged and never masks the original error.
    """

    def __init__(self, subdir: str, *, storage: Optional[Storage] = None):
        self.subdir = subdir.strip("/")
        self.storage = storage or FileSystemStorage()
        self.staged: list[StagedFile] = []
        self.committed = False

    def __enter__(self) -> "FileStaging":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if not self.committed:
            self.discard()
        return False

    def stage(self, upload: UploadedFile, *, owner_id) -> StagedFile:
        name = stored_name(owner_id, upload.name)
        saved = self.storage.save(f"{self.subdir}/{name}", upload)
        staged = StagedFile(
            original_name=upload.name,
            stored_name=saved.rsplit("/", 1)[-1],
            path=saved,
            mime_type=upload.content_type or "application/octet-stream",
            size=upload.size or 0,
        )
        self.staged.append(staged)
        return staged

    def commit(self) -> list[StagedFile]:
        self.committed = True
        return list(self.staged)

    def discard(self) -> None:
        for staged in self.staged:
            try:
                self.storage.delete(staged.path)
            except OSError as e:
                logger.warning("Could not remove staged file %s: %s", staged.path, e)
        self.staged.clear()

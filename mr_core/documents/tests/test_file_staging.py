# mr_core/documents/tests/test_file_staging.py
import pytest
from django.core.files.storage import FileSystemStorage
from django.core.files.uploadedfile import SimpleUploadedFile

from mr_core.documents.staging import DOCUMENTS_DIR, FileStaging


def _upload():
    return SimpleUploadedFile("a.pdf", b"%PDF-1.4", content_type="application/pdf")


def test_committed_files_stay(media_root):
    with FileStaging(DOCUMENTS_DIR) as staging:
        staged = staging.stage(_upload(), owner_id="pat-1")
        staging.commit()

    assert FileSystemStorage().exists(staged.path)
    assert staged.path.startswith("patients/documents/")
    assert staged.file_type == "pdf"
    assert staged.size == 8


def test_uncommitted_files_are_removed_on_error(media_root):
    storage = FileSystemStorage()

    with pytest.raises(RuntimeError):
        with FileStaging(DOCUMENTS_DIR) as staging:
            staged = staging.stage(_upload(), owner_id="pat-1")
            assert storage.exists(staged.path)
            raise RuntimeError("insert failed")

    assert not storage.exists(staged.path)


def test_missing_commit_discards(media_root):
    with FileStaging(DOCUMENTS_DIR) as staging:
        staged = staging.stage(_upload(), owner_id="pat-1")

    assert not FileSystemStorage().exists(staged.path)


def test_delete_failure_does_not_mask_error(media_root, caplog):
    class BrokenStorage(FileSystemStorage):
        def delete(self, name):
            raise PermissionError("read-only")

    with pytest.raises(RuntimeError, match="boom"):
        with FileStaging(DOCUMENTS_DIR, storage=BrokenStorage()) as staging:
            staging.stage(_upload(), owner_id="pat-1")
            raise RuntimeError("boom")

    assert "Could not remove staged file" in caplog.text

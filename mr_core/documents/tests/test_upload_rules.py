# mr_core/documents/tests/test_upload_rules.py
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from mr_core.common.api.exceptions import FileTooLarge, TooManyFiles, UnsupportedFileType
from mr_core.documents.staging import sanitize_owner_id, stored_name
from mr_core.documents.uploads import UploadRules, validate_uploads


def pdf(name="informe.pdf", size=10):
    return SimpleUploadedFile(name, b"%PDF" + b"0" * size, content_type="application/pdf")


def test_rules_come_from_settings():
    rules = UploadRules.from_settings()
    assert rules.max_files == 5
    assert rules.max_file_size == 10 * 1024 * 1024
    assert ".png" in rules.allowed_extensions


def test_accepts_allowed_types():
    files = [pdf(), SimpleUploadedFile("foto.JPG", b"x", content_type="image/jpeg")]
    assert validate_uploads(files, UploadRules.from_settings()) == files


def test_rejects_wrong_mime_and_echoes_it():
    bad = SimpleUploadedFile("notes.pdf", b"x", content_type="text/plain")
    with pytest.raises(UnsupportedFileType) as exc:
        validate_uploads([bad], UploadRules.from_settings())
    assert "text/plain" in str(exc.value.detail["detail"])


def test_rejects_mismatched_extension():
    bad = SimpleUploadedFile("script.exe", b"x", content_type="application/pdf")
    with pytest.raises(UnsupportedFileType):
        validate_uploads([bad], UploadRules.from_settings())


def test_rejects_oversized_file(settings):
    settings.UPLOADS = {**settings.UPLOADS, "MAX_FILE_SIZE": 8}
    with pytest.raises(FileTooLarge) as exc:
        validate_uploads([pdf(size=100)], UploadRules.from_settings())
    assert exc.value.status_code == 413


def test_rejects_too_many_files():
    with pytest.raises(TooManyFiles):
        validate_uploads([pdf(f"f{i}.pdf") for i in range(6)], UploadRules.from_settings())


def test_stored_name_is_sanitized():
    assert sanitize_owner_id("../pat 1/x") == "pat1x"
    name = stored_name("pat/1", "Scan.PNG")
    assert name.startswith("document-pat1-")
    assert name.endswith(".png")

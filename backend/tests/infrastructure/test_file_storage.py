"""Tests for DocumentStorage — tenant directories, naming and path containment."""

import pytest

from trialengage.core.errors import StorageError, UploadRejectedError
from trialengage.infrastructure.file_storage import DocumentStorage, safe_stem


@pytest.fixture
def storage(tmp_path):
    return DocumentStorage(tmp_path)


def test_safe_stem():
    assert safe_stem("Site Manual (v2).pdf") == "Site_Manual_v2"
    assert safe_stem("../../etc/passwd") == "passwd"
    assert safe_stem("") == "document"


def test_save_writes_under_tenant_dir(storage, tmp_path):
    filename = storage.save("acme", "Protocol.PDF", b"%PDF")
    assert filename.startswith("Protocol_")
    assert filename.endswith(".pdf")
    assert (tmp_path / "acme" / filename).read_bytes() == b"%PDF"
    assert storage.exists("acme", filename)
    assert not storage.exists("globex", filename)


def test_delete_reports_missing(storage):
    filename = storage.save("acme", "a.pdf", b"x")
    assert storage.delete("acme", filename) is True
    assert storage.delete("acme", filename) is False


def test_path_cannot_escape_tenant_dir(storage):
    with pytest.raises(UploadRejectedError):
        storage.path_for("acme", "../globex/secret.pdf")


def test_stored_suffix_is_always_pdf(storage):
    for name in ("payload.exe", "noext", "report.pdf.sh"):
        assert storage.save("acme", name, b"%PDF").endswith(".pdf")


def test_write_failure_hides_server_path(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file where the base dir should be")
    storage = DocumentStorage(blocker)
    with pytest.raises(StorageError) as excinfo:
        storage.save("acme", "a.pdf", b"x")
    assert str(tmp_path) not in excinfo.value.message
    assert excinfo.value.message == "Storage write failed: could not save document"

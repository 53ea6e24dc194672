import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from gradeflow.core import config
from gradeflow.core.errors import ValidationFailed
from gradeflow.services.uploads import FILE_TOO_LARGE, INVALID_TYPE, IncomingFile, validate_pdf

PDF = b"%PDF-1.4 answer sheet"


def make_upload(content: bytes, content_type: str, size: int | None) -> UploadFile:
    return UploadFile(
        io.BytesIO(content),
        size=size,
        filename="abc123.pdf",
        headers=Headers({"content-type": content_type}),
    )


def test_pdf_within_limit_is_read():
    upload = make_upload(PDF, "application/pdf", len(PDF))
    incoming = IncomingFile.from_upload(upload)

    assert incoming.content == PDF
    assert incoming.size == len(PDF)
    validate_pdf(incoming)


def test_oversized_file_is_not_buffered(monkeypatch):
    monkeypatch.setattr(config, "MAX_UPLOAD_BYTES", 8)
    upload = make_upload(PDF, "application/pdf", len(PDF))

    incoming = IncomingFile.from_upload(upload)

    assert incoming.content == b""
    assert upload.file.tell() == 0
    with pytest.raises(ValidationFailed) as exc:
        validate_pdf(incoming)
    assert exc.value.message == FILE_TOO_LARGE


def test_wrong_type_is_not_buffered():
    upload = make_upload(b"hello", "text/plain", 5)

    incoming = IncomingFile.from_upload(upload)

    assert incoming.content == b""
    assert upload.file.tell() == 0
    with pytest.raises(ValidationFailed) as exc:
        validate_pdf(incoming)
    assert exc.value.message == INVALID_TYPE


def test_unknown_size_falls_back_to_content_length():
    incoming = IncomingFile.from_upload(make_upload(PDF, "application/pdf", None))
    assert incoming.size == len(PDF)

from dataclasses import dataclass

from fastapi import UploadFile

from gradeflow.core import config
from gradeflow.core.errors import ValidationFailed

INVALID_TYPE = "Only PDF files are allowed"
FILE_TOO_LARGE = "File size exceeds maximum allowed size (10MB)"


@dataclass(frozen=True)
class IncomingFile:
    """An uploaded file, detached from the transport that delivered it."""

    filename: str
    content: bytes
    content_type: str | None
    size: int

    @classmethod
    def from_upload(cls, upload: UploadFile) -> "IncomingFile":
        """Read the body only when the declared type and size can pass ``validate_pdf``."""
        size = upload.size
        if upload.content_type == config.PDF_CONTENT_TYPE and (size is None or size <= config.MAX_UPLOAD_BYTES):
            content = upload.file.read()
        else:
            content = b""
        return cls(
            filename=upload.filename or "",
            content=content,
            content_type=upload.content_type,
            size=size if size is not None else len(content),
        )


def validate_pdf(upload: IncomingFile) -> None:
    if upload.content_type != config.PDF_CONTENT_TYPE:
        raise ValidationFailed(INVALID_TYPE)
    if upload.size > config.MAX_UPLOAD_BYTES:
        raise ValidationFailed(FILE_TOO_LARGE)

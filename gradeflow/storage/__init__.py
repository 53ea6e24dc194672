from gradeflow.storage.base import BlobStore, model_answer_key, student_answer_key
from gradeflow.storage.memory import InMemoryBlobStore
from gradeflow.storage.s3 import S3BlobStore

__all__ = [
    "BlobStore",
    "InMemoryBlobStore",
    "S3BlobStore",
    "build_blob_store",
    "model_answer_key",
    "student_answer_key",
]


def build_blob_store() -> BlobStore:
    """Create the blob store selected by ``BLOB_BACKEND``."""
    from gradeflow.core import config

    if config.BLOB_BACKEND == "s3":
        return S3BlobStore(
            bucket=config.S3_BUCKET_NAME,
            region=config.AWS_REGION,
            endpoint_url=config.S3_ENDPOINT_URL,
        )
    if config.BLOB_BACKEND == "memory":
        return InMemoryBlobStore()
    raise ValueError(f"Unknown BLOB_BACKEND: {config.BLOB_BACKEND!r}")

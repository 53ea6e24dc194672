from gradeflow.db.session import SessionLocal
from gradeflow.storage import BlobStore, build_blob_store

_blob_store: BlobStore | None = None


# every request that needs DB will get a fresh session, and it will always close.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_blob_store() -> BlobStore:
    global _blob_store
    if _blob_store is None:
        _blob_store = build_blob_store()
    return _blob_store

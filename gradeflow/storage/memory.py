import threading

from gradeflow.storage.base import BlobStore


class InMemoryBlobStore(BlobStore):
    """Process-local blob store for development and tests."""

    def __init__(self):
        self._objects: dict[str, tuple[bytes, str]] = {}
        self._lock = threading.Lock()

    def put(self, key: str, data: bytes, content_type: str) -> str:
        with self._lock:
            self._objects[key] = (bytes(data), content_type)
        return f"memory://{key}"

    def get(self, key: str) -> bytes:
        with self._lock:
            return self._objects[key][0]

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._objects)

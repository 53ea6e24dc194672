from abc import ABC, abstractmethod

STUDENT_ANSWERS = "student-answers"
MODEL_ANSWERS = "model-answers"


def student_answer_key(exam_id: str, student_external_id: str) -> str:
    """Format: student-answers/{exam_id}/{student_id}/answer-sheet.pdf"""
    return f"{STUDENT_ANSWERS}/{exam_id}/{student_external_id}/answer-sheet.pdf"


def model_answer_key(exam_id: str) -> str:
    """Format: model-answers/{exam_id}/model-answer.pdf"""
    return f"{MODEL_ANSWERS}/{exam_id}/model-answer.pdf"


class BlobStore(ABC):
    """Durable storage for uploaded files. Implementations must be thread-safe."""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``key`` and return a stable locator.

        Raises ``StorageFailure`` when the write does not complete.
        """
        ...

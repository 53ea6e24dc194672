"""
Batch ingestion of answer sheets.

Each file goes through validate -> resolve identity -> upload -> upsert on
its own. A failure is recorded against that file and the batch moves on;
only a bad exam id, an empty batch or an exam the caller does not own
rejects the whole call.

Blob uploads are the slow part, so they run on a small thread pool. The
session is not shared with those threads: identity lookups happen before
the pool starts and upserts after it finishes, in input order, so the last
file for a given student wins.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from gradeflow.core import config
from gradeflow.core.current_user import AuthContext
from gradeflow.core.errors import DomainError, ErrorKind, ValidationFailed
from gradeflow.models.submission import SubmissionStatus
from gradeflow.repositories.students import StudentDirectory
from gradeflow.repositories.submissions import SubmissionStore
from gradeflow.services.access import get_instructor, get_owned_exam
from gradeflow.services.identity import resolve_student
from gradeflow.services.uploads import IncomingFile, validate_pdf
from gradeflow.storage.base import BlobStore, student_answer_key

logger = logging.getLogger(__name__)


@dataclass
class FileSuccess:
    student_user_id: str
    filename: str
    file_link: str


@dataclass
class FileFailure:
    filename: str
    error: str
    kind: ErrorKind


@dataclass
class BatchReport:
    results: list[FileSuccess] = field(default_factory=list)
    errors: list[FileFailure] = field(default_factory=list)

    @property
    def uploaded(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.errors)


@dataclass
class _Pending:
    """A file that passed validation and identity resolution."""

    index: int
    upload: IncomingFile
    external_id: str
    student_id: str
    locator: str | None = None


def _failure(upload: IncomingFile, exc: DomainError) -> FileFailure:
    return FileFailure(filename=upload.filename, error=exc.message, kind=exc.kind)


def _reopened_fields(locator: str) -> dict:
    # a new file always supersedes any earlier grading
    return {
        "file_link": locator,
        "status": SubmissionStatus.PENDING,
        "marks": None,
        "match_percentage": None,
        "feedback": None,
        "graded_at": None,
    }


class BatchIngestionReconciler:
    def __init__(
        self,
        db: Session,
        blob_store: BlobStore,
        max_workers: int | None = None,
    ):
        self.db = db
        self.blob_store = blob_store
        self.students = StudentDirectory(db)
        self.submissions = SubmissionStore(db)
        self.max_workers = max_workers or config.BATCH_UPLOAD_WORKERS

    def ingest(
        self,
        caller: AuthContext,
        exam_id: str | None,
        files: list[IncomingFile],
    ) -> BatchReport:
        if not exam_id or not files:
            raise ValidationFailed("Exam ID and files are required")

        instructor = get_instructor(self.db, caller)
        exam = get_owned_exam(self.db, exam_id, instructor)

        # one slot per input file; each ends up holding exactly one outcome
        slots: list[FileSuccess | FileFailure | None] = [None] * len(files)

        pending = self._prepare(files, slots)
        self._upload_all(exam.id, pending, slots)
        self._upsert_all(exam.id, pending, slots)

        report = BatchReport()
        for outcome in slots:
            if isinstance(outcome, FileSuccess):
                report.results.append(outcome)
            else:
                report.errors.append(outcome)

        logger.info(
            "Batch for exam %s: %d uploaded, %d failed",
            exam.id,
            report.uploaded,
            report.failed,
        )
        return report

    def _prepare(self, files: list[IncomingFile], slots: list) -> list[_Pending]:
        pending: list[_Pending] = []
        for index, upload in enumerate(files):
            try:
                validate_pdf(upload)
                external_id, student = resolve_student(self.students, upload.filename)
            except DomainError as exc:
                logger.warning("Rejected %s: %s", upload.filename, exc.message)
                slots[index] = _failure(upload, exc)
                continue
            pending.append(_Pending(index, upload, external_id, student.id))
        return pending

    def _upload_one(self, exam_id: str, item: _Pending) -> str:
        key = student_answer_key(exam_id, item.external_id)
        return self.blob_store.put(key, item.upload.content, config.PDF_CONTENT_TYPE)

    def _upload_all(self, exam_id: str, pending: list[_Pending], slots: list) -> None:
        if not pending:
            return

        workers = max(1, min(self.max_workers, len(pending)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [(item, pool.submit(self._upload_one, exam_id, item)) for item in pending]

            for item, future in futures:
                try:
                    item.locator = future.result()
                except DomainError as exc:
                    logger.warning("Upload of %s failed: %s", item.upload.filename, exc.message)
                    slots[item.index] = _failure(item.upload, exc)
                except Exception:
                    logger.exception("Upload of %s failed", item.upload.filename)
                    slots[item.index] = FileFailure(
                        filename=item.upload.filename,
                        error="Upload failed",
                        kind=ErrorKind.STORAGE_FAILURE,
                    )

    def _upsert_all(self, exam_id: str, pending: list[_Pending], slots: list) -> None:
        for item in pending:
            if item.locator is None:
                continue
            try:
                self.submissions.upsert_by_student_exam(
                    item.student_id,
                    exam_id,
                    _reopened_fields(item.locator),
                )
            except DomainError as exc:
                slots[item.index] = _failure(item.upload, exc)
                continue
            except Exception:
                logger.exception("Upsert for %s failed", item.upload.filename)
                slots[item.index] = FileFailure(
                    filename=item.upload.filename,
                    error="Could not save submission",
                    kind=ErrorKind.INTERNAL,
                )
                continue

            slots[item.index] = FileSuccess(
                student_user_id=item.external_id,
                filename=item.upload.filename,
                file_link=item.locator,
            )

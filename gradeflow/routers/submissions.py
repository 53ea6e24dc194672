from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from gradeflow.core.current_user import AuthContext
from gradeflow.core.deps import get_blob_store, get_db
from gradeflow.core.permissions import require_instructor, require_student
from gradeflow.schemas.submission import (
    BatchUploadReport,
    FailedFile,
    SubmissionCreate,
    SubmissionGradeUpdate,
    SubmissionRead,
    UploadedFile,
)
from gradeflow.services import submissions as submission_service
from gradeflow.services.ingestion import BatchIngestionReconciler
from gradeflow.services.uploads import IncomingFile
from gradeflow.storage import BlobStore

router = APIRouter()


@router.post("", response_model=SubmissionRead, status_code=status.HTTP_201_CREATED)
def submit_exam(
    payload: SubmissionCreate,
    db: Session = Depends(get_db),
    student: AuthContext = Depends(require_student),
):
    return submission_service.create_submission(db, student, payload.exam_id, payload.original_answer)


@router.post("/batch", response_model=BatchUploadReport)
def upload_answer_sheets(
    exam_id: str | None = Form(None),
    files: list[UploadFile] | None = File(None),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    instructor: AuthContext = Depends(require_instructor),
):
    incoming = [IncomingFile.from_upload(f) for f in files or []]
    report = BatchIngestionReconciler(db, blob_store).ingest(instructor, exam_id, incoming)

    return BatchUploadReport(
        uploaded=report.uploaded,
        failed=report.failed,
        results=[
            UploadedFile(student_user_id=r.student_user_id, filename=r.filename, file_link=r.file_link)
            for r in report.results
        ],
        errors=[FailedFile(filename=e.filename, error=e.error, kind=e.kind) for e in report.errors],
    )


@router.patch("/{submission_id}/grade", response_model=SubmissionRead)
def grade_submission(
    submission_id: str,
    payload: SubmissionGradeUpdate,
    db: Session = Depends(get_db),
    instructor: AuthContext = Depends(require_instructor),
):
    return submission_service.grade_submission(
        db,
        instructor,
        submission_id,
        marks=payload.marks,
        feedback=payload.feedback,
        match_percentage=payload.match_percentage,
    )

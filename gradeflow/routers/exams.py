from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.orm import Session

from gradeflow.core.current_user import AuthContext
from gradeflow.core.deps import get_blob_store, get_db
from gradeflow.core.permissions import require_instructor
from gradeflow.schemas.exam import (
    ExamCreate,
    ExamHeader,
    ExamListRow,
    ExamRead,
    ExamResultRow,
    ExamResults,
    ExamUpdate,
)
from gradeflow.services import exams as exam_service
from gradeflow.services.uploads import IncomingFile
from gradeflow.storage import BlobStore

router = APIRouter()


@router.post("", response_model=ExamRead, status_code=status.HTTP_201_CREATED)
def create_exam(
    payload: ExamCreate,
    db: Session = Depends(get_db),
    instructor: AuthContext = Depends(require_instructor),
):
    return exam_service.create_exam(db, instructor, payload.model_dump())


@router.get("", response_model=list[ExamListRow])
def list_exams(
    db: Session = Depends(get_db),
    instructor: AuthContext = Depends(require_instructor),
):
    rows = exam_service.list_exams(db, instructor)
    return [
        ExamListRow(
            **ExamRead.model_validate(r["exam"]).model_dump(),
            total_submissions=r["total_submissions"],
            graded_submissions=r["graded_submissions"],
        )
        for r in rows
    ]


@router.get("/{exam_id}", response_model=ExamRead)
def get_exam(
    exam_id: str,
    db: Session = Depends(get_db),
    instructor: AuthContext = Depends(require_instructor),
):
    return exam_service.get_exam(db, instructor, exam_id)


@router.patch("/{exam_id}", response_model=ExamRead)
def update_exam(
    exam_id: str,
    payload: ExamUpdate,
    db: Session = Depends(get_db),
    instructor: AuthContext = Depends(require_instructor),
):
    return exam_service.update_exam(db, instructor, exam_id, payload.model_dump(exclude_unset=True))


@router.delete("/{exam_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_exam(
    exam_id: str,
    db: Session = Depends(get_db),
    instructor: AuthContext = Depends(require_instructor),
):
    exam_service.delete_exam(db, instructor, exam_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{exam_id}/model-answer", response_model=ExamRead)
def upload_model_answer(
    exam_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    instructor: AuthContext = Depends(require_instructor),
):
    return exam_service.upload_model_answer(db, instructor, exam_id, IncomingFile.from_upload(file), blob_store)


@router.get("/{exam_id}/results", response_model=ExamResults)
def exam_results(
    exam_id: str,
    db: Session = Depends(get_db),
    instructor: AuthContext = Depends(require_instructor),
):
    exam, submissions = exam_service.exam_results(db, instructor, exam_id)

    header = ExamHeader(
        id=exam.id,
        title=exam.title,
        description=exam.description,
        exam_type=exam.exam_type,
        deadline=exam.deadline,
        course_code=exam.course.course_code if exam.course else None,
        course_name=exam.course.course_name if exam.course else None,
    )
    rows = [
        ExamResultRow(
            id=s.id,
            student_id=s.student_id,
            student_name=s.student.user.name,
            student_email=s.student.user.email,
            marks=s.marks,
            feedback=s.feedback or "",
            status=s.status,
            graded_at=s.graded_at,
            created_at=s.created_at,
        )
        for s in submissions
    ]
    return ExamResults(exam=header, submissions=rows)

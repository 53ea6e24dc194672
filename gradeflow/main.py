import logging

from fastapi import FastAPI

from gradeflow.core.errors import register_exception_handlers
from gradeflow.core.logging_middleware import LoggingMiddleware
from gradeflow.db.init_db import init_db
from gradeflow.routers.auth import router as auth_router
from gradeflow.routers.courses import router as courses_router
from gradeflow.routers.exams import router as exams_router
from gradeflow.routers.grievances import router as grievances_router
from gradeflow.routers.instructor_dashboard import router as instructor_dashboard_router
from gradeflow.routers.student import router as student_router
from gradeflow.routers.submissions import router as submissions_router

logging.basicConfig(level=logging.INFO)

app = FastAPI(title="GradeFlow")

# Middleware
app.add_middleware(LoggingMiddleware)

register_exception_handlers(app)


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(courses_router, prefix="/courses", tags=["courses"])
app.include_router(exams_router, prefix="/exams", tags=["exams"])
app.include_router(submissions_router, prefix="/submissions", tags=["submissions"])
app.include_router(grievances_router, prefix="/grievances", tags=["grievances"])
app.include_router(student_router, prefix="/student", tags=["student"])

# Instructor dashboard (no prefix, the route defines its full path)
app.include_router(instructor_dashboard_router)

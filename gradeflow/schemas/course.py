from pydantic import BaseModel


class CourseRead(BaseModel):
    id: str
    course_code: str
    course_name: str
    instructor_id: str | None = None

    class Config:
        from_attributes = True

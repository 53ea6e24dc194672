from pydantic import BaseModel, EmailStr

from gradeflow.models.user import Role


class UserRead(BaseModel):
    id: str
    email: EmailStr
    name: str | None = None
    role: Role

    class Config:
        from_attributes = True


class StudentBrief(BaseModel):
    id: str
    user_id: str
    name: str | None = None
    email: str | None = None

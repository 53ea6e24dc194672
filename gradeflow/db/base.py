# import every model so Base.metadata knows all tables
from gradeflow.db.base_class import Base  # noqa: F401
from gradeflow.models import course, exam, grievance, submission, user  # noqa: F401

from gradeflow.repositories.grievances import GrievanceStore
from gradeflow.repositories.students import StudentDirectory
from gradeflow.repositories.submissions import SubmissionFilter, SubmissionStore

__all__ = ["GrievanceStore", "StudentDirectory", "SubmissionFilter", "SubmissionStore"]

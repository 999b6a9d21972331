from typing import List

from pydantic import BaseModel

from app.schemas.assignment import Assignment, AssignmentStatus
from app.schemas.submission import Submission


class StatusCounts(BaseModel):
    draft: int = 0
    published: int = 0
    completed: int = 0
    total: int = 0


class AssignmentStats(BaseModel):
    assignmentId: int
    title: str
    status: AssignmentStatus
    submissionCount: int
    reviewedCount: int
    pendingCount: int
    submissionRate: float


class TeacherAnalytics(BaseModel):
    statusCounts: StatusCounts
    assignments: List[AssignmentStats]
    recentAssignments: List[Assignment]
    recentSubmissions: List[Submission]

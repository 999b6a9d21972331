import logging
from collections import Counter
from typing import Sequence

from app.core.errors import ForbiddenError
from app.database.assignment_repo import AssignmentRepo
from app.database.submission_repo import SubmissionRepo
from app.database.user_repo import UserRepo
from app.schemas.analytics import AssignmentStats, StatusCounts, TeacherAnalytics
from app.schemas.assignment import Assignment
from app.schemas.context import Role, UserContext
from app.schemas.submission import Submission
from app.services.policy import is_teacher

logger = logging.getLogger("analytics.service")

RECENT_LIMIT = 5


def submission_rate(submission_count: int, student_count: int) -> float:
    """Percentuale degli studenti registrati che hanno consegnato."""
    if student_count <= 0:
        return 0.0
    return round(submission_count / student_count * 100, 1)


def _status_counts(assignments: Sequence[Assignment]) -> StatusCounts:
    by_status = Counter(a.status.value for a in assignments)
    return StatusCounts(total=len(assignments), **by_status)


def _stats_for(assignment: Assignment, submissions: Sequence[Submission], student_count: int) -> AssignmentStats:
    mine = [s for s in submissions if s.assignmentId == assignment.id]
    reviewed = sum(1 for s in mine if s.isReviewed)
    return AssignmentStats(
        assignmentId=assignment.id,
        title=assignment.title,
        status=assignment.status,
        submissionCount=len(mine),
        reviewedCount=reviewed,
        pendingCount=len(mine) - reviewed,
        submissionRate=submission_rate(len(mine), student_count),
    )


class AnalyticsService:

    @staticmethod
    async def for_teacher(
        user: UserContext,
        assignments: AssignmentRepo,
        submissions: SubmissionRepo,
        users: UserRepo,
    ) -> TeacherAnalytics:
        if not is_teacher(user):
            raise ForbiddenError("Access denied. Teacher role required.")

        own = await assignments.find_for_teacher(user.user_id)
        own_ids = {a.id for a in own}
        related = [s for s in await submissions.find_all() if s.assignmentId in own_ids]
        student_count = await users.count_by_role(Role.STUDENT)

        recent_assignments = sorted(own, key=lambda a: (a.createdAt, a.id), reverse=True)
        recent_submissions = sorted(related, key=lambda s: (s.submittedAt, s.id), reverse=True)

        logger.debug("Analytics for teacher %s: %d assignments, %d submissions",
                     user.user_id, len(own), len(related))
        return TeacherAnalytics(
            statusCounts=_status_counts(own),
            assignments=[_stats_for(a, related, student_count) for a in own],
            recentAssignments=recent_assignments[:RECENT_LIMIT],
            recentSubmissions=recent_submissions[:RECENT_LIMIT],
        )

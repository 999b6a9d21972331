import logging
from datetime import date, datetime, time, timezone
from typing import Optional, Sequence

from app.core.errors import (
    DeadlinePassedError,
    DuplicateSubmissionError,
    ForbiddenError,
    NotFoundError,
    NotPublishedError,
)
from app.database.assignment_repo import AssignmentRepo
from app.database.submission_repo import SubmissionRepo
from app.schemas.context import Role, UserContext
from app.schemas.submission import Submission, SubmissionCreate
from app.services.policy import Action, can_mutate, can_see, is_student, is_teacher

logger = logging.getLogger("submission.service")


def submission_deadline(due_date: date) -> datetime:
    """Ultimo istante in cui una consegna per ``due_date`` è accettata.

    Le scadenze non hanno orario: vale l'intera giornata (UTC).
    """
    return datetime.combine(due_date, time.max, tzinfo=timezone.utc)


def _display_name(user: UserContext) -> str:
    return user.name.strip() or user.email.split("@")[0]


class SubmissionService:

    @staticmethod
    async def list_submissions(
        user: UserContext,
        repo: SubmissionRepo,
        assignment_id: Optional[int] = None,
    ) -> Sequence[Submission]:
        if user.role is Role.TEACHER:
            if assignment_id is not None:
                return await repo.find_for_assignment(assignment_id)
            return await repo.find_all()
        if user.role is Role.STUDENT:
            own = await repo.find_for_student(user.user_id)
            if assignment_id is not None:
                own = [s for s in own if s.assignmentId == assignment_id]
            return [s for s in own if can_see(user, s)]
        raise ValueError(f"Unknown role: {user.role!r}")

    @staticmethod
    async def list_for_assignment(assignment_id: int, user: UserContext,
                                  repo: SubmissionRepo) -> Sequence[Submission]:
        if not is_teacher(user):
            raise ForbiddenError("Access denied. Teacher role required.")
        return await repo.find_for_assignment(assignment_id)

    @staticmethod
    async def get_my_submission(assignment_id: int, user: UserContext,
                                repo: SubmissionRepo) -> Submission:
        if not is_student(user):
            raise ForbiddenError("Access denied. Student role required.")
        found = await repo.find_by_student_and_assignment(user.user_id, assignment_id)
        if found is None:
            raise NotFoundError("Submission not found")
        return found

    @staticmethod
    async def submit(
        data: SubmissionCreate,
        user: UserContext,
        repo: SubmissionRepo,
        assignments: AssignmentRepo,
        now: Optional[datetime] = None,
    ) -> Submission:
        if not is_student(user):
            raise ForbiddenError("Access denied. Student role required.")

        assignment = await assignments.find_one(data.assignmentId)
        if assignment is None:
            raise NotFoundError("Assignment not found")
        if not can_mutate(user, assignment, Action.SUBMIT):
            raise NotPublishedError()

        ts = now or datetime.now(timezone.utc)
        if ts > submission_deadline(assignment.dueDate):
            raise DeadlinePassedError(
                f"Assignment submission deadline has passed (due {assignment.dueDate.isoformat()})"
            )

        created = await repo.create_unique(
            assignment_id=assignment.id,
            student_id=user.user_id,
            student_name=_display_name(user),
            student_email=user.email,
            answer=data.submittedAnswer,
            file=data.submittedFile,
            submitted_at=ts,
        )
        if created is None:
            raise DuplicateSubmissionError()

        logger.info("Submission %s created for assignment %s by student %s",
                    created.id, assignment.id, user.user_id)
        return created

    @staticmethod
    async def review(submission_id: int, user: UserContext, repo: SubmissionRepo) -> Submission:
        if not is_teacher(user):
            raise ForbiddenError("Access denied. Teacher role required.")
        existing = await repo.find_one(submission_id)
        if existing is None:
            raise NotFoundError("Submission not found")
        if not can_mutate(user, existing, Action.REVIEW):
            raise ForbiddenError()
        reviewed = await repo.mark_reviewed(submission_id)
        if reviewed is None:
            raise NotFoundError("Submission not found")
        logger.info("Submission %s reviewed by teacher %s", submission_id, user.user_id)
        return reviewed

import logging
from datetime import datetime, timezone
from typing import Dict, FrozenSet, Optional, Sequence

from app.core.errors import (
    ForbiddenError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
)
from app.database.assignment_repo import AssignmentRepo
from app.schemas.assignment import (
    Assignment,
    AssignmentCreate,
    AssignmentStatus,
    AssignmentUpdate,
)
from app.schemas.context import Role, UserContext
from app.services.policy import Action, can_create_assignment, can_mutate, can_see

logger = logging.getLogger("assignment.service")

# draft -> published -> completed, completed è terminale
ALLOWED_TRANSITIONS: Dict[AssignmentStatus, FrozenSet[AssignmentStatus]] = {
    AssignmentStatus.DRAFT: frozenset({AssignmentStatus.PUBLISHED}),
    AssignmentStatus.PUBLISHED: frozenset({AssignmentStatus.COMPLETED}),
    AssignmentStatus.COMPLETED: frozenset(),
}


def is_valid_transition(current: AssignmentStatus, target: AssignmentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


async def _load_for_mutation(assignment_id: int, action: Action, user: UserContext,
                             repo: AssignmentRepo) -> Assignment:
    if not can_create_assignment(user):
        raise ForbiddenError("Access denied. Teacher role required.")
    doc = await repo.find_one(assignment_id)
    if doc is None:
        raise NotFoundError("Assignment not found")
    if not can_mutate(user, doc, action):
        raise ForbiddenError("Access denied to this assignment")
    return doc


class AssignmentService:

    @staticmethod
    async def create_assignment(
        data: AssignmentCreate,
        user: UserContext,
        repo: AssignmentRepo,
        now: Optional[datetime] = None,
    ) -> Assignment:
        if not can_create_assignment(user):
            raise ForbiddenError("Access denied. Teacher role required.")

        ts = now or datetime.now(timezone.utc)
        assignment = await repo.create(data, teacher_id=user.user_id, created_at=ts.date())
        logger.info("Assignment %s created by teacher %s", assignment.id, user.user_id)
        return assignment

    @staticmethod
    async def list_assignments(user: UserContext, repo: AssignmentRepo) -> Sequence[Assignment]:
        if user.role is Role.TEACHER:
            return await repo.find_for_teacher(user.user_id)
        if user.role is Role.STUDENT:
            return await repo.find_by_status(AssignmentStatus.PUBLISHED)
        raise ValueError(f"Unknown role: {user.role!r}")

    @staticmethod
    async def get_assignment(assignment_id: int, user: UserContext, repo: AssignmentRepo) -> Assignment:
        doc = await repo.find_one(assignment_id)
        if doc is None:
            raise NotFoundError("Assignment not found")
        if not can_see(user, doc):
            raise ForbiddenError("Access denied")
        return doc

    @staticmethod
    async def update_assignment(
        assignment_id: int,
        data: AssignmentUpdate,
        user: UserContext,
        repo: AssignmentRepo,
    ) -> Assignment:
        doc = await _load_for_mutation(assignment_id, Action.EDIT, user, repo)
        if doc.status is not AssignmentStatus.DRAFT:
            raise InvalidStateError("Only draft assignments can be edited")

        updated = await repo.update_if_status(assignment_id, AssignmentStatus.DRAFT, data.changes())
        if updated is None:
            # qualcun altro l'ha pubblicato o cancellato nel frattempo
            if await repo.find_one(assignment_id) is None:
                raise NotFoundError("Assignment not found")
            raise InvalidStateError("Only draft assignments can be edited")
        return updated

    @staticmethod
    async def change_status(
        assignment_id: int,
        target: AssignmentStatus,
        user: UserContext,
        repo: AssignmentRepo,
    ) -> Assignment:
        doc = await _load_for_mutation(assignment_id, Action.TRANSITION, user, repo)
        if not is_valid_transition(doc.status, target):
            raise InvalidTransitionError(
                f"Invalid status transition from {doc.status.value} to {target.value}"
            )

        updated = await repo.update_if_status(assignment_id, doc.status, {"status": target})
        if updated is None:
            if await repo.find_one(assignment_id) is None:
                raise NotFoundError("Assignment not found")
            raise InvalidTransitionError("Invalid status transition")

        logger.info("Assignment %s moved %s -> %s by teacher %s",
                    assignment_id, doc.status.value, target.value, user.user_id)
        return updated

    @staticmethod
    async def delete_assignment(assignment_id: int, user: UserContext, repo: AssignmentRepo) -> None:
        doc = await _load_for_mutation(assignment_id, Action.DELETE, user, repo)
        if doc.status is not AssignmentStatus.DRAFT:
            raise InvalidStateError("Only draft assignments can be deleted")

        if not await repo.delete_if_status(assignment_id, AssignmentStatus.DRAFT):
            if await repo.find_one(assignment_id) is None:
                raise NotFoundError("Assignment not found")
            raise InvalidStateError("Only draft assignments can be deleted")
        logger.info("Assignment %s deleted by teacher %s", assignment_id, user.user_id)

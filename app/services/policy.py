"""Regole di visibilità e autorizzazione per ruolo.

Entrambi i servizi consultano queste funzioni prima di restituire o modificare
dati. Le regole della macchina a stati (modifiche solo in bozza, transizioni
ammesse) non sono autorizzazione e restano nel servizio degli assignment.
"""
from enum import Enum
from typing import Union

from app.schemas.assignment import Assignment, AssignmentStatus
from app.schemas.context import Role, UserContext
from app.schemas.submission import Submission


class Action(str, Enum):
    EDIT = "edit"
    TRANSITION = "transition"
    DELETE = "delete"
    SUBMIT = "submit"
    REVIEW = "review"


Entity = Union[Assignment, Submission]


def _unknown_role(user: UserContext):
    return ValueError(f"Unknown role: {user.role!r}")


def is_teacher(user: UserContext) -> bool:
    if user.role is Role.TEACHER:
        return True
    if user.role is Role.STUDENT:
        return False
    raise _unknown_role(user)


def is_student(user: UserContext) -> bool:
    return not is_teacher(user)


def can_create_assignment(user: UserContext) -> bool:
    return is_teacher(user)


def _owns(user: UserContext, assignment: Assignment) -> bool:
    return assignment.teacherId == user.user_id


def can_see(user: UserContext, entity: Entity) -> bool:
    if isinstance(entity, Assignment):
        if user.role is Role.TEACHER:
            return _owns(user, entity)
        if user.role is Role.STUDENT:
            return entity.status is AssignmentStatus.PUBLISHED
        raise _unknown_role(user)

    if isinstance(entity, Submission):
        if user.role is Role.TEACHER:
            return True
        if user.role is Role.STUDENT:
            return entity.studentId == user.user_id
        raise _unknown_role(user)

    raise TypeError(f"Unsupported entity: {type(entity).__name__}")


def can_mutate(user: UserContext, entity: Entity, action: Action) -> bool:
    if isinstance(entity, Assignment):
        if action in (Action.EDIT, Action.TRANSITION, Action.DELETE):
            return is_teacher(user) and _owns(user, entity)
        if action is Action.SUBMIT:
            return is_student(user) and entity.status is AssignmentStatus.PUBLISHED
        return False

    if isinstance(entity, Submission):
        if action is Action.REVIEW:
            return is_teacher(user)
        return False

    raise TypeError(f"Unsupported entity: {type(entity).__name__}")

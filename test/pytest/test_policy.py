from datetime import date, datetime, timezone

import pytest

from app.schemas.assignment import Assignment, AssignmentStatus
from app.schemas.context import Role, UserContext
from app.schemas.submission import Submission
from app.services.policy import Action, can_create_assignment, can_mutate, can_see, is_student, is_teacher

TEACHER = UserContext(user_id=1, email="t@test.com", role=Role.TEACHER, name="T")
OTHER_TEACHER = UserContext(user_id=2, email="t2@test.com", role=Role.TEACHER, name="T2")
STUDENT = UserContext(user_id=3, email="s@test.com", role=Role.STUDENT, name="S")
OTHER_STUDENT = UserContext(user_id=4, email="s2@test.com", role=Role.STUDENT, name="S2")


def _assignment(status: AssignmentStatus, teacher_id: int = 1) -> Assignment:
    return Assignment(
        id=1, title="T", description="D", dueDate=date(2099, 1, 1),
        teacherId=teacher_id, createdAt=date(2025, 1, 1), status=status,
    )


def _submission(student_id: int = 3) -> Submission:
    return Submission(
        id=1, assignmentId=1, studentId=student_id, studentName="S", studentEmail="s@test.com",
        submittedAnswer="A", submittedAt=datetime(2025, 1, 2, tzinfo=timezone.utc),
    )


def test_role_helpers():
    assert is_teacher(TEACHER) and not is_student(TEACHER)
    assert is_student(STUDENT) and not is_teacher(STUDENT)
    assert can_create_assignment(TEACHER)
    assert not can_create_assignment(STUDENT)


def test_unknown_role_is_an_error():
    ghost = UserContext.model_construct(user_id=9, email="x", role="admin", name="")
    with pytest.raises(ValueError):
        is_teacher(ghost)
    with pytest.raises(ValueError):
        can_see(ghost, _assignment(AssignmentStatus.PUBLISHED))


@pytest.mark.parametrize("status", list(AssignmentStatus))
def test_teacher_sees_own_assignments_in_any_state(status):
    assert can_see(TEACHER, _assignment(status))
    assert not can_see(OTHER_TEACHER, _assignment(status))


@pytest.mark.parametrize(
    ("status", "visible"),
    [
        (AssignmentStatus.DRAFT, False),
        (AssignmentStatus.PUBLISHED, True),
        (AssignmentStatus.COMPLETED, False),
    ],
)
def test_student_sees_only_published(status, visible):
    assert can_see(STUDENT, _assignment(status)) is visible


@pytest.mark.parametrize("action", [Action.EDIT, Action.TRANSITION, Action.DELETE])
def test_only_owner_teacher_mutates_assignment(action):
    a = _assignment(AssignmentStatus.DRAFT)
    assert can_mutate(TEACHER, a, action)
    assert not can_mutate(OTHER_TEACHER, a, action)
    assert not can_mutate(STUDENT, a, action)


def test_submit_needs_student_and_published():
    assert can_mutate(STUDENT, _assignment(AssignmentStatus.PUBLISHED), Action.SUBMIT)
    assert not can_mutate(STUDENT, _assignment(AssignmentStatus.DRAFT), Action.SUBMIT)
    assert not can_mutate(STUDENT, _assignment(AssignmentStatus.COMPLETED), Action.SUBMIT)
    assert not can_mutate(TEACHER, _assignment(AssignmentStatus.PUBLISHED), Action.SUBMIT)


def test_submission_visibility_and_review():
    s = _submission()
    assert can_see(TEACHER, s)
    assert can_see(OTHER_TEACHER, s)
    assert can_see(STUDENT, s)
    assert not can_see(OTHER_STUDENT, s)

    assert can_mutate(TEACHER, s, Action.REVIEW)
    assert not can_mutate(STUDENT, s, Action.REVIEW)
    assert not can_mutate(TEACHER, s, Action.EDIT)

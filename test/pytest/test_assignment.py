# test/pytest/test_assignment.py
import asyncio
import pytest
from datetime import date, datetime, timezone

from app.core.errors import ForbiddenError, InvalidStateError, InvalidTransitionError, NotFoundError
from app.database.memory_assignment import InMemoryAssignmentRepository
from app.services.assignment_service import AssignmentService, is_valid_transition
from app.schemas.assignment import AssignmentCreate, AssignmentStatus, AssignmentUpdate
from app.schemas.context import Role, UserContext


# ------------------------------- Fixtures -------------------------------------
@pytest.fixture
def repo():
    return InMemoryAssignmentRepository()

@pytest.fixture
def teacher():
    return UserContext(user_id=1, email="t1@test.com", role=Role.TEACHER, name="Teacher One")

@pytest.fixture
def other_teacher():
    return UserContext(user_id=2, email="t2@test.com", role=Role.TEACHER, name="Teacher Two")

@pytest.fixture
def student():
    return UserContext(user_id=3, email="s1@test.com", role=Role.STUDENT, name="Student One")


def _make_create(**overrides):
    base = dict(
        title="Compito",
        description="Desc",
        dueDate=date(2099, 1, 1),
    )
    base.update(overrides)
    return AssignmentCreate(**base)


async def _published(repo, teacher, **overrides):
    a = await AssignmentService.create_assignment(_make_create(**overrides), teacher, repo)
    return await AssignmentService.change_status(a.id, AssignmentStatus.PUBLISHED, teacher, repo)


# --------------------------------- Tests --------------------------------------
@pytest.mark.asyncio
async def test_create_requires_teacher(repo, student):
    with pytest.raises(ForbiddenError):
        await AssignmentService.create_assignment(_make_create(), student, repo)

@pytest.mark.asyncio
async def test_create_ok(repo, teacher):
    now = datetime(2025, 10, 15, 9, 30, tzinfo=timezone.utc)
    created = await AssignmentService.create_assignment(
        _make_create(title="T", description="D"), teacher, repo, now=now
    )
    assert created.id == 1
    assert created.teacherId == 1
    assert created.status == AssignmentStatus.DRAFT
    assert created.createdAt == date(2025, 10, 15)
    assert created.dueDate == date(2099, 1, 1)

@pytest.mark.asyncio
async def test_ids_are_sequential_and_never_reused(repo, teacher):
    a1 = await AssignmentService.create_assignment(_make_create(), teacher, repo)
    a2 = await AssignmentService.create_assignment(_make_create(), teacher, repo)
    await AssignmentService.delete_assignment(a2.id, teacher, repo)
    a3 = await AssignmentService.create_assignment(_make_create(), teacher, repo)
    assert (a1.id, a2.id, a3.id) == (1, 2, 3)

def test_create_rejects_blank_fields():
    with pytest.raises(ValueError):
        _make_create(title="   ")
    with pytest.raises(ValueError):
        AssignmentCreate(title="T", description="D")

@pytest.mark.asyncio
async def test_list_for_teacher_is_owner_scoped(repo, teacher, other_teacher):
    await AssignmentService.create_assignment(_make_create(title="A"), teacher, repo)
    await AssignmentService.create_assignment(_make_create(title="B"), teacher, repo)
    await AssignmentService.create_assignment(_make_create(title="C"), other_teacher, repo)

    items = await AssignmentService.list_assignments(teacher, repo)
    assert [a.title for a in items] == ["A", "B"]

@pytest.mark.asyncio
async def test_list_for_student_only_published(repo, teacher, student):
    await AssignmentService.create_assignment(_make_create(title="Bozza"), teacher, repo)
    await _published(repo, teacher, title="Pubblicato")
    done = await _published(repo, teacher, title="Chiuso")
    await AssignmentService.change_status(done.id, AssignmentStatus.COMPLETED, teacher, repo)

    items = await AssignmentService.list_assignments(student, repo)
    assert [a.title for a in items] == ["Pubblicato"]
    assert all(a.status == AssignmentStatus.PUBLISHED for a in items)

@pytest.mark.asyncio
async def test_get_not_found(repo, teacher):
    with pytest.raises(NotFoundError):
        await AssignmentService.get_assignment(99, teacher, repo)

@pytest.mark.asyncio
async def test_get_teacher_access_ok_and_denied(repo, teacher, other_teacher):
    a = await AssignmentService.create_assignment(_make_create(title="X"), teacher, repo)
    item = await AssignmentService.get_assignment(a.id, teacher, repo)
    assert item.title == "X"
    with pytest.raises(ForbiddenError):
        await AssignmentService.get_assignment(a.id, other_teacher, repo)

@pytest.mark.asyncio
async def test_get_student_sees_only_published(repo, teacher, student):
    draft = await AssignmentService.create_assignment(_make_create(), teacher, repo)
    with pytest.raises(ForbiddenError):
        await AssignmentService.get_assignment(draft.id, student, repo)

    await AssignmentService.change_status(draft.id, AssignmentStatus.PUBLISHED, teacher, repo)
    seen = await AssignmentService.get_assignment(draft.id, student, repo)
    assert seen.status == AssignmentStatus.PUBLISHED

@pytest.mark.asyncio
async def test_update_is_partial(repo, teacher):
    a = await AssignmentService.create_assignment(_make_create(title="Old", description="Keep"), teacher, repo)
    updated = await AssignmentService.update_assignment(
        a.id, AssignmentUpdate(title="New", description="  "), teacher, repo
    )
    assert updated.title == "New"
    assert updated.description == "Keep"
    assert updated.dueDate == a.dueDate

@pytest.mark.asyncio
async def test_update_only_draft(repo, teacher):
    a = await _published(repo, teacher)
    with pytest.raises(InvalidStateError):
        await AssignmentService.update_assignment(a.id, AssignmentUpdate(title="New"), teacher, repo)

@pytest.mark.asyncio
async def test_update_requires_owner(repo, teacher, other_teacher, student):
    a = await AssignmentService.create_assignment(_make_create(), teacher, repo)
    with pytest.raises(ForbiddenError):
        await AssignmentService.update_assignment(a.id, AssignmentUpdate(title="X"), other_teacher, repo)
    with pytest.raises(ForbiddenError):
        await AssignmentService.update_assignment(a.id, AssignmentUpdate(title="X"), student, repo)

@pytest.mark.parametrize(
    ("current", "target", "allowed"),
    [
        (AssignmentStatus.DRAFT, AssignmentStatus.PUBLISHED, True),
        (AssignmentStatus.PUBLISHED, AssignmentStatus.COMPLETED, True),
        (AssignmentStatus.DRAFT, AssignmentStatus.COMPLETED, False),
        (AssignmentStatus.DRAFT, AssignmentStatus.DRAFT, False),
        (AssignmentStatus.PUBLISHED, AssignmentStatus.DRAFT, False),
        (AssignmentStatus.PUBLISHED, AssignmentStatus.PUBLISHED, False),
        (AssignmentStatus.COMPLETED, AssignmentStatus.DRAFT, False),
        (AssignmentStatus.COMPLETED, AssignmentStatus.PUBLISHED, False),
        (AssignmentStatus.COMPLETED, AssignmentStatus.COMPLETED, False),
    ],
)
def test_transition_table(current, target, allowed):
    assert is_valid_transition(current, target) is allowed

@pytest.mark.asyncio
async def test_status_never_regresses(repo, teacher):
    a = await _published(repo, teacher)
    with pytest.raises(InvalidTransitionError):
        await AssignmentService.change_status(a.id, AssignmentStatus.DRAFT, teacher, repo)

    done = await AssignmentService.change_status(a.id, AssignmentStatus.COMPLETED, teacher, repo)
    assert done.status == AssignmentStatus.COMPLETED
    for target in AssignmentStatus:
        with pytest.raises(InvalidTransitionError):
            await AssignmentService.change_status(a.id, target, teacher, repo)
    assert (await repo.find_one(a.id)).status == AssignmentStatus.COMPLETED

@pytest.mark.asyncio
async def test_transition_requires_teacher_owner(repo, teacher, other_teacher, student):
    a = await AssignmentService.create_assignment(_make_create(), teacher, repo)
    with pytest.raises(ForbiddenError):
        await AssignmentService.change_status(a.id, AssignmentStatus.PUBLISHED, student, repo)
    with pytest.raises(ForbiddenError):
        await AssignmentService.change_status(a.id, AssignmentStatus.PUBLISHED, other_teacher, repo)
    with pytest.raises(NotFoundError):
        await AssignmentService.change_status(404, AssignmentStatus.PUBLISHED, teacher, repo)

@pytest.mark.asyncio
async def test_concurrent_publish_only_one_wins(repo, teacher):
    a = await AssignmentService.create_assignment(_make_create(), teacher, repo)
    results = await asyncio.gather(
        AssignmentService.change_status(a.id, AssignmentStatus.PUBLISHED, teacher, repo),
        AssignmentService.change_status(a.id, AssignmentStatus.PUBLISHED, teacher, repo),
        return_exceptions=True,
    )
    ok = [r for r in results if not isinstance(r, Exception)]
    failed = [r for r in results if isinstance(r, InvalidTransitionError)]
    assert len(ok) == 1
    assert len(failed) == 1

@pytest.mark.asyncio
async def test_delete_requires_teacher(repo, teacher, student):
    a = await AssignmentService.create_assignment(_make_create(), teacher, repo)
    with pytest.raises(ForbiddenError):
        await AssignmentService.delete_assignment(a.id, student, repo)

@pytest.mark.asyncio
async def test_delete_ok_and_not_found(repo, teacher):
    a = await AssignmentService.create_assignment(_make_create(), teacher, repo)
    await AssignmentService.delete_assignment(a.id, teacher, repo)
    with pytest.raises(NotFoundError):
        await AssignmentService.delete_assignment(a.id, teacher, repo)

@pytest.mark.asyncio
async def test_delete_only_draft(repo, teacher):
    a = await _published(repo, teacher)
    with pytest.raises(InvalidStateError):
        await AssignmentService.delete_assignment(a.id, teacher, repo)
    assert await repo.find_one(a.id) is not None


class _LosingRaceRepo(InMemoryAssignmentRepository):
    """Applica un'altra scrittura subito prima della prima scrittura condizionale."""

    def __init__(self, interloper):
        super().__init__()
        self._interloper = interloper

    async def _interfere(self, assignment_id):
        if self._interloper is not None:
            interloper, self._interloper = self._interloper, None
            await interloper(self, assignment_id)

    async def update_if_status(self, assignment_id, expected, changes):
        await self._interfere(assignment_id)
        return await super().update_if_status(assignment_id, expected, changes)

    async def delete_if_status(self, assignment_id, expected):
        await self._interfere(assignment_id)
        return await super().delete_if_status(assignment_id, expected)


async def _publish_behind(repo, assignment_id):
    await InMemoryAssignmentRepository.update_if_status(
        repo, assignment_id, AssignmentStatus.DRAFT, {"status": AssignmentStatus.PUBLISHED}
    )


async def _delete_behind(repo, assignment_id):
    await InMemoryAssignmentRepository.delete_if_status(repo, assignment_id, AssignmentStatus.DRAFT)


@pytest.mark.asyncio
async def test_update_loses_to_publish(teacher):
    repo = _LosingRaceRepo(_publish_behind)
    a = await AssignmentService.create_assignment(_make_create(title="Old"), teacher, repo)
    with pytest.raises(InvalidStateError):
        await AssignmentService.update_assignment(a.id, AssignmentUpdate(title="New"), teacher, repo)
    stored = await repo.find_one(a.id)
    assert stored.status == AssignmentStatus.PUBLISHED
    assert stored.title == "Old"

@pytest.mark.asyncio
async def test_update_loses_to_delete(teacher):
    repo = _LosingRaceRepo(_delete_behind)
    a = await AssignmentService.create_assignment(_make_create(), teacher, repo)
    with pytest.raises(NotFoundError):
        await AssignmentService.update_assignment(a.id, AssignmentUpdate(title="New"), teacher, repo)

@pytest.mark.asyncio
async def test_delete_loses_to_publish(teacher):
    repo = _LosingRaceRepo(_publish_behind)
    a = await AssignmentService.create_assignment(_make_create(), teacher, repo)
    with pytest.raises(InvalidStateError):
        await AssignmentService.delete_assignment(a.id, teacher, repo)
    assert (await repo.find_one(a.id)).status == AssignmentStatus.PUBLISHED

@pytest.mark.asyncio
async def test_delete_loses_to_delete(teacher):
    repo = _LosingRaceRepo(_delete_behind)
    a = await AssignmentService.create_assignment(_make_create(), teacher, repo)
    with pytest.raises(NotFoundError):
        await AssignmentService.delete_assignment(a.id, teacher, repo)

@pytest.mark.asyncio
async def test_concurrent_update_and_publish_stay_consistent(repo, teacher):
    a = await AssignmentService.create_assignment(_make_create(title="Old"), teacher, repo)
    results = await asyncio.gather(
        AssignmentService.update_assignment(a.id, AssignmentUpdate(title="New"), teacher, repo),
        AssignmentService.change_status(a.id, AssignmentStatus.PUBLISHED, teacher, repo),
        return_exceptions=True,
    )
    errors = [r for r in results if isinstance(r, Exception)]
    assert len(errors) <= 1
    assert all(isinstance(e, InvalidStateError) for e in errors)

    stored = await repo.find_one(a.id)
    assert stored.status == AssignmentStatus.PUBLISHED
    assert stored.title == ("Old" if errors else "New")

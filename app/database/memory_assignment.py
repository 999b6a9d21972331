import asyncio
import itertools
from datetime import date
from typing import Dict, Optional, Sequence

from app.database.assignment_repo import AssignmentRepo
from app.schemas.assignment import Assignment, AssignmentCreate, AssignmentStatus


class InMemoryAssignmentRepository(AssignmentRepo):
    """Collezione di assignment tenuta in memoria.

    Ogni metodo gira sotto un unico lock, quindi le scritture condizionali
    vedono lo stesso stato su cui sono state verificate. Gli ID vengono da un
    contatore che non torna mai indietro: un ID cancellato non viene riusato.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._ids = itertools.count(1)
        self._items: Dict[int, Assignment] = {}

    async def create(self, data: AssignmentCreate, teacher_id: int, created_at: date,
                     status: AssignmentStatus = AssignmentStatus.DRAFT) -> Assignment:
        async with self._lock:
            assignment = Assignment(
                id=next(self._ids),
                teacherId=teacher_id,
                createdAt=created_at,
                status=status,
                **data.model_dump(),
            )
            self._items[assignment.id] = assignment
            return assignment.model_copy()

    async def find_for_teacher(self, teacher_id: int) -> Sequence[Assignment]:
        async with self._lock:
            return [a.model_copy() for a in self._items.values() if a.teacherId == teacher_id]

    async def find_by_status(self, status: AssignmentStatus) -> Sequence[Assignment]:
        async with self._lock:
            return [a.model_copy() for a in self._items.values() if a.status == status]

    async def find_one(self, assignment_id: int) -> Optional[Assignment]:
        async with self._lock:
            found = self._items.get(assignment_id)
            return found.model_copy() if found else None

    async def update_if_status(self, assignment_id: int, expected: AssignmentStatus,
                               changes: dict) -> Optional[Assignment]:
        async with self._lock:
            current = self._items.get(assignment_id)
            if current is None or current.status != expected:
                return None
            updated = current.model_copy(update=changes)
            self._items[assignment_id] = updated
            return updated.model_copy()

    async def delete_if_status(self, assignment_id: int, expected: AssignmentStatus) -> bool:
        async with self._lock:
            current = self._items.get(assignment_id)
            if current is None or current.status != expected:
                return False
            del self._items[assignment_id]
            return True

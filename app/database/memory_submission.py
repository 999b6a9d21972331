import asyncio
import itertools
from datetime import datetime
from typing import Dict, Optional, Sequence, Tuple

from app.database.submission_repo import SubmissionRepo
from app.schemas.submission import Submission


class InMemorySubmissionRepository(SubmissionRepo):
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._ids = itertools.count(1)
        self._items: Dict[int, Submission] = {}
        # (assignmentId, studentId) -> submission id
        self._by_pair: Dict[Tuple[int, int], int] = {}

    async def create_unique(self, *, assignment_id: int, student_id: int, student_name: str,
                            student_email: str, answer: str, file: Optional[str],
                            submitted_at: datetime) -> Optional[Submission]:
        async with self._lock:
            key = (assignment_id, student_id)
            if key in self._by_pair:
                return None
            submission = Submission(
                id=next(self._ids),
                assignmentId=assignment_id,
                studentId=student_id,
                studentName=student_name,
                studentEmail=student_email,
                submittedAnswer=answer,
                submittedFile=file,
                submittedAt=submitted_at,
                isReviewed=False,
            )
            self._items[submission.id] = submission
            self._by_pair[key] = submission.id
            return submission.model_copy()

    async def find_all(self) -> Sequence[Submission]:
        async with self._lock:
            return [s.model_copy() for s in self._items.values()]

    async def find_for_assignment(self, assignment_id: int) -> Sequence[Submission]:
        async with self._lock:
            return [s.model_copy() for s in self._items.values() if s.assignmentId == assignment_id]

    async def find_for_student(self, student_id: int) -> Sequence[Submission]:
        async with self._lock:
            return [s.model_copy() for s in self._items.values() if s.studentId == student_id]

    async def find_by_student_and_assignment(self, student_id: int,
                                             assignment_id: int) -> Optional[Submission]:
        async with self._lock:
            submission_id = self._by_pair.get((assignment_id, student_id))
            if submission_id is None:
                return None
            return self._items[submission_id].model_copy()

    async def mark_reviewed(self, submission_id: int) -> Optional[Submission]:
        async with self._lock:
            current = self._items.get(submission_id)
            if current is None:
                return None
            if not current.isReviewed:
                current = current.model_copy(update={"isReviewed": True})
                self._items[submission_id] = current
            return current.model_copy()

    async def find_one(self, submission_id: int) -> Optional[Submission]:
        async with self._lock:
            found = self._items.get(submission_id)
            return found.model_copy() if found else None

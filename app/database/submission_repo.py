from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from app.schemas.submission import Submission


class SubmissionRepo(ABC):
    @abstractmethod
    async def create_unique(self, *, assignment_id: int, student_id: int, student_name: str,
                            student_email: str, answer: str, file: Optional[str],
                            submitted_at: datetime) -> Optional[Submission]:
        """Inserisce la consegna se lo studente non ha già consegnato per lo stesso assignment.
        Ritorna None in caso di duplicato."""
        raise NotImplementedError

    @abstractmethod
    async def find_all(self) -> Sequence[Submission]:
        """Ritorna tutte le consegne in ordine di inserimento."""
        raise NotImplementedError

    @abstractmethod
    async def find_for_assignment(self, assignment_id: int) -> Sequence[Submission]:
        """Ritorna le consegne di un assignment."""
        raise NotImplementedError

    @abstractmethod
    async def find_for_student(self, student_id: int) -> Sequence[Submission]:
        """Ritorna le consegne di uno studente."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_student_and_assignment(self, student_id: int,
                                             assignment_id: int) -> Optional[Submission]:
        """Ritorna la consegna di uno studente per un assignment, oppure None."""
        raise NotImplementedError

    @abstractmethod
    async def mark_reviewed(self, submission_id: int) -> Optional[Submission]:
        """Segna la consegna come revisionata. Ritorna None se non esiste."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, submission_id: int) -> Optional[Submission]:
        """Ritorna una consegna per ID, oppure None se non esiste."""
        raise NotImplementedError

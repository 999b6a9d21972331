from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, Sequence

from app.schemas.assignment import Assignment, AssignmentCreate, AssignmentStatus


class AssignmentRepo(ABC):
    @abstractmethod
    async def create(self, data: AssignmentCreate, teacher_id: int, created_at: date,
                     status: AssignmentStatus = AssignmentStatus.DRAFT) -> Assignment:
        """Crea un assignment assegnandogli il prossimo ID della sequenza."""
        raise NotImplementedError

    @abstractmethod
    async def find_for_teacher(self, teacher_id: int) -> Sequence[Assignment]:
        """Ritorna gli assignment creati da un dato teacher."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_status(self, status: AssignmentStatus) -> Sequence[Assignment]:
        """Ritorna gli assignment in un dato stato."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, assignment_id: int) -> Optional[Assignment]:
        """Ritorna un assignment per ID, oppure None se non esiste."""
        raise NotImplementedError

    @abstractmethod
    async def update_if_status(self, assignment_id: int, expected: AssignmentStatus,
                               changes: dict) -> Optional[Assignment]:
        """Applica ``changes`` solo se l'assignment è ancora nello stato ``expected``.
        Ritorna l'assignment aggiornato, oppure None se nessun documento corrisponde."""
        raise NotImplementedError

    @abstractmethod
    async def delete_if_status(self, assignment_id: int, expected: AssignmentStatus) -> bool:
        """Cancella l'assignment solo se è nello stato ``expected``.
        Ritorna True se qualcosa è stato cancellato."""
        raise NotImplementedError

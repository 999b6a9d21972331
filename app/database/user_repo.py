from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from app.schemas.context import Role
from app.schemas.user import User


class UserRepo(ABC):
    @abstractmethod
    async def create_unique(self, *, email: str, password_hash: str, role: Role,
                            name: str) -> Optional[User]:
        """Registra un utente. Ritorna None se l'email è già presente."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Ricerca esatta (case-sensitive) per email."""
        raise NotImplementedError

    @abstractmethod
    async def count_by_role(self, role: Role) -> int:
        raise NotImplementedError

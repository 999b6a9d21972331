import asyncio
import itertools
from typing import Dict, Optional

from app.database.user_repo import UserRepo
from app.schemas.context import Role
from app.schemas.user import User


class InMemoryUserRepository(UserRepo):
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._ids = itertools.count(1)
        self._by_email: Dict[str, User] = {}

    async def create_unique(self, *, email: str, password_hash: str, role: Role,
                            name: str) -> Optional[User]:
        async with self._lock:
            if email in self._by_email:
                return None
            user = User(id=next(self._ids), email=email, passwordHash=password_hash, role=role, name=name)
            self._by_email[email] = user
            return user.model_copy()

    async def find_by_email(self, email: str) -> Optional[User]:
        async with self._lock:
            found = self._by_email.get(email)
            return found.model_copy() if found else None

    async def count_by_role(self, role: Role) -> int:
        async with self._lock:
            return sum(1 for u in self._by_email.values() if u.role == role)

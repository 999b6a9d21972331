from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    TEACHER = "teacher"
    STUDENT = "student"


class UserContext(BaseModel):
    """Identità del chiamante, ricostruita dai claim del token."""
    user_id: int
    email: str
    role: Role
    name: str = ""

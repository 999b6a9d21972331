from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator


class AssignmentStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    COMPLETED = "completed"


class AssignmentCreate(BaseModel):
    title: str
    description: str
    dueDate: date

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("All fields are required")
        return value


class AssignmentUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    dueDate: Optional[date] = None

    @field_validator("title", "description")
    @classmethod
    def blank_means_unchanged(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class AssignmentStatusUpdate(BaseModel):
    status: AssignmentStatus


class Assignment(AssignmentCreate):
    id: int
    teacherId: int
    createdAt: date
    status: AssignmentStatus = AssignmentStatus.DRAFT

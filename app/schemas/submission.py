from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class SubmissionCreate(BaseModel):
    assignmentId: int
    submittedAnswer: str
    submittedFile: Optional[str] = None

    @field_validator("submittedAnswer")
    @classmethod
    def answer_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Assignment ID and answer are required")
        return value

    @field_validator("submittedFile")
    @classmethod
    def empty_file_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class Submission(BaseModel):
    id: int
    assignmentId: int
    studentId: int
    studentName: str
    studentEmail: str
    submittedAnswer: str
    submittedFile: Optional[str] = None
    submittedAt: datetime
    isReviewed: bool = False

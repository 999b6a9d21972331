"""Account demo e dati di esempio caricati all'avvio."""
import logging
from datetime import date, datetime, timezone

from app.core import security
from app.core.config import Settings
from app.database.assignment_repo import AssignmentRepo
from app.database.submission_repo import SubmissionRepo
from app.database.user_repo import UserRepo
from app.schemas.assignment import AssignmentCreate, AssignmentStatus
from app.schemas.context import Role

logger = logging.getLogger("seed.service")

DEMO_USERS = [
    {"email": "teacher@test.com", "password": "teacher123", "role": Role.TEACHER, "name": "Teacher User"},
    {"email": "student@test.com", "password": "student123", "role": Role.STUDENT, "name": "Student User"},
]


async def seed_demo_data(users: UserRepo, assignments: AssignmentRepo,
                         submissions: SubmissionRepo, settings: Settings) -> None:
    created = {}
    for entry in DEMO_USERS:
        user = await users.create_unique(
            email=entry["email"],
            password_hash=security.hash_password(entry["password"], settings.bcrypt_rounds),
            role=entry["role"],
            name=entry["name"],
        )
        if user is None:
            logger.info("Demo user %s already present, skipping seed", entry["email"])
            return
        created[user.role] = user

    teacher, student = created[Role.TEACHER], created[Role.STUDENT]

    react = await assignments.create(
        AssignmentCreate(
            title="React Fundamentals",
            description="Complete the React basics tutorial and submit your project",
            dueDate=date(2025, 11, 1),
        ),
        teacher_id=teacher.id,
        created_at=date(2025, 10, 15),
        status=AssignmentStatus.PUBLISHED,
    )
    await assignments.create(
        AssignmentCreate(
            title="JavaScript ES6 Features",
            description="Write examples demonstrating ES6 features",
            dueDate=date(2025, 11, 5),
        ),
        teacher_id=teacher.id,
        created_at=date(2025, 10, 20),
    )
    await submissions.create_unique(
        assignment_id=react.id,
        student_id=student.id,
        student_name=student.name,
        student_email=student.email,
        answer="I have completed the React fundamentals tutorial and built a simple todo application.",
        file="react-project.zip",
        submitted_at=datetime(2025, 10, 25, 14, 30, tzinfo=timezone.utc),
    )
    logger.info("Seeded demo users, 2 assignments and 1 submission")

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.deps import get_assignment_repo, get_submission_repo
from app.core.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, paginate
from app.database.assignment_repo import AssignmentRepo
from app.database.submission_repo import SubmissionRepo
from app.schemas.context import UserContext
from app.schemas.submission import SubmissionCreate
from app.services.auth_service import AuthService
from app.services.submission_service import SubmissionService

router = APIRouter()

RepoDep = Annotated[SubmissionRepo, Depends(get_submission_repo)]
AssignmentRepoDep = Annotated[AssignmentRepo, Depends(get_assignment_repo)]
UserDep = Annotated[UserContext, Depends(AuthService.get_current_user)]


@router.get("/submissions")
async def list_submissions_endpoint(
    user: UserDep,
    repo: RepoDep,
    assignment_id: Annotated[Optional[int], Query(alias="assignmentId")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
):
    items = await SubmissionService.list_submissions(user, repo, assignment_id)
    page_items, meta = paginate(items, page, limit)
    return {"success": True, "submissions": page_items, "pagination": meta}


@router.get("/submissions/assignment/{assignment_id}")
async def assignment_submissions_endpoint(assignment_id: int, user: UserDep, repo: RepoDep):
    items = await SubmissionService.list_for_assignment(assignment_id, user, repo)
    return {"success": True, "submissions": items}


@router.get("/submissions/my/{assignment_id}")
async def my_submission_endpoint(assignment_id: int, user: UserDep, repo: RepoDep):
    submission = await SubmissionService.get_my_submission(assignment_id, user, repo)
    return {"success": True, "submission": submission}


@router.post("/submissions", status_code=status.HTTP_201_CREATED)
async def submit_endpoint(
    data: SubmissionCreate,
    user: UserDep,
    repo: RepoDep,
    assignments: AssignmentRepoDep,
):
    created = await SubmissionService.submit(data, user, repo, assignments)
    return {"success": True, "message": "Assignment submitted successfully", "submission": created}


@router.patch("/submissions/{submission_id}/review")
async def review_endpoint(submission_id: int, user: UserDep, repo: RepoDep):
    reviewed = await SubmissionService.review(submission_id, user, repo)
    return {"success": True, "message": "Submission marked as reviewed", "submission": reviewed}

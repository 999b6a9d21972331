from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from app.core.deps import get_assignment_repo, get_submission_repo, get_user_repo
from app.core.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, paginate
from app.database.assignment_repo import AssignmentRepo
from app.database.submission_repo import SubmissionRepo
from app.database.user_repo import UserRepo
from app.schemas.assignment import AssignmentCreate, AssignmentStatusUpdate, AssignmentUpdate
from app.schemas.context import UserContext
from app.services.analytics_service import AnalyticsService
from app.services.assignment_service import AssignmentService
from app.services.auth_service import AuthService


router = APIRouter()

RepoDep = Annotated[AssignmentRepo, Depends(get_assignment_repo)]
SubmissionRepoDep = Annotated[SubmissionRepo, Depends(get_submission_repo)]
UserRepoDep = Annotated[UserRepo, Depends(get_user_repo)]
UserDep = Annotated[UserContext, Depends(AuthService.get_current_user)]


@router.get("/assignments")
async def list_assignments_endpoint(
    user: UserDep,
    repo: RepoDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
):
    items = await AssignmentService.list_assignments(user, repo)
    page_items, meta = paginate(items, page, limit)
    return {"success": True, "assignments": page_items, "pagination": meta}


@router.get("/assignments/analytics")
async def analytics_endpoint(
    user: UserDep,
    repo: RepoDep,
    submissions: SubmissionRepoDep,
    users: UserRepoDep,
):
    analytics = await AnalyticsService.for_teacher(user, repo, submissions, users)
    return {"success": True, "analytics": analytics}


@router.get("/assignments/{assignment_id}")
async def get_assignment_endpoint(assignment_id: int, user: UserDep, repo: RepoDep):
    assignment = await AssignmentService.get_assignment(assignment_id, user, repo)
    return {"success": True, "assignment": assignment}


@router.post("/assignments", status_code=status.HTTP_201_CREATED)
async def create_assignment_endpoint(assignment: AssignmentCreate, user: UserDep, repo: RepoDep):
    created = await AssignmentService.create_assignment(assignment, user, repo)

    location = f"/api/v1/assignments/{created.id}"
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=jsonable_encoder({
            "success": True,
            "message": "Assignment created successfully",
            "assignment": created,
        }),
        headers={"Location": location},
    )


@router.put("/assignments/{assignment_id}")
async def update_assignment_endpoint(
    assignment_id: int,
    changes: AssignmentUpdate,
    user: UserDep,
    repo: RepoDep,
):
    updated = await AssignmentService.update_assignment(assignment_id, changes, user, repo)
    return {"success": True, "message": "Assignment updated successfully", "assignment": updated}


@router.patch("/assignments/{assignment_id}/status")
async def change_status_endpoint(
    assignment_id: int,
    body: AssignmentStatusUpdate,
    user: UserDep,
    repo: RepoDep,
):
    updated = await AssignmentService.change_status(assignment_id, body.status, user, repo)
    return {"success": True, "message": "Assignment status updated successfully", "assignment": updated}


@router.delete("/assignments/{assignment_id}")
async def delete_assignment_endpoint(assignment_id: int, user: UserDep, repo: RepoDep):
    await AssignmentService.delete_assignment(assignment_id, user, repo)
    return {"success": True, "message": "Assignment deleted successfully"}

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.core.config import Settings
from app.core.deps import get_settings, get_user_repo
from app.database.user_repo import UserRepo
from app.schemas.context import UserContext
from app.schemas.user import UserLogin, UserRegister
from app.services.auth_service import AuthService

router = APIRouter()

UserRepoDep = Annotated[UserRepo, Depends(get_user_repo)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
UserDep = Annotated[UserContext, Depends(AuthService.get_current_user)]


@router.post("/auth/login")
async def login_endpoint(credentials: UserLogin, repo: UserRepoDep, settings: SettingsDep):
    result = await AuthService.authenticate(credentials, repo, settings)
    return {"success": True, "token": result.token, "user": result.user}


@router.post("/auth/register", status_code=status.HTTP_201_CREATED)
async def register_endpoint(data: UserRegister, repo: UserRepoDep, settings: SettingsDep):
    user = await AuthService.register(data, repo, settings)
    return {"success": True, "message": "User registered successfully", "user": user}


@router.get("/auth/me")
async def me_endpoint(user: UserDep):
    return {
        "success": True,
        "user": {"id": user.user_id, "email": user.email, "role": user.role, "name": user.name},
    }

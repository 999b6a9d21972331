from pydantic import BaseModel, field_validator

from app.schemas.context import Role


def _required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("All fields are required")
    return value


class UserLogin(BaseModel):
    email: str
    password: str

    @field_validator("email", "password")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Email and password are required")
        return value


class UserRegister(BaseModel):
    email: str
    password: str
    role: Role
    name: str

    @field_validator("email", "name")
    @classmethod
    def strip_required(cls, value: str) -> str:
        return _required(value)

    @field_validator("password")
    @classmethod
    def password_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("All fields are required")
        return value


class UserPublic(BaseModel):
    id: int
    email: str
    role: Role
    name: str


class User(UserPublic):
    passwordHash: str

    def public(self) -> UserPublic:
        return UserPublic(id=self.id, email=self.email, role=self.role, name=self.name)


class TokenResponse(BaseModel):
    token: str
    user: UserPublic

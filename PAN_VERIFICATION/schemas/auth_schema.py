from pydantic import BaseModel, field_validator
from typing import Optional

# Fields are optional so that missing values reach the service and get the
# 400 message the client expects instead of a framework validation error.

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

class UserOut(BaseModel):
    id: str
    name: str
    email: str

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v) -> str:
        return str(v)

class AuthResponse(BaseModel):
    user: UserOut
    token: str
    message: str

from pydantic import BaseModel
from typing import Optional, Literal

from bharatgpt.api.schemas.user_schemas import UserResponse


class RegisterRequest(BaseModel):
    email: str
    password: str
    full_name: Optional[str] = ""
    language_preference: Optional[str] = "en"

class LoginRequest(BaseModel):
    email: str
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse

class RoleUpdate(BaseModel):
    role: Literal["student", "admin"]

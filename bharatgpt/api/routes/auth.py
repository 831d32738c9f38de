import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from bharatgpt.utils.database import get_db
from bharatgpt.models.user import User
from bharatgpt.services.auth_service import AuthService, AuthError
from bharatgpt.api.schemas.auth_schemas import RegisterRequest, LoginRequest, TokenResponse
from bharatgpt.api.schemas.user_schemas import UserResponse

logger = logging.getLogger(__name__)
router = APIRouter()


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """FastAPI依赖：从 Authorization 头解析并校验JWT，返回当前用户"""
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    try:
        return AuthService(db).get_user_from_token(auth[7:])
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """FastAPI依赖：仅管理员可访问"""
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(req: RegisterRequest, db: Session = Depends(get_db)):
    """
    注册新用户
    """
    try:
        user, token = AuthService(db).register(
            email=req.email,
            password=req.password,
            full_name=req.full_name or "",
            language_preference=req.language_preference or "en",
        )
    except ValueError as e:
        code = status.HTTP_409_CONFLICT if "already" in str(e) else status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=str(e))
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(req: LoginRequest, db: Session = Depends(get_db)):
    """
    邮箱密码登录
    """
    try:
        user, token = AuthService(db).login(req.email, req.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """
    当前登录用户
    """
    return current_user

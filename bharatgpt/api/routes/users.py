import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from bharatgpt.utils.database import get_db
from bharatgpt.models.user import User
from bharatgpt.services.user_service import UserService
from bharatgpt.services.dashboard_service import DashboardService
from bharatgpt.api.routes.auth import get_current_user
from bharatgpt.api.schemas.user_schemas import (
    UserResponse, UserUpdate, ProgressUpdate, ProgressResponse, LearningHistoryResponse
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.put("/me", response_model=UserResponse)
async def update_me(user_data: UserUpdate, current_user: User = Depends(get_current_user),
                    db: Session = Depends(get_db)):
    """
    更新当前用户资料
    """
    user_service = UserService(db)
    return user_service.update_profile(current_user.id, user_data.model_dump(exclude_unset=True))


@router.get("/me/dashboard")
async def get_dashboard(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    学生仪表盘：模块、进度、最近作答和统计
    """
    try:
        return DashboardService(db).get_student_dashboard(current_user.id)
    except Exception as e:
        logger.error(f"获取学生仪表盘失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="获取仪表盘失败"
        )


@router.get("/me/progress", response_model=List[ProgressResponse])
async def get_progress(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    当前用户的学习进度
    """
    return UserService(db).get_progress(current_user.id)


@router.put("/me/progress/{module_id}", response_model=ProgressResponse)
async def update_progress(module_id: int, progress: ProgressUpdate,
                          current_user: User = Depends(get_current_user),
                          db: Session = Depends(get_db)):
    """
    更新某个模块的学习进度
    """
    try:
        return UserService(db).update_progress(
            current_user.id, module_id, **progress.model_dump(exclude_unset=True)
        )
    except ValueError as e:
        code = status.HTTP_404_NOT_FOUND if "not found" in str(e) else status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=str(e))


@router.get("/me/learning-history", response_model=List[LearningHistoryResponse])
async def get_learning_history(
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    当前用户的学习历史
    """
    return UserService(db).get_learning_history(current_user.id, limit)

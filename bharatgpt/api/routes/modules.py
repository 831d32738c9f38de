from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from bharatgpt.utils.database import get_db
from bharatgpt.models.user import User
from bharatgpt.services.module_service import ModuleService
from bharatgpt.api.routes.auth import get_current_user
from bharatgpt.api.schemas.module_schemas import ModuleResponse


router = APIRouter()

@router.get("", response_model=List[ModuleResponse])
async def list_modules(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    所有启用的学习模块
    """
    return ModuleService(db).get_active_modules()

@router.get("/{module_id}", response_model=ModuleResponse)
async def get_module(module_id: int, current_user: User = Depends(get_current_user),
                     db: Session = Depends(get_db)):
    """
    根据ID获取模块
    """
    module = ModuleService(db).get_module_by_id(module_id)
    if not module or not module.is_active:
        raise HTTPException(status_code=404, detail="模块不存在")
    return module

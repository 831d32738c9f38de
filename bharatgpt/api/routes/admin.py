import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from bharatgpt.utils.database import get_db
from bharatgpt.models.user import User
from bharatgpt.services.dashboard_service import DashboardService
from bharatgpt.services.auth_service import AuthService
from bharatgpt.services.module_service import ModuleService
from bharatgpt.api.routes.auth import require_admin
from bharatgpt.api.schemas.auth_schemas import RoleUpdate
from bharatgpt.api.schemas.module_schemas import ModuleCreate, ModuleUpdate, ModuleResponse
from bharatgpt.api.schemas.user_schemas import UserResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/dashboard")
async def get_admin_dashboard(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """
    管理员仪表盘统计
    """
    return DashboardService(db).get_admin_dashboard()


@router.get("/export/{kind}")
async def export_data(kind: str, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """
    导出 users / progress / certificates 为CSV附件
    """
    try:
        export = DashboardService(db).export_csv(kind)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return Response(
        content=export["content"],
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export["filename"]}"'}
    )


@router.post("/modules", response_model=ModuleResponse, status_code=status.HTTP_201_CREATED)
async def create_module(module_data: ModuleCreate, admin: User = Depends(require_admin),
                        db: Session = Depends(get_db)):
    """
    创建学习模块
    """
    try:
        return ModuleService(db).create_module(**module_data.model_dump())
    except ValueError as e:
        code = status.HTTP_409_CONFLICT if "already exists" in str(e) else status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=str(e))


@router.put("/modules/{module_id}", response_model=ModuleResponse)
async def update_module(module_id: int, module_data: ModuleUpdate, admin: User = Depends(require_admin),
                        db: Session = Depends(get_db)):
    """
    更新学习模块
    """
    try:
        module = ModuleService(db).update_module(module_id, **module_data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not module:
        raise HTTPException(status_code=404, detail="模块不存在")
    return module


@router.delete("/modules/{module_id}")
async def deactivate_module(module_id: int, admin: User = Depends(require_admin),
                            db: Session = Depends(get_db)):
    """
    停用学习模块
    """
    if not ModuleService(db).deactivate_module(module_id):
        raise HTTPException(status_code=404, detail="模块不存在")
    return {"message": "模块已停用"}


@router.put("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(user_id: int, role_data: RoleUpdate, admin: User = Depends(require_admin),
                           db: Session = Depends(get_db)):
    """
    修改用户角色（提升为管理员或降为学生）
    """
    user = AuthService(db).set_role(user_id, role_data.role)
    if not user:
        raise HTTPException(status_code=404, detail="用户不存在")
    return user

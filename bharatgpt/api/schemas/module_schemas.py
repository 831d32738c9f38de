from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class ModuleBase(BaseModel):
    title: str
    description: Optional[str] = None
    subject: Optional[str] = None
    difficulty_level: str = "beginner"
    content: str = ""
    video_url: Optional[str] = None
    audio_url: Optional[str] = None
    order_index: int = 0

class ModuleCreate(ModuleBase):
    pass

class ModuleUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    subject: Optional[str] = None
    difficulty_level: Optional[str] = None
    content: Optional[str] = None
    video_url: Optional[str] = None
    audio_url: Optional[str] = None
    order_index: Optional[int] = None
    is_active: Optional[bool] = None

class ModuleResponse(ModuleBase):
    id: int
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True
    )

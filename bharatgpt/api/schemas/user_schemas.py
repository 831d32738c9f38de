from pydantic import BaseModel, ConfigDict
from typing import Optional, Dict, Any
from datetime import datetime

class UserResponse(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    role: str
    language_preference: Optional[str] = None
    is_active: bool
    last_sign_in_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True
    )

class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    language_preference: Optional[str] = None

class ProgressUpdate(BaseModel):
    status: Optional[str] = None
    completion_percentage: Optional[int] = None
    time_spent_minutes: Optional[int] = None
    ai_feedback: Optional[str] = None
    understanding_level: Optional[int] = None
    retry_count: Optional[int] = None

class ProgressResponse(BaseModel):
    id: int
    user_id: int
    module_id: int
    status: str
    completion_percentage: int
    time_spent_minutes: int
    ai_feedback: Optional[str] = None
    understanding_level: int
    retry_count: int
    last_accessed: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True
    )

class LearningHistoryResponse(BaseModel):
    id: int
    user_id: int
    module_id: Optional[int] = None
    topic: str
    activity_type: str
    details: Optional[Dict[str, Any]] = None
    timestamp: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True
    )

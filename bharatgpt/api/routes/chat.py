import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from bharatgpt.utils.database import get_db
from bharatgpt.models.user import User
from bharatgpt.services.chat_service import ChatService
from bharatgpt.api.routes.auth import get_current_user
from bharatgpt.api.schemas.chat_schemas import (
    ChatRequest, ChatResponse, FeedbackRequest, ChatInteractionResponse
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/messages", response_model=ChatResponse)
async def send_message(req: ChatRequest, current_user: User = Depends(get_current_user),
                       db: Session = Depends(get_db)):
    """
    发送聊天消息给AI导师
    """
    try:
        return await ChatService(db).send_message(
            current_user, req.message, req.module_id, req.language, req.audio_enabled
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/history", response_model=List[ChatInteractionResponse])
async def get_history(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    当前用户的对话记录
    """
    return ChatService(db).get_history(current_user.id, skip, limit)


@router.post("/messages/{interaction_id}/feedback", status_code=status.HTTP_201_CREATED)
async def provide_feedback(interaction_id: int, req: FeedbackRequest,
                           current_user: User = Depends(get_current_user),
                           db: Session = Depends(get_db)):
    """
    评价AI回复
    """
    try:
        feedback = ChatService(db).provide_feedback(current_user.id, interaction_id, req.feedback_type)
    except ValueError as e:
        code = status.HTTP_404_NOT_FOUND if "not found" in str(e) else status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=str(e))
    return {"id": feedback.id, "interaction_id": interaction_id, "feedback_type": feedback.feedback_type}

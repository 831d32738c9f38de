from pydantic import BaseModel, ConfigDict
from typing import Optional, Dict, Literal
from datetime import datetime

class ChatRequest(BaseModel):
    message: str
    module_id: Optional[int] = None
    language: Optional[str] = None
    audio_enabled: bool = False

class SpeechInstruction(BaseModel):
    text: str
    lang: str

class ChatResponse(BaseModel):
    interaction_id: Optional[int] = None
    user_message: str
    response: str
    understanding_level: Optional[int] = None
    module_id: Optional[int] = None
    fallback: bool
    languages: Dict[str, str]
    timestamp: str
    speech: Optional[SpeechInstruction] = None

class FeedbackRequest(BaseModel):
    feedback_type: Literal["helpful", "not_helpful"]

class ChatInteractionResponse(BaseModel):
    id: int
    user_id: int
    module_id: Optional[int] = None
    user_message: str
    ai_response: str
    understanding_level: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True
    )

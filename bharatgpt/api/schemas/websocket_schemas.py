from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any

class WebSocketMessageBase(BaseModel):
    type: str
    timestamp: Optional[str] = None

class UserMessage(WebSocketMessageBase):
    type: str = "user_message"
    content: str
    module_id: Optional[int] = None
    language: Optional[str] = None
    audio_enabled: bool = False

class SpeechStartMessage(WebSocketMessageBase):
    type: str = "speech_start"
    language: str = "english"

class SpeechResultItem(BaseModel):
    transcript: str = ""
    is_final: bool = False

class SpeechResultMessage(WebSocketMessageBase):
    type: str = "speech_result"
    results: List[SpeechResultItem] = Field(default_factory=list)
    result_index: int = 0
    module_id: Optional[int] = None

class SpeechErrorMessage(WebSocketMessageBase):
    type: str = "speech_error"
    error: str

class ChatResponseMessage(WebSocketMessageBase):
    type: str = "chat_response"
    data: Dict[str, Any]

class SpeechControlMessage(WebSocketMessageBase):
    type: str = "speech_control"
    action: str
    delay_ms: int = 0
    error: Optional[str] = None
    config: Optional[Dict[str, Any]] = None

class ErrorMessage(WebSocketMessageBase):
    type: str = "error"
    message: str

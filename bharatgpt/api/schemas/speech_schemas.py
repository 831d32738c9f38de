from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal

Language = Literal["english", "hindi", "gujarati"]

class VoiceInfo(BaseModel):
    name: str
    lang: str
    default: bool = False

class UtteranceRequest(BaseModel):
    text: str
    language: Language = "english"
    voices: List[VoiceInfo] = Field(default_factory=list)

class UtteranceResponse(BaseModel):
    text: str
    language: str
    lang: str
    rate: float
    pitch: float
    volume: float
    voice: Optional[VoiceInfo] = None
    fallback_used: bool
    notice: Optional[str] = None
    error_fallback: Optional[Dict[str, Any]] = None

class LanguageSupportRequest(BaseModel):
    language: Language
    voices: List[VoiceInfo] = Field(default_factory=list)

class LanguageSupportResponse(BaseModel):
    supported: bool
    voices: List[VoiceInfo]
    fallback_voice: Optional[VoiceInfo] = None

class MultilingualRequest(BaseModel):
    content: str

class MultilingualResponse(BaseModel):
    languages: Dict[str, str]
    available: List[str]

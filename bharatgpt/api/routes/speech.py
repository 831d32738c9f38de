from dataclasses import asdict
from typing import List
from fastapi import APIRouter, HTTPException

from bharatgpt.utils.text2speech import (
    LANGUAGE_CONFIGS, Voice, build_utterance, check_language_support, describe_voices
)
from bharatgpt.utils.speech_recognition import LANGUAGE_RECOGNITION_CONFIGS
from bharatgpt.utils.multilingual import parse_multilingual_response
from bharatgpt.api.schemas.speech_schemas import (
    VoiceInfo, UtteranceRequest, UtteranceResponse, LanguageSupportRequest, LanguageSupportResponse,
    MultilingualRequest, MultilingualResponse,
)

router = APIRouter()


def _voices(items):
    return [Voice.from_dict(v.model_dump()) for v in items]


@router.get("/languages")
async def get_languages():
    """
    各语言的朗读和识别配置
    """
    return {
        language: {
            "synthesis": asdict(LANGUAGE_CONFIGS[language]),
            "recognition": LANGUAGE_RECOGNITION_CONFIGS[language].to_dict(),
        }
        for language in LANGUAGE_CONFIGS
    }


@router.post("/utterance", response_model=UtteranceResponse)
async def plan_utterance(req: UtteranceRequest):
    """
    根据客户端的语音列表生成朗读参数
    """
    if not req.text.strip():
        raise HTTPException(status_code=400, detail="text must not be empty")
    return build_utterance(req.text, req.language, _voices(req.voices)).to_dict()


@router.post("/support", response_model=LanguageSupportResponse)
async def language_support(req: LanguageSupportRequest):
    """
    检查客户端对某语言的语音支持
    """
    return check_language_support(req.language, _voices(req.voices)).to_dict()


@router.post("/multilingual", response_model=MultilingualResponse)
async def parse_multilingual(req: MultilingualRequest):
    """
    按语言拆分多语言回复
    """
    languages = parse_multilingual_response(req.content)
    return {"languages": languages, "available": list(languages.keys())}


@router.post("/voices")
async def summarize_voices(voices: List[VoiceInfo]):
    """
    按语言归类客户端的可用语音，便于排查缺少的语言包
    """
    return describe_voices(_voices(voices))

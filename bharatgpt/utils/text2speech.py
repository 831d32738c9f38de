# -*- coding: utf-8 -*-
"""
多语言语音合成辅助

浏览器负责实际发音，这里只根据浏览器上报的可用语音列表挑选语音，
并给出朗读参数（语言、语速、音调、音量）。挑选顺序：
    1. 语言代码完全匹配
    2. 语系前缀匹配（hi-*、gu-*、en-*）
    3. 印地语/古吉拉特语的名称和代码启发式匹配
    4. 印度英语语音兜底
    5. 任意英语语音兜底
"""

import logging
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# 各语言在界面上显示的本地名称
NATIVE_LANGUAGE_NAMES = {
    "english": "English",
    "hindi": "हिंदी",
    "gujarati": "ગુજરાતી",
}

# 印地语/古吉拉特语使用英语语音兜底时的朗读参数
FALLBACK_RATE = 0.7
FALLBACK_PITCH = 1.1

# 朗读出错时改用英语重读的参数
ERROR_FALLBACK_LANG = "en-US"
ERROR_FALLBACK_RATE = 0.8


@dataclass
class SpeechConfig:
    lang: str
    rate: float = 0.9
    pitch: float = 1.0
    volume: float = 1.0


LANGUAGE_CONFIGS: Dict[str, SpeechConfig] = {
    "english": SpeechConfig(lang="en-US", rate=0.9),
    "hindi": SpeechConfig(lang="hi-IN", rate=0.8),
    "gujarati": SpeechConfig(lang="gu-IN", rate=0.8),
}

# 第3步启发式：语言代码片段和名称关键字
_LANGUAGE_HINTS = {
    "hindi": ("hi", "hindi"),
    "gujarati": ("gu", "gujarati"),
}


@dataclass
class Voice:
    """浏览器上报的一个语音"""
    name: str
    lang: str
    default: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Voice":
        return cls(
            name=str(data.get("name", "")),
            lang=str(data.get("lang", "")),
            default=bool(data.get("default", False)),
        )


@dataclass
class VoiceSelection:
    voice: Optional[Voice]
    fallback_used: bool = False
    step: Optional[str] = None  # exact, prefix, heuristic, indian_english, english


@dataclass
class UtterancePlan:
    """一次朗读的完整参数"""
    text: str
    language: str
    lang: str
    rate: float
    pitch: float
    volume: float
    voice: Optional[Voice] = None
    fallback_used: bool = False
    notice: Optional[str] = None
    error_fallback: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LanguageSupport:
    supported: bool
    voices: List[Voice] = field(default_factory=list)
    fallback_voice: Optional[Voice] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _get_config(language: str) -> SpeechConfig:
    if language not in LANGUAGE_CONFIGS:
        raise ValueError(f"不支持的语言: {language}")
    return LANGUAGE_CONFIGS[language]


def _find(voices: List[Voice], predicate) -> Optional[Voice]:
    for voice in voices:
        if predicate(voice):
            return voice
    return None


def _is_indian_english(voice: Voice) -> bool:
    return "en-IN" in voice.lang or "india" in voice.name.lower()


def select_voice(language: str, voices: List[Voice]) -> VoiceSelection:
    """
    按瀑布顺序为语言挑选语音

    语言代码的子串判断区分大小写，名称判断不区分大小写。

    Args:
        language: english / hindi / gujarati
        voices: 浏览器可用语音列表

    Returns:
        VoiceSelection: 选中的语音，没有任何可用语音时 voice 为 None
    """
    config = _get_config(language)

    # 1. 语言代码完全匹配
    voice = _find(voices, lambda v: v.lang == config.lang)
    if voice:
        return VoiceSelection(voice=voice, step="exact")

    # 2. 语系前缀匹配
    lang_code = config.lang.split("-")[0]
    voice = _find(voices, lambda v: v.lang.startswith(lang_code))
    if voice:
        return VoiceSelection(voice=voice, step="prefix")

    # 3. 印地语/古吉拉特语的启发式匹配
    if language in _LANGUAGE_HINTS:
        code_hint, name_hint = _LANGUAGE_HINTS[language]
        voice = _find(voices, lambda v: (
            code_hint in v.lang
            or "in" in v.lang
            or name_hint in v.name.lower()
            or "india" in v.name.lower()
        ))
        if voice:
            return VoiceSelection(voice=voice, step="heuristic")

        # 4. 印度英语兜底
        voice = _find(voices, _is_indian_english)
        if voice:
            logger.info(f"使用印度英语语音兜底: {language}")
            return VoiceSelection(voice=voice, fallback_used=True, step="indian_english")

    # 5. 任意英语语音兜底
    voice = _find(voices, lambda v: v.lang.startswith("en"))
    if voice:
        if language != "english":
            logger.info(f"使用通用英语语音兜底: {language}")
        return VoiceSelection(voice=voice, fallback_used=True, step="english")

    logger.warning(f"没有适合 {language} 的语音，使用浏览器默认语音")
    return VoiceSelection(voice=None)


def build_utterance(text: str, language: str, voices: List[Voice]) -> UtterancePlan:
    """
    生成朗读参数

    印地语/古吉拉特语落到英语语音时放慢语速、略微提高音调，并附带提示语。
    非英语朗读同时给出出错时改用英语重读的参数。
    """
    config = _get_config(language)
    selection = select_voice(language, voices)

    plan = UtterancePlan(
        text=text,
        language=language,
        lang=config.lang,
        rate=config.rate,
        pitch=config.pitch,
        volume=config.volume,
        voice=selection.voice,
        fallback_used=selection.fallback_used,
    )

    if selection.fallback_used and language in _LANGUAGE_HINTS:
        plan.rate = FALLBACK_RATE
        plan.pitch = FALLBACK_PITCH
        plan.notice = fallback_notice(language)

    if language != "english":
        english_voice = _find(voices, lambda v: v.lang.startswith("en"))
        plan.error_fallback = {
            "lang": ERROR_FALLBACK_LANG,
            "rate": ERROR_FALLBACK_RATE,
            "voice": asdict(english_voice) if english_voice else None,
        }

    logger.debug(
        f"朗读参数: {language}, 语音: {selection.voice.name if selection.voice else 'default'}, "
        f"兜底: {selection.fallback_used}"
    )
    return plan


def fallback_notice(language: str) -> str:
    """英语语音兜底时展示给用户的提示"""
    name = NATIVE_LANGUAGE_NAMES.get(language, "English")
    return f"Using English voice for {name} text. Install language packs for better pronunciation."


def check_language_support(language: str, voices: List[Voice]) -> LanguageSupport:
    """检查浏览器语音对某语言的支持情况"""
    _get_config(language)

    if language == "english":
        matched = [v for v in voices if v.lang.startswith("en")]
        return LanguageSupport(supported=bool(matched), voices=matched)

    code_hint, name_hint = _LANGUAGE_HINTS[language]
    matched = [
        v for v in voices
        if code_hint in v.lang or name_hint in v.name.lower() or "in" in v.lang
    ]
    fallback = _find(voices, _is_indian_english)
    return LanguageSupport(supported=bool(matched), voices=matched, fallback_voice=fallback)


def describe_voices(voices: List[Voice]) -> Dict[str, List[str]]:
    """按语言归类可用语音，便于排查缺少的语言包"""
    def label(v: Voice) -> str:
        return f"{v.name} ({v.lang})"

    return {
        "all": [label(v) for v in voices],
        "hindi": [label(v) for v in voices if "hi" in v.lang or "hindi" in v.name.lower()],
        "gujarati": [label(v) for v in voices if "gu" in v.lang or "gujarati" in v.name.lower()],
        "indian": [label(v) for v in voices if "in" in v.lang or "india" in v.name.lower()],
    }

from typing import Dict

SECTION_SEPARATOR = "---"

# 工作流返回的多语言回复中，每段第一行的标记
SECTION_MARKERS = {
    "ENGLISH VERSION:": "english",
    "HINDI VERSION:": "hindi",
    "GUJARATI VERSION:": "gujarati",
}

MISSING_LANGUAGE_TEXT = "Content not available in this language"


def parse_multilingual_response(content: str) -> Dict[str, str]:
    """
    将多语言回复拆分为各语言段落

    回复以 --- 分段，段落首行包含语言标记（前面可带表情符号），
    其余行为该语言正文。没有标记的段落忽略。
    """
    languages: Dict[str, str] = {}
    if not content:
        return languages

    for section in content.split(SECTION_SEPARATOR):
        if not section.strip():
            continue
        lines = section.strip().split("\n")
        first_line = lines[0].strip()
        for marker, language in SECTION_MARKERS.items():
            if marker in first_line:
                languages[language] = "\n".join(lines[1:]).strip()
                break

    return languages


def get_section(languages: Dict[str, str], language: str) -> str:
    """取某语言的段落，不存在时返回提示文本"""
    return languages.get(language) or MISSING_LANGUAGE_TEXT

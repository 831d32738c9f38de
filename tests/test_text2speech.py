import pytest

from bharatgpt.utils.text2speech import (
    Voice, build_utterance, check_language_support, describe_voices, select_voice
)

US = Voice(name="Samantha", lang="en-US")
UK = Voice(name="Daniel", lang="en-GB")
INDIAN_EN = Voice(name="Rishi", lang="en-IN")
HINDI = Voice(name="Lekha", lang="hi-IN")
GUJARATI = Voice(name="Google ગુજરાતી", lang="gu-IN")


class TestSelectVoice:
    def test_exact_locale_wins(self):
        selection = select_voice("hindi", [US, INDIAN_EN, HINDI])
        assert selection.voice == HINDI
        assert selection.step == "exact"
        assert not selection.fallback_used

    def test_prefix_match(self):
        bare_hindi = Voice(name="Hindi basic", lang="hi")
        selection = select_voice("hindi", [US, bare_hindi])
        assert selection.voice == bare_hindi
        assert selection.step == "prefix"

    def test_english_prefers_exact_then_prefix(self):
        assert select_voice("english", [UK, US]).voice == US
        selection = select_voice("english", [UK])
        assert selection.voice == UK
        assert selection.step == "prefix"
        assert not selection.fallback_used

    def test_heuristic_by_name(self):
        named = Voice(name="Microsoft Kalpana - Hindi", lang="xx-XX")
        selection = select_voice("hindi", [US, named])
        assert selection.voice == named
        assert selection.step == "heuristic"
        assert not selection.fallback_used

    def test_lang_substring_check_is_case_sensitive(self):
        # "en-IN" 不包含小写 "in"，落到印度英语兜底
        selection = select_voice("gujarati", [US, INDIAN_EN])
        assert selection.voice == INDIAN_EN
        assert selection.step == "indian_english"
        assert selection.fallback_used

    def test_any_english_fallback(self):
        selection = select_voice("gujarati", [Voice(name="Thomas", lang="fr-FR"), US])
        assert selection.voice == US
        assert selection.step == "english"
        assert selection.fallback_used

    def test_no_usable_voice(self):
        assert select_voice("hindi", []).voice is None
        assert select_voice("english", [Voice(name="Thomas", lang="fr-FR")]).voice is None

    def test_unknown_language_rejected(self):
        with pytest.raises(ValueError):
            select_voice("tamil", [US])


class TestBuildUtterance:
    def test_english_plan(self):
        plan = build_utterance("Hello", "english", [US])
        assert plan.lang == "en-US"
        assert plan.rate == 0.9
        assert plan.pitch == 1.0
        assert plan.voice == US
        assert plan.notice is None
        assert plan.error_fallback is None

    def test_native_voice_keeps_language_rate(self):
        plan = build_utterance("नमस्ते", "hindi", [HINDI, US])
        assert plan.lang == "hi-IN"
        assert plan.rate == 0.8
        assert not plan.fallback_used
        assert plan.error_fallback == {
            "lang": "en-US",
            "rate": 0.8,
            "voice": {"name": "Samantha", "lang": "en-US", "default": False},
        }

    def test_english_voice_fallback_slows_down_and_warns(self):
        plan = build_utterance("કેમ છો", "gujarati", [US])
        assert plan.fallback_used
        assert plan.rate == 0.7
        assert plan.pitch == 1.1
        assert plan.notice == (
            "Using English voice for ગુજરાતી text. Install language packs for better pronunciation."
        )

    def test_no_voice_uses_browser_default(self):
        plan = build_utterance("नमस्ते", "hindi", [])
        assert plan.voice is None
        assert not plan.fallback_used
        assert plan.rate == 0.8
        assert plan.error_fallback["voice"] is None


def test_check_language_support():
    support = check_language_support("gujarati", [US, INDIAN_EN, GUJARATI])
    assert support.supported
    assert support.voices == [GUJARATI]
    assert support.fallback_voice == INDIAN_EN

    english = check_language_support("english", [HINDI])
    assert not english.supported
    assert english.fallback_voice is None


def test_describe_voices():
    summary = describe_voices([US, HINDI])
    assert summary["all"] == ["Samantha (en-US)", "Lekha (hi-IN)"]
    assert summary["hindi"] == ["Lekha (hi-IN)"]
    assert summary["gujarati"] == []

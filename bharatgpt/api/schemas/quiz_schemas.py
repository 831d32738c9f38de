from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any
from datetime import datetime


class QuizSubmission(BaseModel):
    answers: Dict[str, str] = Field(default_factory=dict)  # 题目id -> 答案
    time_taken_seconds: Optional[int] = None

class GradedQuestion(BaseModel):
    question: Optional[str] = None
    type: Optional[str] = None
    user_answer: str = ""
    correct_answer: Optional[str] = None
    is_correct: bool

class QuizAttemptResponse(BaseModel):
    id: int
    user_id: int
    quiz_id: Optional[int] = None
    quiz_title: Optional[str] = None
    quiz_topic: Optional[str] = None
    answers: Optional[Dict[str, Any]] = None
    score: int
    percentage: int
    grade: str
    total_questions: int
    correct_count: int
    time_taken_minutes: Optional[int] = None
    attempt_number: int
    passed: bool
    feedback: Optional[str] = None
    graded_questions: Optional[List[Dict[str, Any]]] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True
    )

class CertificateResponse(BaseModel):
    id: int
    user_id: int
    module_id: Optional[int] = None
    quiz_id: Optional[int] = None
    attempt_id: Optional[int] = None
    grade: Optional[str] = None
    score: Optional[int] = None
    issued_date: Optional[datetime] = None
    certificate_url: Optional[str] = None

    model_config = ConfigDict(
        from_attributes=True
    )

class QuizResultResponse(BaseModel):
    attempt: QuizAttemptResponse
    certificate: Optional[CertificateResponse] = None


# 生成测验（n8n 工作流格式）
class GeneratedQuestion(BaseModel):
    type: str = "mcq"
    question: str
    options: Optional[List[str]] = None
    correct_answer: str

class GeneratedQuiz(BaseModel):
    title: str
    topic: Optional[str] = None
    level: Optional[str] = None
    description: Optional[str] = None
    questions: List[GeneratedQuestion]

class QuizGenerationRequest(BaseModel):
    lesson_id: Optional[str] = None

class QuizGenerationResponse(BaseModel):
    quiz: GeneratedQuiz
    source: str
    time_limit_seconds: int

class UserAnswer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_index: int = Field(alias="questionIndex")
    answer: str = ""

class GeneratedQuizSubmission(BaseModel):
    lesson_id: Optional[str] = None
    user_answers: List[UserAnswer] = Field(default_factory=list)
    quiz: GeneratedQuiz

class GeneratedQuizResult(BaseModel):
    userId: str
    lessonId: Optional[str] = None
    quiz_topic: Optional[str] = None
    quiz_title: Optional[str] = None
    total_questions: int
    correct_count: int
    score_percent: int
    passed: bool
    feedback: Optional[str] = None
    graded_questions: List[GradedQuestion]
    graded_by: str
    attempt_id: Optional[int] = None

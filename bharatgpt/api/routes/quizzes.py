import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from bharatgpt.utils.database import get_db
from bharatgpt.models.user import User
from bharatgpt.services.quiz_service import QuizService, public_quiz_view
from bharatgpt.services.quiz_generator_service import QuizGeneratorService
from bharatgpt.api.routes.auth import get_current_user
from bharatgpt.api.schemas.quiz_schemas import (
    QuizSubmission, QuizResultResponse, QuizAttemptResponse, CertificateResponse,
    QuizGenerationRequest, QuizGenerationResponse,
    GeneratedQuizSubmission, GeneratedQuizResult,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def list_quizzes(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    所有启用的测验（不含答案）
    """
    return [public_quiz_view(q) for q in QuizService(db).get_active_quizzes()]


@router.get("/history", response_model=List[QuizAttemptResponse])
async def get_quiz_history(
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    当前用户的作答记录，最近的在前
    """
    return QuizService(db).get_quiz_history(current_user.id, limit)


@router.get("/certificates", response_model=List[CertificateResponse])
async def get_certificates(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    当前用户获得的证书
    """
    return QuizService(db).get_certificates(current_user.id)


@router.post("/generate", response_model=QuizGenerationResponse)
async def generate_quiz(req: QuizGenerationRequest, current_user: User = Depends(get_current_user),
                        db: Session = Depends(get_db)):
    """
    生成测验，工作流不可用时从本地题库挑选
    """
    try:
        return await QuizGeneratorService(db).generate_quiz(current_user.id, req.lesson_id)
    except Exception as e:
        logger.error(f"生成测验失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="生成测验失败"
        )


@router.post("/generated/submit", response_model=GeneratedQuizResult)
async def submit_generated_quiz(submission: GeneratedQuizSubmission,
                                current_user: User = Depends(get_current_user),
                                db: Session = Depends(get_db)):
    """
    提交生成的测验，工作流评分失败时本地评分
    """
    answers = [
        {"questionIndex": a.question_index, "answer": a.answer}
        for a in submission.user_answers
    ]
    return await QuizGeneratorService(db).submit_generated_quiz(
        current_user.id, submission.quiz.model_dump(), answers, submission.lesson_id
    )


@router.get("/{quiz_id}")
async def get_quiz(quiz_id: int, current_user: User = Depends(get_current_user),
                   db: Session = Depends(get_db)):
    """
    获取测验内容（不含答案）
    """
    quiz = QuizService(db).get_quiz(quiz_id)
    if not quiz:
        raise HTTPException(status_code=404, detail="测验不存在")
    return public_quiz_view(quiz)


@router.post("/{quiz_id}/submit", response_model=QuizResultResponse)
async def submit_quiz(quiz_id: int, submission: QuizSubmission,
                      current_user: User = Depends(get_current_user),
                      db: Session = Depends(get_db)):
    """
    提交题库测验并评分，通过时签发证书
    """
    try:
        return QuizService(db).submit_attempt(
            current_user.id, quiz_id, submission.answers, submission.time_taken_seconds
        )
    except ValueError as e:
        code = status.HTTP_404_NOT_FOUND if "not found" in str(e) else status.HTTP_409_CONFLICT
        raise HTTPException(status_code=code, detail=str(e))

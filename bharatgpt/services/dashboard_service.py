#!/usr/bin/env python3
"""
仪表盘服务
学生仪表盘统计、管理员仪表盘统计以及CSV导出
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from bharatgpt.config.settings import settings
from bharatgpt.repositories.user_repository import UserRepository
from bharatgpt.repositories.module_repository import ModuleRepository
from bharatgpt.repositories.progress_repository import ProgressRepository
from bharatgpt.repositories.quiz_repository import (
    QuizRepository, QuizAttemptRepository, CertificateRepository
)
from bharatgpt.utils.helpers import average_percentage, to_csv, utcnow

logger = logging.getLogger(__name__)

EXPORT_KINDS = ("users", "progress", "certificates")


class DashboardService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.module_repo = ModuleRepository(db)
        self.progress_repo = ProgressRepository(db)
        self.quiz_repo = QuizRepository(db)
        self.attempt_repo = QuizAttemptRepository(db)
        self.certificate_repo = CertificateRepository(db)

    def get_student_dashboard(self, user_id: int) -> Dict[str, Any]:
        """
        学生仪表盘

        平均分和获得证书数都只统计最近的几次作答。
        """
        modules = self.module_repo.get_active_modules()
        progress = self.progress_repo.get_user_progress(user_id)
        recent_attempts = self.attempt_repo.get_recent_attempts(user_id, settings.RECENT_ATTEMPTS_STUDENT)

        stats = {
            "completed_modules": sum(1 for p in progress if p.status == "completed"),
            "total_modules": len(modules),
            "average_score": average_percentage([a.percentage for a in recent_attempts]),
            "certifications_earned": sum(1 for a in recent_attempts if a.passed),
        }
        logger.debug(f"学生仪表盘: 用户{user_id}, {stats}")

        return {
            "stats": stats,
            "modules": [m.to_dict() for m in modules],
            "progress": [p.to_dict() for p in progress],
            "recent_attempts": [a.to_dict() for a in recent_attempts],
        }

    def get_admin_dashboard(self) -> Dict[str, Any]:
        """管理员仪表盘"""
        since = utcnow() - timedelta(days=settings.ACTIVE_USER_DAYS)
        recent_attempts = self.attempt_repo.get_latest_attempts(settings.RECENT_ATTEMPTS_ADMIN)

        stats = {
            "total_users": self.user_repo.count(),
            "total_modules": self.module_repo.count(),
            "total_quizzes": self.quiz_repo.count(),
            "total_certificates": self.certificate_repo.count(),
            "active_users": len(self.user_repo.get_users_signed_in_since(since)),
            "average_score": average_percentage([a.percentage for a in recent_attempts]),
        }

        attempts = []
        for attempt in recent_attempts:
            row = attempt.to_dict()
            row["user_full_name"] = attempt.user.full_name if attempt.user else None
            row["quiz_title"] = attempt.quiz.title if attempt.quiz else attempt.quiz_title
            attempts.append(row)

        return {
            "stats": stats,
            "recent_attempts": attempts,
            "modules": [m.to_dict() for m in self.module_repo.get_all_ordered()],
            "users": [u.to_dict() for u in self.user_repo.list_users(settings.ADMIN_DASHBOARD_USERS)],
        }

    def export_rows(self, kind: str) -> List[Dict[str, Any]]:
        """
        导出数据行

        Raises:
            ValueError: 不支持的导出类型
        """
        if kind == "users":
            return [u.to_dict() for u in self.user_repo.list_users()]

        if kind == "progress":
            rows = []
            for item in self.progress_repo.get_all_with_relations():
                row = item.to_dict()
                row["full_name"] = item.user.full_name if item.user else None
                row["module_title"] = item.module.title if item.module else None
                rows.append(row)
            return rows

        if kind == "certificates":
            rows = []
            for cert in self.certificate_repo.get_all_with_relations():
                row = cert.to_dict()
                row["full_name"] = cert.user.full_name if cert.user else None
                row["module_title"] = cert.module.title if cert.module else None
                rows.append(row)
            return rows

        raise ValueError(f"unsupported export type: {kind}")

    def export_csv(self, kind: str) -> Dict[str, str]:
        """导出CSV，返回文件名和内容"""
        rows = self.export_rows(kind)
        logger.info(f"导出 {kind}: {len(rows)} 行")
        return {"filename": f"{kind}_export.csv", "content": to_csv(rows)}

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List


class Settings(BaseSettings):
    """应用配置"""

    # 应用配置
    APP_NAME: str = "BharatGPT Learning"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # 数据库配置
    DATABASE_URL: str = "sqlite:///./bharatgpt.db"

    # 认证配置
    JWT_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRY_HOURS: int = 24
    MIN_PASSWORD_LENGTH: int = 8
    # 以这些邮箱注册的账号自动成为管理员，用于初始化第一个管理员
    ADMIN_EMAILS: List[str] = []

    # n8n 工作流配置，留空表示未配置
    CHAT_WEBHOOK_URL: str = ""
    N8N_BASE_URL: str = ""
    QUIZ_GENERATION_WEBHOOK: str = "2e31fb8e-9f79-45b0-b40f-aa297c3d3294"
    QUIZ_GRADING_WEBHOOK: str = "44d2d27d-4936-4ff2-a808-b6b11679e08b"
    WEBHOOK_TIMEOUT: int = 30
    WEBHOOK_MAX_ATTEMPTS: int = 1

    # 聊天配置
    CHAT_CONTEXT_MESSAGES: int = 5
    DEFAULT_UNDERSTANDING_LEVEL: int = 3

    # 测验配置
    LOCAL_PASSING_SCORE: int = 70
    GENERATED_QUIZ_TIME_LIMIT_SECONDS: int = 600

    # 仪表盘配置
    ACTIVE_USER_DAYS: int = 7
    RECENT_ATTEMPTS_STUDENT: int = 5
    RECENT_ATTEMPTS_ADMIN: int = 10
    ADMIN_DASHBOARD_USERS: int = 50

    # 语音识别配置
    RECOGNITION_RESTART_DELAY_MS: int = 100

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # 日志配置
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
    LOG_DIR: str = "logs"

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    def quiz_generation_url(self) -> str:
        """测验生成工作流地址，未配置时返回空字符串"""
        if not self.N8N_BASE_URL:
            return ""
        return f"{self.N8N_BASE_URL.rstrip('/')}/webhook/{self.QUIZ_GENERATION_WEBHOOK}"

    def quiz_grading_url(self) -> str:
        """测验评分工作流地址，未配置时返回空字符串"""
        if not self.N8N_BASE_URL:
            return ""
        return f"{self.N8N_BASE_URL.rstrip('/')}/webhook/{self.QUIZ_GRADING_WEBHOOK}"


# 创建全局配置实例
settings = Settings()

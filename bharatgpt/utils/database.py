from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
import logging

from bharatgpt.config.settings import settings

logger = logging.getLogger(__name__)

# SQLite 需要允许跨线程使用连接
_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# 创建数据库引擎
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # 在DEBUG模式下输出SQL语句
    pool_pre_ping=True,
    pool_recycle=3600,
    connect_args=_connect_args,
)

# 创建SessionLocal类
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    """获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"数据库会话错误: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def check_db_connection() -> bool:
    """检查数据库连接是否正常"""
    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
        return True
    except Exception as e:
        logger.error(f"数据库连接检查失败: {e}")
        return False


def import_models():
    """导入所有模型，确保建表时元数据完整"""
    from bharatgpt.models import (  # noqa: F401
        user, learning_module, user_progress, quiz, quiz_attempt,
        certificate, chat_interaction, learning_history
    )


def init_db():
    """初始化数据库表并写入基础数据"""
    try:
        from bharatgpt.models.base import Base
        import_models()

        # 创建所有表
        Base.metadata.create_all(bind=engine)
        logger.info("数据库表初始化完成")

        db = SessionLocal()
        try:
            seed_base_data(db)
        finally:
            db.close()

    except Exception as e:
        logger.error(f"数据库初始化失败: {e}")
        raise


def seed_base_data(db: Session):
    """
    初始化学习模块和题库测验
    已存在的记录（按标题判断）跳过，可重复执行
    """
    from bharatgpt.content.sample_quizzes import BASE_MODULES, SAMPLE_QUIZZES
    from bharatgpt.repositories.module_repository import ModuleRepository
    from bharatgpt.repositories.quiz_repository import QuizRepository

    logger.info("开始初始化学习模块和测验数据")

    module_repo = ModuleRepository(db)
    quiz_repo = QuizRepository(db)

    try:
        module_count = 0
        modules_by_subject = {}
        for module_data in BASE_MODULES:
            module = module_repo.get_by_title(module_data["title"])
            if not module:
                module = module_repo.create(**module_data)
                module_count += 1
                logger.debug(f"创建学习模块: {module.title}")
            modules_by_subject[module.subject] = module

        quiz_count = 0
        for quiz_data in SAMPLE_QUIZZES:
            if quiz_repo.get_by_title(quiz_data["title"]):
                continue

            module = modules_by_subject.get(quiz_data["topic"])
            questions = []
            for index, question in enumerate(quiz_data["questions"], start=1):
                questions.append({
                    "id": f"q{index}",
                    "question": question["question"],
                    "type": question["type"],
                    "options": question.get("options"),
                    "correct_answer": question["correct_answer"],
                    "explanation": question.get("explanation", ""),
                    "points": question.get("points", 1),
                })

            quiz_repo.create(
                module_id=module.id if module else None,
                title=quiz_data["title"],
                description=quiz_data["description"],
                topic=quiz_data["topic"],
                questions=questions,
                passing_score=quiz_data["passing_score"],
                time_limit_minutes=quiz_data["time_limit_minutes"],
                max_attempts=3,
                is_active=True,
            )
            quiz_count += 1

        logger.info(f"基础数据初始化完成，新增{module_count}个模块、{quiz_count}个测验")

    except Exception as e:
        db.rollback()
        logger.error(f"初始化基础数据失败: {e}")
        raise


def get_db_stats() -> dict:
    """
    获取数据库统计信息
    """
    tables = [
        "users", "learning_modules", "user_progress", "quizzes", "quiz_attempts",
        "certificates", "chat_interactions", "learning_history"
    ]
    stats = {}
    try:
        db = SessionLocal()
        try:
            for table in tables:
                try:
                    result = db.execute(text(f"SELECT COUNT(*) FROM {table}"))
                    stats[table] = result.scalar()
                except Exception as e:
                    logger.warning(f"获取表 {table} 统计失败: {e}")
                    stats[table] = 0
        finally:
            db.close()
        logger.debug(f"数据库统计: {stats}")
        return stats

    except Exception as e:
        logger.error(f"获取数据库统计失败: {e}")
        return {}

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bharatgpt.main import app
from bharatgpt.models.base import Base
from bharatgpt.services.auth_service import AuthService
from bharatgpt.utils.database import get_db, import_models, seed_base_data

# 测试数据库（内存SQLite，所有连接共用一个）
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

STUDENT_PASSWORD = "student-pass-123"
ADMIN_PASSWORD = "admin-pass-123"


@pytest.fixture(scope="function")
def db_session():
    """创建测试数据库会话，写入基础模块和测验"""
    import_models()
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    seed_base_data(session)
    try:
        yield session
    finally:
        session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """创建测试客户端"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def student(db_session):
    user, token = AuthService(db_session).register(
        email="asha@example.com",
        password=STUDENT_PASSWORD,
        full_name="Asha Patel",
        language_preference="gu",
    )
    return user, token


@pytest.fixture
def admin(db_session):
    user, token = AuthService(db_session).register(
        email="admin@example.com",
        password=ADMIN_PASSWORD,
        full_name="Site Admin",
        role="admin",
    )
    return user, token


@pytest.fixture
def student_headers(student):
    return {"Authorization": f"Bearer {student[1]}"}


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {admin[1]}"}

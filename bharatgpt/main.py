#!/usr/bin/env python3
"""
BharatGPT 学习平台 - FastAPI 主应用入口
Description: REST API 提供认证、仪表盘、测验和语音辅助功能，WebSocket 提供实时聊天
"""

import logging
import platform
from contextlib import asynccontextmanager

import psutil
import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bharatgpt.config.settings import settings
from bharatgpt.utils.logger import setup_logging
from bharatgpt.utils.database import init_db, get_db, check_db_connection, get_db_stats
from bharatgpt.utils.helpers import format_timestamp
from bharatgpt.api.websocket_manager import websocket_manager
from bharatgpt.api.routes import auth, users, modules, quizzes, chat, admin, speech
from bharatgpt.api.routes.websocket import ChatWebSocketHandler

# 设置日志
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理
    - 启动时建表并写入基础数据
    - 关闭时清理WebSocket连接
    """
    logger.info(f"初始化 {settings.APP_NAME}...")

    try:
        init_db()
        logger.info("数据库初始化完成")

        if not settings.CHAT_WEBHOOK_URL:
            logger.warning("未配置聊天工作流，聊天将返回兜底回复")
        if not settings.N8N_BASE_URL:
            logger.warning("未配置 n8n 地址，测验将使用本地题库和本地评分")

        logger.info(f"{settings.APP_NAME} 启动完成")
    except Exception as e:
        logger.error(f"应用启动失败: {e}")
        raise

    yield

    logger.info(f"正在关闭 {settings.APP_NAME}...")
    for connection_id in list(websocket_manager.active_connections.keys()):
        websocket_manager.disconnect(connection_id)
    logger.info(f"{settings.APP_NAME} 已安全关闭")


def create_application() -> FastAPI:
    """创建并配置FastAPI应用实例"""

    app = FastAPI(
        title=settings.APP_NAME,
        description="面向印度学生的多语言AI学习平台",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 全局异常处理
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        logger.error(f"未处理的异常: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"}
        )

    return app


# 创建应用实例
app = create_application()

# 注册API路由
app.include_router(auth.router, prefix="/api/v1/auth", tags=["认证"])
app.include_router(users.router, prefix="/api/v1/users", tags=["用户"])
app.include_router(modules.router, prefix="/api/v1/modules", tags=["学习模块"])
app.include_router(quizzes.router, prefix="/api/v1/quizzes", tags=["测验"])
app.include_router(chat.router, prefix="/api/v1/chat", tags=["AI导师聊天"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["管理后台"])
app.include_router(speech.router, prefix="/api/v1/speech", tags=["语音辅助"])


@app.websocket("/ws/chat/{user_id}")
async def chat_websocket_endpoint(websocket: WebSocket, user_id: int, token: str = Query(""),
                                  db: Session = Depends(get_db)):
    """
    聊天WebSocket端点
    - 通过查询参数 token 认证
    - 处理文字消息、语音识别事件和心跳
    """
    handler = ChatWebSocketHandler(db)
    await handler.handle_connection(websocket, user_id, token)


# 健康检查端点
@app.get("/")
async def root():
    """根端点 - 服务状态检查"""
    return {
        "status": "running",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": format_timestamp()
    }


@app.get("/health")
async def health_check():
    """健康检查端点"""
    db_status = check_db_connection()

    return {
        "status": "healthy" if db_status else "unhealthy",
        "database": "connected" if db_status else "disconnected",
        "chat_webhook": "configured" if settings.CHAT_WEBHOOK_URL else "not_configured",
        "quiz_webhooks": "configured" if settings.N8N_BASE_URL else "not_configured",
        "timestamp": format_timestamp()
    }


@app.get("/api/v1/system/info")
async def system_info():
    """系统信息端点"""
    return {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "cpu_usage": psutil.cpu_percent(),
        "memory_usage": psutil.virtual_memory().percent,
        "active_connections": websocket_manager.get_connection_count(),
        "chat_context_messages": settings.CHAT_CONTEXT_MESSAGES,
        "local_passing_score": settings.LOCAL_PASSING_SCORE,
        "quiz_time_limit_seconds": settings.GENERATED_QUIZ_TIME_LIMIT_SECONDS,
        "table_rows": get_db_stats(),
    }


if __name__ == "__main__":
    """开发环境直接运行"""
    uvicorn.run(
        "bharatgpt.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
        ws_ping_interval=20,
        ws_ping_timeout=20,
        timeout_keep_alive=5,
    )

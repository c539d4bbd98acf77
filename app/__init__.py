"""
Interview Copilot - 面试实时转写 + 记忆检索后端
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logger = logging.getLogger(__name__)


def create_app(memory_service=None) -> FastAPI:
    """
    创建 API 应用

    :param memory_service: 预先构建的 MemoryService（测试时传入假实现）；
                           为空时在启动阶段按配置创建并连接数据库
    """
    from app.config import settings
    from app.routers import memory
    from app.services.memory_service import create_memory_service

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.memory_service is None:
            settings.require_credentials()
            app.state.memory_service = create_memory_service(settings)
        yield
        app.state.memory_service.close()
        logger.info("[App] 已关闭记忆服务")

    app = FastAPI(
        title="Interview Copilot",
        description="保存面试笔记并按语义检索，为实时转写中的面试问题提供上下文",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.memory_service = memory_service
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    memory.install_error_handlers(app)
    app.include_router(memory.router, prefix="/api")
    return app

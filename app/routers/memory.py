"""
记忆 API 路由

  1. POST /api/save-memory    — 保存一条记忆（计算 embedding 后入库）
  2. POST /api/search-memory  — 语义检索记忆
  3. GET  /api/health         — 健康检查

所有响应使用 {success, ...} 信封，错误为 {success: false, error}
"""
import logging

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.exceptions import UpstreamServiceError
from app.models.memory import (
    SaveMemoryRequest,
    SaveMemoryResponse,
    SearchMemoryRequest,
    SearchMemoryResponse,
)
from app.services.memory_service import MemoryService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["记忆"])


def get_memory_service(request: Request) -> MemoryService:
    """从应用上下文中取共享服务"""
    return request.app.state.memory_service


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


# ==================== API Endpoints ====================


@router.post("/save-memory", summary="保存记忆", response_model=SaveMemoryResponse)
def save_memory(req: SaveMemoryRequest, service: MemoryService = Depends(get_memory_service)):
    """
    保存一条记忆

    embedding 基于 "classification: description" 计算，createdAt 由服务端生成
    """
    try:
        service.save_memory(req.memory, source_file=req.sourceFile)
    except UpstreamServiceError as e:
        logger.error(f"[API] 保存记忆失败: {e}")
        return _error(500, str(e))
    except Exception as e:
        logger.error(f"[API] 保存记忆异常: {e}", exc_info=True)
        return _error(500, "An internal server error occurred.")

    return SaveMemoryResponse()


@router.post("/search-memory", summary="检索记忆", response_model=SearchMemoryResponse)
def search_memory(req: SearchMemoryRequest, service: MemoryService = Depends(get_memory_service)):
    """按语义相似度返回最相关的记忆"""
    try:
        results = service.search_memories(req.query, limit=req.limit)
    except UpstreamServiceError as e:
        logger.error(f"[API] 检索记忆失败: {e}")
        return _error(500, str(e))
    except Exception as e:
        logger.error(f"[API] 检索记忆异常: {e}", exc_info=True)
        return _error(500, "An internal server error occurred.")

    return SearchMemoryResponse(results=results)


@router.get("/health", summary="健康检查")
def health():
    return {"status": "ok"}


# ==================== 错误处理 ====================


def install_error_handlers(app: FastAPI):
    """请求体校验失败统一返回 400 + 错误信封"""

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
            for err in exc.errors()
        )
        logger.warning(f"[API] 请求体无效: {request.url.path} - {details}")
        return _error(400, f"Invalid request body. {details}")

"""
记忆检索 HTTP 客户端
实时转写端通过后端 /api/search-memory 做语义检索
"""
import logging
from typing import List, Optional

import httpx

from app.exceptions import UpstreamServiceError
from app.models.memory import SearchResult

logger = logging.getLogger(__name__)


class HttpMemorySearchClient:
    """
    调用后端检索接口

    不重试，不额外设置超时（沿用 httpx 默认值）；失败统一抛 UpstreamServiceError
    """

    def __init__(self, backend_url: str, client: Optional[httpx.AsyncClient] = None):
        self.backend_url = backend_url.rstrip("/")
        self.client = client or httpx.AsyncClient()

    async def search(self, query: str, limit: int = 3) -> List[SearchResult]:
        url = f"{self.backend_url}/api/search-memory"
        try:
            response = await self.client.post(url, json={"query": query, "limit": limit})
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[SearchClient] 请求失败: {e}")
            raise UpstreamServiceError(f"Memory search request failed: {e}") from e

        if not isinstance(data, dict):
            logger.error(f"[SearchClient] 响应格式异常: HTTP {response.status_code}")
            raise UpstreamServiceError(f"Memory search failed: unexpected response body (HTTP {response.status_code})")

        if response.is_error or not data.get("success"):
            message = data.get("error") or f"HTTP {response.status_code}"
            raise UpstreamServiceError(f"Memory search failed: {message}")

        return [SearchResult(**row) for row in data.get("results", [])]

    async def aclose(self):
        await self.client.aclose()

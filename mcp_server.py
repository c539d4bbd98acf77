"""
Interview Copilot MCP Server
让其他 AI 助手可以按语义检索已保存的记忆

启动方式:
    python mcp_server.py

配置到其他 AI 助手时，需要使用 MCP 客户端运行（stdio，每行一个 JSON-RPC 消息）
"""
import json
import logging
import sys
from typing import Callable, List, Optional

from app.config import settings
from app.services.memory_service import MemoryService, create_memory_service

logger = logging.getLogger("copilot.mcp")

SEARCH_LIMIT = 5


class MemoryMCP:
    """MCP 服务器核心类，数据库连接在首次调用时建立并复用"""

    def __init__(self, service_factory: Callable[[], MemoryService]):
        self.service_factory = service_factory
        self._service: Optional[MemoryService] = None

    @property
    def service(self) -> MemoryService:
        if self._service is None:
            self._service = self.service_factory()
        return self._service

    def list_tools(self) -> List[dict]:
        """列出可用工具"""
        return [
            {
                "name": "search_memories",
                "description": (
                    "Search stored memories using vector similarity. Returns the top 5 most "
                    "relevant memories based on semantic similarity."
                ),
                "inputSchema": {
                    "type": "object",
                    "properties": {
                        "query": {
                            "type": "string",
                            "description": "The search query to find relevant memories",
                        }
                    },
                    "required": ["query"],
                },
            },
        ]

    def search_memories(self, query: str) -> dict:
        """检索记忆，返回 MCP 工具调用结果"""
        try:
            if not query:
                raise ValueError("Missing query parameter")
            results = self.service.search_memories(query, limit=SEARCH_LIMIT)
        except Exception as e:
            logger.error(f"[MCP] 检索失败: {e}", exc_info=True)
            return {
                "content": [{"type": "text", "text": f"Error: {e}"}],
                "isError": True,
            }

        payload = [r.model_dump() for r in results]
        return {
            "content": [
                {"type": "text", "text": json.dumps(payload, ensure_ascii=False, indent=2)}
            ]
        }

    def close(self):
        if self._service is not None:
            self._service.close()
            self._service = None


# MCP 协议处理
def error_response(request_id, code: int, message: str) -> dict:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "error": {"code": code, "message": message}
    }


def handle_jsonrpc(request: dict, mcp: MemoryMCP) -> Optional[dict]:
    """处理 JSON-RPC 请求，通知消息（无 id）不返回响应"""
    if not isinstance(request, dict):
        return error_response(None, -32600, "Invalid Request")

    method = request.get("method")
    request_id = request.get("id")

    if "id" not in request:
        logger.debug(f"[MCP] 收到通知: {method}")
        return None

    if method == "tools/list":
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "result": {"tools": mcp.list_tools()}
        }
    elif method == "tools/call":
        params = request.get("params") or {}
        tool_name = params.get("name")
        arguments = params.get("arguments") or {}

        if tool_name != "search_memories":
            return {
                "jsonrpc": "2.0",
                "id": request_id,
                "error": {"code": -32601, "message": f"Unknown tool: {tool_name}"}
            }

        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "result": mcp.search_memories(arguments.get("query", "")),
        }
    elif method == "initialize":
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "result": {
                "protocolVersion": "2024-11-05",
                "capabilities": {"tools": {}},
                "serverInfo": {"name": "memory-vector-search", "version": "1.0.0"}
            }
        }
    elif method == "ping":
        return {"jsonrpc": "2.0", "id": request_id, "result": {}}
    else:
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "error": {"code": -32601, "message": f"Method not found: {method}"}
        }


def main():
    """MCP 服务器主循环"""
    # stdout 用于协议通信，日志只写 stderr
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s │ %(levelname)-7s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    )
    logger.info("Interview Copilot MCP Server 启动中...")

    settings.require_credentials()
    mcp = MemoryMCP(service_factory=lambda: create_memory_service(settings))

    try:
        for line in sys.stdin:
            line = line.strip()
            if not line:
                continue
            try:
                request = json.loads(line)
            except json.JSONDecodeError as e:
                logger.error(f"[MCP] 无法解析请求: {e}")
                print(json.dumps(error_response(None, -32700, "Parse error")), flush=True)
                continue

            try:
                response = handle_jsonrpc(request, mcp)
            except Exception as e:
                logger.error(f"[MCP] 处理请求失败: {e}", exc_info=True)
                request_id = request.get("id") if isinstance(request, dict) else None
                response = error_response(request_id, -32603, f"Internal error: {e}")

            if response is not None:
                print(json.dumps(response, ensure_ascii=False), flush=True)
    finally:
        mcp.close()


if __name__ == "__main__":
    main()

"""
记忆（Memory）相关数据模型
字段名与 HTTP / 数据库中的 JSON 键保持一致 (camelCase)
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# -------- API 请求 / 响应模型 (Pydantic) --------

class MemoryPayload(BaseModel):
    """一条待保存的笔记，额外字段原样入库"""
    model_config = ConfigDict(extra="allow")

    classification: str = Field(min_length=1)          # 分类标签，如 skill / project
    description: str = Field(min_length=1)             # 笔记正文


class SaveMemoryRequest(BaseModel):
    """保存记忆的请求体"""
    memory: MemoryPayload
    sourceFile: str = Field(min_length=1)              # 来源文件名


class SearchMemoryRequest(BaseModel):
    """检索记忆的请求体"""
    query: str = Field(min_length=1)
    limit: int = Field(default=5, ge=1, le=50)         # 不能超过 numCandidates


class SearchResult(BaseModel):
    """单条检索结果（不入库）"""
    classification: str = ""
    description: str = ""
    sourceFile: str = ""
    createdAt: Optional[str] = None
    score: float = 0.0


class SaveMemoryResponse(BaseModel):
    success: bool = True


class SearchMemoryResponse(BaseModel):
    success: bool = True
    results: List[SearchResult] = []


class ErrorResponse(BaseModel):
    success: bool = False
    error: str

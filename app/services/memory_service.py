"""
记忆服务
编排两条流程:
  保存: 校验后的记忆 → embedding → 入库
  检索: 查询文本 → embedding → 向量近邻 → 结果
"""
import logging
from datetime import datetime, timezone
from typing import List

from app.llm.base import Embedder
from app.llm.prompts import build_memory_text
from app.models.memory import MemoryPayload, SearchResult
from app.stores.base import MemoryStore

logger = logging.getLogger(__name__)


class MemoryService:
    """
    记忆的保存与检索

    只追加：没有唯一约束、去重或更新路径
    任何 embedding / 数据库错误都直接抛给调用方，不做重试
    """

    def __init__(self, embedder: Embedder, store: MemoryStore):
        self.embedder = embedder
        self.store = store

    def save_memory(self, memory: MemoryPayload, source_file: str) -> dict:
        """
        计算 embedding 并保存一条记忆

        :param memory: 已校验的记忆（额外字段一并保存）
        :param source_file: 来源文件
        :return: 入库的文档
        """
        text = build_memory_text(memory.classification, memory.description)
        embedding = self.embedder.embed(text)

        document = {
            **memory.model_dump(),
            "embedding": embedding,
            "sourceFile": source_file,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        self.store.insert(document)

        logger.info(f"[MemoryService] 已保存记忆: source={source_file}, classification={memory.classification}")
        return document

    def search_memories(self, query: str, limit: int = 5) -> List[SearchResult]:
        """
        语义检索记忆

        :param query: 查询文本
        :param limit: 最多返回条数
        :return: 按相似度降序的结果
        """
        query_vector = self.embedder.embed(query)
        rows = self.store.vector_search(query_vector, limit)
        results = [SearchResult(**row) for row in rows]
        logger.info(f"[MemoryService] 检索完成: query_len={len(query)}, limit={limit}, hits={len(results)}")
        return results

    def close(self):
        self.store.close()


def create_memory_service(settings) -> MemoryService:
    """根据配置创建服务实例（共享一个数据库连接）"""
    from app.llm.openai_llm import OpenAIEmbedder
    from app.stores.mongo_store import MongoMemoryStore

    embedder = OpenAIEmbedder(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        model=settings.embedding_model,
    )
    store = MongoMemoryStore(
        uri=settings.mongo_db_uri,
        db_name=settings.mongo_db_name,
        collection=settings.mongo_collection,
        index=settings.mongo_vector_index,
    )
    return MemoryService(embedder=embedder, store=store)

"""
基于 MongoDB Atlas Vector Search 的记忆存储
向量索引建在 embedding 字段上，由 Atlas 侧配置
"""
import logging
from typing import List, Optional

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from app.exceptions import UpstreamServiceError
from app.stores.base import MemoryStore

logger = logging.getLogger(__name__)

NUM_CANDIDATES = 50

RESULT_PROJECTION = {
    "_id": 0,
    "classification": 1,
    "description": 1,
    "sourceFile": 1,
    "createdAt": 1,
    "score": {"$meta": "vectorSearchScore"},
}


def build_vector_search_pipeline(
    query_vector: List[float],
    limit: int,
    index: str = "vector_index",
    num_candidates: int = NUM_CANDIDATES,
) -> List[dict]:
    """组装 $vectorSearch 聚合管道"""
    return [
        {
            "$vectorSearch": {
                "index": index,
                "path": "embedding",
                "queryVector": query_vector,
                "numCandidates": num_candidates,
                "limit": limit,
            }
        },
        {"$project": RESULT_PROJECTION},
    ]


class MongoMemoryStore(MemoryStore):
    """
    单个共享连接，进程启动时创建，关闭时释放

    连接池由 pymongo 自身管理
    """

    def __init__(
        self,
        uri: str,
        db_name: str = "context",
        collection: str = "test1",
        index: str = "vector_index",
        client: Optional[MongoClient] = None,
    ):
        self.client = client or MongoClient(uri)
        self.collection = self.client[db_name][collection]
        self.index = index
        logger.info(f"[MongoStore] 已连接: db={db_name}, collection={collection}, index={index}")

    def insert(self, document: dict) -> None:
        try:
            self.collection.insert_one(document)
        except PyMongoError as e:
            raise UpstreamServiceError(f"Failed to store memory: {e}") from e

    def vector_search(self, query_vector: List[float], limit: int) -> List[dict]:
        pipeline = build_vector_search_pipeline(query_vector, limit, index=self.index)
        try:
            return list(self.collection.aggregate(pipeline))
        except PyMongoError as e:
            raise UpstreamServiceError(f"Vector search failed: {e}") from e

    def close(self) -> None:
        self.client.close()
        logger.info("[MongoStore] 连接已关闭")

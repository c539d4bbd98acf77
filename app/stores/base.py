"""
记忆存储抽象基类
"""
from abc import ABC, abstractmethod
from typing import List


class MemoryStore(ABC):
    """只追加的记忆存储 + 向量近邻检索"""

    @abstractmethod
    def insert(self, document: dict) -> None:
        """写入一条完整记忆文档（含 embedding）"""
        ...

    @abstractmethod
    def vector_search(self, query_vector: List[float], limit: int) -> List[dict]:
        """
        近邻检索

        :param query_vector: 查询向量
        :param limit: 返回条数
        :return: 仅含展示字段与 score 的文档，按相似度降序
        """
        ...

    def close(self) -> None:
        """释放连接（子类可覆盖）"""
        return None

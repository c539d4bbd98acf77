"""
LLM 抽象基类
"""
from abc import ABC, abstractmethod
from typing import List


class Embedder(ABC):
    """文本向量化基类"""

    @abstractmethod
    def embed(self, text: str) -> List[float]:
        """
        计算文本的 embedding 向量

        :param text: 待向量化的文本
        :return: 定长浮点向量
        """
        ...


class QuestionClassifier(ABC):
    """基于生成模型的问题分类器基类"""

    @abstractmethod
    async def ask(self, text: str) -> str:
        """
        让模型判断文本是否为面试问题

        :param text: 一句完整的转写文本
        :return: 模型的原始回答（期望为 yes / no）
        """
        ...

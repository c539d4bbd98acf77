"""
问题检测器抽象基类
"""
from abc import ABC, abstractmethod
from enum import Enum


class DetectionMode(str, Enum):
    """检测策略，由配置选择"""
    KEYWORD = "keyword"
    LLM = "llm"


class QuestionDetector(ABC):
    """判断一句转写文本是否为面试问题 / 重要对话点"""

    mode: DetectionMode

    @abstractmethod
    async def classify(self, text: str) -> bool:
        """
        :param text: 累积完成的一句文本
        :return: 是否为问题
        """
        ...

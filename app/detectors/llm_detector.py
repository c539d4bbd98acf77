"""
LLM 语义问题检测
结果按原文缓存（FIFO 上限 100 条），分类失败时回退到关键词检测
"""
import logging
from typing import Dict, Optional

from app.detectors.base import DetectionMode, QuestionDetector
from app.detectors.keyword_detector import KeywordQuestionDetector
from app.llm.base import QuestionClassifier

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 100


class FIFOCache:
    """按插入顺序淘汰的定长缓存，读取不会刷新顺序"""

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE):
        self.max_size = max_size
        self._data: Dict[str, bool] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str) -> Optional[bool]:
        return self._data.get(key)

    def put(self, key: str, value: bool):
        self._data[key] = value
        if len(self._data) > self.max_size:
            oldest = next(iter(self._data))
            del self._data[oldest]

    def keys(self):
        return list(self._data)


class LLMQuestionDetector(QuestionDetector):
    """
    使用生成模型做 yes / no 判断

    缓存属于检测器实例，只在单一事件循环中访问
    """

    mode = DetectionMode.LLM

    def __init__(
        self,
        classifier: QuestionClassifier,
        fallback: Optional[KeywordQuestionDetector] = None,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ):
        self.classifier = classifier
        self.fallback = fallback or KeywordQuestionDetector()
        self.cache = FIFOCache(cache_size)

    async def classify(self, text: str) -> bool:
        cached = self.cache.get(text)
        if cached is not None:
            logger.info(f"[LLMDetector] 命中缓存: {'YES' if cached else 'NO'} - {text}")
            return cached

        try:
            answer = await self.classifier.ask(text)
        except Exception as e:
            logger.error(f"[LLMDetector] 分类失败，回退关键词检测: {e}")
            return self.fallback.is_question(text)

        is_question = "yes" in answer.lower()
        logger.info(f"[LLMDetector] 分类结果: {'YES' if is_question else 'NO'} - {text}")
        self.cache.put(text, is_question)
        return is_question

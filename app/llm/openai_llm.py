"""
基于 OpenAI 兼容 API 的 embedding 与问题分类
默认走 Gemini 的 OpenAI 兼容接口，也可指向任何兼容服务 (OpenAI / Ollama 等)
"""
import logging
from typing import List

from openai import AsyncOpenAI, OpenAI, OpenAIError

from app.config import GEMINI_OPENAI_BASE_URL
from app.exceptions import UpstreamServiceError
from app.llm.base import Embedder, QuestionClassifier
from app.llm.prompts import build_detection_prompt

logger = logging.getLogger(__name__)


class OpenAIEmbedder(Embedder):
    """
    通用 OpenAI 兼容 embedding

    通过设置不同的 base_url 支持:
    - Gemini:  https://generativelanguage.googleapis.com/v1beta/openai/
    - OpenAI:  https://api.openai.com/v1
    - Ollama:  http://localhost:11434/v1
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = GEMINI_OPENAI_BASE_URL,
        model: str = "text-embedding-004",
    ):
        self.model = model
        self.client = OpenAI(api_key=api_key, base_url=base_url)
        logger.info(f"[Embedder] 初始化完成: model={model}, base_url={base_url}")

    def embed(self, text: str) -> List[float]:
        try:
            response = self.client.embeddings.create(model=self.model, input=text)
        except OpenAIError as e:
            logger.error(f"[Embedder] 请求失败: {e}")
            raise UpstreamServiceError(f"Embedding request failed: {e}") from e

        vector = response.data[0].embedding
        logger.debug(f"[Embedder] 完成: dim={len(vector)}, text_len={len(text)}")
        return vector


class OpenAIQuestionClassifier(QuestionClassifier):
    """使用聊天补全接口做 yes / no 问题分类"""

    def __init__(
        self,
        api_key: str,
        base_url: str = GEMINI_OPENAI_BASE_URL,
        model: str = "gemini-2.0-flash",
        temperature: float = 0.0,
    ):
        self.model = model
        self.temperature = temperature
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        logger.info(f"[Classifier] 初始化完成: model={model}, base_url={base_url}")

    async def ask(self, text: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": build_detection_prompt(text)}],
                temperature=self.temperature,
            )
        except OpenAIError as e:
            raise UpstreamServiceError(f"Classification request failed: {e}") from e

        return (response.choices[0].message.content or "").strip()

"""
基于 Groq API 的 Whisper 分块转写器
采集端把麦克风音频切成短块文件，这里逐块送去云端转写，每块产出一个片段
"""
import logging
from pathlib import Path
from typing import AsyncIterator, Iterable, Optional, Tuple

from openai import AsyncOpenAI, OpenAIError

from app.exceptions import UpstreamServiceError
from app.transcribers.base import StreamingTranscriber

logger = logging.getLogger(__name__)


class GroqChunkTranscriber(StreamingTranscriber):
    """
    使用 Groq 提供的 whisper-large-v3-turbo 模型

    也可以指向任何 OpenAI 兼容的 audio.transcriptions 接口

    获取 API Key: https://console.groq.com/keys
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.groq.com/openai/v1",
        model: str = "whisper-large-v3-turbo",
        language: Optional[str] = "en",
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        self.language = language
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._closed = False
        logger.info(f"[GroqWhisper] 初始化完成: model={model}")

    async def transcribe_chunk(self, file_path: str) -> str:
        """转写单个音频块，返回去掉首尾空白后的文本"""
        file_size = Path(file_path).stat().st_size / 1024
        logger.debug(f"[GroqWhisper] 转写音频块: {file_path} ({file_size:.1f} KB)")

        with open(file_path, "rb") as audio_file:
            kwargs = {
                "model": self.model,
                "file": audio_file,
                "response_format": "json",
            }
            if self.language:
                kwargs["language"] = self.language

            try:
                response = await self.client.audio.transcriptions.create(**kwargs)
            except OpenAIError as e:
                raise UpstreamServiceError(f"Transcription failed for {file_path}: {e}") from e

        return response.text.strip()

    async def stream(self, audio_chunks: Iterable[str]) -> AsyncIterator[Tuple[str, bool]]:
        for chunk in audio_chunks:
            if self._closed:
                logger.info("[GroqWhisper] 会话已关闭，停止转写")
                break
            text = await self.transcribe_chunk(chunk)
            if text:
                yield f"{text} ", True

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.client.close()
        logger.info("[GroqWhisper] 会话已关闭")

"""
实时转写会话
编排: 音频块 → 流式转写 → 片段聚合 (问题检测 → 记忆检索) → 展示

状态流转: idle → connecting → listening → stopped / error
"""
import logging
from contextlib import aclosing
from typing import Callable, Iterable, Optional

from app.config import Settings, settings as default_settings
from app.detectors.base import DetectionMode, QuestionDetector
from app.detectors.keyword_detector import KeywordQuestionDetector
from app.exceptions import ConfigurationError
from app.models.transcript import TranscriptionStatus
from app.services.transcript_aggregator import TranscriptAggregator
from app.transcribers.base import StreamingTranscriber

logger = logging.getLogger(__name__)


def create_detector(mode: Optional[str] = None, settings: Settings = default_settings) -> QuestionDetector:
    """根据配置创建问题检测器"""
    mode = (mode or settings.detection_mode).lower()
    try:
        detection_mode = DetectionMode(mode)
    except ValueError:
        raise ConfigurationError(f"不支持的检测模式: {mode}，可选: keyword / llm")

    if detection_mode is DetectionMode.KEYWORD:
        return KeywordQuestionDetector()

    from app.detectors.llm_detector import LLMQuestionDetector
    from app.llm.openai_llm import OpenAIQuestionClassifier

    if not settings.gemini_api_key:
        raise ConfigurationError("GEMINI_API_KEY 未配置，LLM 检测模式不可用")
    classifier = OpenAIQuestionClassifier(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        model=settings.classifier_model,
    )
    return LLMQuestionDetector(classifier=classifier)


def create_transcriber(settings: Settings = default_settings) -> StreamingTranscriber:
    """根据配置创建分块转写器"""
    from app.transcribers.groq_transcriber import GroqChunkTranscriber

    if not settings.transcriber_api_key:
        raise ConfigurationError("TRANSCRIBER_API_KEY 未配置，请在 .env 中设置")
    return GroqChunkTranscriber(
        api_key=settings.transcriber_api_key,
        base_url=settings.transcriber_base_url,
        model=settings.transcriber_model,
    )


class LiveSession:
    """
    一次实时转写会话的生命周期

    每次 start() 都会新建转写器并重置聚合器，出错或停止后可以重新开始。
    stop() 只拆除转写会话，不取消进行中的分类 / 检索。
    """

    def __init__(
        self,
        transcriber_factory: Callable[[], StreamingTranscriber],
        aggregator: TranscriptAggregator,
        on_status: Optional[Callable[[TranscriptionStatus], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
    ):
        self.transcriber_factory = transcriber_factory
        self.aggregator = aggregator
        self.on_status = on_status
        self.on_error = on_error

        self.status = TranscriptionStatus.IDLE
        self.error: Optional[str] = None
        self._transcriber: Optional[StreamingTranscriber] = None

    @property
    def is_active(self) -> bool:
        return self.status in (TranscriptionStatus.CONNECTING, TranscriptionStatus.LISTENING)

    def _set_status(self, status: TranscriptionStatus):
        self.status = status
        logger.info(f"[LiveSession] 状态: {status.value}")
        if self.on_status:
            self.on_status(status)

    def _fail(self, exc: Exception):
        self.error = f"An error occurred: {exc}"
        logger.error(f"[LiveSession] 会话出错: {exc}", exc_info=True)
        if self.on_error:
            self.on_error(self.error)
        self._set_status(TranscriptionStatus.ERROR)

    async def start(self, audio_chunks: Iterable[str]):
        """
        开始会话并一直运行到音频耗尽、stop() 或出错

        :param audio_chunks: 采集端产出的音频块文件路径
        """
        if self._transcriber is not None:
            await self._teardown()

        self.error = None
        self.aggregator.reset()
        self._set_status(TranscriptionStatus.CONNECTING)

        try:
            self._transcriber = self.transcriber_factory()
            self._set_status(TranscriptionStatus.LISTENING)

            async with aclosing(self._transcriber.stream(audio_chunks)) as fragments:
                async for text, is_final in fragments:
                    if self.status is not TranscriptionStatus.LISTENING:
                        break
                    self.aggregator.handle_fragment(text, is_final)
        except Exception as e:
            if self.status is TranscriptionStatus.STOPPED:
                logger.info(f"[LiveSession] 会话已停止，忽略转写异常: {e}")
                return
            self._fail(e)
            await self._teardown()
            return

        if self.status is TranscriptionStatus.LISTENING:
            await self.stop()

    async def stop(self):
        """停止会话：关闭转写会话，状态置为 stopped"""
        if not self.is_active:
            return
        # 先置为 stopped，关闭过程中转写流抛出的异常不再视为会话出错
        self._set_status(TranscriptionStatus.STOPPED)
        await self._teardown()

    async def _teardown(self):
        transcriber, self._transcriber = self._transcriber, None
        if transcriber is None:
            return
        try:
            await transcriber.close()
        except Exception as e:
            logger.warning(f"[LiveSession] 关闭转写会话失败: {e}")

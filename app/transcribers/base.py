"""
流式转写器抽象基类
"""
from abc import ABC, abstractmethod
from typing import AsyncIterator, Iterable, Tuple


class StreamingTranscriber(ABC):
    """把音频流转成一系列 (text, is_final) 片段"""

    @abstractmethod
    def stream(self, audio_chunks: Iterable[str]) -> AsyncIterator[Tuple[str, bool]]:
        """
        逐块转写音频

        :param audio_chunks: 采集端产出的音频块文件路径
        :return: 异步产出 (片段文本, 是否最终结果)
        """
        ...

    async def close(self) -> None:
        """关闭底层会话（子类可覆盖）"""
        return None

"""
转写片段聚合
把流式片段按句子分组，在句末标点处触发问题检测，是问题则检索记忆并回写到整组片段

状态: Idle (无打开分组) → Accumulating (累积片段) → 遇到句末标点回到 Idle
"""
import asyncio
import itertools
import logging
import re
from typing import Callable, List, Optional, Protocol, Set

from app.detectors.base import QuestionDetector
from app.models.memory import SearchResult
from app.models.transcript import TranscriptFragment

logger = logging.getLogger(__name__)

SENTENCE_END = re.compile(r"[.?!]")


class MemorySearcher(Protocol):
    async def search(self, query: str, limit: int = 3) -> List[SearchResult]:
        ...


def filter_by_score(results: List[SearchResult], min_score: float) -> List[SearchResult]:
    """保留 score >= min_score 的结果，顺序不变"""
    return [r for r in results if r.score >= min_score]


class TranscriptAggregator:
    """
    片段聚合器

    - 片段到达后立即追加并通知展示，不等待分类
    - 分类与检索在后台 task 中完成，结果可能晚于后续片段到达
    - reset() 之后，旧会话迟到的标注会被丢弃
    - 必须在事件循环中调用 handle_fragment
    """

    def __init__(
        self,
        detector: QuestionDetector,
        searcher: MemorySearcher,
        min_score: float = 0.5,
        search_limit: int = 3,
        on_display: Optional[Callable[[TranscriptFragment], None]] = None,
        on_annotate: Optional[Callable[[int, List[TranscriptFragment]], None]] = None,
    ):
        self.detector = detector
        self.searcher = searcher
        self.min_score = min_score
        self.search_limit = search_limit
        self.on_display = on_display
        self.on_annotate = on_annotate

        self.fragments: List[TranscriptFragment] = []
        self._fragment_ids = itertools.count()
        self._group_ids = itertools.count()
        self._group_id: Optional[int] = None
        self._buffer = ""
        self._epoch = 0
        self._pending: Set[asyncio.Task] = set()

    @property
    def current_group_id(self) -> Optional[int]:
        return self._group_id

    @property
    def buffer(self) -> str:
        return self._buffer

    def reset(self):
        """开始新会话：清空片段、序号和缓冲区"""
        self.fragments = []
        self._fragment_ids = itertools.count()
        self._group_id = None
        self._buffer = ""
        self._epoch += 1

    def handle_fragment(self, text: str, is_final: bool = False) -> TranscriptFragment:
        """
        处理一个新片段

        :param text: 片段文本
        :param is_final: 转写服务是否已确认
        :return: 已加入展示列表的片段
        """
        if self._group_id is None:
            self._group_id = next(self._group_ids)

        self._buffer += text
        fragment = TranscriptFragment(
            id=next(self._fragment_ids),
            text=text,
            is_final=is_final,
            question_group_id=self._group_id,
        )
        self.fragments.append(fragment)
        if self.on_display:
            self.on_display(fragment)

        if SENTENCE_END.search(text):
            sentence, group_id = self._buffer, self._group_id
            self._buffer = ""
            self._group_id = None
            task = asyncio.get_running_loop().create_task(
                self._annotate(sentence, group_id, self._epoch)
            )
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        return fragment

    async def wait_idle(self):
        """等待所有进行中的分类 / 检索完成"""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _annotate(self, sentence: str, group_id: int, epoch: int):
        try:
            is_question = await self.detector.classify(sentence)
        except Exception as e:
            logger.error(f"[Aggregator] 问题检测异常: group={group_id}, error={e}", exc_info=True)
            return

        if not is_question:
            return

        try:
            results = await self.searcher.search(sentence, self.search_limit)
        except Exception as e:
            logger.warning(f"[Aggregator] 记忆检索失败，按无结果处理: {e}")
            results = []
        results = filter_by_score(results, self.min_score)

        if epoch != self._epoch:
            logger.info(f"[Aggregator] 会话已重置，丢弃迟到的标注: group={group_id}")
            return

        annotated = [f for f in self.fragments if f.question_group_id == group_id]
        for fragment in annotated:
            fragment.is_question = True
            fragment.search_results = list(results)

        logger.info(
            f"[Aggregator] 问题已标注: group={group_id}, fragments={len(annotated)}, "
            f"results={len(results)}"
        )
        if self.on_annotate:
            self.on_annotate(group_id, annotated)

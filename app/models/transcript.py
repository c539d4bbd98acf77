"""
实时转写片段数据模型
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from app.models.memory import SearchResult


class TranscriptionStatus(str, Enum):
    """实时会话状态"""
    IDLE = "idle"
    CONNECTING = "connecting"
    LISTENING = "listening"
    STOPPED = "stopped"
    ERROR = "error"


@dataclass
class TranscriptFragment:
    """转写服务每次回调产生的一个片段"""
    id: int                                   # 会话内递增序号
    text: str                                 # 片段文本（创建后不再修改）
    is_final: bool                            # 转写服务是否已确认
    question_group_id: Optional[int] = None   # 所属问题分组
    is_question: bool = False                 # 分组被判定为问题后置为 True
    search_results: List[SearchResult] = field(default_factory=list)

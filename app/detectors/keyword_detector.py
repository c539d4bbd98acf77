"""
关键词问题检测
问号或面试常见短语（大小写不敏感子串匹配）即判定为问题
"""
import logging
from typing import Optional, Tuple

from app.detectors.base import DetectionMode, QuestionDetector

logger = logging.getLogger(__name__)

INTERVIEW_KEYWORDS: Tuple[str, ...] = (
    "experience",
    "skill",
    "skills",
    "background",
    "qualification",
    "qualifications",
    "tell me about",
    "describe",
    "explain",
    "walk me through",
    "how would you",
    "what would you",
    "why did you",
    "when did you",
    "where did you",
    "have you ever",
    "can you",
    "could you",
    "would you",
    "do you have",
    "what is your",
    "strengths",
    "weaknesses",
    "challenge",
    "project",
    "team",
    "leadership",
    "conflict",
    "situation",
    "example",
    "greatest achievement",
    "why should we",
)


def match_keyword(text: str, keywords: Tuple[str, ...] = INTERVIEW_KEYWORDS) -> Optional[str]:
    """返回命中的关键词（问号记为 "?"），未命中返回 None"""
    lower_text = text.lower().strip()
    if "?" in lower_text:
        return "?"
    for keyword in keywords:
        if keyword in lower_text:
            return keyword
    return None


class KeywordQuestionDetector(QuestionDetector):
    """确定性、同步、无失败路径"""

    mode = DetectionMode.KEYWORD

    def __init__(self, keywords: Tuple[str, ...] = INTERVIEW_KEYWORDS):
        self.keywords = keywords

    def is_question(self, text: str) -> bool:
        matched = match_keyword(text, self.keywords)
        if matched:
            logger.info(f"[KeywordDetector] 命中问题 (keyword={matched!r}): {text}")
            return True
        return False

    async def classify(self, text: str) -> bool:
        return self.is_question(text)

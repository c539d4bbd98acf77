"""
Prompt 模板模块
"""

# ==================== 问题检测 Prompt ====================

QUESTION_DETECTION_PROMPT = """Analyze this text and determine if it's an interview question or important conversation point that an interviewee would want help with.

Text: "{text}"

Consider it a "yes" if it:
- Is a direct question
- Asks about experience, skills, or qualifications
- Requests examples or explanations
- Discusses challenges, projects, or achievements
- Is a behavioral interview question
- Is a technical question
- Asks "tell me about" or similar prompts

Respond with ONLY "yes" or "no"."""


def build_detection_prompt(text: str) -> str:
    """组装问题检测 prompt"""
    return QUESTION_DETECTION_PROMPT.format(text=text)


def build_memory_text(classification: str, description: str) -> str:
    """
    组装用于 embedding 的记忆文本

    :param classification: 分类标签
    :param description: 笔记正文
    :return: "分类: 正文"
    """
    return f"{classification}: {description}"

"""
Interview Copilot 配置模块
从 .env 文件加载所有配置项，提供全局单例 settings
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from app.exceptions import ConfigurationError

load_dotenv()

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


@dataclass
class Settings:
    """全局配置"""

    # 服务
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5001"))

    # MongoDB Atlas (向量检索)
    mongo_db_uri: str = os.getenv("MONGO_DB_URI", "")
    mongo_db_name: str = os.getenv("MONGO_DB_NAME", "context")
    mongo_collection: str = os.getenv("MONGO_COLLECTION", "test1")
    mongo_vector_index: str = os.getenv("MONGO_VECTOR_INDEX", "vector_index")

    # Gemini (通过 OpenAI 兼容接口调用 embedding / 问题分类)
    gemini_api_key: str = os.getenv("GEMINI_API_KEY", "")
    gemini_base_url: str = os.getenv("GEMINI_BASE_URL", GEMINI_OPENAI_BASE_URL)
    embedding_model: str = os.getenv("EMBEDDING_MODEL", "text-embedding-004")
    classifier_model: str = os.getenv("CLASSIFIER_MODEL", "gemini-2.0-flash")

    # 问题检测模式: keyword / llm
    detection_mode: str = os.getenv("DETECTION_MODE", "keyword")

    # 分块转写 (Groq Whisper，OpenAI 兼容接口)
    transcriber_api_key: str = os.getenv("TRANSCRIBER_API_KEY", os.getenv("GROQ_API_KEY", ""))
    transcriber_base_url: str = os.getenv("TRANSCRIBER_BASE_URL", "https://api.groq.com/openai/v1")
    transcriber_model: str = os.getenv("TRANSCRIBER_MODEL", "whisper-large-v3-turbo")

    # 实时客户端
    backend_url: str = os.getenv("BACKEND_URL", "http://localhost:5001")
    search_limit: int = int(os.getenv("SEARCH_LIMIT", "3"))
    min_score: float = float(os.getenv("MIN_SCORE", "0.5"))

    def require_credentials(self):
        """启动前检查必填项，缺失即视为致命错误"""
        missing = []
        if not self.mongo_db_uri:
            missing.append("MONGO_DB_URI")
        if not self.gemini_api_key:
            missing.append("GEMINI_API_KEY")
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}. "
                f"Please check your .env file."
            )


settings = Settings()

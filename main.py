"""
Interview Copilot — 记忆保存 / 检索后端

启动命令:
    python main.py
    或
    uvicorn main:app --host 0.0.0.0 --port 5001 --reload
"""
import logging

import uvicorn

from app import create_app
from app.config import settings

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-7s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger("copilot")

app = create_app()

if __name__ == "__main__":
    settings.require_credentials()

    logger.info(f"🚀 Interview Copilot 启动中 http://{settings.host}:{settings.port}")
    logger.info(f"📖 API 文档: http://127.0.0.1:{settings.port}/docs")
    logger.info(f"🧠 Embedding: {settings.embedding_model} @ {settings.gemini_base_url}")
    logger.info(f"🗄️ MongoDB: {settings.mongo_db_name}.{settings.mongo_collection} (index={settings.mongo_vector_index})")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        reload=False,
    )

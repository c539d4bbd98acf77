"""
Interview Copilot 实时转写客户端

采集端把麦克风音频切成短块文件，依次交给本程序:
    python live.py chunks/0001.wav chunks/0002.wav ...
    python live.py --mode llm --min-score 0.6 chunks/*.wav

检测到面试问题时，会在转写旁打印检索到的相关记忆
"""
import argparse
import asyncio
import logging
import sys
from typing import List

from app.clients.memory_search_client import HttpMemorySearchClient
from app.config import settings
from app.models.transcript import TranscriptFragment, TranscriptionStatus
from app.services.live_session import LiveSession, create_detector, create_transcriber
from app.services.transcript_aggregator import TranscriptAggregator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-7s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger("copilot.live")


def print_fragment(fragment: TranscriptFragment):
    marker = " " if fragment.is_final else "~"
    print(f"{marker} [{fragment.question_group_id}] {fragment.text}", flush=True)


def print_annotation(group_id: int, fragments: List[TranscriptFragment]):
    sentence = "".join(f.text for f in fragments).strip()
    print(f"🎯 问题: {sentence}", flush=True)
    results = fragments[0].search_results if fragments else []
    if not results:
        print("   (没有相关记忆)", flush=True)
    for r in results:
        print(f"   • [{r.classification}] {r.description}  ({r.sourceFile}, score={r.score:.3f})", flush=True)


def print_status(status: TranscriptionStatus):
    print(f"── {status.value} ──", file=sys.stderr, flush=True)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="实时转写并检索相关记忆")
    parser.add_argument("chunks", nargs="+", help="按顺序排列的音频块文件")
    parser.add_argument("--mode", default=settings.detection_mode, choices=["keyword", "llm"], help="问题检测模式")
    parser.add_argument("--min-score", type=float, default=settings.min_score, help="检索结果最低相似度")
    parser.add_argument("--limit", type=int, default=settings.search_limit, help="每个问题检索的记忆条数")
    parser.add_argument("--backend-url", default=settings.backend_url, help="记忆后端地址")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    searcher = HttpMemorySearchClient(args.backend_url)
    aggregator = TranscriptAggregator(
        detector=create_detector(args.mode),
        searcher=searcher,
        min_score=args.min_score,
        search_limit=args.limit,
        on_display=print_fragment,
        on_annotate=print_annotation,
    )
    session = LiveSession(
        transcriber_factory=create_transcriber,
        aggregator=aggregator,
        on_status=print_status,
        on_error=lambda message: print(message, file=sys.stderr, flush=True),
    )

    try:
        await session.start(args.chunks)
        await aggregator.wait_idle()
    finally:
        await searcher.aclose()

    return 1 if session.status is TranscriptionStatus.ERROR else 0


def main(argv=None) -> int:
    args = parse_args(argv)
    logger.info(f"🎙️ 检测模式: {args.mode}, 后端: {args.backend_url}, 音频块: {len(args.chunks)}")
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())

# app/services/feedback_service.py
import logging
from typing import List, NamedTuple, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import MissingInputError, StoreUnavailableError
from app.core.models import Feedback
from app.services.credit_gate import check_credits, consume_credit, get_counter
from app.services.sentiment import analyze_sentiment

logger = logging.getLogger(__name__)


class SubmissionResult(NamedTuple):
    id: str
    sentiment: str
    confidence: float
    credits_remaining: int


async def submit_feedback(db: AsyncSession, feedback_text: Optional[str]) -> SubmissionResult:
    """
    Service 层入口：额度检查 -> 分类 -> 入库 -> 扣减额度
    """
    if not feedback_text or not feedback_text.strip():
        raise MissingInputError("Feedback text is required")

    # 1. 额度检查 (用完直接拒绝，不落库)
    counter = await get_counter(db)
    check_credits(counter)

    # 2. 分类
    analysis = analyze_sentiment(feedback_text)
    logger.info("分类结果: %s (%.2f)", analysis.sentiment, analysis.confidence)

    # 3. 入库
    record = Feedback(
        feedback_text=feedback_text,
        sentiment=analysis.sentiment,
        confidence_score=analysis.confidence,
    )
    try:
        db.add(record)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("❌ 反馈入库失败: %s", e)
        raise StoreUnavailableError("Failed to store feedback") from e

    # 4. 扣减额度 (失败不影响返回)
    remaining = await consume_credit(db, counter)

    return SubmissionResult(record.id, analysis.sentiment, analysis.confidence, remaining)


async def list_recent_feedback(db: AsyncSession, limit: int = 5) -> List[Feedback]:
    """最近的反馈，按创建时间倒序"""
    try:
        result = await db.execute(
            select(Feedback).order_by(Feedback.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())
    except SQLAlchemyError as e:
        logger.error("❌ 查询反馈历史失败: %s", e)
        raise StoreUnavailableError("Unable to load feedback") from e

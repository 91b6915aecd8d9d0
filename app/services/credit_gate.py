# app/services/credit_gate.py
"""
全局额度计数器 (credits 表里唯一的一行)。

- get_counter: 读取计数器快照，是访问共享计数器的唯一入口
- check_credits: 用完即拒绝 (429)
- consume_credit: 成功分类并入库后 +1；写失败只记日志，不影响响应

注意：检查和扣减之间没有加锁，并发请求可能同时通过检查。
扣减本身用 SQL 表达式 credits_used + 1 完成，不会丢失更新。
"""
import logging
from typing import NamedTuple

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import CreditsExhaustedError, StoreUnavailableError
from app.core.models import Credits

logger = logging.getLogger(__name__)


class CreditSnapshot(NamedTuple):
    id: str
    credits_used: int
    max_credits: int

    @property
    def remaining(self) -> int:
        return self.max_credits - self.credits_used


async def get_counter(db: AsyncSession) -> CreditSnapshot:
    try:
        result = await db.execute(select(Credits).order_by(Credits.created_at).limit(1))
        row = result.scalars().first()
    except SQLAlchemyError as e:
        logger.error("读取额度失败: %s", e)
        raise StoreUnavailableError("Unable to check credits") from e

    if row is None:
        logger.error("credits 表为空，计数器未初始化")
        raise StoreUnavailableError("Unable to check credits")

    return CreditSnapshot(row.id, row.credits_used, row.max_credits)


def check_credits(counter: CreditSnapshot) -> None:
    if counter.credits_used >= counter.max_credits:
        raise CreditsExhaustedError(
            f"Credit limit reached. You have used all {counter.max_credits} credits."
        )


async def consume_credit(db: AsyncSession, counter: CreditSnapshot) -> int:
    """扣减一个额度，返回基于快照计算的剩余额度"""
    try:
        await db.execute(
            update(Credits)
            .where(Credits.id == counter.id)
            .values(credits_used=Credits.credits_used + 1)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error("⚠️ 额度扣减失败 (已忽略), counter=%s", counter.id, exc_info=True)

    return counter.max_credits - (counter.credits_used + 1)


def credits_status(counter: CreditSnapshot) -> dict:
    return {
        "credits_used": counter.credits_used,
        "max_credits": counter.max_credits,
        "credits_remaining": counter.remaining,
    }


async def ensure_counter(db: AsyncSession, max_credits: int) -> None:
    """启动时调用：没有计数器就插入一行，已有的不重置"""
    result = await db.execute(select(Credits.id).limit(1))
    if result.first() is not None:
        return

    db.add(Credits(credits_used=0, max_credits=max_credits))
    await db.commit()
    logger.info("✅ 已初始化额度计数器, max_credits=%s", max_credits)

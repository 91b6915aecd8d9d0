# app/core/models.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.dialects import mysql
from app.utils.database import Base

def _new_id() -> str:
    return str(uuid.uuid4())

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

# MySQL DATETIME 默认只到秒，历史记录排序需要微秒
PreciseDateTime = DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql")

class Feedback(Base):
    __tablename__ = "feedback"
    __table_args__ = (
        CheckConstraint(
            "sentiment IN ('positive', 'neutral', 'negative')",
            name="ck_feedback_sentiment",
        ),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    feedback_text = Column(Text, nullable=False)
    sentiment = Column(String(10), nullable=False)
    confidence_score = Column(Numeric(3, 2, asdecimal=False))

    # 创建时间在应用侧生成 (微秒精度)，写入后不再修改
    created_at = Column(PreciseDateTime, nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

class Credits(Base):
    """全局单例计数器，只有一行"""
    __tablename__ = "credits"

    id = Column(String(36), primary_key=True, default=_new_id)
    credits_used = Column(Integer, nullable=False, default=0)
    max_credits = Column(Integer, nullable=False, default=5)
    last_reset = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

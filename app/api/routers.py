# app/api/routers.py
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import FeedbackServiceError
from app.services.credit_gate import credits_status, get_counter
from app.services.feedback_service import list_recent_feedback, submit_feedback
from app.utils.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


# --- DTOs ---
class AnalyzeRequest(BaseModel):
    feedback_text: Optional[str] = None

class AnalyzeResponse(BaseModel):
    id: str
    sentiment: str
    confidence: float
    credits_remaining: int

class CreditsResponse(BaseModel):
    credits_used: int
    max_credits: int
    credits_remaining: int

class FeedbackItem(BaseModel):
    id: str
    feedback_text: str
    sentiment: str
    confidence_score: Optional[float] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

# ==========================
# 1. 情感分析接口
# ==========================
@router.post("/analyze-sentiment", response_model=AnalyzeResponse)
async def analyze_sentiment_endpoint(
    request: AnalyzeRequest,
    db: AsyncSession = Depends(get_db)
):
    try:
        result = await submit_feedback(db, request.feedback_text)
    except FeedbackServiceError as e:
        # 业务异常交给全局 handler
        logger.warning("提交被拒绝 (%s): %s", e.status_code, e.message)
        raise

    return AnalyzeResponse(**result._asdict())

# ==========================
# 2. 额度查询接口
# ==========================
@router.get("/credits", response_model=CreditsResponse)
async def get_credits(db: AsyncSession = Depends(get_db)):
    counter = await get_counter(db)
    return credits_status(counter)

# ==========================
# 3. 反馈历史接口
# ==========================
@router.get("/feedback", response_model=List[FeedbackItem])
async def get_feedback_history(
    limit: Optional[int] = Query(None, ge=1, le=50),
    db: AsyncSession = Depends(get_db)
):
    if limit is None:
        limit = get_settings().HISTORY_LIMIT
    return await list_recent_feedback(db, limit)

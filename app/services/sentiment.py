# app/services/sentiment.py
"""
关键词计数的情感分类。

小写化后，统计正/负关键词表中各有多少个词出现在文本里（每个词最多计一次，
子串匹配）。计数严格更高的一方获胜；平局（包括 0:0）判为 neutral。
不处理否定、词干和位置权重。
"""
from typing import NamedTuple

POSITIVE_WORDS = (
    "good", "great", "excellent", "amazing", "love", "awesome", "fantastic",
    "wonderful", "perfect", "best", "happy", "satisfied", "pleased",
)
NEGATIVE_WORDS = (
    "bad", "terrible", "awful", "hate", "worst", "horrible", "disappointing",
    "poor", "angry", "frustrated", "upset",
)

BASE_CONFIDENCE = 0.6
CONFIDENCE_STEP = 0.1
MAX_CONFIDENCE = 0.95
NEUTRAL_CONFIDENCE = 0.7


class SentimentResult(NamedTuple):
    sentiment: str
    confidence: float


def _count_matches(text: str, keywords) -> int:
    return sum(1 for word in keywords if word in text)


def _confidence(score: int) -> float:
    # 保留两位小数，与数据库 DECIMAL(3,2) 对齐
    return round(min(MAX_CONFIDENCE, BASE_CONFIDENCE + score * CONFIDENCE_STEP), 2)


def analyze_sentiment(text: str) -> SentimentResult:
    if not text or not text.strip():
        raise ValueError("text must be non-empty")

    lower_text = text.lower()
    positive_score = _count_matches(lower_text, POSITIVE_WORDS)
    negative_score = _count_matches(lower_text, NEGATIVE_WORDS)

    if positive_score > negative_score:
        return SentimentResult("positive", _confidence(positive_score))
    if negative_score > positive_score:
        return SentimentResult("negative", _confidence(negative_score))
    return SentimentResult("neutral", NEUTRAL_CONFIDENCE)

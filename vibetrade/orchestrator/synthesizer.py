"""
建议合成器 - 从可用的数据源结果生成交易建议

纯函数，无 I/O。
"""

import math
from typing import Optional, Dict, Any

from vibetrade.domain.models import Recommendation, TradeAction


DEFAULT_SIGNAL_CONFIDENCE = 0.5

REASONING_BOTH = "Technical breakout confirmed by positive sentiment"
REASONING_TECHNICAL_ONLY = "Technical indicators show strength"
REASONING_SENTIMENT_ONLY = "Market sentiment is bullish"
REASONING_INSUFFICIENT = "Insufficient data for strong recommendation"

BULLISH_SIGNALS = {"uptrend", "bullish"}
BEARISH_SIGNALS = {"downtrend", "bearish"}


def select_reasoning(has_technical: bool, has_sentiment: bool) -> str:
    """按数据源是否可用选择推理说明"""
    if has_technical and has_sentiment:
        return REASONING_BOTH
    if has_technical:
        return REASONING_TECHNICAL_ONLY
    if has_sentiment:
        return REASONING_SENTIMENT_ONLY
    return REASONING_INSUFFICIENT


def _signal_value(value: Any) -> float:
    """将上游数值转为 float，缺失、布尔、非数值或非有限值按 0.5 计"""
    if value is None or isinstance(value, bool):
        return DEFAULT_SIGNAL_CONFIDENCE
    try:
        number = float(value)
    except (TypeError, ValueError):
        return DEFAULT_SIGNAL_CONFIDENCE
    return number if math.isfinite(number) else DEFAULT_SIGNAL_CONFIDENCE


def combine_confidence(
    technical: Optional[Dict[str, Any]],
    sentiment: Optional[Dict[str, Any]],
) -> float:
    """取技术面 strength 与情绪面 confidence 的较大值，缺失按 0.5 计，不做截断"""
    return max(
        _signal_value((technical or {}).get("strength")),
        _signal_value((sentiment or {}).get("confidence")),
    )


def decide_action(
    technical: Optional[Dict[str, Any]],
    sentiment: Optional[Dict[str, Any]],
) -> TradeAction:
    """
    按信号方向投票决定交易动作

    技术面看 trend，情绪面看 market_sentiment；
    多头票多为 BUY，空头票多为 SELL，持平或无数据为 HOLD。
    """
    votes = [
        str((technical or {}).get("trend", "")).lower(),
        str((sentiment or {}).get("market_sentiment", "")).lower(),
    ]
    bullish = sum(1 for vote in votes if vote in BULLISH_SIGNALS)
    bearish = sum(1 for vote in votes if vote in BEARISH_SIGNALS)

    if bullish > bearish:
        return TradeAction.BUY
    if bearish > bullish:
        return TradeAction.SELL
    return TradeAction.HOLD


def synthesize(
    technical: Optional[Dict[str, Any]],
    sentiment: Optional[Dict[str, Any]],
) -> Recommendation:
    """
    合成交易建议

    Args:
        technical: 技术面数据（可选）
        sentiment: 情绪面数据（可选）

    Returns:
        Recommendation: 交易建议
    """
    return Recommendation(
        action=decide_action(technical, sentiment),
        confidence=combine_confidence(technical, sentiment),
        reasoning=select_reasoning(technical is not None, sentiment is not None),
    )

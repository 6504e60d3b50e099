"""
建议合成器测试
"""

import pytest

from vibetrade.orchestrator.synthesizer import (
    synthesize,
    select_reasoning,
    combine_confidence,
    decide_action,
    REASONING_BOTH,
    REASONING_TECHNICAL_ONLY,
    REASONING_SENTIMENT_ONLY,
    REASONING_INSUFFICIENT,
)
from vibetrade.domain.models import TradeAction


class TestReasoning:
    """推理说明选择"""

    @pytest.mark.parametrize("has_technical,has_sentiment,expected", [
        (True, True, "Technical breakout confirmed by positive sentiment"),
        (True, False, "Technical indicators show strength"),
        (False, True, "Market sentiment is bullish"),
        (False, False, "Insufficient data for strong recommendation"),
    ])
    def test_select_reasoning(self, has_technical, has_sentiment, expected):
        assert select_reasoning(has_technical, has_sentiment) == expected


class TestConfidence:
    """置信度合成"""

    def test_max_of_both(self, technical_payload, sentiment_payload):
        """测试取较大值"""
        assert combine_confidence(technical_payload, sentiment_payload) == 0.78

    def test_missing_side_defaults_to_half(self, technical_payload):
        """测试缺失一侧按 0.5 计"""
        assert combine_confidence(technical_payload, None) == 0.78
        assert combine_confidence({"strength": 0.3}, None) == 0.5
        assert combine_confidence(None, {"confidence": 0.2}) == 0.5

    def test_no_data(self):
        """测试无数据时为 0.5"""
        assert combine_confidence(None, None) == 0.5

    def test_not_clamped(self):
        """测试超出 [0, 1] 的值原样保留"""
        assert combine_confidence({"strength": 1.4}, {"confidence": 0.9}) == 1.4

    def test_numeric_string_coerced(self):
        """测试上游以字符串返回的数值被转换"""
        assert combine_confidence({"strength": "0.9"}, {"confidence": 0.72}) == 0.9

    @pytest.mark.parametrize("garbage", ["high", True, [0.9], {"v": 1}, "nan", "inf"])
    def test_non_numeric_defaults_to_half(self, garbage):
        """测试非数值不抛异常，按 0.5 计"""
        assert combine_confidence({"strength": garbage}, None) == 0.5
        assert combine_confidence({"strength": 0.3}, {"confidence": garbage}) == 0.5

    def test_synthesize_with_string_strength(self, sentiment_payload):
        recommendation = synthesize(
            {"trend": "uptrend", "strength": "high"},
            sentiment_payload,
        )
        assert recommendation.action == TradeAction.BUY
        assert recommendation.confidence == 0.72


class TestAction:
    """交易动作投票"""

    def test_bullish_signals_buy(self, technical_payload, sentiment_payload):
        assert decide_action(technical_payload, sentiment_payload) == TradeAction.BUY

    def test_bearish_signals_sell(self):
        assert decide_action(
            {"trend": "downtrend"}, {"market_sentiment": "bearish"}
        ) == TradeAction.SELL

    def test_split_vote_holds(self):
        assert decide_action(
            {"trend": "uptrend"}, {"market_sentiment": "bearish"}
        ) == TradeAction.HOLD

    def test_no_data_holds(self):
        assert decide_action(None, None) == TradeAction.HOLD

    def test_single_side_decides(self):
        assert decide_action(None, {"market_sentiment": "Bullish"}) == TradeAction.BUY


class TestSynthesize:
    """完整合成"""

    def test_both_sources(self, technical_payload, sentiment_payload):
        recommendation = synthesize(technical_payload, sentiment_payload)

        assert recommendation.action == TradeAction.BUY
        assert recommendation.confidence == 0.78
        assert recommendation.reasoning == REASONING_BOTH

    def test_technical_only(self, technical_payload):
        recommendation = synthesize(technical_payload, None)

        assert recommendation.confidence == 0.78
        assert recommendation.reasoning == REASONING_TECHNICAL_ONLY

    def test_sentiment_only(self, sentiment_payload):
        recommendation = synthesize(None, sentiment_payload)

        assert recommendation.confidence == 0.72
        assert recommendation.reasoning == REASONING_SENTIMENT_ONLY

    def test_nothing(self):
        recommendation = synthesize(None, None)

        assert recommendation.action == TradeAction.HOLD
        assert recommendation.confidence == 0.5
        assert recommendation.reasoning == REASONING_INSUFFICIENT
        assert recommendation.to_dict() == {
            "action": "HOLD",
            "confidence": 0.5,
            "reasoning": REASONING_INSUFFICIENT,
        }

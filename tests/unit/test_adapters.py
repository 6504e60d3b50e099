"""
适配器测试 - mock 数据源与 LiteLLM 适配器
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from vibetrade.adapters import (
    MockTechnicalAdapter,
    MockSentimentAdapter,
    MockMacroAdapter,
    LiteLLMAdapter,
    MockReasoningAdapter,
)
from vibetrade.domain.models import AnalysisRequest, Timeframe
from vibetrade.infrastructure.errors import LLMError
from vibetrade.orchestrator.router import parse_routing_response


def llm_response(content):
    """构造 litellm 响应对象"""
    response = MagicMock()
    response.choices[0].message.content = content
    return response


class TestMockSources:
    """mock 数据源测试"""

    def test_technical_payload(self):
        request = AnalysisRequest(symbol="BTC", timeframe=Timeframe.H4)
        data = asyncio.run(MockTechnicalAdapter().fetch(request))

        assert MockTechnicalAdapter.name == "TAAPI"
        assert data["indicators"]["rsi"] == 65
        assert data["strength"] == 0.78
        assert data["trend"] == "uptrend"
        assert data["timeframe"] == "4h"

    def test_sentiment_payload(self, btc_request):
        data = asyncio.run(MockSentimentAdapter().fetch(btc_request))

        assert MockSentimentAdapter.name == "AIXBT"
        assert data["market_sentiment"] == "bullish"
        assert data["confidence"] == 0.72

    def test_macro_payload(self, btc_request):
        data = asyncio.run(MockMacroAdapter().fetch(btc_request))
        assert data["environment"] == "risk_on"
        assert "FOMC Meeting" in data["key_events"]

    def test_simulated_latency(self, btc_request):
        """测试模拟延迟可触发超时"""
        source = MockSentimentAdapter(latency_seconds=1.0)

        async def run():
            return await asyncio.wait_for(source.fetch(btc_request), timeout=0.05)

        with pytest.raises(asyncio.TimeoutError):
            asyncio.run(run())


class TestLiteLLMAdapter:
    """LiteLLMAdapter 测试类"""

    @pytest.fixture
    def adapter(self):
        return LiteLLMAdapter(provider="openai", model="gpt-4o-mini", api_key="sk-test")

    def test_model_name(self, adapter):
        assert adapter.model_name == "openai/gpt-4o-mini"

    def test_classify_route_returns_raw_text(self, adapter):
        """测试路由返回原始文本，由路由器解析"""
        raw = '```json\n{"call_taapi": true, "call_aixbt": false}\n```'
        with patch(
            "vibetrade.adapters.llm_adapter.acompletion",
            new=AsyncMock(return_value=llm_response(raw)),
        ) as mocked:
            text = asyncio.run(adapter.classify_route("BTC", "chart only"))

        assert text == raw
        prompt = mocked.call_args.kwargs["messages"][0]["content"]
        assert "BTC" in prompt
        assert "chart only" in prompt
        assert parse_routing_response(text).call_sentiment is False

    def test_analyze_market_parses_json(self, adapter):
        raw = '```json\n{"action": "BUY", "confidence": 0.81}\n```'
        with patch(
            "vibetrade.adapters.llm_adapter.acompletion",
            new=AsyncMock(return_value=llm_response(raw)),
        ):
            result = asyncio.run(adapter.analyze_market('{"symbol": "BTC"}'))

        assert result == {"action": "BUY", "confidence": 0.81}

    def test_analyze_market_bad_json(self, adapter):
        with patch(
            "vibetrade.adapters.llm_adapter.acompletion",
            new=AsyncMock(return_value=llm_response("buy it")),
        ):
            with pytest.raises(LLMError):
                asyncio.run(adapter.analyze_market("{}"))

    def test_call_failure_wrapped(self, adapter):
        """测试底层异常包装为 LLMError"""
        with patch(
            "vibetrade.adapters.llm_adapter.acompletion",
            new=AsyncMock(side_effect=RuntimeError("401 unauthorized")),
        ):
            with pytest.raises(LLMError) as exc_info:
                asyncio.run(adapter.classify_route("BTC", ""))

        assert exc_info.value.status_code == 502


class TestMockReasoningAdapter:
    """固定推理载荷"""

    def test_analyze_market(self):
        result = asyncio.run(MockReasoningAdapter().analyze_market("{}"))
        assert result["action"] == "BUY"
        assert result["stop_loss"] == 42200
        assert result["reasoning"] == "Technical breakout confirmed by macro tailwinds"

    def test_classify_route_calls_both(self):
        text = asyncio.run(MockReasoningAdapter().classify_route("BTC", ""))
        decision = parse_routing_response(text)
        assert decision.call_technical and decision.call_sentiment

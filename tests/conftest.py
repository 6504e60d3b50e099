"""
测试配置 - pytest 配置和公共 fixtures
"""

import asyncio
import pytest
from typing import Any, Dict, List, Optional

from vibetrade.domain.models import (
    AnalysisRequest,
    Timeframe,
    SOURCE_TECHNICAL,
    SOURCE_SENTIMENT,
)
from vibetrade.ports.interfaces import DataSourcePort, LLMPort
from vibetrade.infrastructure import metrics


# ==================== 测试替身 ====================

class StubSource(DataSourcePort):
    """
    可配置的数据源替身

    - delay: 返回前等待的秒数（用于模拟超时）
    - error: 抛出的异常（用于模拟失败）
    """

    def __init__(
        self,
        name: str,
        data: Optional[Dict[str, Any]] = None,
        delay: float = 0.0,
        error: Optional[Exception] = None,
    ):
        self.name = name
        self.data = data
        self.delay = delay
        self.error = error
        self.calls: List[AnalysisRequest] = []
        self.cancelled = False

    async def fetch(self, request: AnalysisRequest) -> Dict[str, Any]:
        self.calls.append(request)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        return self.data


class StubLLM(LLMPort):
    """返回固定路由文本的 LLM 替身"""

    def __init__(self, route_text: str = "", error: Optional[Exception] = None):
        self.route_text = route_text
        self.error = error
        self.route_calls = 0

    async def classify_route(self, symbol: str, query: str) -> str:
        self.route_calls += 1
        if self.error is not None:
            raise self.error
        return self.route_text

    async def analyze_market(self, market_data: str) -> Dict[str, Any]:
        if self.error is not None:
            raise self.error
        return {"action": "BUY", "confidence": 0.81}


# ==================== Fixtures ====================

@pytest.fixture(autouse=True)
def fresh_metrics(monkeypatch):
    """每个测试使用独立的指标注册表"""
    monkeypatch.setattr(metrics, "_registry", None)
    yield
    monkeypatch.setattr(metrics, "_registry", None)


@pytest.fixture
def technical_payload():
    """模拟技术指标载荷"""
    return {
        "indicators": {
            "rsi": 65,
            "macd": {"status": "bullish_crossover"},
            "moving_averages": {"alignment": "aligned_uptrend"},
        },
        "pattern": "ascending_triangle",
        "strength": 0.78,
        "trend": "uptrend",
    }


@pytest.fixture
def sentiment_payload():
    """模拟市场情绪载荷"""
    return {
        "market_sentiment": "bullish",
        "narrative": "Fed pivot expectations",
        "confidence": 0.72,
    }


@pytest.fixture
def technical_source(technical_payload):
    """立即返回的技术面数据源"""
    return StubSource(SOURCE_TECHNICAL, data=technical_payload)


@pytest.fixture
def sentiment_source(sentiment_payload):
    """立即返回的情绪面数据源"""
    return StubSource(SOURCE_SENTIMENT, data=sentiment_payload)


@pytest.fixture
def slow_sentiment_source(sentiment_payload):
    """远超超时时间才返回的情绪面数据源"""
    return StubSource(SOURCE_SENTIMENT, data=sentiment_payload, delay=3.0)


@pytest.fixture
def failing_sentiment_source():
    """立即失败的情绪面数据源"""
    return StubSource(SOURCE_SENTIMENT, error=RuntimeError("upstream 500"))


@pytest.fixture
def btc_request():
    """BTC 1h 分析请求"""
    return AnalysisRequest(symbol="BTC", timeframe=Timeframe.H1)


@pytest.fixture
def make_source():
    """数据源替身工厂"""
    return StubSource


@pytest.fixture
def make_llm():
    """LLM 替身工厂"""
    return StubLLM

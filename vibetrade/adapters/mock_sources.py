"""
Mock 数据源适配器 - 实现 DataSourcePort

返回固定的示例载荷，用于开发、演示和测试。
SOURCE_MODE=mock 时由服务容器装配。
"""

import asyncio
from typing import Dict, Any

from vibetrade.domain.models import (
    AnalysisRequest,
    SOURCE_TECHNICAL,
    SOURCE_SENTIMENT,
    SOURCE_MACRO,
)
from vibetrade.ports.interfaces import DataSourcePort


class _MockSource(DataSourcePort):
    """带可选模拟延迟的 mock 数据源基类"""

    def __init__(self, latency_seconds: float = 0.0):
        self.latency_seconds = latency_seconds

    async def _simulate_latency(self):
        if self.latency_seconds > 0:
            await asyncio.sleep(self.latency_seconds)


class MockTechnicalAdapter(_MockSource):
    """TAAPI 技术指标（mock）"""

    name = SOURCE_TECHNICAL

    async def fetch(self, request: AnalysisRequest) -> Dict[str, Any]:
        await self._simulate_latency()
        return {
            "indicators": {
                "rsi": 65,
                "macd": {"status": "bullish_crossover"},
                "moving_averages": {"alignment": "aligned_uptrend"},
            },
            "pattern": "ascending_triangle",
            "strength": 0.78,
            "trend": "uptrend",
            "timeframe": request.timeframe.value,
        }


class MockSentimentAdapter(_MockSource):
    """AIXBT 市场情绪（mock）"""

    name = SOURCE_SENTIMENT

    async def fetch(self, request: AnalysisRequest) -> Dict[str, Any]:
        await self._simulate_latency()
        return {
            "market_sentiment": "bullish",
            "narrative": "Fed pivot expectations",
            "confidence": 0.72,
            "whale_activity": {"large_buys_24h": 45, "net_flow": "bullish"},
        }


class MockMacroAdapter(_MockSource):
    """宏观环境（mock）"""

    name = SOURCE_MACRO

    async def fetch(self, request: AnalysisRequest) -> Dict[str, Any]:
        await self._simulate_latency()
        return {
            "environment": "risk_on",
            "key_events": ["FOMC Meeting", "CPI Release"],
            "impact": "high",
            "fed_policy": "Accommodative",
        }

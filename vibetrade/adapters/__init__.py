"""
适配器层 - 端口接口的具体实现

包含：
- MockTechnicalAdapter / MockSentimentAdapter / MockMacroAdapter: 固定载荷数据源
- X402SourceAdapter: 通过 x402 付费调用的真实数据源
- X402Client: x402 付费 HTTP 客户端
- LiteLLMAdapter: LiteLLM 路由与推理适配器
- MockReasoningAdapter: 固定载荷的推理适配器
"""

from vibetrade.adapters.mock_sources import (
    MockTechnicalAdapter,
    MockSentimentAdapter,
    MockMacroAdapter,
)
from vibetrade.adapters.x402_client import X402Client
from vibetrade.adapters.x402_source_adapter import X402SourceAdapter
from vibetrade.adapters.llm_adapter import LiteLLMAdapter, MockReasoningAdapter

__all__ = [
    "MockTechnicalAdapter",
    "MockSentimentAdapter",
    "MockMacroAdapter",
    "X402Client",
    "X402SourceAdapter",
    "LiteLLMAdapter",
    "MockReasoningAdapter",
]

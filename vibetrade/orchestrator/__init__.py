"""
编排层 - 数据源路由与结果聚合

负责：
1. 数据源路由（LLM + 默认兜底）
2. 带超时的并行获取
3. 交易建议合成
4. 支付预算

包含：
- SourceRouter: 软路由
- call_with_timeout / fan_out: 限时并行获取
- synthesize: 建议合成
- PaymentBudget: 预算计算
- Orchestrator: 统一编排器
- create_orchestrator: 工厂函数
"""

from vibetrade.orchestrator.router import SourceRouter, parse_routing_response
from vibetrade.orchestrator.fetcher import (
    call_with_timeout,
    fan_out,
    FanOutResult,
    DEFAULT_TIMEOUT_SECONDS,
)
from vibetrade.orchestrator.synthesizer import synthesize, select_reasoning
from vibetrade.orchestrator.budget import (
    PaymentBudget,
    ENTRY_PRICE,
    BULK_PRICE_PER_SYMBOL,
)
from vibetrade.orchestrator.orchestrator import Orchestrator, create_orchestrator

__all__ = [
    "SourceRouter",
    "parse_routing_response",
    "call_with_timeout",
    "fan_out",
    "FanOutResult",
    "DEFAULT_TIMEOUT_SECONDS",
    "synthesize",
    "select_reasoning",
    "PaymentBudget",
    "ENTRY_PRICE",
    "BULK_PRICE_PER_SYMBOL",
    "Orchestrator",
    "create_orchestrator",
]

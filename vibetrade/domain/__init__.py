"""
领域层 - 核心业务实体

包含：
- AnalysisRequest: 交易分析请求
- RoutingDecision: 数据源路由决策
- SourceResult: 单数据源调用结果
- Recommendation: 聚合交易建议
- PaymentRequirement / PaymentReceipt: x402 支付描述
- AnalysisResult: 分析结果
"""

from vibetrade.domain.models import (
    Timeframe,
    TradeAction,
    ErrorCode,
    AnalysisRequest,
    RoutingDecision,
    SourceResult,
    Recommendation,
    PaymentRequirement,
    PaymentReceipt,
    AnalysisResult,
    SOURCE_TECHNICAL,
    SOURCE_SENTIMENT,
    SOURCE_MACRO,
    SOURCE_REASONING,
)

__all__ = [
    "Timeframe",
    "TradeAction",
    "ErrorCode",
    "AnalysisRequest",
    "RoutingDecision",
    "SourceResult",
    "Recommendation",
    "PaymentRequirement",
    "PaymentReceipt",
    "AnalysisResult",
    "SOURCE_TECHNICAL",
    "SOURCE_SENTIMENT",
    "SOURCE_MACRO",
    "SOURCE_REASONING",
]

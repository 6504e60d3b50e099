"""
核心领域模型 - 单次请求生命周期内的值对象

设计原则：
1. 不可变性：请求、路由决策、建议均为 frozen dataclass
2. 请求作用域：所有对象随请求创建、随响应丢弃，无持久化
3. 可序列化：AnalysisResult 提供 to_dict 供 API 层输出
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any


# ==================== 枚举类型 ====================

class Timeframe(str, Enum):
    """K 线周期"""
    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"
    W1 = "1w"


class TradeAction(str, Enum):
    """交易动作"""
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class ErrorCode(str, Enum):
    """错误码"""
    INVALID_REQUEST = "INVALID_REQUEST"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"
    NOT_FOUND = "NOT_FOUND"
    DATA_UNAVAILABLE = "DATA_UNAVAILABLE"
    LLM_ERROR = "LLM_ERROR"
    TIMEOUT = "TIMEOUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# 数据源名称（同时用于 sources_called）
SOURCE_TECHNICAL = "TAAPI"
SOURCE_SENTIMENT = "AIXBT"
SOURCE_MACRO = "MACRO"
SOURCE_REASONING = "DREAMS"


# ==================== 请求 ====================

@dataclass(frozen=True)
class AnalysisRequest:
    """交易分析请求"""
    symbol: str                              # 交易标的（如 BTC, ETH）
    timeframe: Timeframe = Timeframe.H1
    query: str = ""                          # 可选的自然语言上下文
    account_address: Optional[str] = None    # 可选的 Hyperliquid 账户地址
    request_id: Optional[str] = None
    budget_per_source: Optional[str] = None  # 单源支付上限，由编排器按本次价格填入
    timestamp: datetime = field(default_factory=datetime.now)


# ==================== 值对象 ====================

@dataclass(frozen=True)
class RoutingDecision:
    """路由决策：本次请求需要调用哪些数据源"""
    call_technical: bool = True
    call_sentiment: bool = True
    source: str = "default"   # "llm" 或 "default"

    @classmethod
    def default(cls) -> "RoutingDecision":
        """兜底决策：两个数据源都调用"""
        return cls(call_technical=True, call_sentiment=True, source="default")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "call_taapi": self.call_technical,
            "call_aixbt": self.call_sentiment,
            "source": self.source,
        }


@dataclass(frozen=True)
class SourceResult:
    """单个数据源的调用结果，data 为 None 表示失败或超时"""
    name: str
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    timed_out: bool = False
    latency_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.data is not None


@dataclass(frozen=True)
class Recommendation:
    """聚合后的交易建议"""
    action: TradeAction
    confidence: float
    reasoning: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class PaymentRequirement:
    """x402 支付要求描述"""
    amount: str                  # USDC 最小单位（6 位小数）
    network: str
    recipient: str
    currency: str = "USDC"
    description: str = "Trading analysis request"
    facilitator_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "amount": self.amount,
            "currency": self.currency,
            "network": self.network,
            "recipient": self.recipient,
            "description": self.description,
        }
        if self.facilitator_url:
            data["facilitator_url"] = self.facilitator_url
        return data


@dataclass(frozen=True)
class PaymentReceipt:
    """X-Payment / X-Payment-Response 头解码后的内容（未做签名校验）"""
    amount: str = "0"
    currency: str = "USDC"
    network: str = "base-sepolia"
    status: str = "pending"
    transaction_hash: str = "0x"
    recipient: Optional[str] = None
    payer: Optional[str] = None
    nonce: Optional[int] = None
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transaction_hash": self.transaction_hash,
            "amount": self.amount,
            "currency": self.currency,
            "network": self.network,
            "recipient": self.recipient,
            "payer": self.payer,
            "nonce": self.nonce,
            "timestamp": self.timestamp,
            "status": self.status,
        }


# ==================== 结果 ====================

@dataclass
class AnalysisResult:
    """分析结果（可变，由编排器逐步填充）"""
    request_id: str
    symbol: str
    timeframe: Timeframe
    recommendation: Recommendation

    # 数据源结果
    technical: Optional[Dict[str, Any]] = None
    sentiment: Optional[Dict[str, Any]] = None
    macro: Optional[Dict[str, Any]] = None
    llm_insight: Optional[Dict[str, Any]] = None
    portfolio: Optional[Dict[str, Any]] = None

    # 元数据
    sources_called: List[str] = field(default_factory=list)
    total_cost: str = "0"
    budget_per_source: str = "0"
    routing: Optional[RoutingDecision] = None
    processing_time_ms: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典（用于 JSON 序列化）"""
        analysis: Dict[str, Any] = {
            "technical": self.technical,
            "sentiment": self.sentiment,
            "recommendation": self.recommendation.to_dict(),
        }
        if self.macro is not None:
            analysis["macro"] = self.macro
        if self.llm_insight is not None:
            analysis["llm_insight"] = self.llm_insight

        data: Dict[str, Any] = {
            "symbol": self.symbol,
            "timeframe": self.timeframe.value,
            "analysis": analysis,
            "metadata": {
                "request_id": self.request_id,
                "sources_called": list(self.sources_called),
                "total_cost": self.total_cost,
                "budget_per_source": self.budget_per_source,
                "routing": self.routing.to_dict() if self.routing else None,
                "processing_time_ms": self.processing_time_ms,
                "timestamp": self.timestamp.isoformat(),
            },
        }
        if self.portfolio is not None:
            data["portfolio"] = self.portfolio
        return data

"""
API 请求/响应模型 - Pydantic Schema 定义

所有 API 的输入输出都通过这些模型定义，
确保类型安全和自动文档生成。
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from enum import Enum

from vibetrade.domain.models import (
    AnalysisRequest as DomainRequest,
    AnalysisResult,
    Timeframe,
)


# ==================== 枚举类型 ====================

class TimeframeEnum(str, Enum):
    """K 线周期"""
    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"
    W1 = "1w"


class TradeActionEnum(str, Enum):
    """交易动作"""
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


def _strip_symbol(v: str) -> str:
    v = v.strip().upper()
    if not v:
        raise ValueError('Symbol cannot be empty.')
    return v


# ==================== 请求模型 ====================

class TradingAnalysisRequest(BaseModel):
    """单标的分析请求"""
    symbol: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="交易标的，如 BTC, ETH"
    )
    timeframe: TimeframeEnum = Field(
        ...,
        description="K 线周期"
    )
    query: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="可选的自然语言上下文"
    )
    account_address: Optional[str] = Field(
        default=None,
        description="可选的 Hyperliquid 账户地址"
    )

    @field_validator('symbol')
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        """去除空白并转大写，空值拒绝"""
        return _strip_symbol(v)

    def to_domain(self, request_id: Optional[str] = None) -> DomainRequest:
        return DomainRequest(
            symbol=self.symbol,
            timeframe=Timeframe(self.timeframe.value),
            query=self.query or "",
            account_address=self.account_address,
            request_id=request_id,
        )


class EntrypointInput(TradingAnalysisRequest):
    """analyze 入口的输入，timeframe 默认 1h"""
    timeframe: TimeframeEnum = Field(
        default=TimeframeEnum.H1,
        description="K 线周期"
    )


class EntrypointRequest(BaseModel):
    """入口调用请求体"""
    input: EntrypointInput


class BulkAnalysisRequest(BaseModel):
    """批量分析请求"""
    symbols: List[str] = Field(
        ...,
        min_length=1,
        max_length=20,
        description="交易标的列表"
    )
    timeframe: TimeframeEnum = Field(
        default=TimeframeEnum.H1,
        description="K 线周期"
    )
    query: Optional[str] = Field(default=None, max_length=1000)

    @field_validator('symbols')
    @classmethod
    def validate_symbols(cls, v: List[str]) -> List[str]:
        """逐个规范化，保持顺序去重"""
        symbols: List[str] = []
        for symbol in v:
            normalized = _strip_symbol(symbol)
            if normalized not in symbols:
                symbols.append(normalized)
        return symbols

    def to_domain(self) -> List[DomainRequest]:
        return [
            DomainRequest(
                symbol=symbol,
                timeframe=Timeframe(self.timeframe.value),
                query=self.query or "",
            )
            for symbol in self.symbols
        ]


# ==================== 响应模型 ====================

class RecommendationData(BaseModel):
    """交易建议"""
    action: TradeActionEnum
    confidence: float
    reasoning: str


class AnalysisData(BaseModel):
    """分析内容"""
    technical: Optional[Dict[str, Any]] = Field(default=None, description="技术指标")
    sentiment: Optional[Dict[str, Any]] = Field(default=None, description="市场情绪")
    macro: Optional[Dict[str, Any]] = Field(default=None, description="宏观环境")
    llm_insight: Optional[Dict[str, Any]] = Field(default=None, description="LLM 推理")
    recommendation: RecommendationData


class MetadataData(BaseModel):
    """元数据"""
    request_id: str
    sources_called: List[str] = Field(default_factory=list, description="成功调用的数据源")
    total_cost: str = Field(..., description="可用于下游的支出上限（USDC 最小单位）")
    budget_per_source: str
    routing: Optional[Dict[str, Any]] = None
    processing_time_ms: int
    timestamp: str


class AnalysisOutput(BaseModel):
    """单标的分析结果"""
    symbol: str
    timeframe: str
    analysis: AnalysisData
    portfolio: Optional[Dict[str, Any]] = None
    metadata: MetadataData


class EntrypointResponse(BaseModel):
    """入口调用响应"""
    output: AnalysisOutput
    model: str = "vibe-trade-v1"


class BulkAnalysisResponse(BaseModel):
    """批量分析响应"""
    results: List[AnalysisOutput]
    total_price: str


class PaymentRequiredData(BaseModel):
    """x402 支付描述"""
    amount: str
    currency: str = "USDC"
    network: str
    recipient: str
    description: str
    facilitator_url: Optional[str] = None


class PaymentRequiredResponse(BaseModel):
    """402 响应"""
    error: str = "Payment Required"
    code: str = "PAYMENT_REQUIRED"
    payment_required: PaymentRequiredData
    timestamp: int


class ErrorResponse(BaseModel):
    """错误响应"""
    error: str = Field(..., description="错误标题")
    code: str = Field(..., description="错误码")
    details: Optional[Any] = Field(default=None, description="错误详情")
    timestamp: int


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str = Field(..., description="服务状态")
    service: str
    version: str = Field(..., description="API 版本")
    timestamp: int
    components: Dict[str, str] = Field(default_factory=dict, description="组件状态")


# ==================== 转换函数 ====================

def analysis_result_to_output(result: AnalysisResult) -> AnalysisOutput:
    """将领域层 AnalysisResult 转换为 API 输出"""
    return AnalysisOutput.model_validate(result.to_dict())

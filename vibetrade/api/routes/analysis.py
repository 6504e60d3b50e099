"""
分析路由 - 付费交易分析 API

提供单标的分析和批量分析端点。
请求体校验（400）在支付检查（402）之前完成。
"""

from fastapi import APIRouter, Depends, Header, Response
from typing import Optional

from vibetrade.api.schemas import (
    TradingAnalysisRequest,
    BulkAnalysisRequest,
    AnalysisOutput,
    BulkAnalysisResponse,
    PaymentRequiredResponse,
    ErrorResponse,
    analysis_result_to_output,
)
from vibetrade.api.dependencies import (
    Settings,
    get_orchestrator,
    get_payment_gate,
    get_settings,
)
from vibetrade.infrastructure.payment import PaymentGate, PAYMENT_RESPONSE_HEADER
from vibetrade.orchestrator import Orchestrator


router = APIRouter(prefix="/api/v1", tags=["Analysis"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "请求参数错误"},
    402: {"model": PaymentRequiredResponse, "description": "需要 x402 支付"},
    500: {"model": ErrorResponse, "description": "服务器内部错误"},
}


@router.post(
    "/trading-analysis",
    response_model=AnalysisOutput,
    responses=ERROR_RESPONSES,
    summary="单标的交易分析",
    description="""
    付费交易分析 - 聚合技术指标与市场情绪，给出交易建议。

    - 缺少 `X-Payment` 头时返回 402 及支付描述
    - 单个数据源失败或超时只会减少结果内容，不会导致请求失败
    """
)
async def trading_analysis(
    request: TradingAnalysisRequest,
    response: Response,
    x_payment: Optional[str] = Header(default=None, alias="X-Payment"),
    orchestrator: Orchestrator = Depends(get_orchestrator),
    payment_gate: PaymentGate = Depends(get_payment_gate),
    settings: Settings = Depends(get_settings),
) -> AnalysisOutput:
    """执行单标的分析"""
    receipt = payment_gate.verify(x_payment, settings.ENTRY_PRICE)

    result = await orchestrator.analyze(
        request.to_domain(),
        price=settings.ENTRY_PRICE,
    )

    response.headers[PAYMENT_RESPONSE_HEADER] = payment_gate.response_header(receipt)
    return analysis_result_to_output(result)


@router.post(
    "/bulk-analysis",
    response_model=BulkAnalysisResponse,
    responses=ERROR_RESPONSES,
    summary="批量交易分析",
    description="对多个标的并行分析，按标的数量计价。"
)
async def bulk_analysis(
    request: BulkAnalysisRequest,
    response: Response,
    x_payment: Optional[str] = Header(default=None, alias="X-Payment"),
    orchestrator: Orchestrator = Depends(get_orchestrator),
    payment_gate: PaymentGate = Depends(get_payment_gate),
    settings: Settings = Depends(get_settings),
) -> BulkAnalysisResponse:
    """执行批量分析"""
    total_price = settings.BULK_PRICE_PER_SYMBOL * len(request.symbols)
    receipt = payment_gate.verify(
        x_payment,
        total_price,
        description=f"Bulk trading analysis ({len(request.symbols)} symbols)",
    )

    results = await orchestrator.analyze_many(
        request.to_domain(),
        price=settings.BULK_PRICE_PER_SYMBOL,
    )

    response.headers[PAYMENT_RESPONSE_HEADER] = payment_gate.response_header(receipt)
    return BulkAnalysisResponse(
        results=[analysis_result_to_output(result) for result in results],
        total_price=str(total_price),
    )

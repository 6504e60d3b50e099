"""
入口路由 - 付费 RPC 入口

`analyze` 入口：请求体为 {"input": {...}}，响应为 {"output": {...}, "model": ...}
"""

from fastapi import APIRouter, Depends, Header, Response
from typing import Optional

from vibetrade.api.schemas import (
    EntrypointRequest,
    EntrypointResponse,
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


router = APIRouter(prefix="/entrypoints", tags=["Entrypoints"])


@router.post(
    "/analyze/invoke",
    response_model=EntrypointResponse,
    responses={
        400: {"model": ErrorResponse, "description": "请求参数错误"},
        402: {"model": PaymentRequiredResponse, "description": "需要 x402 支付"},
    },
    summary="analyze 入口",
    description="与 /api/v1/trading-analysis 相同的分析流程，timeframe 默认 1h。"
)
async def invoke_analyze(
    request: EntrypointRequest,
    response: Response,
    x_payment: Optional[str] = Header(default=None, alias="X-Payment"),
    orchestrator: Orchestrator = Depends(get_orchestrator),
    payment_gate: PaymentGate = Depends(get_payment_gate),
    settings: Settings = Depends(get_settings),
) -> EntrypointResponse:
    """调用 analyze 入口"""
    receipt = payment_gate.verify(
        x_payment,
        settings.ENTRY_PRICE,
        description="Analyze entrypoint invocation",
    )

    result = await orchestrator.analyze(
        request.input.to_domain(),
        price=settings.ENTRY_PRICE,
    )

    response.headers[PAYMENT_RESPONSE_HEADER] = payment_gate.response_header(receipt)
    return EntrypointResponse(
        output=analysis_result_to_output(result),
        model=settings.MODEL_NAME,
    )

"""
错误处理 - 统一错误定义和处理

提供：
- 业务异常类层次（带 HTTP 状态码）
- 错误响应信封
- 异常到标准错误的转换
"""

from typing import Optional, Dict, Any
import time

from vibetrade.domain.models import ErrorCode


# ==================== 异常类层次 ====================

class VibeTradeError(Exception):
    """Vibe Trade 基础异常"""

    status_code: int = 500
    title: str = "Internal Server Error"

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为错误响应信封"""
        return error_envelope(
            error=self.title,
            code=self.error_code,
            details=self.message,
        )


class ValidationError(VibeTradeError):
    """验证错误"""

    status_code = 400
    title = "Missing required fields"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_REQUEST,
            details={"field": field} if field else {}
        )


class PaymentRequiredError(VibeTradeError):
    """缺少 x402 支付"""

    status_code = 402
    title = "Payment Required"

    def __init__(self, requirement: Dict[str, Any]):
        super().__init__(
            message="X-Payment header is required",
            error_code=ErrorCode.PAYMENT_REQUIRED,
            details={"payment_required": requirement}
        )

    def to_dict(self) -> Dict[str, Any]:
        data = error_envelope(error=self.title, code=self.error_code)
        data["payment_required"] = self.details["payment_required"]
        return data


class DataUnavailableError(VibeTradeError):
    """数据不可用错误"""

    status_code = 503
    title = "Service Unavailable"

    def __init__(self, source: str, reason: Optional[str] = None):
        message = f"数据源 '{source}' 不可用"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message,
            error_code=ErrorCode.DATA_UNAVAILABLE,
            details={"source": source, "reason": reason}
        )


class LLMError(VibeTradeError):
    """LLM 服务错误"""

    status_code = 502
    title = "Bad Gateway"

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.LLM_ERROR,
            details={"provider": provider}
        )


class TimeoutError(VibeTradeError):
    """超时错误"""

    status_code = 504
    title = "Gateway Timeout"

    def __init__(self, operation: str, timeout_seconds: float):
        super().__init__(
            message=f"操作 '{operation}' 超时（{timeout_seconds}秒）",
            error_code=ErrorCode.TIMEOUT,
            details={"operation": operation, "timeout": timeout_seconds}
        )


# ==================== 错误信封 ====================

def error_envelope(
    error: str,
    code: ErrorCode,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    构建统一的错误响应体

    Args:
        error: 简短错误标题
        code: 错误码
        details: 详细说明（可选）

    Returns:
        Dict: {error, code, details?, timestamp}
    """
    data: Dict[str, Any] = {
        "error": error,
        "code": code.value,
    }
    if details is not None:
        data["details"] = details
    data["timestamp"] = int(time.time() * 1000)
    return data


# ==================== 错误处理工具 ====================

class ErrorHandler:
    """错误处理器"""

    @staticmethod
    def handle_exception(
        e: Exception,
        context: Optional[str] = None
    ) -> VibeTradeError:
        """
        将异常转换为 VibeTradeError

        Args:
            e: 原始异常
            context: 上下文信息

        Returns:
            VibeTradeError: 标准化的错误
        """
        if isinstance(e, VibeTradeError):
            return e

        error_message = str(e)
        if context:
            error_message = f"[{context}] {error_message}"

        if "timeout" in type(e).__name__.lower():
            return TimeoutError(context or "unknown", 0)

        if "connection" in type(e).__name__.lower():
            return DataUnavailableError("network", str(e))

        return VibeTradeError(
            message=error_message,
            error_code=ErrorCode.INTERNAL_ERROR,
            details={"original_type": type(e).__name__}
        )


"""
安全中间件 - 基本安全防护

提供：
- 安全头设置
- 交易标的输入规范化
"""

from typing import Callable, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    安全头中间件

    添加基本的安全响应头。
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "0"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cross-Origin-Resource-Policy"] = "same-origin"

        # API 响应不缓存（付费结果不可复用）
        if request.url.path.startswith(("/api/", "/entrypoints/")):
            response.headers["Cache-Control"] = "no-store"

        return response


class InputSanitizer:
    """
    输入清理器

    提供交易相关字段的规范化。
    """

    @classmethod
    def normalize_symbol(cls, symbol: Optional[str]) -> str:
        """
        规范化交易标的：去除空白并转大写

        Args:
            symbol: 原始输入

        Returns:
            规范化后的标的，可能为空字符串
        """
        if symbol is None:
            return ""
        return str(symbol).strip().upper()


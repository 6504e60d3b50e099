"""
数据源路由器 - 软路由实现

设计原则：
1. LLM 优先：由 LLM 决定调用哪些数据源
2. 静态兜底：LLM 未配置、调用失败或输出格式错误时两个数据源都调用
3. 单次尝试：不重试，路由失败不影响后续流程
"""

import json
import logging
import re
from typing import Optional, Any

from vibetrade.domain.models import RoutingDecision
from vibetrade.ports.interfaces import LLMPort


logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r'```(?:json)?\s*')
_JSON_OBJECT = re.compile(r'\{.*?\}', re.DOTALL)


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def parse_routing_response(text: Optional[str]) -> Optional[RoutingDecision]:
    """
    解析 LLM 的路由输出

    接受纯 JSON、markdown 代码块包裹的 JSON，或夹杂在文本中的 JSON 对象。

    Args:
        text: LLM 原始输出

    Returns:
        RoutingDecision；无法解析或字段不是布尔值时返回 None，不抛异常
    """
    if not text or not isinstance(text, str):
        return None

    cleaned = _CODE_FENCE.sub('', text).strip()
    candidates = [cleaned] + _JSON_OBJECT.findall(cleaned)

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if not isinstance(data, dict):
            continue

        call_technical = _as_bool(data.get("call_taapi"))
        call_sentiment = _as_bool(data.get("call_aixbt"))
        if call_technical is None or call_sentiment is None:
            return None
        return RoutingDecision(
            call_technical=call_technical,
            call_sentiment=call_sentiment,
            source="llm",
        )

    return None


class SourceRouter:
    """
    数据源路由器

    职责：根据 symbol 和 query 决定本次请求调用技术面、情绪面中的哪些数据源。
    """

    def __init__(self, llm_port: Optional[LLMPort] = None):
        """
        初始化路由器

        Args:
            llm_port: LLM 端口（可选，未配置时总是返回默认决策）
        """
        self.llm = llm_port

    async def route(self, symbol: str, query: str = "") -> RoutingDecision:
        """
        执行路由决策

        Args:
            symbol: 交易标的
            query: 自然语言上下文

        Returns:
            RoutingDecision: 路由决策，任何失败都返回默认决策
        """
        if not self.llm:
            return RoutingDecision.default()

        try:
            raw = await self.llm.classify_route(symbol, query)
        except Exception as e:
            logger.warning(f"路由决策失败，使用默认决策: {e}")
            return RoutingDecision.default()

        decision = parse_routing_response(raw)
        if decision is None:
            logger.warning(f"路由输出无法解析，使用默认决策: {raw!r}")
            return RoutingDecision.default()

        return decision

"""
LLM 适配器 - 实现 LLMPort

使用 LiteLLM 进行数据源路由决策和市场推理（Dreams LLM Router）。
"""

import json
import re
from typing import Dict, Any, Optional

from litellm import acompletion

from vibetrade.ports.interfaces import LLMPort
from vibetrade.infrastructure.errors import LLMError


class LiteLLMAdapter(LLMPort):
    """
    LiteLLM 适配器

    实现 LLMPort 接口，提供路由决策和市场推理功能。
    """

    # 路由决策提示词
    ROUTING_PROMPT = """You are the routing step of a crypto trading analysis service.
Decide which data sources to call for this request:
- TAAPI: technical indicators (RSI, MACD, moving averages, chart patterns)
- AIXBT: market sentiment and narrative, whale activity

symbol: {symbol}
query: {query}

Return JSON only (no markdown code block):
{{"call_taapi": true or false, "call_aixbt": true or false}}"""

    # 市场推理提示词
    ANALYSIS_PROMPT = """Analyze the following market data and produce a trading plan.

{market_data}

Return JSON only (no markdown code block):
{{
    "action": "BUY" | "SELL" | "HOLD",
    "entry_price": number,
    "stop_loss": number,
    "take_profit": number,
    "position_size": "percentage of portfolio, e.g. 2.5%",
    "confidence": 0.0-1.0,
    "reasoning": "one sentence"
}}"""

    def __init__(
        self,
        provider: str = "openai",
        model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: float = 10.0,
    ):
        """
        初始化适配器

        Args:
            provider: LLM 提供商
            model: 模型名称
            api_key: API 密钥（可选）
            api_base: API 基础 URL（可选）
            timeout: 单次调用超时（秒）
        """
        self.provider = provider
        self.model = model
        self.api_key = api_key
        self.api_base = api_base
        self.timeout = timeout

    @property
    def model_name(self) -> str:
        return f"{self.provider}/{self.model}" if self.provider else self.model

    async def _call_llm(self, messages: list, temperature: float = 0.3) -> str:
        """调用 LLM"""
        try:
            response = await acompletion(
                model=self.model_name,
                messages=messages,
                temperature=temperature,
                api_key=self.api_key,
                api_base=self.api_base,
                timeout=self.timeout,
            )
            return response.choices[0].message.content or ""
        except Exception as e:
            raise LLMError(f"LLM 调用失败: {str(e)}", provider=self.model_name) from e

    async def classify_route(self, symbol: str, query: str) -> str:
        """返回 LLM 原始路由输出，解析交给路由器"""
        prompt = self.ROUTING_PROMPT.format(symbol=symbol, query=query or "(none)")
        messages = [{"role": "user", "content": prompt}]
        return await self._call_llm(messages, temperature=0.1)

    async def analyze_market(self, market_data: str) -> Dict[str, Any]:
        """生成市场推理结论"""
        prompt = self.ANALYSIS_PROMPT.format(market_data=market_data)
        messages = [{"role": "user", "content": prompt}]
        response = await self._call_llm(messages, temperature=0.3)

        # 移除可能的 markdown 代码块标记
        response = re.sub(r'```json\s*', '', response)
        response = re.sub(r'```\s*', '', response)
        try:
            result = json.loads(response.strip())
        except json.JSONDecodeError as e:
            raise LLMError(f"LLM 推理结果解析失败: {e}", provider=self.model_name) from e
        if not isinstance(result, dict):
            raise LLMError("LLM 推理结果不是 JSON 对象", provider=self.model_name)
        return result


class MockReasoningAdapter(LLMPort):
    """
    Dreams LLM 推理（mock）

    未配置 API 密钥时使用，返回固定的推理载荷。
    """

    async def classify_route(self, symbol: str, query: str) -> str:
        return json.dumps({"call_taapi": True, "call_aixbt": True})

    async def analyze_market(self, market_data: str) -> Dict[str, Any]:
        return {
            "action": "BUY",
            "entry_price": 43100,
            "stop_loss": 42200,
            "take_profit": 45000,
            "position_size": "2.5%",
            "confidence": 0.81,
            "reasoning": "Technical breakout confirmed by macro tailwinds",
        }

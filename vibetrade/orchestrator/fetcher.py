"""
并行获取 - 带超时的数据源调用与扇出

语义约定：
- 每个数据源独立限时（默认 2 秒），超时后取消该调用
- 扇出等待所有被选中的数据源结束（成功、失败或超时），总耗时不超过一个超时窗口
- 失败和超时只记录日志，结果为空，不向调用方抛出
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Any, List, Optional, Sequence

from vibetrade.domain.models import AnalysisRequest, SourceResult
from vibetrade.ports.interfaces import DataSourcePort
from vibetrade.infrastructure.errors import ErrorHandler
from vibetrade.infrastructure.metrics import record_source_outcome


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 2.0


async def call_with_timeout(
    name: str,
    operation: Callable[[], Awaitable[Dict[str, Any]]],
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> SourceResult:
    """
    在超时限制内执行一次数据源调用

    Args:
        name: 数据源名称
        operation: 无参协程工厂
        timeout: 超时时间（秒）

    Returns:
        SourceResult: 成功时带数据；超时或异常时 data 为 None
    """
    start_time = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - start_time) * 1000)

    try:
        data = await asyncio.wait_for(operation(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"{name} 调用超时（{timeout}秒）", extra={'source': name})
        record_source_outcome(name, "timeout", time.perf_counter() - start_time)
        return SourceResult(
            name=name,
            error=f"timeout:{timeout}s",
            timed_out=True,
            latency_ms=elapsed_ms(),
        )
    except Exception as e:
        error = ErrorHandler.handle_exception(e, context=name)
        logger.warning(f"{name} 调用失败: {error.message}", extra={'source': name})
        record_source_outcome(name, "failed", time.perf_counter() - start_time)
        return SourceResult(name=name, error=error.message, latency_ms=elapsed_ms())

    if data is None:
        logger.warning(f"{name} 返回空结果", extra={'source': name})
        record_source_outcome(name, "failed", time.perf_counter() - start_time)
        return SourceResult(name=name, error="empty result", latency_ms=elapsed_ms())

    record_source_outcome(name, "success", time.perf_counter() - start_time)
    return SourceResult(name=name, data=data, latency_ms=elapsed_ms())


@dataclass
class FanOutResult:
    """扇出结果"""
    results: Dict[str, SourceResult] = field(default_factory=dict)
    sources_called: List[str] = field(default_factory=list)

    def data(self, name: str) -> Optional[Dict[str, Any]]:
        """获取指定数据源的数据，未调用或失败时返回 None"""
        result = self.results.get(name)
        return result.data if result else None


async def fan_out(
    request: AnalysisRequest,
    sources: Sequence[DataSourcePort],
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> FanOutResult:
    """
    并行调用所有给定的数据源

    Args:
        request: 分析请求
        sources: 已被路由选中的数据源（顺序即 sources_called 的顺序）
        timeout: 每个数据源的超时时间（秒）

    Returns:
        FanOutResult: 各数据源结果及成功调用的数据源列表
    """
    if not sources:
        return FanOutResult()

    results = await asyncio.gather(*[
        call_with_timeout(
            source.name,
            lambda source=source: source.fetch(request),
            timeout=timeout,
        )
        for source in sources
    ])

    fan_out_result = FanOutResult()
    for result in results:
        fan_out_result.results[result.name] = result
        if result.succeeded:
            fan_out_result.sources_called.append(result.name)
    return fan_out_result

"""
监控指标路由 - 暴露系统性能数据

提供请求计数、支付拦截、各数据源成功/失败/超时计数及延迟统计。
"""

from typing import Dict, Any
from fastapi import APIRouter

from vibetrade.infrastructure import get_metrics_registry

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("/system", summary="获取系统指标")
async def get_system_metrics() -> Dict[str, Any]:
    """
    获取系统性能指标

    返回请求计数、数据源延迟统计等核心指标。
    """
    registry = get_metrics_registry()
    return {
        "metrics": registry.get_all_metrics(),
    }

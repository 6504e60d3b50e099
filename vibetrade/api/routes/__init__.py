"""
路由包初始化
"""

from vibetrade.api.routes.analysis import router as analysis_router
from vibetrade.api.routes.entrypoints import router as entrypoints_router
from vibetrade.api.routes.health import router as health_router
from vibetrade.api.routes.metrics import router as metrics_router

__all__ = [
    "analysis_router",
    "entrypoints_router",
    "health_router",
    "metrics_router",
]

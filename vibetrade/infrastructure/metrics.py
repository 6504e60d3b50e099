"""
指标系统 - 进程内性能监控

提供：
- 请求计数（按状态）
- 数据源成功 / 失败 / 超时计数
- 数据源延迟分布
"""

from typing import Dict, Any, Optional, List
from collections import defaultdict
from threading import Lock, RLock


class Counter:
    """计数器 - 只增不减的指标"""

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._value = 0.0
        self._lock = Lock()

    def inc(self, value: float = 1.0):
        """增加计数"""
        with self._lock:
            self._value += value

    def get(self) -> float:
        """获取当前值"""
        with self._lock:
            return self._value


class Histogram:
    """直方图 - 记录值的分布"""

    DEFAULT_BUCKETS = [0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 2.5, 5, 10]

    def __init__(
        self,
        name: str,
        description: str = "",
        buckets: Optional[List[float]] = None
    ):
        self.name = name
        self.description = description
        self.buckets = buckets or self.DEFAULT_BUCKETS
        self._counts = defaultdict(int)
        self._sum = 0.0
        self._count = 0
        self._lock = RLock()  # get_stats 中嵌套调用 get_percentile

    def observe(self, value: float):
        """记录一个观察值"""
        with self._lock:
            self._sum += value
            self._count += 1
            for bucket in self.buckets:
                if value <= bucket:
                    self._counts[bucket] += 1

    def get_percentile(self, p: float) -> float:
        """
        获取百分位数

        _counts 中每个桶记录的是 <= 上界的累计数量，
        因此取第一个累计数量达到目标的桶。
        """
        with self._lock:
            if self._count == 0:
                return 0.0
            target = self._count * p / 100
            for bucket in sorted(self.buckets):
                if self._counts[bucket] >= target:
                    return bucket
            return self.buckets[-1]

    def get_stats(self) -> Dict[str, float]:
        """获取统计信息"""
        with self._lock:
            return {
                "count": self._count,
                "sum": self._sum,
                "avg": self._sum / self._count if self._count > 0 else 0,
                "p50": self.get_percentile(50),
                "p90": self.get_percentile(90),
                "p99": self.get_percentile(99),
            }


class MetricsRegistry:
    """指标注册表 - 管理所有指标"""

    def __init__(self):
        self._metrics: Dict[str, Any] = {}
        self._lock = Lock()
        self._setup_default_metrics()

    def _setup_default_metrics(self):
        """设置默认指标"""
        self.register_counter("vibetrade_requests_total", "总请求数")
        self.register_counter("vibetrade_payment_required_total", "返回 402 的请求数")
        self.register_counter("vibetrade_analyses_total", "完成的分析数")
        self.register_histogram(
            "vibetrade_request_duration_seconds",
            "请求处理时间",
            buckets=[0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10]
        )
        self.register_histogram(
            "vibetrade_source_duration_seconds",
            "数据源调用时间"
        )

    def register_counter(self, name: str, description: str = "") -> Counter:
        """注册计数器"""
        with self._lock:
            if name not in self._metrics:
                self._metrics[name] = Counter(name, description)
            return self._metrics[name]

    def register_histogram(
        self,
        name: str,
        description: str = "",
        buckets: Optional[List[float]] = None
    ) -> Histogram:
        """注册直方图"""
        with self._lock:
            if name not in self._metrics:
                self._metrics[name] = Histogram(name, description, buckets)
            return self._metrics[name]

    def get(self, name: str) -> Any:
        """获取指标"""
        with self._lock:
            return self._metrics.get(name)

    def get_all_metrics(self) -> Dict[str, Any]:
        """获取所有指标的当前值"""
        result = {}
        with self._lock:
            for name, metric in self._metrics.items():
                if isinstance(metric, Counter):
                    result[name] = {"type": "counter", "value": metric.get()}
                elif isinstance(metric, Histogram):
                    result[name] = {"type": "histogram", **metric.get_stats()}
        return result


# 全局指标注册表
_registry: Optional[MetricsRegistry] = None


def get_metrics_registry() -> MetricsRegistry:
    """获取全局指标注册表"""
    global _registry
    if _registry is None:
        _registry = MetricsRegistry()
    return _registry


def increment_counter(name: str, value: float = 1.0):
    """增加计数器，不存在时自动注册"""
    get_metrics_registry().register_counter(name).inc(value)


def record_histogram(name: str, value: float):
    """记录直方图值"""
    histogram = get_metrics_registry().get(name)
    if histogram:
        histogram.observe(value)


def record_source_outcome(source: str, outcome: str, duration_seconds: float):
    """
    记录一次数据源调用

    Args:
        source: 数据源名称
        outcome: success / failed / timeout
        duration_seconds: 耗时（秒）
    """
    increment_counter(f"vibetrade_source_{source.lower()}_{outcome}_total")
    record_histogram("vibetrade_source_duration_seconds", duration_seconds)

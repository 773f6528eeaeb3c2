"""
Evaluation Layer - 评估框架

Modules:
    evaluator: 评估器和智能体
    metrics: 评估指标
"""
from .evaluator import (
    EvalResult,
    Agent,
    RandomAgent,
    HeuristicAgent,
    Evaluator,
)
from .metrics import (
    GameMetrics,
    MetricsCollector,
    SeriesStats,
    MetricsAggregator,
)

__all__ = [
    # evaluator
    "EvalResult",
    "Agent",
    "RandomAgent",
    "HeuristicAgent",
    "Evaluator",
    # metrics
    "GameMetrics",
    "MetricsCollector",
    "SeriesStats",
    "MetricsAggregator",
]

"""
评估指标

单局指标收集与分布统计
"""
from typing import Dict, List, Tuple
from dataclasses import dataclass
from collections import Counter
import numpy as np

from core.cards import TOTAL_ENEMIES


@dataclass
class GameMetrics:
    """
    单局游戏指标

    Attributes:
        victory: 是否胜利
        enemies_defeated: 击败的敌人数
        length: 成功执行的步数
        reward: 累计奖励
        invalid_actions: 被拒绝的动作数
        truncated: 是否因步数上限被截断
    """
    victory: bool
    enemies_defeated: int
    length: int
    reward: float = 0.0
    invalid_actions: int = 0
    truncated: bool = False

    @property
    def gameover(self) -> bool:
        return not self.victory and not self.truncated

    @property
    def furthest_tier(self) -> str:
        """到达的最远敌人层级 (J / Q / K / cleared)"""
        if self.victory:
            return "cleared"
        return ("J", "Q", "K")[min(self.enemies_defeated // 4, 2)]


class MetricsCollector:
    """
    指标收集器

    收集单局指标并汇总
    """

    def __init__(self):
        self.games: List[GameMetrics] = []

    def add_game(self, metrics: GameMetrics):
        """添加游戏指标"""
        self.games.append(metrics)

    def compute_metrics(self) -> Dict[str, float]:
        """
        计算汇总指标

        Returns:
            指标字典, 没有对局时为空
        """
        n_games = len(self.games)
        if n_games == 0:
            return {}

        return {
            "games": n_games,
            "win_rate": sum(g.victory for g in self.games) / n_games,
            "gameover_rate": sum(g.gameover for g in self.games) / n_games,
            "truncated_rate": sum(g.truncated for g in self.games) / n_games,
            "avg_enemies_defeated": float(np.mean([g.enemies_defeated for g in self.games])),
            "avg_length": float(np.mean([g.length for g in self.games])),
            "avg_reward": float(np.mean([g.reward for g in self.games])),
            "avg_invalid_actions": float(np.mean([g.invalid_actions for g in self.games])),
        }

    def defeat_histogram(self) -> Dict[int, int]:
        """击败敌人数的分布 (0..12)"""
        counts = Counter(g.enemies_defeated for g in self.games)
        return {n: counts.get(n, 0) for n in range(TOTAL_ENEMIES + 1)}

    def tier_counts(self) -> Dict[str, int]:
        """到达各层级的对局数"""
        counts = Counter(g.furthest_tier for g in self.games)
        return {tier: counts.get(tier, 0) for tier in ("J", "Q", "K", "cleared")}

    def reset(self):
        """重置"""
        self.games.clear()


class SeriesStats:
    """
    数值序列统计

    保留全部样本, 汇总时给出均值、样本标准差与分位数
    """

    def __init__(self):
        self.values: List[float] = []

    def update(self, x: float):
        self.values.append(float(x))

    @property
    def count(self) -> int:
        return len(self.values)

    @property
    def mean(self) -> float:
        return float(np.mean(self.values)) if self.values else 0.0

    @property
    def variance(self) -> float:
        """样本方差 (少于 2 个样本时为 0)"""
        if len(self.values) < 2:
            return 0.0
        return float(np.var(self.values, ddof=1))

    @property
    def std(self) -> float:
        return float(np.sqrt(self.variance))

    def percentile(self, q: float) -> float:
        """第 q 百分位数"""
        if not self.values:
            return 0.0
        return float(np.percentile(self.values, q))

    def to_dict(self) -> Dict[str, float]:
        if not self.values:
            return {"count": 0, "mean": 0.0, "std": 0.0, "min": 0.0, "median": 0.0, "p90": 0.0, "max": 0.0}
        arr = np.asarray(self.values)
        return {
            "count": len(arr),
            "mean": float(arr.mean()),
            "std": self.std,
            "min": float(arr.min()),
            "median": float(np.median(arr)),
            "p90": self.percentile(90),
            "max": float(arr.max()),
        }


# 按对局累积的字段
TRACKED_FIELDS = ("enemies_defeated", "length", "reward", "invalid_actions")


class MetricsAggregator:
    """按字段汇总多局 GameMetrics 的分布"""

    def __init__(self, fields: Tuple[str, ...] = TRACKED_FIELDS):
        self.fields = fields
        self.series: Dict[str, SeriesStats] = {name: SeriesStats() for name in fields}

    def add_game(self, game: GameMetrics):
        for name in self.fields:
            self.series[name].update(getattr(game, name))

    def get(self, name: str) -> Dict[str, float]:
        """
        获取单个字段的统计

        Returns:
            统计字典, 未跟踪的字段返回空字典
        """
        stats = self.series.get(name)
        return stats.to_dict() if stats is not None else {}

    def get_all(self) -> Dict[str, Dict[str, float]]:
        return {name: stats.to_dict() for name, stats in self.series.items()}

    def reset(self):
        self.series = {name: SeriesStats() for name in self.fields}

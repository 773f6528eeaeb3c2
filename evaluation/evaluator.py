"""
评估器

评估智能体在 Regicide 中的表现
"""
from typing import Dict, List, Optional, Callable, Any, Union
from dataclasses import dataclass, field, asdict
import numpy as np
import logging

from core.actions import Action
from core.ai import RegicideAI, HeuristicWeights
from core.state import GameSnapshot

from .metrics import GameMetrics, MetricsCollector, MetricsAggregator

logger = logging.getLogger(__name__)


@dataclass
class EvalResult:
    """评估结果"""
    win_rate: float
    avg_reward: float
    avg_length: float
    games_played: int
    avg_enemies_defeated: float = 0.0
    gameover_rate: float = 0.0
    defeat_histogram: Dict[int, int] = field(default_factory=dict)
    tier_counts: Dict[str, int] = field(default_factory=dict)
    extra_stats: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def __repr__(self) -> str:
        return (
            f"EvalResult(win_rate={self.win_rate:.2%}, "
            f"avg_enemies={self.avg_enemies_defeated:.2f}, "
            f"avg_reward={self.avg_reward:.2f}, "
            f"games={self.games_played})"
        )


class Agent:
    """智能体基类"""

    def __init__(self, name: str = "agent"):
        self.name = name

    def act(
        self,
        obs: Dict[str, Any],
        legal_actions: List[Action],
        info: Optional[Dict[str, Any]] = None,
    ) -> Union[int, Action]:
        """选择动作 (合法动作索引或 Action 对象)"""
        raise NotImplementedError

    def reset(self):
        """重置状态"""
        pass


class RandomAgent(Agent):
    """随机智能体"""

    def __init__(self, name: str = "random", seed: Optional[int] = None):
        super().__init__(name)
        self._seed = seed
        self._rng = np.random.default_rng(seed)

    def act(
        self,
        obs: Dict[str, Any],
        legal_actions: List[Action],
        info: Optional[Dict[str, Any]] = None,
    ) -> int:
        if not legal_actions:
            return 0
        return int(self._rng.integers(len(legal_actions)))

    def reset(self):
        self._rng = np.random.default_rng(self._seed)


class HeuristicAgent(Agent):
    """
    启发式智能体

    包装 RegicideAI, 为当前行动的座位决策
    """

    def __init__(self, name: str = "heuristic", weights: Optional[HeuristicWeights] = None):
        super().__init__(name)
        self.weights = weights or HeuristicWeights()

    def act(
        self,
        obs: Dict[str, Any],
        legal_actions: List[Action],
        info: Optional[Dict[str, Any]] = None,
    ) -> Action:
        if info is None or "state" not in info:
            raise ValueError("HeuristicAgent needs the env info dict with a 'state' snapshot")
        state: GameSnapshot = info["state"]
        ai = RegicideAI(player_index=state.current_player, weights=self.weights)
        return ai.decide(state)


class Evaluator:
    """
    评估器

    合作游戏中由同一智能体控制所有座位, 统计胜率与推进深度
    """

    def __init__(
        self,
        env_fn: Callable,
        max_steps: int = 1000,
    ):
        """
        Args:
            env_fn: 创建环境的工厂函数
            max_steps: 单局最大动作数 (含被拒绝的动作)
        """
        self.env_fn = env_fn
        self.max_steps = max_steps

    def run_game(self, env, agent: Agent, seed: Optional[int] = None) -> GameMetrics:
        """
        运行一局

        Returns:
            单局指标
        """
        agent.reset()
        obs, info = env.reset(seed=seed)
        done = False
        truncated = False
        reward_sum = 0.0
        length = 0
        invalid = 0
        steps = 0

        while not done:
            action = agent.act(obs, info["legal_actions"], info)
            obs, reward, terminated, truncated, info = env.step(action)
            reward_sum += reward
            steps += 1
            if "error" in info:
                invalid += 1
            else:
                length += 1
            if steps >= self.max_steps and not terminated:
                truncated = True
            done = terminated or truncated

        return GameMetrics(
            victory=bool(info.get("victory", False)),
            enemies_defeated=info["enemies_defeated"],
            length=length,
            reward=reward_sum,
            invalid_actions=invalid,
            truncated=truncated,
        )

    def evaluate(
        self,
        agent: Agent,
        n_games: int = 100,
        seed: Optional[int] = None,
        verbose: bool = False,
    ) -> EvalResult:
        """
        评估智能体

        Args:
            agent: 待评估智能体
            n_games: 游戏数量
            seed: 起始种子, 第 i 局使用 seed + i
            verbose: 是否输出详情

        Returns:
            评估结果
        """
        env = self.env_fn()
        collector = MetricsCollector()
        aggregator = MetricsAggregator()

        for game_idx in range(n_games):
            game_seed = seed + game_idx if seed is not None else None
            metrics = self.run_game(env, agent, seed=game_seed)
            collector.add_game(metrics)
            aggregator.add_game(metrics)

            if verbose and (game_idx + 1) % 10 == 0:
                wins = sum(g.victory for g in collector.games)
                logger.info(f"Game {game_idx + 1}/{n_games}, Win rate: {wins/(game_idx+1):.2%}")

        env.close()

        summary = collector.compute_metrics()
        if not summary:
            return EvalResult(win_rate=0.0, avg_reward=0.0, avg_length=0.0, games_played=0)

        return EvalResult(
            win_rate=summary["win_rate"],
            avg_reward=summary["avg_reward"],
            avg_length=summary["avg_length"],
            games_played=n_games,
            avg_enemies_defeated=summary["avg_enemies_defeated"],
            gameover_rate=summary["gameover_rate"],
            defeat_histogram=collector.defeat_histogram(),
            tier_counts=collector.tier_counts(),
            extra_stats={
                "truncated_rate": summary["truncated_rate"],
                "avg_invalid_actions": summary["avg_invalid_actions"],
                "distributions": aggregator.get_all(),
            },
        )

    def compare(
        self,
        agent1: Agent,
        agent2: Agent,
        n_games: int = 100,
        seed: int = 0,
    ) -> Dict[str, float]:
        """
        在相同发牌下对比两个智能体

        Args:
            agent1: 智能体1
            agent2: 智能体2
            n_games: 游戏数量
            seed: 起始种子

        Returns:
            对比结果
        """
        result1 = self.evaluate(agent1, n_games=n_games, seed=seed)
        result2 = self.evaluate(agent2, n_games=n_games, seed=seed)

        return {
            "agent1_win_rate": result1.win_rate,
            "agent2_win_rate": result2.win_rate,
            "agent1_avg_enemies": result1.avg_enemies_defeated,
            "agent2_avg_enemies": result2.avg_enemies_defeated,
            "enemies_diff": result1.avg_enemies_defeated - result2.avg_enemies_defeated,
        }

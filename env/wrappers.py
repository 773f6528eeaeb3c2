"""
环境包装器

观测展平、AI 伙伴代打与回合统计
"""
from typing import Dict, Tuple, Optional
import numpy as np

import gymnasium as gym
from gymnasium import Wrapper

from core.ai import RegicideAI, HeuristicWeights


class FlattenObservationWrapper(gym.ObservationWrapper):
    """
    按观测空间的键顺序把字典观测拼成一维向量

    所有分量都已归一化到 [0, 1]
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        self._keys = list(env.observation_space.spaces.keys())
        flat_dim = sum(
            int(np.prod(env.observation_space[key].shape)) for key in self._keys
        )
        self.observation_space = gym.spaces.Box(0.0, 1.0, shape=(flat_dim,), dtype=np.float32)

    def observation(self, obs: Dict[str, np.ndarray]) -> np.ndarray:
        return np.concatenate([np.ravel(obs[key]) for key in self._keys]).astype(np.float32)


class PartnerWrapper(Wrapper):
    """
    AI 伙伴包装器

    智能体只控制一个座位, 其余座位由启发式 AI 自动行动;
    伙伴行动产生的奖励累加到智能体的这一步
    """

    def __init__(
        self,
        env: gym.Env,
        controlled_player: int = 0,
        weights: Optional[HeuristicWeights] = None,
    ):
        """
        Args:
            env: 基础环境 (RegicideEnv)
            controlled_player: 智能体控制的座位
            weights: 伙伴 AI 的打分权重
        """
        super().__init__(env)
        self.controlled_player = controlled_player
        self.weights = weights
        self._partners: Dict[int, RegicideAI] = {}

    def reset(self, **kwargs) -> Tuple[Dict, Dict]:
        obs, info = self.env.reset(**kwargs)

        game = self.env.unwrapped.game
        self._partners = {
            player: RegicideAI(game, player_index=player, weights=self.weights)
            for player in range(game.player_count)
            if player != self.controlled_player
        }

        obs, _, terminated, truncated, info = self._run_partners(obs, info)
        return obs, info

    def step(self, action) -> Tuple[Dict, float, bool, bool, Dict]:
        obs, reward, terminated, truncated, info = self.env.step(action)

        if terminated or truncated or "error" in info:
            return obs, reward, terminated, truncated, info

        obs, partner_reward, terminated, truncated, info = self._run_partners(obs, info)
        return obs, reward + partner_reward, terminated, truncated, info

    def _run_partners(self, obs: Dict, info: Dict) -> Tuple[Dict, float, bool, bool, Dict]:
        """伙伴连续行动, 直到轮回智能体或对局结束"""
        total_reward = 0.0
        terminated = truncated = False

        while info["current_player"] != self.controlled_player:
            partner = self._partners[info["current_player"]]
            action = partner.decide(info["state"])
            obs, reward, terminated, truncated, info = self.env.step(action)
            total_reward += reward
            if terminated or truncated:
                break
            if "error" in info:
                raise RuntimeError(f"Partner AI chose a rejected action: {info['error']}")

        return obs, total_reward, terminated, truncated, info


class RecordEpisodeStatistics(Wrapper):
    """
    回合结束时在 info["episode"] 中写入统计:
    r 累计奖励, l 成功动作数, invalid 被拒绝动作数, enemies_defeated, victory
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        self._totals = {"r": 0.0, "l": 0, "invalid": 0}

    def reset(self, **kwargs) -> Tuple[Dict, Dict]:
        self._totals = {"r": 0.0, "l": 0, "invalid": 0}
        return self.env.reset(**kwargs)

    def step(self, action) -> Tuple[Dict, float, bool, bool, Dict]:
        obs, reward, terminated, truncated, info = self.env.step(action)

        self._totals["r"] += reward
        if "error" in info:
            self._totals["invalid"] += 1
        else:
            self._totals["l"] += 1

        if terminated or truncated:
            info["episode"] = dict(
                self._totals,
                enemies_defeated=info.get("enemies_defeated", 0),
                victory=info.get("victory", False),
            )

        return obs, reward, terminated, truncated, info


def wrap_env(
    env: gym.Env,
    flatten_obs: bool = False,
    record_stats: bool = True,
    partner: bool = False,
    controlled_player: int = 0,
) -> gym.Env:
    """
    应用常用包装器组合

    Args:
        env: 基础环境
        flatten_obs: 是否展平观测
        record_stats: 是否记录统计
        partner: 是否由 AI 控制其余座位
        controlled_player: 智能体控制的座位 (partner=True 时生效)

    Returns:
        包装后的环境
    """
    if partner:
        env = PartnerWrapper(env, controlled_player=controlled_player)

    if record_stats:
        env = RecordEpisodeStatistics(env)

    if flatten_obs:
        env = FlattenObservationWrapper(env)

    return env

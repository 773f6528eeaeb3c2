"""
奖励函数

支持两种奖励设计:
- 终局奖励 (sparse)
- 过程奖励 (shaped): 终局奖励 + 击败敌人 + 造成伤害
"""
from dataclasses import dataclass
from typing import Optional
from enum import Enum

from core.state import GameSnapshot, Phase


class RewardType(Enum):
    """奖励类型"""
    SPARSE = "sparse"      # 仅终局奖励
    SHAPED = "shaped"      # 过程奖励


@dataclass
class RewardConfig:
    """奖励配置"""
    reward_type: RewardType = RewardType.SHAPED
    victory_reward: float = 10.0
    gameover_reward: float = -10.0
    enemy_defeat_bonus: float = 1.0
    damage_weight: float = 0.02     # 每点伤害
    invalid_action_penalty: float = -0.5

    @classmethod
    def from_dict(cls, d: dict) -> 'RewardConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        if isinstance(filtered.get("reward_type"), str):
            filtered["reward_type"] = RewardType(filtered["reward_type"])
        return cls(**filtered)


class RewardCalculator:
    """
    奖励计算器

    Regicide 是合作游戏, 所有玩家共享同一奖励
    """

    def __init__(self, config: Optional[RewardConfig] = None):
        self.config = config or RewardConfig()

    def compute(
        self,
        state: GameSnapshot,
        prev_state: Optional[GameSnapshot] = None,
    ) -> float:
        """
        计算奖励

        Args:
            state: 当前快照
            prev_state: 前一快照 (用于 shaped 奖励)

        Returns:
            奖励值
        """
        if self.config.reward_type == RewardType.SPARSE:
            return self._sparse_reward(state)
        elif self.config.reward_type == RewardType.SHAPED:
            return self._shaped_reward(state, prev_state)
        else:
            return 0.0

    def _sparse_reward(self, state: GameSnapshot) -> float:
        """
        稀疏奖励：仅在游戏结束时给予

        Returns:
            胜利: victory_reward, 失败: gameover_reward, 其他: 0
        """
        if state.phase == Phase.VICTORY:
            return self.config.victory_reward
        if state.phase == Phase.GAMEOVER:
            return self.config.gameover_reward
        return 0.0

    def _shaped_reward(
        self,
        state: GameSnapshot,
        prev_state: Optional[GameSnapshot],
    ) -> float:
        """
        过程奖励

        奖励组成:
        1. 终局奖励
        2. 新击败的敌人
        3. 对同一敌人造成的伤害
        """
        reward = self._sparse_reward(state)
        if prev_state is None:
            return reward

        defeated = state.enemies_defeated - prev_state.enemies_defeated
        if defeated > 0:
            reward += defeated * self.config.enemy_defeat_bonus
        elif (
            state.current_enemy is not None
            and state.current_enemy == prev_state.current_enemy
        ):
            damage = prev_state.enemy_hp - state.enemy_hp
            if damage > 0:
                reward += damage * self.config.damage_weight

        return reward


def create_reward_calculator(
    reward_type: str = "shaped",
    **kwargs
) -> RewardCalculator:
    """
    工厂函数：创建奖励计算器

    Args:
        reward_type: 奖励类型 ("sparse", "shaped")
        **kwargs: 其他配置参数

    Returns:
        RewardCalculator 实例
    """
    config = RewardConfig(
        reward_type=RewardType(reward_type),
        **kwargs
    )
    return RewardCalculator(config)

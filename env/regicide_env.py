"""
Regicide Gymnasium 环境

遵循标准 Gymnasium API
"""
from typing import Dict, Any, Tuple, Optional, List, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from core.actions import Action, ACTION_CLASSES
from core.cards import NUM_CARD_SLOTS, cards_to_str
from core.config import GameConfig, MAX_PLAYERS
from core.engine import RegicideGame
from core.state import GameSnapshot, Phase, Rejected

from .observation import ObservationBuilder, PHASE_ORDER, get_action_encoder
from .reward import RewardCalculator, RewardConfig, RewardType


class RegicideEnv(gym.Env):
    """
    Regicide Gymnasium 环境

    合作游戏: 智能体依次控制当前行动的玩家, 所有玩家共享奖励

    API:
    - reset() -> observation, info
    - step(action) -> observation, reward, terminated, truncated, info
    """

    metadata = {
        "render_modes": ["human", "ansi"],
        "name": "Regicide-v1",
    }

    def __init__(
        self,
        render_mode: Optional[str] = None,
        player_count: int = 1,
        joker_policy: Optional[str] = None,
        reward_type: str = "shaped",
        reward_config: Optional[RewardConfig] = None,
        max_steps: int = 1000,
        seed: Optional[int] = None,
    ):
        """
        Args:
            render_mode: 渲染模式 ("human", "ansi", None)
            player_count: 玩家数 (1-4)
            joker_policy: Joker 模式 ("counter", "card", None=按人数默认)
            reward_type: 奖励类型 ("sparse", "shaped")
            reward_config: 完整奖励配置 (优先于 reward_type)
            max_steps: 单局最大步数, 超出则截断
            seed: 随机种子
        """
        super().__init__()

        self.render_mode = render_mode
        self.max_steps = max_steps
        self._seed = seed
        self._config = GameConfig(player_count=player_count, joker_policy=joker_policy)

        # 观测构建器
        self._obs_builder = ObservationBuilder()

        # 奖励计算器
        if reward_config is None:
            reward_config = RewardConfig(reward_type=RewardType(reward_type))
        self._reward_calculator = RewardCalculator(reward_config)

        # 动作编码器
        self._action_encoder = get_action_encoder()

        # 状态
        self._game: Optional[RegicideGame] = None
        self._prev_state: Optional[GameSnapshot] = None
        self._step_count = 0

        # 定义空间
        self._define_spaces()

    def _define_spaces(self):
        """定义观测和动作空间"""
        # 动作空间: 当前合法动作列表中的索引
        self.action_space = spaces.Discrete(self._action_encoder.num_actions)

        # 观测空间: 字典形式
        self.observation_space = spaces.Dict({
            "hand": spaces.Box(0, 1, shape=(NUM_CARD_SLOTS,), dtype=np.float32),
            "enemy": spaces.Box(0, 1, shape=(NUM_CARD_SLOTS,), dtype=np.float32),
            "discard": spaces.Box(0, 1, shape=(NUM_CARD_SLOTS,), dtype=np.float32),
            "enemy_stats": spaces.Box(0, 1, shape=(5,), dtype=np.float32),
            "piles": spaces.Box(0, 1, shape=(4,), dtype=np.float32),
            "hand_sizes": spaces.Box(0, 1, shape=(MAX_PLAYERS,), dtype=np.float32),
            "position": spaces.Box(0, 1, shape=(MAX_PLAYERS,), dtype=np.float32),
            "phase": spaces.Box(0, 1, shape=(len(PHASE_ORDER),), dtype=np.float32),
            "discard_info": spaces.Box(0, 1, shape=(2,), dtype=np.float32),
            "jokers": spaces.Box(0, 1, shape=(2,), dtype=np.float32),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        重置环境

        Args:
            seed: 随机种子
            options: 额外选项

        Returns:
            (observation, info) 元组
        """
        super().reset(seed=seed)

        # 使用提供的种子或初始种子
        game_seed = seed if seed is not None else self._seed

        self._game = RegicideGame(self._config)
        self._game.reset(seed=game_seed)
        self._prev_state = None
        self._step_count = 0

        obs = self._build_observation()
        info = self._build_info()

        if self.render_mode == "human":
            self.render()

        return obs, info

    def step(
        self,
        action: Union[int, Action],
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        执行动作

        Args:
            action: 动作索引或 Action 对象

        Returns:
            (observation, reward, terminated, truncated, info) 元组
        """
        if self._game is None:
            raise RuntimeError("Environment not reset. Call reset() first.")

        self._prev_state = self._game.get_state()
        concrete_action = self._decode_action(action)

        result = self._game.apply(concrete_action)
        if isinstance(result, Rejected):
            # 非法动作：给予惩罚并保持状态
            obs = self._build_observation()
            info = self._build_info()
            info["error"] = result.message
            info["reject_reason"] = result.reason.value
            return obs, self._reward_calculator.config.invalid_action_penalty, False, False, info

        self._step_count += 1
        state = self._game.get_state()

        obs = self._build_observation()
        reward = self._reward_calculator.compute(state, self._prev_state)

        terminated = state.is_finished
        truncated = not terminated and self._step_count >= self.max_steps

        info = self._build_info()
        info["events"] = result.events

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    def _decode_action(self, action: Union[int, Action]) -> Action:
        """解码动作"""
        if isinstance(action, ACTION_CLASSES):
            return action
        elif isinstance(action, (int, np.integer)):
            legal_actions = self._game.get_legal_actions()
            decoded = self._action_encoder.decode(int(action), legal_actions)
            if decoded is None:
                raise ValueError(
                    f"Invalid action index: {action}. "
                    f"Valid range: 0-{len(legal_actions) - 1}"
                )
            return decoded
        else:
            raise ValueError(f"Invalid action type: {type(action)}")

    def _build_observation(self) -> Dict[str, np.ndarray]:
        """构建观测 (当前行动玩家视角)"""
        obs = self._obs_builder.build(self._game)
        return obs.to_dict()

    def _build_info(self) -> Dict[str, Any]:
        """构建 info 字典"""
        state = self._game.get_state()
        legal_actions = self._game.get_legal_actions()

        info = {
            "state": state,
            "current_player": state.current_player,
            "phase": state.phase.value,
            "legal_actions": legal_actions,
            "legal_action_mask": self._action_encoder.build_legal_mask(legal_actions),
            "enemies_defeated": state.enemies_defeated,
            "step_count": self._step_count,
        }

        if state.is_finished:
            info["victory"] = state.phase == Phase.VICTORY

        return info

    def render(self) -> Optional[str]:
        """渲染环境"""
        if self.render_mode == "ansi" or self.render_mode == "human":
            return self._render_text()
        return None

    def _render_text(self) -> str:
        """文本渲染"""
        state = self._game.get_state()
        lines = []
        lines.append("=" * 50)
        lines.append(f"Phase: {state.phase.value}")
        lines.append(f"Current Player: {state.current_player + 1}")

        if state.current_enemy is not None:
            lines.append(
                f"Enemy: {state.current_enemy.label} "
                f"HP {state.enemy_hp}/{state.enemy_max_hp} "
                f"ATK {state.effective_attack} (shield {state.shield})"
            )
        lines.append(
            f"Tavern: {state.tavern_count}  Castle: {state.castle_count}  "
            f"Discard: {state.discard_count}  Defeated: {state.enemies_defeated}/{state.total_enemies}"
        )

        # 显示手牌
        for player, hand in enumerate(state.hands):
            lines.append(f"Player {player + 1}: {cards_to_str(hand)} ({len(hand)})")

        if state.phase == Phase.DISCARD:
            lines.append(f"Discard needed: {state.discard_remaining}")
        if state.jokers_available:
            lines.append(f"Jokers: {state.jokers_available}")

        lines.append("=" * 50)

        output = "\n".join(lines)
        if self.render_mode == "human":
            print(output)
        return output

    def close(self):
        """关闭环境"""
        pass

    @property
    def game(self) -> Optional[RegicideGame]:
        """获取对局引擎 (用于调试)"""
        return self._game

    @property
    def state(self) -> Optional[GameSnapshot]:
        """获取当前快照"""
        if self._game is None:
            return None
        return self._game.get_state()

    def get_legal_actions(self) -> List[Action]:
        """获取当前合法动作"""
        if self._game is None:
            return []
        return self._game.get_legal_actions()

    def sample_action(self) -> int:
        """随机采样一个合法动作索引"""
        legal_actions = self.get_legal_actions()
        if not legal_actions:
            return 0
        return int(self.np_random.integers(len(legal_actions)))


def make_env(
    env_id: str = "Regicide-v1",
    **kwargs
) -> RegicideEnv:
    """
    工厂函数：创建环境

    Args:
        env_id: 环境 ID
        **kwargs: 环境参数

    Returns:
        RegicideEnv 实例
    """
    return RegicideEnv(**kwargs)

"""
观察空间编码

将对局状态转换为神经网络可用的特征表示
"""
from dataclasses import dataclass
from typing import Dict, List, Optional
import numpy as np

from core.cards import NUM_CARD_SLOTS, MAX_JOKERS, cards_to_array
from core.config import MAX_PLAYERS
from core.state import Phase
from core.actions import Action
from core.engine import RegicideGame


# 单步合法动作数的上限 (8 张手牌时实际不超过 ~110)
MAX_ACTIONS = 256

PHASE_ORDER = (Phase.PLAY, Phase.DISCARD, Phase.GAMEOVER, Phase.VICTORY)

# 归一化常数
MAX_ENEMY_HP = 40.0
MAX_ENEMY_ATTACK = 20.0
MAX_HAND = 8.0


@dataclass
class Observation:
    """
    结构化观测

    Attributes:
        hand: 视角玩家手牌 (54,)
        enemy: 当前敌人 (54,) one-hot
        discard: 弃牌堆内容 (54,) (公开信息)
        enemy_stats: [生命, 最大生命, 攻击, 护盾, 有效攻击] 归一化 (5,)
        piles: [酒馆, 城堡, 弃牌堆, 已击败] 归一化 (4,)
        hand_sizes: 各玩家手牌数 (4,)
        position: 视角玩家 one-hot (4,)
        phase_onehot: 阶段 one-hot (4,)
        discard_info: [需要弃牌值, 剩余弃牌值] 归一化 (2,)
        jokers: [可用 Joker, 剩余计数] 归一化 (2,)
        legal_actions: 合法动作列表
        phase: 阶段名
    """
    hand: np.ndarray
    enemy: np.ndarray
    discard: np.ndarray
    enemy_stats: np.ndarray
    piles: np.ndarray
    hand_sizes: np.ndarray
    position: np.ndarray
    phase_onehot: np.ndarray
    discard_info: np.ndarray
    jokers: np.ndarray
    legal_actions: List[Action]
    phase: str

    def to_dict(self) -> Dict[str, np.ndarray]:
        """转换为字典格式"""
        return {
            "hand": self.hand,
            "enemy": self.enemy,
            "discard": self.discard,
            "enemy_stats": self.enemy_stats,
            "piles": self.piles,
            "hand_sizes": self.hand_sizes,
            "position": self.position,
            "phase": self.phase_onehot,
            "discard_info": self.discard_info,
            "jokers": self.jokers,
        }

    def to_flat_array(self) -> np.ndarray:
        """
        展平为单一向量 (用于简单网络)

        特征维度: 54 * 3 + 5 + 4 + 4 + 4 + 4 + 2 + 2 = 187
        """
        return np.concatenate([
            self.hand,
            self.enemy,
            self.discard,
            self.enemy_stats,
            self.piles,
            self.hand_sizes,
            self.position,
            self.phase_onehot,
            self.discard_info,
            self.jokers,
        ])


class ObservationBuilder:
    """
    观测构建器

    负责将 RegicideGame 转换为 Observation
    """

    def __init__(self, include_discard: bool = True):
        """
        Args:
            include_discard: 是否编码弃牌堆内容
        """
        self.include_discard = include_discard

    def build(self, game: RegicideGame, perspective: Optional[int] = None) -> Observation:
        """
        从对局构建观测

        Args:
            game: 对局引擎
            perspective: 视角玩家 (默认为当前玩家)

        Returns:
            Observation 对象
        """
        state = game.get_state()
        if perspective is None:
            perspective = state.current_player

        hand = cards_to_array(state.hand(perspective))

        enemy = np.zeros(NUM_CARD_SLOTS, dtype=np.float32)
        if state.current_enemy is not None:
            enemy = cards_to_array([state.current_enemy])

        if self.include_discard:
            discard = cards_to_array(game.discard_pile)
        else:
            discard = np.zeros(NUM_CARD_SLOTS, dtype=np.float32)

        enemy_stats = np.array([
            state.enemy_hp / MAX_ENEMY_HP,
            state.enemy_max_hp / MAX_ENEMY_HP,
            state.enemy_attack / MAX_ENEMY_ATTACK,
            state.shield / MAX_ENEMY_HP,
            state.effective_attack / MAX_ENEMY_ATTACK,
        ], dtype=np.float32)
        enemy_stats = np.clip(enemy_stats, 0, 1)

        piles = np.array([
            state.tavern_count / NUM_CARD_SLOTS,
            state.castle_count / state.total_enemies,
            state.discard_count / NUM_CARD_SLOTS,
            state.enemies_defeated / state.total_enemies,
        ], dtype=np.float32)

        hand_sizes = np.zeros(MAX_PLAYERS, dtype=np.float32)
        for i, cards in enumerate(state.hands):
            hand_sizes[i] = len(cards) / MAX_HAND

        position = np.zeros(MAX_PLAYERS, dtype=np.float32)
        position[perspective] = 1

        phase_onehot = np.zeros(len(PHASE_ORDER), dtype=np.float32)
        phase_onehot[PHASE_ORDER.index(state.phase)] = 1

        discard_info = np.array([
            state.discard_needed / MAX_ENEMY_ATTACK,
            state.discard_remaining / MAX_ENEMY_ATTACK,
        ], dtype=np.float32)

        jokers = np.array([
            min(game.jokers_available(perspective), MAX_JOKERS) / MAX_JOKERS,
            min(state.jokers_remaining, MAX_JOKERS) / MAX_JOKERS,
        ], dtype=np.float32)

        return Observation(
            hand=hand,
            enemy=enemy,
            discard=discard,
            enemy_stats=enemy_stats,
            piles=piles,
            hand_sizes=hand_sizes,
            position=position,
            phase_onehot=phase_onehot,
            discard_info=discard_info,
            jokers=jokers,
            legal_actions=game.get_legal_actions(),
            phase=state.phase.value,
        )


class ActionEncoder:
    """
    动作编码器

    Regicide 的动作由手牌决定, 因此索引指向当前合法动作列表中的位置,
    列表顺序由 RegicideGame.get_legal_actions() 保证稳定
    """

    def __init__(self, max_actions: int = MAX_ACTIONS):
        self._num_actions = max_actions

    @property
    def num_actions(self) -> int:
        """动作空间大小"""
        return self._num_actions

    def encode(self, action: Action, legal_actions: List[Action]) -> int:
        """
        将动作编码为索引

        Returns:
            动作索引，不在合法列表中返回 -1
        """
        try:
            idx = legal_actions.index(action)
        except ValueError:
            return -1
        return idx if idx < self._num_actions else -1

    def decode(self, idx: int, legal_actions: List[Action]) -> Optional[Action]:
        """
        将索引解码为动作

        Returns:
            Action 对象，越界返回 None
        """
        if 0 <= idx < min(len(legal_actions), self._num_actions):
            return legal_actions[idx]
        return None

    def get_legal_action_indices(self, legal_actions: List[Action]) -> List[int]:
        """获取合法动作的索引列表"""
        return list(range(min(len(legal_actions), self._num_actions)))

    def build_legal_mask(self, legal_actions: List[Action]) -> np.ndarray:
        """
        构建合法动作掩码

        Returns:
            (num_actions,) 数组
        """
        mask = np.zeros(self._num_actions, dtype=np.float32)
        mask[:min(len(legal_actions), self._num_actions)] = 1
        return mask


# 全局单例
_action_encoder: Optional[ActionEncoder] = None


def get_action_encoder() -> ActionEncoder:
    """获取全局动作编码器"""
    global _action_encoder
    if _action_encoder is None:
        _action_encoder = ActionEncoder()
    return _action_encoder

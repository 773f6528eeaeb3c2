"""
对局配置

定义玩家数、Joker 模式等对局级参数
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .cards import MAX_JOKERS


class JokerPolicy(Enum):
    """Joker 规则变体"""
    COUNTER = "counter"  # 全局计数器, 与手牌无关的免费资源
    CARD = "card"        # 实体牌, 洗入酒馆, 需从手牌弃掉才能生效


# 玩家数 -> 手牌上限
HAND_SIZES: Dict[int, int] = {1: 8, 2: 7, 3: 6, 4: 5}

# CARD 模式下默认洗入酒馆的 Joker 数
DEFAULT_JOKER_CARDS: Dict[int, int] = {1: 0, 2: 0, 3: 1, 4: 2}

# COUNTER 模式下默认的 Joker 次数
DEFAULT_JOKER_COUNTER = 2

MIN_PLAYERS = 1
MAX_PLAYERS = 4


@dataclass
class GameConfig:
    """
    对局配置

    Attributes:
        player_count: 玩家数 (1-4)
        joker_policy: Joker 模式, None 表示单人用 COUNTER、多人用 CARD
        jokers: Joker 数量, None 表示按模式取默认值
        max_log_entries: 对局日志保留条数
        seed: 随机种子
    """
    player_count: int = 2
    joker_policy: Optional[JokerPolicy] = None
    jokers: Optional[int] = None
    max_log_entries: int = 50
    seed: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.joker_policy, str):
            self.joker_policy = JokerPolicy(self.joker_policy)
        self.validate()

    def validate(self):
        """检查配置合法性"""
        if not MIN_PLAYERS <= self.player_count <= MAX_PLAYERS:
            raise ValueError(
                f"player_count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, "
                f"got {self.player_count}"
            )
        if self.jokers is not None and self.jokers < 0:
            raise ValueError(f"jokers must be non-negative, got {self.jokers}")
        if self.policy == JokerPolicy.CARD and self.joker_count > MAX_JOKERS:
            raise ValueError(f"At most {MAX_JOKERS} joker cards are supported")
        if self.max_log_entries <= 0:
            raise ValueError("max_log_entries must be positive")

    @property
    def policy(self) -> JokerPolicy:
        """实际生效的 Joker 模式"""
        if self.joker_policy is not None:
            return self.joker_policy
        return JokerPolicy.COUNTER if self.player_count == 1 else JokerPolicy.CARD

    @property
    def joker_count(self) -> int:
        """实际 Joker 数量 (计数器次数或实体牌张数)"""
        if self.jokers is not None:
            return self.jokers
        if self.policy == JokerPolicy.COUNTER:
            return DEFAULT_JOKER_COUNTER
        return DEFAULT_JOKER_CARDS[self.player_count]

    @property
    def max_hand_size(self) -> int:
        return HAND_SIZES[self.player_count]

    @classmethod
    def solo(cls, **kwargs) -> 'GameConfig':
        """单人模式配置"""
        return cls(player_count=1, **kwargs)

    @classmethod
    def from_dict(cls, d: dict) -> 'GameConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)

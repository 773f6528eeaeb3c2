"""
游戏状态定义

- Phase: 对局阶段
- Event / EventType: 出牌结算产生的有序事件
- Accepted / Rejected: 变更操作的结果 (带标签的联合类型)
- Enemy: 当前敌人 (可变, 仅引擎持有)
- GameSnapshot: 对外只读快照 (不可变, 不与引擎共享可变对象)
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .cards import Card, Suit, enemy_attack, enemy_max_hp, total_value
from .config import JokerPolicy
from .rules import RuleEngine


class Phase(Enum):
    """游戏阶段"""
    PLAY = "play"          # 出牌阶段
    DISCARD = "discard"    # 弃牌抵挡阶段
    GAMEOVER = "gameover"  # 失败
    VICTORY = "victory"    # 胜利

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.GAMEOVER, Phase.VICTORY)


class EventType(Enum):
    """结算事件类型"""
    DAMAGE = "damage"
    CLUBS = "clubs"
    DIAMONDS = "diamonds"
    SPADES = "spades"
    HEARTS = "hearts"
    IMMUNITY = "immunity"
    DEFEAT = "defeat"
    ENEMY_ATTACK = "enemy_attack"
    SHIELDED = "shielded"
    SURVIVED = "survived"
    JOKER = "joker"
    GAMEOVER = "gameover"
    VICTORY = "victory"


@dataclass(frozen=True)
class Event:
    """
    结算事件

    Attributes:
        type: 事件类型
        message: 可读描述
        amount: 相关数值 (伤害、抽牌数、攻击力等)
        suit: 相关花色 (免疫事件使用)
    """
    type: EventType
    message: str
    amount: Optional[int] = None
    suit: Optional[Suit] = None


class RejectReason(Enum):
    """操作被拒绝的原因"""
    WRONG_PHASE = "wrong_phase"
    WRONG_PLAYER = "wrong_player"
    INVALID_SELECTION = "invalid_selection"
    INVALID_COMBO = "invalid_combo"
    NO_JOKER = "no_joker"


@dataclass(frozen=True)
class Accepted:
    """操作成功"""
    message: str
    events: Tuple[Event, ...] = ()

    @property
    def success(self) -> bool:
        return True

    def has_event(self, event_type: EventType) -> bool:
        return any(e.type == event_type for e in self.events)

    def events_of(self, event_type: EventType) -> Tuple[Event, ...]:
        return tuple(e for e in self.events if e.type == event_type)


@dataclass(frozen=True)
class Rejected:
    """操作被拒绝 (状态未改变)"""
    reason: RejectReason
    message: str

    @property
    def success(self) -> bool:
        return False

    @property
    def events(self) -> Tuple[Event, ...]:
        return ()

    def has_event(self, event_type: EventType) -> bool:
        return False


ActionResult = Union[Accepted, Rejected]


@dataclass
class Enemy:
    """
    当前敌人

    Attributes:
        card: 敌人牌
        max_hp: 最大生命值
        attack: 基础攻击力
        current_hp: 当前生命值 (结算时可暂时为负)
        shield: 本次遭遇累计的黑桃护盾
    """
    card: Card
    max_hp: int
    attack: int
    current_hp: int
    shield: int = 0

    @classmethod
    def from_card(cls, card: Card) -> 'Enemy':
        hp = enemy_max_hp(card)
        return cls(card=card, max_hp=hp, attack=enemy_attack(card), current_hp=hp)

    @property
    def effective_attack(self) -> int:
        return RuleEngine.effective_attack(self.attack, self.shield)

    @property
    def display_hp(self) -> int:
        return max(0, self.current_hp)

    @property
    def is_defeated(self) -> bool:
        return self.current_hp <= 0


@dataclass(frozen=True)
class GameSnapshot:
    """
    只读对局快照

    所有集合均为元组, 与引擎内部列表不共享

    Attributes:
        phase: 当前阶段
        current_player: 当前行动玩家
        hands: 各玩家手牌
        current_enemy: 当前敌人牌 (胜利后为 None)
        enemy_hp: 当前敌人生命 (不低于 0)
        enemy_max_hp: 当前敌人最大生命
        enemy_attack: 当前敌人基础攻击
        shield: 累计护盾
        effective_attack: 扣除护盾后的攻击
        tavern_count: 酒馆剩余牌数
        castle_count: 城堡剩余敌人数 (不含当前敌人)
        discard_count: 弃牌堆张数
        discard_needed: 需要弃牌抵挡的总值
        discarded_so_far: 本次抵挡已弃的牌
        enemies_defeated: 已击败敌人数
        total_enemies: 敌人总数
        log: 最近的对局日志
        player_count: 玩家数
        max_hand_size: 手牌上限
        joker_policy: Joker 模式
        jokers_available: 当前玩家可用的 Joker 数 (计数器剩余或手中 Joker 张数)
        jokers_remaining: COUNTER 模式剩余次数 (CARD 模式为 0)
    """
    phase: Phase
    current_player: int
    hands: Tuple[Tuple[Card, ...], ...]
    current_enemy: Optional[Card]
    enemy_hp: int
    enemy_max_hp: int
    enemy_attack: int
    shield: int
    effective_attack: int
    tavern_count: int
    castle_count: int
    discard_count: int
    discard_needed: int
    discarded_so_far: Tuple[Card, ...]
    enemies_defeated: int
    total_enemies: int
    log: Tuple[str, ...]
    player_count: int
    max_hand_size: int
    joker_policy: JokerPolicy
    jokers_available: int
    jokers_remaining: int

    def hand(self, player: int) -> Tuple[Card, ...]:
        """获取指定玩家的手牌"""
        if 0 <= player < len(self.hands):
            return self.hands[player]
        return ()

    @property
    def discarded_value(self) -> int:
        return total_value(self.discarded_so_far)

    @property
    def discard_remaining(self) -> int:
        """本次抵挡还需弃掉的值"""
        return max(0, self.discard_needed - self.discarded_value)

    @property
    def is_finished(self) -> bool:
        return self.phase.is_terminal


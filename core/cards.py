"""
牌的定义与编码

Regicide 使用一副去掉大小王的扑克牌:
- A-10 四种花色共 40 张组成酒馆牌堆 (tavern)
- J/Q/K 四种花色共 12 张组成城堡 (castle) 敌人
- 可选的 Joker 牌 (按模式放入酒馆)
"""
from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple
import random

import numpy as np


class Suit(Enum):
    """花色"""
    HEARTS = "hearts"      # 红桃: 回收弃牌
    DIAMONDS = "diamonds"  # 方块: 抽牌
    CLUBS = "clubs"        # 梅花: 伤害翻倍
    SPADES = "spades"      # 黑桃: 护盾
    JOKER = "joker"


# 常规花色 (顺序即结算/编码顺序)
SUITS: Tuple[Suit, ...] = (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)

SUIT_SYMBOLS: Dict[Suit, str] = {
    Suit.HEARTS: '♥',
    Suit.DIAMONDS: '♦',
    Suit.CLUBS: '♣',
    Suit.SPADES: '♠',
    Suit.JOKER: '★',
}

RANKS: Tuple[str, ...] = ('A', '2', '3', '4', '5', '6', '7', '8', '9', '10')
FACE_RANKS: Tuple[str, ...] = ('J', 'Q', 'K')
JOKER_RANK = 'Joker'

# 牌面值 = 出牌伤害 = 弃牌抵挡值
CARD_VALUES: Dict[str, int] = {
    'A': 1, '2': 2, '3': 3, '4': 4, '5': 5,
    '6': 6, '7': 7, '8': 8, '9': 9, '10': 10,
    'J': 10, 'Q': 15, 'K': 20, JOKER_RANK: 0,
}

# 敌人生命值 / 攻击力
ENEMY_HP: Dict[str, int] = {'J': 20, 'Q': 30, 'K': 40}
ENEMY_ATTACK: Dict[str, int] = {'J': 10, 'Q': 15, 'K': 20}

TOTAL_ENEMIES = 12


@dataclass(frozen=True, eq=False)
class Card:
    """
    不可变卡牌

    按 id 判等与哈希; 两张 Joker 通过 id 后缀区分

    Attributes:
        suit: 花色
        rank: 点数 ('A', '2'..'10', 'J', 'Q', 'K', 'Joker')
        id: 唯一标识, 如 "A_spades" / "Joker_joker_1"
    """
    suit: Suit
    rank: str
    id: str = field(default="")

    def __post_init__(self):
        if not self.id:
            object.__setattr__(self, "id", f"{self.rank}_{self.suit.value}")

    @classmethod
    def joker(cls, number: int) -> 'Card':
        """创建第 number 张 Joker"""
        return cls(Suit.JOKER, JOKER_RANK, f"{JOKER_RANK}_{Suit.JOKER.value}_{number}")

    @property
    def value(self) -> int:
        return CARD_VALUES[self.rank]

    @property
    def is_ace(self) -> bool:
        return self.rank == 'A'

    @property
    def is_face(self) -> bool:
        return self.rank in FACE_RANKS

    @property
    def is_joker(self) -> bool:
        return self.rank == JOKER_RANK

    @property
    def label(self) -> str:
        """显示用短名, 如 "7♣" """
        if self.is_joker:
            return JOKER_RANK
        return f"{self.rank}{SUIT_SYMBOLS[self.suit]}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Card({self.id})"

    def __str__(self) -> str:
        return self.label


def card_value(card: Card) -> int:
    """牌面值 (A=1, J=10, Q=15, K=20, Joker=0)"""
    return CARD_VALUES[card.rank]


def enemy_max_hp(card: Card) -> int:
    """敌人最大生命值, 非人头牌返回 0"""
    return ENEMY_HP.get(card.rank, 0)


def enemy_attack(card: Card) -> int:
    """敌人攻击力, 非人头牌返回 0"""
    return ENEMY_ATTACK.get(card.rank, 0)


def shuffle(cards: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Fisher-Yates 原地洗牌

    Args:
        cards: 待洗的牌 (原地修改)
        rng: 随机数生成器, 默认新建一个

    Returns:
        同一个列表
    """
    rng = rng or random.Random()
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]
    return cards


def create_deck(jokers: int = 0) -> List[Card]:
    """
    创建酒馆牌组 (未洗牌)

    Args:
        jokers: 加入的 Joker 数量

    Returns:
        40 张数字牌 + jokers 张 Joker
    """
    deck = [Card(suit, rank) for suit in SUITS for rank in RANKS]
    deck.extend(Card.joker(i + 1) for i in range(jokers))
    return deck


def create_enemy_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """
    创建城堡敌人队列

    每个等级内部洗牌, 然后按 J -> Q -> K 叠放 (列表头部先出场)
    """
    rng = rng or random.Random()
    castle: List[Card] = []
    for rank in FACE_RANKS:
        tier = [Card(suit, rank) for suit in SUITS]
        castle.extend(shuffle(tier, rng))
    return castle


# 稳定的 54 维编码顺序: 40 张数字牌, 12 张人头牌, 2 张 Joker
MAX_JOKERS = 2

ALL_CARDS: Tuple[Card, ...] = tuple(
    create_deck()
    + [Card(suit, rank) for rank in FACE_RANKS for suit in SUITS]
    + [Card.joker(i + 1) for i in range(MAX_JOKERS)]
)

CARD_INDEX: Dict[str, int] = {card.id: i for i, card in enumerate(ALL_CARDS)}
NUM_CARD_SLOTS = len(ALL_CARDS)


def card_from_id(card_id: str) -> Card:
    """
    从 id 还原卡牌

    Args:
        card_id: 如 "10_clubs", "Joker_joker_2"

    Raises:
        ValueError: id 格式非法
    """
    parts = card_id.split('_')
    if len(parts) == 3 and parts[0] == JOKER_RANK and parts[1] == Suit.JOKER.value:
        return Card.joker(int(parts[2]))
    if len(parts) != 2:
        raise ValueError(f"Invalid card id: {card_id!r}")
    rank, suit_name = parts
    if rank not in CARD_VALUES or rank == JOKER_RANK:
        raise ValueError(f"Invalid card rank in id: {card_id!r}")
    try:
        suit = Suit(suit_name)
    except ValueError:
        raise ValueError(f"Invalid card suit in id: {card_id!r}") from None
    if suit == Suit.JOKER:
        raise ValueError(f"Invalid card suit in id: {card_id!r}")
    return Card(suit, rank)


def str_to_cards(s: str) -> List[Card]:
    """
    将空白分隔的 id 字符串转换为牌列表

    Args:
        s: 如 "A_spades 7_clubs"
    """
    return [card_from_id(token) for token in s.split()]


def cards_to_str(cards: Iterable[Card]) -> str:
    """可读字符串, 如 "A♠ 7♣" """
    return ' '.join(card.label for card in cards)


def cards_to_array(cards: Iterable[Card]) -> np.ndarray:
    """
    将牌集合转换为 54 维 one-hot 向量

    Args:
        cards: 牌集合

    Returns:
        54 维 float32 数组
    """
    array = np.zeros(NUM_CARD_SLOTS, dtype=np.float32)
    for card in cards:
        array[CARD_INDEX[card.id]] = 1.0
    return array


def total_value(cards: Iterable[Card]) -> int:
    """牌面值之和"""
    return sum(card_value(c) for c in cards)

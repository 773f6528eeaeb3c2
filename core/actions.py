"""
动作类型定义与动作生成器

Regicide 的动作分为四类: 出牌、让过 (yield)、弃牌抵挡、使用 Joker
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union
from collections import defaultdict
import itertools

from .cards import Card, RANKS, FACE_RANKS
from .rules import RuleEngine, MAX_SET_SIZE

T = TypeVar("T")


class ActionType(IntEnum):
    """动作类型"""
    PLAY = 0      # 出牌攻击
    YIELD = 1     # 让过 (弃一张牌, 不攻击)
    DISCARD = 2   # 弃牌抵挡敌人攻击
    JOKER = 3     # 使用 Joker 重置手牌


@dataclass(frozen=True)
class PlayAction:
    """
    出牌动作

    Attributes:
        card_ids: 打出的牌 id
    """
    card_ids: Tuple[str, ...]

    @property
    def action_type(self) -> ActionType:
        return ActionType.PLAY

    def __len__(self) -> int:
        return len(self.card_ids)


@dataclass(frozen=True)
class YieldAction:
    """
    让过动作

    Attributes:
        card_id: 弃掉的牌 id, 手牌为空时为 None
    """
    card_id: Optional[str] = None

    @property
    def action_type(self) -> ActionType:
        return ActionType.YIELD


@dataclass(frozen=True)
class DiscardAction:
    """
    弃牌抵挡动作

    Attributes:
        card_ids: 弃掉的牌 id
    """
    card_ids: Tuple[str, ...]

    @property
    def action_type(self) -> ActionType:
        return ActionType.DISCARD

    def __len__(self) -> int:
        return len(self.card_ids)


@dataclass(frozen=True)
class JokerAction:
    """使用 Joker 重置手牌"""

    @property
    def action_type(self) -> ActionType:
        return ActionType.JOKER


Action = Union[PlayAction, YieldAction, DiscardAction, JokerAction]
ACTION_CLASSES = (PlayAction, YieldAction, DiscardAction, JokerAction)


def choose(items: Sequence[T], k: int) -> List[Tuple[T, ...]]:
    """
    从 n 个元素中选 k 个的全部组合

    Args:
        items: 候选元素
        k: 选取个数

    Returns:
        组合列表 (保持输入顺序)
    """
    if k <= 0 or k > len(items):
        return []
    return list(itertools.combinations(items, k))


class ActionGenerator:
    """
    合法动作生成器

    根据手牌生成所有可能的出牌组合
    """

    def __init__(self, hand_cards: Iterable[Card]):
        """
        Args:
            hand_cards: 手牌列表
        """
        self.hand: List[Card] = list(hand_cards)
        self.by_rank: Dict[str, List[Card]] = defaultdict(list)

        for card in self.hand:
            self.by_rank[card.rank].append(card)

        self.aces: List[Card] = self.by_rank.get('A', [])
        self.non_aces: List[Card] = [c for c in self.hand if not c.is_ace and not c.is_joker]

    def gen_singles(self) -> List[List[Card]]:
        """生成所有单张 (不含 Joker)"""
        return [[card] for card in self.hand if not card.is_joker]

    def gen_sets(self) -> List[List[Card]]:
        """生成所有同点数 2-4 张的子集 (含全 A 组)"""
        result = []
        for rank in RANKS + FACE_RANKS:
            group = self.by_rank.get(rank, [])
            for size in range(2, min(len(group), MAX_SET_SIZE) + 1):
                for combo in choose(group, size):
                    result.append(list(combo))
        return result

    def gen_companions(self) -> List[List[Card]]:
        """生成所有动物伙伴组合: 1..n 张 A + 一张非 A"""
        result = []
        for count in range(1, len(self.aces) + 1):
            for aces in choose(self.aces, count):
                for other in self.non_aces:
                    result.append(list(aces) + [other])
        return result

    def gen_plays(self) -> List[List[Card]]:
        """
        生成所有合法出牌组合

        候选组合统一经过 RuleEngine.is_valid_combo 过滤,
        保证与引擎规则一致
        """
        candidates = self.gen_singles() + self.gen_sets() + self.gen_companions()
        return [cards for cards in candidates if RuleEngine.is_valid_combo(cards)]

    def generate_plays(self) -> List[PlayAction]:
        """生成所有出牌动作"""
        return [PlayAction(tuple(c.id for c in cards)) for cards in self.gen_plays()]

    def generate_yields(self) -> List[YieldAction]:
        """生成让过动作 (每张牌一种; 手牌为空时只有空让过)"""
        if not self.hand:
            return [YieldAction(None)]
        return [YieldAction(card.id) for card in self.hand]

    def generate_discards(self) -> List[DiscardAction]:
        """生成单张弃牌动作 (抵挡可以分多次完成)"""
        return [DiscardAction((card.id,)) for card in self.hand]

    def joker_cards(self) -> List[Card]:
        """手牌中的 Joker"""
        return [card for card in self.hand if card.is_joker]

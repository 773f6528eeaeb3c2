"""
规则引擎 - 组合检测、伤害与花色计算

所有方法都是纯函数，无状态
"""
from enum import IntEnum
from typing import Iterable, List, Sequence, Tuple

from .cards import Card, Suit, SUITS, card_value


# 同点数组合的总值上限
MAX_COMBO_TOTAL = 10
# 同点数组合最多张数
MAX_SET_SIZE = 4


class ComboType(IntEnum):
    """出牌组合类型"""
    INVALID = 0         # 非法组合
    SINGLE = 1          # 单张
    SET = 2             # 同点数 2-4 张 (总值 <= 10)
    COMPANION = 3       # 动物伙伴: 若干 A + 一张非 A
    COMPANION_PACK = 4  # 全是 A (2-4 张)


class RuleEngine:
    """
    Regicide 规则引擎

    提供组合检测、伤害计算、花色提取等功能
    所有方法都是静态方法，无状态
    """

    @staticmethod
    def detect_combo_type(cards: Sequence[Card]) -> ComboType:
        """
        检测出牌组合类型

        判定顺序:
        1. 空 -> 非法
        2. 含 Joker -> 非法 (Joker 只能用于重置手牌)
        3. 单张 -> 合法
        4. 按 A / 非 A 拆分
        5. 全是 A -> 动物伙伴组
        6. A + 恰好一张非 A -> 动物伙伴
        7. 无 A 多张: 人头牌非法; 同点数、<= 4 张、总值 <= 10 才合法
        8. A + 两张及以上非 A -> 非法

        Args:
            cards: 选中的牌

        Returns:
            组合类型
        """
        if not cards:
            return ComboType.INVALID

        if any(c.is_joker for c in cards):
            return ComboType.INVALID

        if len(cards) == 1:
            return ComboType.SINGLE

        aces = [c for c in cards if c.is_ace]
        others = [c for c in cards if not c.is_ace]

        if not others:
            return ComboType.COMPANION_PACK

        if aces:
            if len(others) == 1:
                return ComboType.COMPANION
            return ComboType.INVALID

        # 无 A, 多张非 A
        if any(c.is_face for c in others):
            return ComboType.INVALID
        if len({c.rank for c in others}) != 1:
            return ComboType.INVALID
        if len(others) > MAX_SET_SIZE:
            return ComboType.INVALID
        if RuleEngine.combo_value(others) > MAX_COMBO_TOTAL:
            return ComboType.INVALID
        return ComboType.SET

    @staticmethod
    def is_valid_combo(cards: Sequence[Card]) -> bool:
        """是否为可以一起打出的组合"""
        if len({c.id for c in cards}) != len(cards):
            return False
        return RuleEngine.detect_combo_type(cards) != ComboType.INVALID

    @staticmethod
    def combo_value(cards: Iterable[Card]) -> int:
        """基础伤害 = 所有牌面值之和"""
        return sum(card_value(c) for c in cards)

    @staticmethod
    def combo_suits(cards: Iterable[Card]) -> Tuple[Suit, ...]:
        """
        组合中出现的花色 (去重, 按 SUITS 顺序)

        Joker 不触发任何花色能力
        """
        present = {c.suit for c in cards}
        return tuple(s for s in SUITS if s in present)

    @staticmethod
    def effective_attack(attack: int, shield: int) -> int:
        """扣除护盾后的敌人攻击力 (不低于 0)"""
        return max(0, attack - shield)

    @staticmethod
    def is_immune(enemy_card: Card, suit: Suit) -> bool:
        """敌人对自身花色的能力免疫"""
        return enemy_card.suit == suit

    @staticmethod
    def clubs_damage(base_damage: int, suits: Sequence[Suit], enemy_card: Card) -> int:
        """
        计算梅花翻倍后的实际伤害

        Args:
            base_damage: 基础伤害
            suits: 组合花色
            enemy_card: 当前敌人

        Returns:
            实际伤害
        """
        if Suit.CLUBS in suits and not RuleEngine.is_immune(enemy_card, Suit.CLUBS):
            return base_damage * 2
        return base_damage

    @staticmethod
    def sorted_by_value(cards: Iterable[Card], reverse: bool = False) -> List[Card]:
        """按牌面值排序 (稳定排序)"""
        return sorted(cards, key=card_value, reverse=reverse)

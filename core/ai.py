"""
合作 AI 伙伴

贪心单步启发式: 枚举当前手牌的所有合法出牌, 逐一打分, 选择最高分;
不做多回合搜索。AI 只读取快照, 通过引擎公开操作执行决策。
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union
import logging

from .cards import Card, Suit, card_value, total_value
from .actions import Action, ActionGenerator, PlayAction, YieldAction, DiscardAction, JokerAction
from .rules import RuleEngine
from .state import Phase, GameSnapshot, ActionResult, Rejected, RejectReason

logger = logging.getLogger(__name__)


@dataclass
class HeuristicWeights:
    """
    启发式打分权重

    Attributes:
        lethal_bonus: 能击杀时的奖励
        exact_kill_bonus: 恰好击杀 (敌人进入弃牌堆) 的额外奖励
        lethal_card_penalty: 击杀时每用一张牌的惩罚
        damage_weight: 伤害系数
        spades_weight: 黑桃系数 (攻击较高时)
        spades_attack_threshold: 黑桃加成生效的攻击阈值
        diamonds_weight: 方块系数 (手牌较少时)
        diamonds_hand_threshold: 方块加成生效的手牌数阈值
        hearts_weight: 红桃系数 (弃牌堆较大时)
        hearts_discard_threshold: 红桃加成生效的弃牌堆阈值
        clubs_weight: 梅花固定系数
        card_penalty: 每张牌的保守惩罚
        overkill_cap: 对 J 出牌的伤害上限, 超出部分惩罚
        overkill_weight: 超出部分的惩罚系数
        high_attack_threshold: 视为高威胁的剩余攻击
        survival_penalty: 手牌不足以抵挡攻击时的惩罚
        min_viable_score: 最低可接受分数, 低于则让过
    """
    lethal_bonus: float = 100.0
    exact_kill_bonus: float = 50.0
    lethal_card_penalty: float = 5.0
    damage_weight: float = 2.0
    spades_weight: float = 3.0
    spades_attack_threshold: int = 5
    diamonds_weight: float = 2.0
    diamonds_hand_threshold: int = 4
    hearts_weight: float = 1.5
    hearts_discard_threshold: int = 3
    clubs_weight: float = 1.0
    card_penalty: float = 3.0
    overkill_cap: int = 7
    overkill_weight: float = 2.0
    high_attack_threshold: int = 10
    survival_penalty: float = 30.0
    min_viable_score: float = -50.0

    @classmethod
    def from_dict(cls, d: dict) -> 'HeuristicWeights':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)


class RegicideAI:
    """
    合作 AI 伙伴

    Usage:
        ai = RegicideAI(game, player_index=1)
        if game.current_player == 1:
            ai.take_turn()
    """

    def __init__(
        self,
        game=None,
        player_index: int = 1,
        weights: Optional[HeuristicWeights] = None,
    ):
        """
        Args:
            game: RegicideGame 实例 (只用于读取快照和执行决策, 可为空)
            player_index: AI 控制的座位
            weights: 打分权重
        """
        self.game = game
        self.player_index = player_index
        self.weights = weights or HeuristicWeights()

    def _snapshot(self, state: Optional[GameSnapshot]) -> GameSnapshot:
        if state is not None:
            return state
        if self.game is None:
            raise ValueError("RegicideAI needs either a game or an explicit state")
        return self.game.get_state()

    # ------------------------------------------------------------------
    # 决策
    # ------------------------------------------------------------------

    def decide_play(self, state: Optional[GameSnapshot] = None) -> Union[PlayAction, YieldAction]:
        """
        决定出牌或让过

        Returns:
            PlayAction 或 YieldAction
        """
        state = self._snapshot(state)
        hand = list(state.hand(self.player_index))

        if state.current_enemy is None or not hand:
            return YieldAction(None)

        plays = self.get_all_valid_plays(hand)
        if not plays:
            return self._yield_lowest(hand)

        best_play = None
        best_score = float("-inf")
        for play in plays:
            score = self.score_play(play, state)
            if score > best_score:
                best_score = score
                best_play = play

        if best_play is not None and best_score > self.weights.min_viable_score:
            logger.debug("AI player %d plays %s (score %.1f)",
                         self.player_index, [c.id for c in best_play], best_score)
            return PlayAction(tuple(c.id for c in best_play))

        return self._yield_lowest(hand)

    def decide_discard(self, state: Optional[GameSnapshot] = None) -> DiscardAction:
        """
        决定弃哪些牌抵挡攻击

        Returns:
            DiscardAction (需求已满足或手牌为空时 card_ids 为空)
        """
        state = self._snapshot(state)
        hand = list(state.hand(self.player_index))
        needed = state.discard_remaining

        if not hand or needed <= 0:
            return DiscardAction(())

        cards = self.find_optimal_discard(hand, needed)
        return DiscardAction(tuple(c.id for c in cards))

    def decide(self, state: Optional[GameSnapshot] = None) -> Action:
        """
        根据当前阶段给出动作

        有 Joker 可用时, 弃牌阶段手牌总值不足以抵挡、或出牌阶段手牌为空,
        先用 Joker 重置手牌

        Returns:
            PlayAction / YieldAction / DiscardAction / JokerAction
        """
        state = self._snapshot(state)
        hand = state.hand(self.player_index)
        if state.phase == Phase.PLAY and not hand and state.jokers_available > 0:
            logger.debug("AI player %d uses a joker on an empty hand", self.player_index)
            return JokerAction()
        if state.phase == Phase.DISCARD:
            if total_value(hand) < state.discard_remaining and state.jokers_available > 0:
                logger.debug("AI player %d uses a joker", self.player_index)
                return JokerAction()
            return self.decide_discard(state)
        return self.decide_play(state)

    def take_turn(self) -> ActionResult:
        """
        根据当前阶段决策并通过引擎执行

        Returns:
            引擎返回的结果
        """
        if self.game is None:
            raise ValueError("take_turn requires a bound game")

        state = self.game.get_state()
        if state.is_finished:
            return Rejected(RejectReason.WRONG_PHASE, f"Game is over ({state.phase.value})")
        if state.current_player != self.player_index:
            return Rejected(RejectReason.WRONG_PLAYER, "Not the AI's turn")

        return self.game.apply(self.decide(state))

    # ------------------------------------------------------------------
    # 枚举与打分
    # ------------------------------------------------------------------

    @staticmethod
    def get_all_valid_plays(hand: Sequence[Card]) -> List[List[Card]]:
        """所有合法出牌 (单张、同点数子集、动物伙伴), 经规则引擎过滤"""
        return ActionGenerator(hand).gen_plays()

    @staticmethod
    def find_optimal_discard(hand: Sequence[Card], needed: int) -> List[Card]:
        """
        选择抵挡用的弃牌

        1. 单张足够: 选能满足需求的最小那张
        2. 否则从大到小贪心累加
        3. 整手都不够: 弃掉整手
        """
        singles = [c for c in hand if card_value(c) >= needed]
        if singles:
            return [min(singles, key=card_value)]

        result = []
        total = 0
        for card in RuleEngine.sorted_by_value(hand, reverse=True):
            result.append(card)
            total += card_value(card)
            if total >= needed:
                return result

        return list(hand)

    def score_play(self, cards: Sequence[Card], state: GameSnapshot) -> float:
        """
        对一次出牌打分

        考虑: 击杀 (及恰好击杀)、伤害、情境花色加成、保守出牌、
        对 J 浪费大牌、出牌后能否抵挡敌人攻击
        """
        w = self.weights
        enemy = state.current_enemy
        damage = RuleEngine.combo_value(cards)
        suits = [s for s in RuleEngine.combo_suits(cards) if not RuleEngine.is_immune(enemy, s)]
        total_damage = RuleEngine.clubs_damage(damage, suits, enemy)
        hand = state.hand(self.player_index)

        if total_damage >= state.enemy_hp:
            score = w.lethal_bonus
            if total_damage == state.enemy_hp:
                score += w.exact_kill_bonus
            score -= len(cards) * w.lethal_card_penalty
            return score

        score = total_damage * w.damage_weight

        if Suit.SPADES in suits and state.effective_attack > w.spades_attack_threshold:
            score += damage * w.spades_weight
        if Suit.DIAMONDS in suits and len(hand) < w.diamonds_hand_threshold:
            score += damage * w.diamonds_weight
        if Suit.HEARTS in suits and state.discard_count > w.hearts_discard_threshold:
            score += damage * w.hearts_weight
        if Suit.CLUBS in suits:
            score += damage * w.clubs_weight

        score -= len(cards) * w.card_penalty

        # 不要在 J 身上浪费大牌
        if enemy.rank == 'J' and damage > w.overkill_cap:
            score -= (damage - w.overkill_cap) * w.overkill_weight

        attack_after = state.effective_attack
        if Suit.SPADES in suits:
            attack_after = max(0, attack_after - damage)

        if attack_after > w.high_attack_threshold and Suit.SPADES not in suits:
            score -= attack_after

        played = {c.id for c in cards}
        value_after = total_value(c for c in hand if c.id not in played)
        if attack_after > 0 and value_after < attack_after:
            score -= w.survival_penalty

        return score

    @staticmethod
    def _yield_lowest(hand: Sequence[Card]) -> YieldAction:
        """让过并弃掉最小的牌 (尽量保留 Joker)"""
        if not hand:
            return YieldAction(None)
        lowest = min(hand, key=lambda c: (c.is_joker, card_value(c)))
        return YieldAction(lowest.id)

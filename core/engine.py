"""
游戏引擎 - Regicide 状态机

引擎实例持有全部可变状态 (酒馆、城堡、弃牌堆、手牌、阶段),
外部只能通过变更操作 (play_cards / discard_cards / yield_turn / play_joker)
修改状态, 通过 get_state() 读取不可变快照。

所有规则违例都以 Rejected 结果返回, 不抛异常, 且不修改任何状态。
"""
from collections import deque
from typing import Deque, List, Optional, Sequence, Tuple, Union
import logging
import random

from .cards import (
    Card,
    Suit,
    SUIT_SYMBOLS,
    TOTAL_ENEMIES,
    cards_to_str,
    create_deck,
    create_enemy_deck,
    shuffle,
    total_value,
)
from .config import GameConfig, JokerPolicy
from .rules import RuleEngine
from .actions import (
    Action,
    ActionGenerator,
    PlayAction,
    YieldAction,
    DiscardAction,
    JokerAction,
)
from .state import (
    Phase,
    Event,
    EventType,
    RejectReason,
    Accepted,
    Rejected,
    ActionResult,
    Enemy,
    GameSnapshot,
)

logger = logging.getLogger(__name__)


# 花色能力的结算顺序 (伤害结算位于梅花之后、方块之前)
POWER_ORDER: Tuple[Suit, ...] = (Suit.CLUBS, Suit.DIAMONDS, Suit.SPADES, Suit.HEARTS)


class RegicideGame:
    """
    Regicide 对局引擎

    阶段流转:
        play -> discard | play (下一个敌人) | gameover | victory
        discard -> play | gameover

    Usage:
        game = RegicideGame(player_count=2, seed=42)
        result = game.play_cards(0, ["A_spades"])
        state = game.get_state()
    """

    TOTAL_ENEMIES = TOTAL_ENEMIES

    def __init__(self, config: Optional[GameConfig] = None, **kwargs):
        """
        Args:
            config: 对局配置
            **kwargs: 未提供 config 时用于构造 GameConfig 的参数
        """
        if config is not None and kwargs:
            raise ValueError("Pass either a GameConfig or keyword options, not both")
        self.config = config if config is not None else GameConfig(**kwargs)
        self.reset()

    # ------------------------------------------------------------------
    # 构造
    # ------------------------------------------------------------------

    def reset(self, seed: Optional[int] = None):
        """
        开始新的一局: 洗牌、建城堡、发牌并翻开第一个敌人

        Args:
            seed: 随机种子, 默认使用配置中的种子
        """
        self._rng = random.Random(seed if seed is not None else self.config.seed)
        self._init_piles()

        card_jokers = self.config.joker_count if self.config.policy == JokerPolicy.CARD else 0
        self._tavern = shuffle(create_deck(jokers=card_jokers), self._rng)
        self._castle = create_enemy_deck(self._rng)

        # 发牌
        for hand in self._hands:
            for _ in range(self.config.max_hand_size):
                if self._tavern:
                    hand.append(self._tavern.pop())

        self._reveal_enemy()

    @classmethod
    def from_piles(
        cls,
        hands: Sequence[Sequence[Card]],
        castle: Sequence[Card],
        tavern: Sequence[Card] = (),
        discard: Sequence[Card] = (),
        current_player: int = 0,
        enemies_defeated: int = 0,
        config: Optional[GameConfig] = None,
        **kwargs,
    ) -> 'RegicideGame':
        """
        用给定牌堆构造对局 (残局、测试场景)

        Args:
            hands: 各玩家手牌
            castle: 敌人队列, 第一个立即翻开
            tavern: 酒馆牌堆, 末尾为牌顶
            discard: 弃牌堆, 末尾为最新
            current_player: 当前行动玩家
            enemies_defeated: 已击败敌人数
            config: 对局配置, 默认按 hands 数量创建
            **kwargs: 未提供 config 时传给 GameConfig

        Raises:
            ValueError: 布局不一致 (玩家数不符、重复牌、城堡含非人头牌等)
        """
        if config is None:
            kwargs.setdefault("player_count", len(hands))
            config = GameConfig(**kwargs)
        elif kwargs:
            raise ValueError("Pass either a GameConfig or keyword options, not both")

        if len(hands) != config.player_count:
            raise ValueError(f"Expected {config.player_count} hands, got {len(hands)}")
        if not castle:
            raise ValueError("Castle must contain at least one enemy")
        if any(not card.is_face for card in castle):
            raise ValueError("Castle may only contain J/Q/K cards")
        if not 0 <= current_player < config.player_count:
            raise ValueError(f"Invalid current player: {current_player}")

        all_cards = [c for hand in hands for c in hand] + list(castle) + list(tavern) + list(discard)
        seen = set()
        for card in all_cards:
            if card.id in seen:
                raise ValueError(f"Duplicate card in layout: {card.id}")
            seen.add(card.id)

        game = cls.__new__(cls)
        game.config = config
        game._rng = random.Random(config.seed)
        game._init_piles()
        game._hands = [list(hand) for hand in hands]
        game._castle = list(castle)
        game._tavern = list(tavern)
        game._discard = list(discard)
        game.current_player = current_player
        game.enemies_defeated = enemies_defeated
        game._reveal_enemy()
        return game

    def _init_piles(self):
        """重置所有牌堆与计数"""
        self._tavern: List[Card] = []
        self._castle: List[Card] = []
        self._discard: List[Card] = []
        self._removed: List[Card] = []
        self._hands: List[List[Card]] = [[] for _ in range(self.config.player_count)]
        self._log: Deque[str] = deque(maxlen=self.config.max_log_entries)

        self.current_player = 0
        self.phase = Phase.PLAY
        self.enemy: Optional[Enemy] = None
        self.enemies_defeated = 0

        self._discard_needed = 0
        self._discarded_so_far: List[Card] = []

        if self.config.policy == JokerPolicy.COUNTER:
            self._jokers_remaining = self.config.joker_count
        else:
            self._jokers_remaining = 0

    # ------------------------------------------------------------------
    # 只读访问
    # ------------------------------------------------------------------

    @property
    def player_count(self) -> int:
        return self.config.player_count

    @property
    def is_finished(self) -> bool:
        return self.phase.is_terminal

    @property
    def tavern(self) -> Tuple[Card, ...]:
        """酒馆牌堆 (末尾为牌顶)"""
        return tuple(self._tavern)

    @property
    def castle(self) -> Tuple[Card, ...]:
        """尚未出场的敌人 (开头先出场)"""
        return tuple(self._castle)

    @property
    def discard_pile(self) -> Tuple[Card, ...]:
        """弃牌堆 (末尾为最新)"""
        return tuple(self._discard)

    @property
    def removed(self) -> Tuple[Card, ...]:
        """被溢出伤害击败、永久移出游戏的敌人"""
        return tuple(self._removed)

    def hand(self, player: int) -> Tuple[Card, ...]:
        """获取指定玩家手牌的副本"""
        return tuple(self._hands[player])

    def all_cards(self) -> Tuple[Card, ...]:
        """所有区域中的牌 (用于守恒检查)"""
        cards: List[Card] = []
        for hand in self._hands:
            cards.extend(hand)
        cards.extend(self._tavern)
        cards.extend(self._castle)
        cards.extend(self._discard)
        cards.extend(self._removed)
        if self.enemy is not None:
            cards.append(self.enemy.card)
        return tuple(cards)

    def jokers_available(self, player: int) -> int:
        """玩家当前可用的 Joker 数"""
        if self.config.policy == JokerPolicy.COUNTER:
            return self._jokers_remaining
        return sum(1 for c in self._hands[player] if c.is_joker)

    def get_state(self) -> GameSnapshot:
        """
        获取只读快照

        Returns:
            GameSnapshot, 其中所有集合都是副本
        """
        enemy = self.enemy
        return GameSnapshot(
            phase=self.phase,
            current_player=self.current_player,
            hands=tuple(tuple(hand) for hand in self._hands),
            current_enemy=enemy.card if enemy else None,
            enemy_hp=enemy.display_hp if enemy else 0,
            enemy_max_hp=enemy.max_hp if enemy else 0,
            enemy_attack=enemy.attack if enemy else 0,
            shield=enemy.shield if enemy else 0,
            effective_attack=enemy.effective_attack if enemy else 0,
            tavern_count=len(self._tavern),
            castle_count=len(self._castle),
            discard_count=len(self._discard),
            discard_needed=self._discard_needed,
            discarded_so_far=tuple(self._discarded_so_far),
            enemies_defeated=self.enemies_defeated,
            total_enemies=self.TOTAL_ENEMIES,
            log=tuple(self._log),
            player_count=self.player_count,
            max_hand_size=self.config.max_hand_size,
            joker_policy=self.config.policy,
            jokers_available=self.jokers_available(self.current_player),
            jokers_remaining=self._jokers_remaining,
        )

    def get_legal_actions(self) -> List[Action]:
        """
        获取当前玩家的合法动作

        Returns:
            出牌阶段: 出牌 + 让过 (+ Joker)
            弃牌阶段: 单张弃牌 (+ Joker)
            终局: 空列表
        """
        if self.is_finished:
            return []

        generator = ActionGenerator(self._hands[self.current_player])
        actions: List[Action] = []

        if self.phase == Phase.PLAY:
            actions.extend(generator.generate_plays())
            actions.extend(generator.generate_yields())
        elif self.phase == Phase.DISCARD:
            actions.extend(generator.generate_discards())

        if self.jokers_available(self.current_player) > 0:
            actions.append(JokerAction())

        return actions

    # ------------------------------------------------------------------
    # 变更操作
    # ------------------------------------------------------------------

    def apply(self, action: Action) -> ActionResult:
        """
        以当前玩家身份执行动作

        Raises:
            TypeError: 未知动作类型
        """
        player = self.current_player
        if isinstance(action, PlayAction):
            return self.play_cards(player, action.card_ids)
        if isinstance(action, YieldAction):
            return self.yield_turn(player, action.card_id)
        if isinstance(action, DiscardAction):
            return self.discard_cards(player, action.card_ids)
        if isinstance(action, JokerAction):
            return self.play_joker(player)
        raise TypeError(f"Unknown action: {action!r}")

    def play_cards(self, player: int, card_ids: Sequence[str]) -> ActionResult:
        """
        打出一个组合攻击当前敌人

        结算顺序: 梅花 -> 伤害 -> 方块 -> 黑桃 -> 红桃,
        敌人对与自身花色相同的能力免疫

        Args:
            player: 出牌玩家
            card_ids: 打出的牌 id

        Returns:
            Accepted (含事件列表) 或 Rejected
        """
        rejected = self._check_turn(player, Phase.PLAY)
        if rejected:
            return rejected

        selection = self._resolve_cards(player, card_ids)
        if isinstance(selection, Rejected):
            return selection
        cards = selection

        if not RuleEngine.is_valid_combo(cards):
            return Rejected(
                RejectReason.INVALID_COMBO,
                "Invalid card combination. Play a single card, a same-rank set "
                "totalling 10 or less, or aces with at most one other card.",
            )

        self._remove_from_hand(player, cards)
        enemy = self.enemy
        base_damage = RuleEngine.combo_value(cards)
        suits = RuleEngine.combo_suits(cards)
        events: List[Event] = []

        self._add_log(f"Player {player + 1} plays {cards_to_str(cards)}")

        total_damage = base_damage
        for suit in POWER_ORDER:
            if suit == Suit.DIAMONDS:
                # 伤害在梅花之后、其他能力之前结算
                enemy.current_hp -= total_damage
                events.append(Event(EventType.DAMAGE, f"Dealt {total_damage} damage!", total_damage))
                self._add_log(f"Dealt {total_damage} damage! Enemy HP: {enemy.display_hp}")

            if suit not in suits:
                continue
            if RuleEngine.is_immune(enemy.card, suit):
                events.append(self._immunity(suit))
                continue

            if suit == Suit.CLUBS:
                total_damage = base_damage * 2
                events.append(Event(EventType.CLUBS, f"♣ Clubs doubles damage to {total_damage}!", total_damage))
                self._add_log(f"♣ Damage doubled to {total_damage}!")
            elif suit == Suit.DIAMONDS:
                drawn = self._draw_round_robin(player, base_damage)
                events.append(Event(EventType.DIAMONDS, f"♦ Drew {drawn} card(s)!", drawn))
                self._add_log(f"♦ Drew {drawn} card(s)!")
            elif suit == Suit.SPADES:
                enemy.shield += base_damage
                events.append(Event(
                    EventType.SPADES,
                    f"♠ Shield! Enemy attack reduced to {enemy.effective_attack}",
                    enemy.effective_attack,
                ))
                self._add_log(f"♠ Enemy attack reduced to {enemy.effective_attack}!")
            elif suit == Suit.HEARTS:
                healed = self._heal(base_damage)
                events.append(Event(EventType.HEARTS, f"♥ Returned {healed} card(s) from discard to tavern!", healed))
                self._add_log(f"♥ Returned {healed} card(s) to the tavern!")

        # 打出的牌结算后进入弃牌堆
        self._discard.extend(cards)

        if enemy.is_defeated:
            events.extend(self._defeat_enemy())
        else:
            events.extend(self._enemy_attacks())

        return Accepted(f"Played {cards_to_str(cards)} for {total_damage} damage", tuple(events))

    def discard_cards(self, player: int, card_ids: Sequence[str]) -> ActionResult:
        """
        弃牌抵挡敌人攻击

        弃牌总值达到要求即存活, 轮到下一位玩家;
        手牌耗尽仍未达到要求则游戏失败 (其他玩家无法代为抵挡)

        Args:
            player: 受攻击的玩家
            card_ids: 弃掉的牌 id
        """
        rejected = self._check_turn(player, Phase.DISCARD)
        if rejected:
            return rejected

        if not card_ids:
            return Rejected(RejectReason.INVALID_SELECTION, "No cards selected")

        selection = self._resolve_cards(player, card_ids)
        if isinstance(selection, Rejected):
            return selection
        cards = selection

        self._remove_from_hand(player, cards)
        self._discard.extend(cards)
        self._discarded_so_far.extend(cards)

        value = total_value(cards)
        absorbed = total_value(self._discarded_so_far)
        self._add_log(f"Player {player + 1} discards {cards_to_str(cards)} ({value} damage absorbed)")

        if absorbed >= self._discard_needed:
            self.phase = Phase.PLAY
            self._discard_needed = 0
            self._discarded_so_far = []
            self._advance_player()
            self._add_log("Player survives! Next player's turn.")
            return Accepted(
                "Attack survived!",
                (Event(EventType.SURVIVED, "Attack survived!", absorbed),),
            )

        if not self._hands[player]:
            event = self._game_over("Could not absorb enough damage.")
            return Accepted("Game Over! Not enough cards to survive.", (event,))

        remaining = self._discard_needed - absorbed
        return Accepted(f"Need {remaining} more damage to absorb.")

    def yield_turn(self, player: int, discard_card_id: Optional[str] = None) -> ActionResult:
        """
        让过: 不攻击, 弃掉一张指定的牌 (手牌为空时不弃), 随后敌人攻击

        Args:
            player: 让过的玩家
            discard_card_id: 弃掉的牌 id
        """
        rejected = self._check_turn(player, Phase.PLAY)
        if rejected:
            return rejected

        if discard_card_id is None:
            if self._hands[player]:
                return Rejected(RejectReason.INVALID_SELECTION, "Yielding requires discarding a card")
            self._add_log(f"Player {player + 1} yields their turn")
        else:
            selection = self._resolve_cards(player, [discard_card_id])
            if isinstance(selection, Rejected):
                return selection
            self._remove_from_hand(player, selection)
            self._discard.extend(selection)
            self._add_log(f"Player {player + 1} yields and discards {cards_to_str(selection)}")

        events = self._enemy_attacks()
        return Accepted(f"Player {player + 1} yields", tuple(events))

    def play_joker(self, player: int) -> ActionResult:
        """
        使用 Joker 重置手牌: 弃掉全部手牌, 从酒馆补到手牌上限

        COUNTER 模式消耗全局计数; CARD 模式需要手中有 Joker 牌。
        出牌与弃牌阶段均可使用, 不结束回合, 弃掉的牌不计入抵挡值。

        Args:
            player: 使用 Joker 的玩家
        """
        rejected = self._check_turn(player, Phase.PLAY, Phase.DISCARD)
        if rejected:
            return rejected

        hand = self._hands[player]
        if self.config.policy == JokerPolicy.COUNTER:
            if self._jokers_remaining <= 0:
                return Rejected(RejectReason.NO_JOKER, "No jokers remaining")
            self._jokers_remaining -= 1
            discarded = list(hand)
        else:
            jokers = ActionGenerator(hand).joker_cards()
            if not jokers:
                return Rejected(RejectReason.NO_JOKER, "No joker in hand")
            spent = jokers[0]
            discarded = [spent] + [c for c in hand if c != spent]

        self._discard.extend(discarded)
        self._hands[player] = []
        drawn = self._draw_up_to(player, self.config.max_hand_size)

        self._add_log(
            f"Player {player + 1} plays a Joker: discards {len(discarded)} card(s), draws {drawn}"
        )
        events = [Event(EventType.JOKER, f"Joker! Hand reset, drew {drawn} card(s).", drawn)]

        if self.phase == Phase.DISCARD and not self._hands[player]:
            events.append(self._game_over("No cards left to absorb damage."))

        return Accepted("Joker played", tuple(events))

    # ------------------------------------------------------------------
    # 内部结算
    # ------------------------------------------------------------------

    def _check_turn(self, player: int, *phases: Phase) -> Optional[Rejected]:
        """检查阶段与行动玩家"""
        if self.phase not in phases:
            if self.is_finished:
                return Rejected(RejectReason.WRONG_PHASE, f"Game is over ({self.phase.value})")
            names = " or ".join(p.value for p in phases)
            return Rejected(RejectReason.WRONG_PHASE, f"Not in {names} phase")
        if player != self.current_player:
            return Rejected(RejectReason.WRONG_PLAYER, "Not your turn")
        return None

    def _resolve_cards(self, player: int, card_ids: Sequence[str]) -> Union[List[Card], Rejected]:
        """将 id 解析为手中的牌"""
        if isinstance(card_ids, str):
            card_ids = [card_ids]
        if len(set(card_ids)) != len(card_ids):
            return Rejected(RejectReason.INVALID_SELECTION, "Duplicate cards selected")

        in_hand = {card.id: card for card in self._hands[player]}
        cards = []
        for card_id in card_ids:
            card = in_hand.get(card_id)
            if card is None:
                return Rejected(RejectReason.INVALID_SELECTION, f"Card {card_id} is not in your hand")
            cards.append(card)
        return cards

    def _remove_from_hand(self, player: int, cards: Sequence[Card]):
        ids = {card.id for card in cards}
        self._hands[player] = [c for c in self._hands[player] if c.id not in ids]

    def _immunity(self, suit: Suit) -> Event:
        label = self.enemy.card.label
        self._add_log(f"{label} is immune to {SUIT_SYMBOLS[suit]} {suit.value}!")
        return Event(EventType.IMMUNITY, f"{label} is immune to {suit.value}!", suit=suit)

    def _draw_round_robin(self, start_player: int, count: int) -> int:
        """
        方块能力: 从行动玩家开始轮流抽牌, 跳过已达上限的玩家

        Returns:
            实际抽到的张数
        """
        to_draw = min(count, len(self._tavern))
        max_size = self.config.max_hand_size
        drawn = 0
        full_in_a_row = 0
        target = start_player

        while drawn < to_draw and full_in_a_row < self.player_count:
            hand = self._hands[target]
            if len(hand) < max_size:
                hand.append(self._tavern.pop())
                drawn += 1
                full_in_a_row = 0
            else:
                full_in_a_row += 1
            target = (target + 1) % self.player_count

        return drawn

    def _heal(self, count: int) -> int:
        """
        红桃能力: 弃牌堆顶部的牌按原顺序放到酒馆底部

        Returns:
            实际移动的张数
        """
        n = min(count, len(self._discard))
        if n > 0:
            moved = self._discard[-n:]
            del self._discard[-n:]
            self._tavern[0:0] = moved
        return n

    def _draw_up_to(self, player: int, size: int) -> int:
        """补牌到指定张数, 酒馆耗尽时停止"""
        hand = self._hands[player]
        drawn = 0
        while len(hand) < size and self._tavern:
            hand.append(self._tavern.pop())
            drawn += 1
        return drawn

    def _defeat_enemy(self) -> List[Event]:
        """
        击败当前敌人

        生命恰好为 0: 敌人牌进入弃牌堆 (可被红桃回收);
        生命低于 0: 敌人牌永久移出游戏
        """
        enemy = self.enemy
        label = enemy.card.label
        events = [Event(EventType.DEFEAT, f"{label} defeated!", enemy.current_hp)]
        self._add_log(f"{label} has been defeated!")
        self.enemies_defeated += 1

        if enemy.current_hp == 0:
            self._discard.append(enemy.card)
            self._add_log(f"The {label} joins the discard pile.")
        else:
            self._removed.append(enemy.card)
            self._add_log(f"The {label} is removed from the game.")

        self.enemy = None
        self._advance_player()
        victory = self._reveal_enemy()
        if victory is not None:
            events.append(victory)
        return events

    def _enemy_attacks(self) -> List[Event]:
        """
        敌人攻击结算 (出牌未击杀与让过共用)

        有效攻击为 0 时直接轮到下一位玩家;
        否则进入弃牌阶段, 若受攻击玩家无法支付则立即失败
        """
        attack = self.enemy.effective_attack

        if attack == 0:
            self._add_log("Attack fully shielded!")
            self._advance_player()
            events = [Event(EventType.SHIELDED, "Attack fully shielded!", 0)]
            # 所有手牌耗尽且无法补牌时无人能再出牌
            if not any(self._hands) and not self._can_refill():
                events.append(self._game_over("No cards left to attack."))
            return events

        self.phase = Phase.DISCARD
        self._discard_needed = attack
        self._discarded_so_far = []
        events = [Event(
            EventType.ENEMY_ATTACK,
            f"Enemy attacks for {attack}! Discard cards totaling {attack}.",
            attack,
        )]
        self._add_log(f"Enemy attacks for {attack}! Discard cards to survive.")

        if not self._can_absorb(self.current_player):
            events.append(self._game_over("No cards left to absorb damage."))
        return events

    def _can_absorb(self, player: int) -> bool:
        """受攻击玩家是否还有办法弃牌 (手中有牌, 或能用 Joker 从酒馆补牌)"""
        return bool(self._hands[player]) or self._can_refill()

    def _can_refill(self) -> bool:
        """COUNTER 模式下还能用 Joker 从酒馆补牌"""
        return self._jokers_remaining > 0 and bool(self._tavern)

    def _reveal_enemy(self) -> Optional[Event]:
        """翻开下一个敌人; 城堡为空时进入胜利阶段"""
        if not self._castle:
            self.enemy = None
            self.phase = Phase.VICTORY
            self._add_log("All enemies defeated! Victory!")
            logger.info("Victory after defeating %d enemies", self.enemies_defeated)
            return Event(EventType.VICTORY, "All enemies defeated! Victory!")

        card = self._castle.pop(0)
        self.enemy = Enemy.from_card(card)
        self.phase = Phase.PLAY
        self._discard_needed = 0
        self._discarded_so_far = []
        self._add_log(f"A {card.label} appears! HP: {self.enemy.max_hp}, Attack: {self.enemy.attack}")
        return None

    def _game_over(self, reason: str) -> Event:
        self.phase = Phase.GAMEOVER
        self._add_log(f"Game Over! {reason}")
        logger.info("Game over after defeating %d enemies: %s", self.enemies_defeated, reason)
        return Event(EventType.GAMEOVER, f"Game Over! {reason}")

    def _advance_player(self):
        self.current_player = (self.current_player + 1) % self.player_count

    def _add_log(self, message: str):
        self._log.append(message)
        logger.debug(message)

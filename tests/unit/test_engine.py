"""对局引擎测试"""
import pytest

from core.cards import Card, Suit, create_deck, str_to_cards, FACE_RANKS, SUITS
from core.config import GameConfig, JokerPolicy
from core.engine import RegicideGame
from core.actions import PlayAction, YieldAction, DiscardAction, JokerAction
from core.state import Phase, EventType, RejectReason, Accepted, Rejected


def ids(cards):
    return sorted(c.id for c in cards)


def full_set(jokers: int = 0):
    faces = [Card(suit, rank) for rank in FACE_RANKS for suit in SUITS]
    return ids(create_deck(jokers) + faces)


class TestSetup:
    """开局测试"""

    def test_two_player_deal(self):
        game = RegicideGame(player_count=2, seed=1)
        state = game.get_state()
        assert [len(h) for h in state.hands] == [7, 7]
        assert state.tavern_count == 40 - 14
        assert state.castle_count == 11
        assert state.current_enemy.rank == 'J'
        assert state.phase == Phase.PLAY
        assert state.current_player == 0
        assert state.enemies_defeated == 0

    def test_solo_deal(self):
        game = RegicideGame(GameConfig.solo(seed=3))
        state = game.get_state()
        assert len(state.hand(0)) == 8
        assert state.tavern_count == 32
        assert state.joker_policy == JokerPolicy.COUNTER
        assert state.jokers_remaining == 2
        assert state.jokers_available == 2

    def test_four_player_jokers_in_tavern(self):
        game = RegicideGame(player_count=4, seed=5)
        state = game.get_state()
        assert [len(h) for h in state.hands] == [5, 5, 5, 5]
        assert state.tavern_count == 42 - 20
        assert ids(game.all_cards()) == full_set(jokers=2)

    def test_seed_determinism(self):
        a = RegicideGame(player_count=3, seed=11).get_state()
        b = RegicideGame(player_count=3, seed=11).get_state()
        assert a == b

    def test_reset(self):
        game = RegicideGame(player_count=2, seed=1)
        first = game.get_state()
        game.play_cards(0, [first.hand(0)[0].id])
        game.reset(seed=1)
        assert game.get_state() == first

    def test_independent_instances(self):
        a = RegicideGame(player_count=2, seed=1)
        b = RegicideGame(player_count=2, seed=1)
        a.play_cards(0, [a.hand(0)[0].id])
        assert b.get_state() == RegicideGame(player_count=2, seed=1).get_state()

    def test_conservation_at_start(self):
        game = RegicideGame(player_count=1, seed=0)
        assert ids(game.all_cards()) == full_set()

    def test_config_and_kwargs(self):
        with pytest.raises(ValueError):
            RegicideGame(GameConfig(), player_count=2)

    def test_invalid_player_count(self):
        with pytest.raises(ValueError):
            RegicideGame(player_count=5)


class TestFromPiles:
    """自定义布局测试"""

    def test_reveals_first_enemy(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_clubs")],
            castle=str_to_cards("J_hearts Q_clubs"),
        )
        assert game.enemy.card == Card(Suit.HEARTS, 'J')
        assert game.castle == (Card(Suit.CLUBS, 'Q'),)
        assert game.player_count == 1

    def test_duplicate_card(self):
        with pytest.raises(ValueError):
            RegicideGame.from_piles(
                hands=[str_to_cards("5_clubs")],
                castle=str_to_cards("J_hearts"),
                tavern=str_to_cards("5_clubs"),
            )

    def test_non_face_castle(self):
        with pytest.raises(ValueError):
            RegicideGame.from_piles(hands=[[]], castle=str_to_cards("5_clubs"))

    def test_empty_castle(self):
        with pytest.raises(ValueError):
            RegicideGame.from_piles(hands=[[]], castle=[])

    def test_hand_count_mismatch(self):
        with pytest.raises(ValueError):
            RegicideGame.from_piles(
                hands=[[], []],
                castle=str_to_cards("J_hearts"),
                config=GameConfig(player_count=3),
            )

    def test_bad_current_player(self):
        with pytest.raises(ValueError):
            RegicideGame.from_piles(hands=[[], []], castle=str_to_cards("J_hearts"), current_player=2)


class TestEndToEnd:
    """黑桃 A 对红桃 J"""

    def test_ace_of_spades_vs_jack_of_hearts(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("A_spades 5_clubs 7_diamonds"), str_to_cards("3_hearts")],
            castle=str_to_cards("J_hearts Q_clubs"),
            tavern=str_to_cards("2_clubs 2_hearts"),
        )
        result = game.play_cards(0, ["A_spades"])

        assert isinstance(result, Accepted)
        assert not result.has_event(EventType.IMMUNITY)
        assert result.has_event(EventType.SPADES)
        assert result.has_event(EventType.ENEMY_ATTACK)

        state = game.get_state()
        assert state.enemy_hp == 19
        assert state.shield == 1
        assert state.effective_attack == 9
        assert state.phase == Phase.DISCARD
        assert state.discard_needed == 9
        assert state.current_player == 0
        assert state.discard_count == 1

    def test_survive_with_discard(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("A_spades 5_clubs 7_diamonds"), str_to_cards("3_hearts")],
            castle=str_to_cards("J_hearts Q_clubs"),
        )
        game.play_cards(0, ["A_spades"])

        partial = game.discard_cards(0, ["5_clubs"])
        assert isinstance(partial, Accepted)
        assert game.phase == Phase.DISCARD
        assert game.get_state().discard_remaining == 4

        done = game.discard_cards(0, ["7_diamonds"])
        assert done.has_event(EventType.SURVIVED)
        assert game.phase == Phase.PLAY
        assert game.current_player == 1
        assert game.get_state().discard_needed == 0


class TestSuitPowers:
    """花色能力测试"""

    def test_clubs_double(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_clubs 9_hearts")],
            castle=str_to_cards("J_hearts"),
        )
        result = game.play_cards(0, ["5_clubs"])
        assert result.has_event(EventType.CLUBS)
        assert game.enemy.current_hp == 10

    def test_clubs_immunity(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_clubs 9_hearts")],
            castle=str_to_cards("J_clubs"),
        )
        result = game.play_cards(0, ["5_clubs"])
        immunity = result.events_of(EventType.IMMUNITY)
        assert len(immunity) == 1
        assert immunity[0].suit == Suit.CLUBS
        assert not result.has_event(EventType.CLUBS)
        assert result.events_of(EventType.DAMAGE)[0].amount == 5
        assert game.enemy.current_hp == 15

    def test_event_order(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("A_clubs 4_spades 9_hearts")],
            castle=str_to_cards("Q_hearts"),
        )
        result = game.play_cards(0, ["A_clubs", "4_spades"])
        types = [e.type for e in result.events]
        assert types[:3] == [EventType.CLUBS, EventType.DAMAGE, EventType.SPADES]
        assert game.enemy.current_hp == 30 - 10
        # 黑桃只按基础值加护盾
        assert game.enemy.shield == 5

    def test_diamonds_round_robin(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_diamonds 2_clubs"), str_to_cards("3_clubs")],
            castle=str_to_cards("J_spades"),
            tavern=str_to_cards("2_hearts 3_hearts 4_hearts 5_hearts 6_hearts 7_hearts"),
        )
        result = game.play_cards(0, ["5_diamonds"])
        assert result.events_of(EventType.DIAMONDS)[0].amount == 5
        # 从牌顶 (列表末尾) 轮流抽: 玩家 0, 1, 0, 1, 0
        assert ids(game.hand(0)) == ids(str_to_cards("2_clubs 7_hearts 5_hearts 3_hearts"))
        assert ids(game.hand(1)) == ids(str_to_cards("3_clubs 6_hearts 4_hearts"))
        assert game.tavern == (Card(Suit.HEARTS, '2'),)

    def test_diamonds_skip_full_hands(self):
        hand = str_to_cards("5_diamonds 2_clubs 3_clubs 4_clubs 6_clubs 7_clubs 8_clubs 9_clubs")
        game = RegicideGame.from_piles(
            hands=[hand],
            castle=str_to_cards("J_spades"),
            tavern=str_to_cards("2_hearts 3_hearts 4_hearts"),
        )
        result = game.play_cards(0, ["5_diamonds"])
        assert result.events_of(EventType.DIAMONDS)[0].amount == 1
        assert len(game.hand(0)) == 8
        assert game.get_state().tavern_count == 2

    def test_diamonds_empty_tavern(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_diamonds 2_clubs")],
            castle=str_to_cards("J_spades"),
        )
        result = game.play_cards(0, ["5_diamonds"])
        assert result.events_of(EventType.DIAMONDS)[0].amount == 0

    def test_diamonds_immunity(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_diamonds 2_clubs")],
            castle=str_to_cards("J_diamonds"),
            tavern=str_to_cards("2_hearts 3_hearts"),
        )
        result = game.play_cards(0, ["5_diamonds"])
        assert result.has_event(EventType.IMMUNITY)
        assert not result.has_event(EventType.DIAMONDS)
        assert game.get_state().tavern_count == 2

    def test_spades_full_shield(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("10_spades 2_clubs"), str_to_cards("3_clubs")],
            castle=str_to_cards("J_hearts"),
        )
        result = game.play_cards(0, ["10_spades"])
        assert result.has_event(EventType.SHIELDED)
        assert game.phase == Phase.PLAY
        assert game.current_player == 1
        assert game.get_state().effective_attack == 0

    def test_spades_immunity(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_spades 2_clubs")],
            castle=str_to_cards("J_spades"),
        )
        game.play_cards(0, ["5_spades"])
        assert game.get_state().shield == 0
        assert game.get_state().discard_needed == 10

    def test_hearts_heal_order(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("3_hearts 9_clubs")],
            castle=str_to_cards("J_spades"),
            tavern=str_to_cards("10_diamonds"),
            discard=str_to_cards("2_clubs 4_clubs 5_clubs 6_clubs"),
        )
        result = game.play_cards(0, ["3_hearts"])
        assert result.events_of(EventType.HEARTS)[0].amount == 3
        # 弃牌堆顶部 3 张按原顺序放到酒馆底部
        assert game.tavern == tuple(str_to_cards("4_clubs 5_clubs 6_clubs 10_diamonds"))
        assert game.discard_pile == tuple(str_to_cards("2_clubs 3_hearts"))

    def test_hearts_played_card_not_healed(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_hearts 9_clubs")],
            castle=str_to_cards("J_spades"),
        )
        result = game.play_cards(0, ["5_hearts"])
        assert result.events_of(EventType.HEARTS)[0].amount == 0
        assert game.discard_pile == tuple(str_to_cards("5_hearts"))


class TestDefeat:
    """击败敌人测试"""

    def test_exact_kill_recoverable(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("10_clubs 2_hearts 9_diamonds")],
            castle=str_to_cards("J_hearts J_spades"),
        )
        result = game.play_cards(0, ["10_clubs"])
        assert result.has_event(EventType.DEFEAT)
        assert Card(Suit.HEARTS, 'J') in game.discard_pile
        assert game.removed == ()
        assert game.enemies_defeated == 1
        assert game.enemy.card == Card(Suit.SPADES, 'J')

        game.play_cards(0, ["2_hearts"])
        assert Card(Suit.HEARTS, 'J') in game.tavern

    def test_overkill_removed(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("A_spades 10_clubs 2_hearts 9_diamonds")],
            castle=str_to_cards("J_hearts J_spades"),
        )
        result = game.play_cards(0, ["A_spades", "10_clubs"])
        assert result.events_of(EventType.DAMAGE)[0].amount == 22
        assert game.removed == (Card(Suit.HEARTS, 'J'),)
        assert Card(Suit.HEARTS, 'J') not in game.discard_pile

        game.play_cards(0, ["2_hearts"])
        assert Card(Suit.HEARTS, 'J') not in game.tavern
        assert Card(Suit.HEARTS, 'J') in game.removed

    def test_defeat_advances_player(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("10_clubs"), str_to_cards("3_hearts")],
            castle=str_to_cards("J_hearts Q_spades"),
        )
        game.play_cards(0, ["10_clubs"])
        state = game.get_state()
        assert state.current_player == 1
        assert state.phase == Phase.PLAY
        assert state.enemy_hp == 30
        assert state.shield == 0

    def test_no_attack_after_defeat(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("10_clubs 5_hearts")],
            castle=str_to_cards("J_hearts Q_spades"),
        )
        result = game.play_cards(0, ["10_clubs"])
        assert not result.has_event(EventType.ENEMY_ATTACK)

    def test_victory(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("10_clubs")],
            castle=str_to_cards("J_hearts"),
            enemies_defeated=11,
        )
        result = game.play_cards(0, ["10_clubs"])
        assert result.has_event(EventType.VICTORY)
        state = game.get_state()
        assert state.phase == Phase.VICTORY
        assert state.enemies_defeated == 12
        assert state.current_enemy is None
        assert game.get_legal_actions() == []

        after = game.play_cards(0, ["10_clubs"])
        assert isinstance(after, Rejected)
        assert after.reason == RejectReason.WRONG_PHASE


class TestGameOver:
    """失败条件测试"""

    def test_discard_to_survive_fails(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("3_hearts 2_spades 4_clubs"), []],
            castle=str_to_cards("J_diamonds"),
        )
        game.play_cards(0, ["4_clubs"])
        assert game.phase == Phase.DISCARD
        game.discard_cards(0, ["3_hearts"])
        assert game.phase == Phase.DISCARD
        result = game.discard_cards(0, ["2_spades"])
        assert result.has_event(EventType.GAMEOVER)
        assert game.phase == Phase.GAMEOVER
        assert game.get_legal_actions() == []

    def test_empty_hand_on_attack(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("3_hearts"), []],
            castle=str_to_cards("J_spades"),
        )
        result = game.play_cards(0, ["3_hearts"])
        assert result.has_event(EventType.ENEMY_ATTACK)
        assert result.has_event(EventType.GAMEOVER)
        assert game.phase == Phase.GAMEOVER

    def test_counter_joker_keeps_game_alive(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("3_hearts")],
            castle=str_to_cards("J_spades"),
            tavern=str_to_cards("10_clubs 9_clubs"),
        )
        result = game.play_cards(0, ["3_hearts"])
        assert not result.has_event(EventType.GAMEOVER)
        assert game.phase == Phase.DISCARD
        assert game.get_legal_actions() == [JokerAction()]

    def test_all_hands_empty_when_shielded(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("10_spades"), []],
            castle=str_to_cards("J_hearts"),
        )
        result = game.play_cards(0, ["10_spades"])
        assert result.has_event(EventType.SHIELDED)
        assert result.has_event(EventType.GAMEOVER)

    def test_partner_cards_cannot_pay(self):
        # 只有受攻击的玩家能弃牌, 队友手中的牌无法代为抵挡
        game = RegicideGame.from_piles(
            hands=[[], str_to_cards("9_clubs 8_clubs")],
            castle=str_to_cards("J_spades"),
            tavern=str_to_cards("2_hearts"),
        )
        result = game.yield_turn(0)
        assert result.has_event(EventType.ENEMY_ATTACK)
        assert result.has_event(EventType.GAMEOVER)
        assert game.phase == Phase.GAMEOVER
        assert len(game.hand(1)) == 2

    def test_rejected_after_gameover(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("3_hearts"), []],
            castle=str_to_cards("J_spades"),
        )
        game.play_cards(0, ["3_hearts"])
        result = game.yield_turn(0)
        assert isinstance(result, Rejected)
        assert "Game is over" in result.message


class TestYield:
    """让过测试"""

    def test_yield_requires_card(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_clubs 9_hearts")],
            castle=str_to_cards("J_spades"),
        )
        result = game.yield_turn(0)
        assert isinstance(result, Rejected)
        assert result.reason == RejectReason.INVALID_SELECTION

    def test_yield_discards_and_attacks(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_clubs 9_hearts 10_diamonds")],
            castle=str_to_cards("J_spades"),
        )
        result = game.yield_turn(0, "5_clubs")
        assert result.has_event(EventType.ENEMY_ATTACK)
        assert game.discard_pile == tuple(str_to_cards("5_clubs"))
        assert game.phase == Phase.DISCARD
        assert game.enemy.current_hp == 20

    def test_yield_empty_hand(self):
        game = RegicideGame.from_piles(
            hands=[[], str_to_cards("9_hearts")],
            castle=str_to_cards("J_spades"),
        )
        result = game.yield_turn(0)
        assert result.has_event(EventType.GAMEOVER)

    def test_yield_card_not_in_hand(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_clubs")],
            castle=str_to_cards("J_spades"),
        )
        result = game.yield_turn(0, "9_hearts")
        assert result.reason == RejectReason.INVALID_SELECTION


class TestRejections:
    """非法操作测试 (状态不变)"""

    @pytest.fixture
    def game(self):
        return RegicideGame.from_piles(
            hands=[str_to_cards("5_clubs 6_clubs 9_hearts"), str_to_cards("3_hearts")],
            castle=str_to_cards("J_spades"),
            tavern=str_to_cards("2_clubs"),
        )

    def test_wrong_player(self, game):
        before = game.get_state()
        result = game.play_cards(1, ["3_hearts"])
        assert result.reason == RejectReason.WRONG_PLAYER
        assert result.message == "Not your turn"
        assert game.get_state() == before

    def test_wrong_phase(self, game):
        before = game.get_state()
        result = game.discard_cards(0, ["5_clubs"])
        assert result.reason == RejectReason.WRONG_PHASE
        assert game.get_state() == before

    def test_invalid_combo(self, game):
        before = game.get_state()
        result = game.play_cards(0, ["5_clubs", "6_clubs"])
        assert result.reason == RejectReason.INVALID_COMBO
        assert game.get_state() == before

    def test_card_not_in_hand(self, game):
        result = game.play_cards(0, ["3_hearts"])
        assert result.reason == RejectReason.INVALID_SELECTION

    def test_duplicate_selection(self, game):
        result = game.play_cards(0, ["5_clubs", "5_clubs"])
        assert result.reason == RejectReason.INVALID_SELECTION

    def test_empty_discard(self, game):
        game.play_cards(0, ["5_clubs"])
        result = game.discard_cards(0, [])
        assert result.reason == RejectReason.INVALID_SELECTION

    def test_no_joker(self, game):
        result = game.play_joker(0)
        assert result.reason == RejectReason.NO_JOKER

    def test_apply_unknown(self, game):
        with pytest.raises(TypeError):
            game.apply("play")


class TestJoker:
    """Joker 测试"""

    def test_counter_joker(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_clubs 9_hearts")],
            castle=str_to_cards("J_spades"),
            tavern=str_to_cards("2_clubs 3_clubs 4_clubs"),
        )
        result = game.play_joker(0)
        assert result.has_event(EventType.JOKER)
        assert game.get_state().jokers_remaining == 1
        assert ids(game.hand(0)) == ids(str_to_cards("2_clubs 3_clubs 4_clubs"))
        assert ids(game.discard_pile) == ids(str_to_cards("5_clubs 9_hearts"))
        # Joker 不结束回合
        assert game.phase == Phase.PLAY
        assert game.current_player == 0

    def test_counter_exhausted(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_clubs")],
            castle=str_to_cards("J_spades"),
            tavern=str_to_cards("2_clubs 3_clubs 4_clubs"),
            jokers=1,
        )
        game.play_joker(0)
        result = game.play_joker(0)
        assert result.reason == RejectReason.NO_JOKER
        assert JokerAction() not in game.get_legal_actions()

    def test_card_joker(self):
        hand = str_to_cards("5_clubs") + [Card.joker(1)]
        game = RegicideGame.from_piles(
            hands=[hand, [], []],
            castle=str_to_cards("J_spades"),
            tavern=str_to_cards("2_clubs 3_clubs"),
        )
        assert game.config.policy == JokerPolicy.CARD
        assert game.jokers_available(0) == 1
        result = game.play_joker(0)
        assert isinstance(result, Accepted)
        assert Card.joker(1) in game.discard_pile
        assert ids(game.hand(0)) == ids(str_to_cards("2_clubs 3_clubs"))
        assert game.jokers_available(0) == 0

    def test_card_joker_spends_first_joker(self):
        hand = str_to_cards("5_clubs") + [Card.joker(1), Card.joker(2)]
        game = RegicideGame.from_piles(
            hands=[hand, [], []],
            castle=str_to_cards("J_spades"),
            tavern=str_to_cards("2_clubs"),
        )
        assert game.jokers_available(0) == 2
        game.play_joker(0)
        assert game.discard_pile == (Card.joker(1), str_to_cards("5_clubs")[0], Card.joker(2))
        assert ids(game.hand(0)) == ["2_clubs"]

    def test_joker_in_discard_phase(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("3_hearts 2_spades")],
            castle=str_to_cards("J_spades"),
            tavern=str_to_cards("10_clubs 9_clubs"),
        )
        game.play_cards(0, ["3_hearts"])
        assert game.phase == Phase.DISCARD
        game.play_joker(0)
        assert game.phase == Phase.DISCARD
        # 被 Joker 弃掉的牌不计入抵挡
        assert game.get_state().discard_remaining == 10
        result = game.discard_cards(0, ["10_clubs"])
        assert result.has_event(EventType.SURVIVED)

    def test_joker_in_discard_phase_empty_tavern(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("3_hearts 2_spades")],
            castle=str_to_cards("J_spades"),
        )
        game.play_cards(0, ["3_hearts"])
        result = game.play_joker(0)
        assert result.has_event(EventType.GAMEOVER)


class TestLegalActions:
    """合法动作测试"""

    def test_play_phase(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_clubs 5_hearts"), []],
            castle=str_to_cards("J_spades"),
        )
        actions = game.get_legal_actions()
        assert PlayAction(("5_clubs",)) in actions
        assert PlayAction(("5_clubs", "5_hearts")) in actions
        assert YieldAction("5_clubs") in actions
        assert JokerAction() not in actions

    def test_discard_phase(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_clubs 5_hearts 9_spades"), []],
            castle=str_to_cards("J_spades"),
        )
        game.play_cards(0, ["9_spades"])
        actions = game.get_legal_actions()
        assert actions == [DiscardAction(("5_clubs",)), DiscardAction(("5_hearts",))]

    def test_apply_legal_actions(self):
        game = RegicideGame(player_count=2, seed=4)
        for action in game.get_legal_actions():
            probe = RegicideGame(player_count=2, seed=4)
            assert probe.apply(action).success


class TestLog:
    """对局日志测试"""

    def test_log_capped(self):
        game = RegicideGame(player_count=1, seed=2, max_log_entries=3)
        game.play_cards(0, [game.hand(0)[0].id])
        assert len(game.get_state().log) <= 3

    def test_log_contents(self):
        game = RegicideGame.from_piles(
            hands=[str_to_cards("5_clubs 9_hearts")],
            castle=str_to_cards("J_spades"),
        )
        game.play_cards(0, ["5_clubs"])
        log = game.get_state().log
        assert any("Player 1 plays 5♣" in line for line in log)
        assert any("Enemy attacks for 10" in line for line in log)


class TestConservation:
    """牌守恒测试"""

    def test_after_operations(self):
        game = RegicideGame(player_count=2, seed=8)
        expected = ids(game.all_cards())
        for _ in range(30):
            actions = game.get_legal_actions()
            if not actions:
                break
            game.apply(actions[0])
            assert ids(game.all_cards()) == expected
            assert len(set(c.id for c in game.all_cards())) == len(expected)

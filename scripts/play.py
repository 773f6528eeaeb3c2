#!/usr/bin/env python3
"""
对局脚本

Usage:
    python scripts/play.py --mode watch              # 观看 AI 独自通关
    python scripts/play.py --mode watch --players 3  # 观看 3 个 AI 合作
    python scripts/play.py --mode play --players 2   # 与 AI 伙伴合作
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional
import time

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.actions import Action, PlayAction, YieldAction, DiscardAction, JokerAction
from core.ai import RegicideAI
from core.cards import card_from_id
from core.engine import RegicideGame
from core.state import Accepted, ActionResult, Phase

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Regicide Play")

    parser.add_argument(
        "--mode",
        type=str,
        default="watch",
        choices=["watch", "play"],
        help="Mode: watch the AI or play alongside the AI",
    )
    parser.add_argument("--players", type=int, default=1, choices=[1, 2, 3, 4], help="Number of players")
    parser.add_argument(
        "--jokers",
        type=str,
        default=None,
        choices=["counter", "card"],
        help="Joker policy (default: counter for solo, card otherwise)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--delay", type=float, default=0.5, help="Delay between AI moves")
    parser.add_argument("--games", type=int, default=1, help="Number of games")

    return parser.parse_args()


def labels(card_ids) -> str:
    """牌 id 转显示字符串"""
    return " ".join(card_from_id(card_id).label for card_id in card_ids)


def action_to_str(action: Action) -> str:
    """动作转字符串"""
    if isinstance(action, PlayAction):
        return f"Play {labels(action.card_ids)}"
    if isinstance(action, YieldAction):
        if action.card_id is None:
            return "Yield"
        return f"Yield (discard {labels([action.card_id])})"
    if isinstance(action, DiscardAction):
        return f"Discard {labels(action.card_ids)}"
    if isinstance(action, JokerAction):
        return "Joker (reset hand)"
    return repr(action)


def print_game_state(game: RegicideGame, human: Optional[int] = None):
    """打印对局状态"""
    state = game.get_state()

    print("\n" + "=" * 60)
    if state.current_enemy is not None:
        print(
            f"Enemy: {state.current_enemy.label}  HP {state.enemy_hp}/{state.enemy_max_hp}  "
            f"ATK {state.effective_attack} (base {state.enemy_attack}, shield {state.shield})"
        )
    print(
        f"Tavern: {state.tavern_count}  Castle: {state.castle_count}  "
        f"Discard: {state.discard_count}  Defeated: {state.enemies_defeated}/{state.total_enemies}"
    )
    if state.jokers_available:
        print(f"Jokers available: {state.jokers_available}")
    print("-" * 60)

    for player, hand in enumerate(state.hands):
        marker = ">" if player == state.current_player else " "
        name = "You" if player == human else f"Player {player + 1}"
        shown = " ".join(c.label for c in hand)
        print(f"{marker} {name} ({len(hand)}): {shown}")

    if state.phase == Phase.DISCARD:
        print(f"\nDiscard cards totaling {state.discard_remaining} more to survive!")
    print("=" * 60)


def print_result(result: ActionResult):
    """打印操作结果"""
    if isinstance(result, Accepted):
        for event in result.events:
            print(f"  {event.message}")
        if not result.events:
            print(f"  {result.message}")
    else:
        print(f"  Rejected: {result.message}")


def ask_action(game: RegicideGame) -> Optional[Action]:
    """让玩家从合法动作中选择, 'q' 退出"""
    legal_actions = game.get_legal_actions()
    print("\n可选动作:")
    for i, action in enumerate(legal_actions):
        print(f"  {i}: {action_to_str(action)}")

    while True:
        choice = input("\n请选择动作编号 (或输入 'q' 退出): ").strip()
        if choice.lower() == 'q':
            return None
        try:
            idx = int(choice)
        except ValueError:
            print("请输入数字")
            continue
        if 0 <= idx < len(legal_actions):
            return legal_actions[idx]
        print("无效选择，请重试")


def run_game(args, game_idx: int, human: Optional[int] = None) -> bool:
    """
    运行一局

    Returns:
        是否正常结束 (玩家输入 'q' 时为 False)
    """
    seed = args.seed + game_idx if args.seed is not None else None
    game = RegicideGame(player_count=args.players, joker_policy=args.jokers, seed=seed)
    ais = {p: RegicideAI(game, player_index=p) for p in range(args.players) if p != human}

    print(f"\n{'='*60}")
    print(f"Game {game_idx + 1}/{args.games}")
    print("=" * 60)

    while not game.is_finished:
        print_game_state(game, human)
        player = game.current_player

        if player == human:
            action = ask_action(game)
            if action is None:
                print("退出游戏")
                return False
            print(f"\nYou: {action_to_str(action)}")
            result = game.apply(action)
        else:
            action = ais[player].decide()
            print(f"\nPlayer {player + 1} (AI): {action_to_str(action)}")
            result = game.apply(action)
            time.sleep(args.delay)

        print_result(result)

    state = game.get_state()
    print("\n" + "=" * 60)
    if state.phase == Phase.VICTORY:
        print("Victory! All 12 enemies defeated.")
    else:
        print(f"Game over. Enemies defeated: {state.enemies_defeated}/{state.total_enemies}")
    print("=" * 60)
    return True


def main():
    args = parse_args()

    print("=" * 60)
    print("Regicide")
    print("=" * 60)

    human = 0 if args.mode == "play" else None
    for game_idx in range(args.games):
        if not run_game(args, game_idx, human):
            break


if __name__ == "__main__":
    main()

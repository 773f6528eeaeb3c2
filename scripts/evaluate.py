#!/usr/bin/env python3
"""
评估脚本

Usage:
    python scripts/evaluate.py --agent heuristic --games 100
    python scripts/evaluate.py --agent random --players 2 --games 200 --output results.json
    python scripts/evaluate.py --compare --games 100
"""
import argparse
import logging
import sys
from pathlib import Path
import json

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from env import RegicideEnv
from evaluation import (
    Evaluator,
    RandomAgent,
    HeuristicAgent,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Regicide Evaluation")

    # 模式
    parser.add_argument("--compare", action="store_true", help="Compare heuristic vs random")

    # 评估参数
    parser.add_argument(
        "--agent",
        type=str,
        default="heuristic",
        choices=["heuristic", "random"],
        help="Agent type",
    )
    parser.add_argument("--games", type=int, default=100, help="Number of games")
    parser.add_argument("--players", type=int, default=1, choices=[1, 2, 3, 4], help="Number of players")
    parser.add_argument(
        "--jokers",
        type=str,
        default=None,
        choices=["counter", "card"],
        help="Joker policy",
    )
    parser.add_argument("--seed", type=int, default=0, help="Seed of the first game")
    parser.add_argument("--max-steps", type=int, default=1000, help="Step limit per game")

    # 其他
    parser.add_argument("--output", type=str, help="Output file for results")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")

    return parser.parse_args()


def make_env_fn(args):
    def env_fn():
        return RegicideEnv(
            player_count=args.players,
            joker_policy=args.jokers,
            max_steps=args.max_steps,
        )
    return env_fn


def create_agent(name: str, seed: int):
    if name == "random":
        return RandomAgent("random", seed=seed)
    return HeuristicAgent("heuristic")


def evaluate_single(args):
    """评估单个智能体"""
    logger.info(f"Evaluating {args.agent} agent ({args.players} player(s), {args.games} games)")

    agent = create_agent(args.agent, args.seed)
    evaluator = Evaluator(env_fn=make_env_fn(args), max_steps=args.max_steps)
    result = evaluator.evaluate(
        agent=agent,
        n_games=args.games,
        seed=args.seed,
        verbose=args.verbose,
    )

    logger.info("=" * 50)
    logger.info("Evaluation Results")
    logger.info("=" * 50)
    logger.info(f"Win Rate: {result.win_rate:.2%}")
    logger.info(f"Game Over Rate: {result.gameover_rate:.2%}")
    logger.info(f"Average Enemies Defeated: {result.avg_enemies_defeated:.2f}")
    logger.info(f"Average Reward: {result.avg_reward:.2f}")
    logger.info(f"Average Length: {result.avg_length:.1f}")
    logger.info(f"Furthest Tier: {result.tier_counts}")
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump({
                "agent": args.agent,
                "players": args.players,
                "seed": args.seed,
                **result.to_dict(),
            }, f, indent=2)
        logger.info(f"Results saved to {args.output}")

    return result


def compare_agents(args):
    """在相同发牌下比较启发式与随机智能体"""
    logger.info(f"Comparing heuristic vs random ({args.games} games)")

    evaluator = Evaluator(env_fn=make_env_fn(args), max_steps=args.max_steps)
    result = evaluator.compare(
        HeuristicAgent("heuristic"),
        RandomAgent("random", seed=args.seed),
        n_games=args.games,
        seed=args.seed,
    )

    logger.info("=" * 50)
    logger.info("Comparison Results")
    logger.info("=" * 50)
    logger.info(
        f"Heuristic: {result['agent1_win_rate']:.2%} wins, "
        f"{result['agent1_avg_enemies']:.2f} enemies"
    )
    logger.info(
        f"Random:    {result['agent2_win_rate']:.2%} wins, "
        f"{result['agent2_avg_enemies']:.2f} enemies"
    )
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump(result, f, indent=2)
        logger.info(f"Results saved to {args.output}")

    return result


def main():
    args = parse_args()

    if args.compare:
        compare_agents(args)
    else:
        evaluate_single(args)


if __name__ == "__main__":
    main()

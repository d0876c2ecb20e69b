"""
Performance Benchmark
=====================

Measures simulation throughput and how a simple greedy lane policy fares.

Usage:
    python -m tools.benchmark_speed [--steps S] [--episodes E] [--quick]
"""

from __future__ import annotations

import argparse
import sys
import time

import numpy as np

from gate_rush.core.config_loader import load_config
from gate_rush.core.env_gym import ACTION_LEFT, ACTION_RIGHT, ACTION_STAY, GateRushEnv
from gate_rush.core.game import CoreGame
from gate_rush.core.scheduler import ManualScheduler


def greedy_action(obs: dict) -> int:
    """Step toward the lane whose next gate leaves the best projected score."""
    projected = obs["lane_projected_score"]
    lane = int(obs["lane"])
    best = int(np.argmax(projected))
    if projected[best] <= projected[lane]:
        return ACTION_STAY
    return ACTION_RIGHT if best > lane else ACTION_LEFT


def benchmark_core_game(num_steps: int = 1000, seed: int = 42) -> dict:
    """
    Benchmark raw CoreGame ticks (no Gym overhead).

    Args:
        num_steps: Number of ticks to run.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    scheduler = ManualScheduler(frame_ms=config.observation.frame_ms)
    game = CoreGame(config=config, scheduler=scheduler, seed=seed)
    rng = np.random.default_rng(seed)

    game.start_session()
    start = time.perf_counter()

    for _ in range(num_steps):
        move = rng.integers(0, 3)
        if move == 1:
            game.on_move_left()
        elif move == 2:
            game.on_move_right()
        if not scheduler.advance():
            game.start_session()

    elapsed = time.perf_counter() - start
    game.stop()

    return {
        "mode": "core",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_single_env(num_steps: int = 1000, seed: int = 42) -> dict:
    """
    Benchmark single environment performance with random actions.

    Args:
        num_steps: Number of steps to run.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    env = GateRushEnv()
    rng = np.random.default_rng(seed)

    obs, _ = env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        action = int(rng.integers(0, 3))
        obs, _, terminated, truncated, _ = env.step(action)
        if terminated or truncated:
            obs, _ = env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "env",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def evaluate_greedy(num_episodes: int = 5, seed: int = 42) -> dict:
    """
    Play full episodes with the greedy policy.

    Returns:
        Dict with win count and score statistics.
    """
    env = GateRushEnv()
    wins = 0
    scores = []
    frames = []

    for episode in range(num_episodes):
        obs, _ = env.reset(seed=seed + episode)
        terminated = truncated = False
        info = {}
        while not (terminated or truncated):
            obs, _, terminated, truncated, info = env.step(greedy_action(obs))
        if info.get("won"):
            wins += 1
        scores.append(info["score"])
        frames.append(info["frames"])

    env.close()
    return {
        "episodes": num_episodes,
        "wins": wins,
        "mean_score": float(np.mean(scores)),
        "mean_frames": float(np.mean(frames)),
    }


def run_all_benchmarks(steps: int = 1000, episodes: int = 5) -> list:
    """Run comprehensive benchmarks."""
    results = []

    print("=" * 60)
    print("GATE RUSH PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    print("Benchmarking CoreGame (raw)...")
    result = benchmark_core_game(num_steps=steps)
    results.append(result)
    print(f"  Steps/sec: {result['steps_per_second']:.1f}")
    print(f"  ms/step:   {result['ms_per_step']:.3f}")
    print()

    print("Benchmarking GateRushEnv (single)...")
    result = benchmark_single_env(num_steps=steps)
    results.append(result)
    print(f"  Steps/sec: {result['steps_per_second']:.1f}")
    print(f"  ms/step:   {result['ms_per_step']:.3f}")
    print()

    print(f"Greedy policy over {episodes} episodes...")
    greedy = evaluate_greedy(num_episodes=episodes)
    print(f"  Wins:        {greedy['wins']}/{greedy['episodes']}")
    print(f"  Mean score:  {greedy['mean_score']:.1f}")
    print(f"  Mean frames: {greedy['mean_frames']:.0f}")
    print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 44)
    for r in results:
        print(f"{r['mode']:<20} {r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.3f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Gate Rush simulation performance")
    parser.add_argument("--steps", type=int, default=1000, help="Steps per benchmark")
    parser.add_argument("--episodes", type=int, default=5, help="Greedy policy episodes")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")

    args = parser.parse_args()

    steps = 100 if args.quick else args.steps
    episodes = 1 if args.quick else args.episodes

    run_all_benchmarks(steps=steps, episodes=episodes)

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Performance Benchmark
=====================

Measures simulation throughput for performance tuning.

Usage:
    python -m tools.benchmark_speed [--steps S] [--frame-skip K]
"""

from __future__ import annotations

import argparse
import sys
import time
import numpy as np

from shrimp_swim.swim_core.config_loader import load_config
from shrimp_swim.swim_core.env_gym import SwimEnv
from shrimp_swim.swim_core.game import GamePhase, GameScene


def benchmark_single_env(
    num_steps: int = 1000,
    frame_skip: int = 1,
    touch_probability: float = 0.08,
    seed: int = 42
) -> dict:
    """
    Benchmark gym environment performance.

    Args:
        num_steps: Number of steps to run.
        frame_skip: Frames per env step.
        touch_probability: Chance of a tap each step.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    env = SwimEnv(frame_skip=frame_skip)
    rng = np.random.default_rng(seed)

    # Warmup
    obs, _ = env.reset(seed=seed)
    for _ in range(10):
        action = int(rng.random() < touch_probability)
        obs, _, terminated, truncated, _ = env.step(action)
        if terminated or truncated:
            obs, _ = env.reset()

    # Benchmark
    obs, _ = env.reset(seed=seed)
    episodes = 0
    start = time.perf_counter()

    for _ in range(num_steps):
        action = int(rng.random() < touch_probability)
        obs, _, terminated, truncated, _ = env.step(action)
        if terminated or truncated:
            episodes += 1
            obs, _ = env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "env",
        "frame_skip": frame_skip,
        "num_steps": num_steps,
        "episodes": episodes,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_scene(
    num_frames: int = 1000,
    touch_probability: float = 0.08,
    seed: int = 42
) -> dict:
    """
    Benchmark raw GameScene ticks without Gym overhead.

    Args:
        num_frames: Number of frames.
        touch_probability: Chance of a tap each frame.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = GameScene(config=config, seed=seed)
    rng = np.random.default_rng(seed)

    start = time.perf_counter()

    for _ in range(num_frames):
        if rng.random() < touch_probability and game.state is GamePhase.RUNNING:
            game.touches_began()
        game.tick()
        if game.state is GamePhase.GAME_OVER:
            game.reset()

    elapsed = time.perf_counter() - start

    return {
        "mode": "scene",
        "frame_skip": 1,
        "num_steps": num_frames,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_frames / elapsed,
        "ms_per_step": (elapsed * 1000) / num_frames
    }


def run_all_benchmarks(
    frame_skips: tuple = (1, 4),
    steps: int = 500
) -> list:
    """Run comprehensive benchmarks."""
    results = []

    print("=" * 60)
    print("SHRIMP SWIM PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    print("Benchmarking GameScene (raw)...")
    result = benchmark_scene(num_frames=steps)
    results.append(result)
    print(f"  Frames/sec: {result['steps_per_second']:.1f}")
    print(f"  ms/frame:   {result['ms_per_step']:.3f}")
    print()

    for frame_skip in frame_skips:
        print(f"Benchmarking SwimEnv (frame_skip={frame_skip})...")
        result = benchmark_single_env(num_steps=steps, frame_skip=frame_skip)
        results.append(result)
        print(f"  Steps/sec: {result['steps_per_second']:.1f}")
        print(f"  ms/step:   {result['ms_per_step']:.3f}")
        print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Skip':>6} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 50)

    for r in results:
        print(f"{r['mode']:<20} {r['frame_skip']:>6} {r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.3f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Shrimp Swim performance")
    parser.add_argument("--steps", type=int, default=500, help="Steps per benchmark")
    parser.add_argument("--frame-skip", type=int, nargs="+", default=[1, 4],
                        help="Frame skip values to test")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")

    args = parser.parse_args()

    steps = 100 if args.quick else args.steps

    run_all_benchmarks(
        frame_skips=args.frame_skip,
        steps=steps
    )

    return 0


if __name__ == "__main__":
    sys.exit(main())

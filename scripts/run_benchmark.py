#!/usr/bin/env python3
"""Batch runner for the timetable allocator.

This script runs both allocation strategies on synthetic instances of
increasing size and several random seeds, and writes placement results to
CSV for ``plot_results.py``.
"""

from __future__ import annotations

import argparse
import csv
import json
import random
import time
from pathlib import Path
from typing import Any, Dict, List

from timetable_engine import Allocator, EntitySnapshot, find_conflicts

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# (subjects, teachers, lecture rooms, labs, slots per day)
PRESETS: Dict[str, tuple] = {
    "small": (8, 4, 2, 2, 6),
    "medium": (20, 8, 4, 3, 8),
    "large": (40, 14, 6, 5, 9),
}

LAB_TYPES = ["Computer Lab", "Network Lab", "Business Lab", "Lab"]


# ---------- Helpers ----------

def build_instance(size: str, instance_seed: int = 0) -> Dict[str, Any]:
    """Synthetic entity lists for a preset; same seed, same instance."""
    n_subjects, n_teachers, n_lecture_rooms, n_labs, slots_per_day = PRESETS[size]
    rng = random.Random(instance_seed)
    days = ["Mon", "Tue", "Wed", "Thu", "Fri"]

    timeslots = [
        {"day": d, "slotNo": s, "startTime": f"{7 + s:02d}:00", "endTime": f"{8 + s:02d}:00"}
        for d in days
        for s in range(1, slots_per_day + 1)
    ]
    teachers = []
    for i in range(n_teachers):
        busy = rng.sample([f"{d}-{s}" for d in days for s in range(1, slots_per_day + 1)], k=2)
        teachers.append({"id": f"T{i:02d}", "name": f"Teacher {i:02d}", "unavailable": ";".join(busy)})
    rooms = [{"id": f"R{i:02d}", "name": f"Room {i:02d}", "type": "Lecture Room"} for i in range(n_lecture_rooms)]
    rooms += [
        {"id": f"L{i:02d}", "name": f"Lab {i:02d}", "type": LAB_TYPES[i % len(LAB_TYPES)]}
        for i in range(n_labs)
    ]
    subjects = []
    assignments = []
    for i in range(n_subjects):
        flag = rng.choice([None, "requiresComputer", "requiresNetwork", "requiresBusiness"])
        subject = {
            "id": f"S{i:03d}",
            "name": f"Subject {i:03d}",
            "lectureHours": rng.randint(1, 3),
            "labHours": rng.randint(0, 2),
        }
        if flag:
            subject[flag] = True
        subjects.append(subject)
        for t in rng.sample(range(n_teachers), k=min(2, n_teachers)):
            assignments.append({"subjectId": subject["id"], "teacherId": f"T{t:02d}"})

    return {
        "timeslots": timeslots,
        "teachers": teachers,
        "subjects": subjects,
        "rooms": rooms,
        "assignments": assignments,
    }


def load_instance(name: str) -> Dict[str, Any]:
    if name in PRESETS:
        return build_instance(name)
    path = Path(name)
    if not path.exists():
        raise FileNotFoundError(f"No preset or instance file named '{name}'")
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def total_hours(data: Dict[str, Any]) -> int:
    """Total number of weekly hours requested in an instance."""
    return sum(s.get("lectureHours", 0) + s.get("labHours", 0) for s in data.get("subjects", []))


# ---------- Benchmark Runner ----------

def run_benchmark(
    instances: List[str],
    strategies: List[str],
    seed_count: int,
    time_limit: float,
    output: Path,
) -> None:
    records: List[Dict[str, Any]] = []

    print("Running benchmark (single-threaded, reproducible).")

    for name in instances:
        data = load_instance(name)
        snapshot = EntitySnapshot.model_validate(data)

        meta = {
            "instance": Path(name).stem,
            "n_subjects": len(snapshot.subjects),
            "n_teachers": len(snapshot.teachers),
            "n_rooms": len(snapshot.rooms),
            "n_timeslots": len(snapshot.timeslots),
            "total_hours": total_hours(data),
        }

        for strategy in strategies:
            for seed in range(seed_count):
                allocator = Allocator(seed=seed, strategy=strategy, time_limit_seconds=time_limit)
                started = time.perf_counter()
                result = allocator.generate_from(snapshot)
                wall_time = time.perf_counter() - started

                record = {
                    **meta,
                    "strategy": strategy,
                    "used_strategy": result.strategy,
                    "seed": seed,
                    "placed_hours": len(result.entries),
                    "failed_sessions": len(result.failures),
                    "conflicts": len(find_conflicts(result.entries)),
                    "wall_time_s": round(wall_time, 4),
                }
                records.append(record)

                print(
                    f"[{meta['instance']}] {strategy} seed={seed}: "
                    f"placed={record['placed_hours']}/{meta['total_hours']} "
                    f"failed={record['failed_sessions']}"
                )

    # ---------- Write CSV ----------

    fieldnames = [
        "instance",
        "strategy",
        "used_strategy",
        "seed",
        "placed_hours",
        "failed_sessions",
        "conflicts",
        "wall_time_s",
        "n_subjects",
        "n_teachers",
        "n_rooms",
        "n_timeslots",
        "total_hours",
    ]

    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
        writer.writeheader()
        for record in records:
            writer.writerow(record)

    print(f"Wrote benchmark results to {output}")


# ---------- CLI ----------

def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--instances",
        nargs="+",
        default=["small", "medium", "large"],
        help="preset names or paths to EntitySnapshot JSON files",
    )
    parser.add_argument("--strategies", nargs="+", default=["cp-sat", "random"], choices=["cp-sat", "random"])
    parser.add_argument("--seed-count", type=int, default=10)
    parser.add_argument("--time-limit", type=float, default=10.0)
    parser.add_argument(
        "--output",
        type=Path,
        default=PROJECT_ROOT / "results.csv",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    run_benchmark(
        instances=args.instances,
        strategies=args.strategies,
        seed_count=args.seed_count,
        time_limit=args.time_limit,
        output=args.output,
    )


if __name__ == "__main__":
    main()

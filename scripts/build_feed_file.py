"""Write a YAML telemetry feed file for local runs (feed.path)."""

from __future__ import annotations

import argparse
import random
from pathlib import Path

import yaml

from power_monitor.feed.synthetic import FULL_DAY_SAMPLES, generate_synthetic_series


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser()
    p.add_argument("--output", default="data.yml")
    p.add_argument("--samples", type=int, default=FULL_DAY_SAMPLES)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument(
        "--invalid-every",
        type=int,
        default=0,
        help="replace every Nth power value with a non-numeric string (0 = never)",
    )
    return p.parse_args()


def build_document(samples: int, seed: int | None, invalid_every: int) -> dict:
    series = generate_synthetic_series(random.Random(seed), sample_count=samples)
    power = []
    for i, sample in enumerate(series.power.values, start=1):
        value: object = round(sample.value, 3)
        if invalid_every and i % invalid_every == 0:
            value = "invalid"
        power.append({"time": sample.time, "value": value})
    temperature = [
        {"time": sample.time, "value": round(sample.value, 1)}
        for sample in series.temperature.values
    ]
    return {
        "power": {"unit": series.power.unit, "values": power},
        "temperature": {"unit": series.temperature.unit, "values": temperature},
    }


def main() -> None:
    args = parse_args()
    doc = build_document(args.samples, args.seed, args.invalid_every)
    out = Path(args.output)
    with out.open("w", encoding="utf-8") as f:
        yaml.safe_dump(doc, f, default_flow_style=False, sort_keys=False)
    print(f"Wrote {args.samples} samples per series to {out}")


if __name__ == "__main__":
    main()

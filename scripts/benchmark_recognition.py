"""Benchmark script: distance statistics between registered faces."""

import argparse
import sys
from pathlib import Path

import numpy as np

# Add parent directory to path to import facepay modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from facepay.config import DATA_DIR, MATCH_THRESHOLD, PAYMENT_THRESHOLD
from facepay.db import DescriptorStore
from facepay.storage import JsonFileStorage
from facepay.utils import l2_distance


def main():
    """Compute pairwise distances between different registered wallets."""
    parser = argparse.ArgumentParser(description="Distance statistics for registered faces")
    parser.add_argument("--data-dir", default=str(DATA_DIR), help="Directory for saved state")
    args = parser.parse_args()

    print("=== Recognition Distance Benchmark ===")
    print("Computing distances between faces registered to different wallets\n")

    store = DescriptorStore(JsonFileStorage(args.data_dir))
    records = store.load()

    if len(records) < 2:
        print("Need at least 2 registered faces for meaningful statistics.")
        return

    # Every pair belongs to a different wallet
    inter_distances = []
    nearest = {}
    for i in range(len(records)):
        for j in range(i + 1, len(records)):
            dist = l2_distance(records[i].descriptor, records[j].descriptor)
            inter_distances.append(dist)
            for a, b in ((i, j), (j, i)):
                name = records[a].identifier
                if name not in nearest or dist < nearest[name][1]:
                    nearest[name] = (records[b].identifier, dist)

    print("Inter-class distances (different wallets):")
    print(f"  Mean:   {np.mean(inter_distances):.4f}")
    print(f"  Std:    {np.std(inter_distances):.4f}")
    print(f"  Median: {np.median(inter_distances):.4f}")
    print(f"  Min:    {np.min(inter_distances):.4f}")
    print(f"  Max:    {np.max(inter_distances):.4f}")
    print(f"  Count:  {len(inter_distances)}")

    print("\nNearest other wallet per registered face:")
    for name, (other, dist) in nearest.items():
        flag = ""
        if dist < PAYMENT_THRESHOLD:
            flag = "  <- would authorize payment"
        elif dist < MATCH_THRESHOLD:
            flag = "  <- within match threshold"
        print(f"  {name} -> {other}: {dist:.4f}{flag}")

    far = sum(1 for d in inter_distances if d < MATCH_THRESHOLD) / len(inter_distances)
    print(f"\nPairs within match threshold {MATCH_THRESHOLD}: {far * 100:.2f}%")


if __name__ == "__main__":
    main()

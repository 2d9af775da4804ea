import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path

# ============================================================
# Paths
# ============================================================
PROJECT_ROOT = Path(__file__).resolve().parents[1]
RESULTS_CSV = PROJECT_ROOT / "results.csv"
SIZE_ORDER = ["small", "medium", "large"]

print(f"Loading results from: {RESULTS_CSV}")

# ============================================================
# Load CSV
# ============================================================
df = pd.read_csv(RESULTS_CSV)
df.columns = df.columns.str.strip()

# ============================================================
# Normalize placement
# ============================================================
df["placement_rate"] = df["placed_hours"] / df["total_hours"]

order = [name for name in SIZE_ORDER if name in set(df["instance"])]
order += sorted(set(df["instance"]) - set(order))

# ============================================================
# PLOT 1: Placement rate across seeds
# ============================================================
plt.figure(figsize=(7, 4))
for (inst, strategy), subset in df.groupby(["instance", "strategy"]):
    plt.scatter(subset["seed"], subset["placement_rate"], label=f"{inst} / {strategy}", alpha=0.7)

plt.xlabel("Random seed")
plt.ylabel("Placed hours / requested hours")
plt.title("Placement rate across seeds")
plt.legend()
plt.grid(True)
plt.tight_layout()

# ============================================================
# PLOT 2: Mean placement rate by instance size and strategy
# ============================================================
plt.figure(figsize=(7, 4))
grouped = (
    df.pivot_table(index="instance", columns="strategy", values="placement_rate", aggfunc="mean")
      .reindex(order)
)
grouped.plot(kind="bar", ax=plt.gca(), rot=0)
plt.ylabel("Mean placement rate")
plt.title("Placement rate by instance size")
plt.grid(axis="y")
plt.tight_layout()

# ============================================================
# PLOT 3: Wall time by instance size and strategy
# ============================================================
plt.figure(figsize=(7, 4))
runtime = (
    df.groupby(["instance", "strategy"])["wall_time_s"]
      .agg(["mean", "std"])
      .reset_index()
)
strategies = sorted(runtime["strategy"].unique())
width = 0.8 / max(len(strategies), 1)
for i, strategy in enumerate(strategies):
    subset = runtime[runtime["strategy"] == strategy].set_index("instance").reindex(order)
    positions = [x + i * width for x in range(len(order))]
    plt.bar(positions, subset["mean"], width=width, yerr=subset["std"], capsize=4, label=strategy)

plt.xticks([x + width * (len(strategies) - 1) / 2 for x in range(len(order))], order)
plt.ylabel("Wall time (s)")
plt.title("Runtime by instance size")
plt.legend()
plt.grid(axis="y")
plt.tight_layout()

# ============================================================
# PLOT 4: Sessions reported as failures
# ============================================================
plt.figure(figsize=(7, 4))
failures = (
    df.pivot_table(index="instance", columns="strategy", values="failed_sessions", aggfunc="mean")
      .reindex(order)
)
failures.plot(kind="bar", ax=plt.gca(), rot=0)
plt.ylabel("Mean failed sessions")
plt.title("Unplaced sessions by instance size")
plt.grid(axis="y")
plt.tight_layout()

# ============================================================
# SHOW ALL FIGURES AT ONCE
# ============================================================
plt.show()

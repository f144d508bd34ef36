#!/usr/bin/env python3
"""
Analyze generation CSVs produced by GenerationCsvLogger.

Features:
  - --session latest|<id> filters to a single run (so you never need to delete runs/)
  - Saves timestamped CSV exports and PNG plots under --outdir
  - Overall plot:
      (1) predator / prey counts
      (2) avg & max fitness, total kills on a twin axis
      (3) avg traits (size, metabolism, aggression, vision)
  - Species plots (one PNG per species):
      (1) fitness (avg, max)
      (2) avg traits
Usage examples:
  python analyze_ui_csv.py --overall runs/ui_generations.csv \
                           --species runs/ui_species_generations.csv \
                           --outdir reports \
                           --tag demo \
                           --session latest
"""
import argparse
import os
import sys
import time
import pandas as pd

# Use non-interactive backend for headless operation
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

TRAIT_COLS = ("avg_size", "avg_metabolism", "avg_aggression", "avg_vision")
OVERALL_NUMERIC = ("generation", "n", "alive_end", "predators", "prey", "total_kills", "food_eaten",
                   "avg_fitness", "fitness_min", "fitness_q25", "fitness_median", "fitness_q75",
                   "fitness_max", *TRAIT_COLS, "food_count", "generation_length")
SPECIES_NUMERIC = ("generation", "n", "alive_end", "kills", "food_eaten", "avg_fitness", "max_fitness",
                   *TRAIT_COLS)


# ------------------------- utilities -------------------------
def ensure_dir(p: str) -> None:
    os.makedirs(p, exist_ok=True)

def timestamp(tag: str | None = None) -> str:
    t = time.strftime("%Y%m%d_%H%M%S")
    return f"{t}__{tag}" if tag else t

def exists(path: str | None) -> bool:
    return bool(path and os.path.exists(path))

def _to_numeric(df: pd.DataFrame, cols) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


# ------------------------- loading ---------------------------
def load_csvs(overall_path: str, species_path: str | None):
    if not exists(overall_path):
        print(
            "\n[ERROR] Overall CSV not found.\n"
            f"  Expected: {overall_path}\n"
            "Hints:\n"
            "  • Run the UI until at least one generation completes.\n"
            "  • Confirm the logger paths in neuro_evo/ui/app.py match these args.\n",
            file=sys.stderr
        )
        sys.exit(1)

    df_overall = pd.read_csv(overall_path)
    df_species = pd.read_csv(species_path) if (species_path and exists(species_path)) else None
    return df_overall, df_species


def latest_session_id(df: pd.DataFrame) -> str | None:
    """Return the last session_id in file order (used by --session latest)."""
    if "session_id" not in df.columns or len(df) == 0:
        return None
    s = df["session_id"].dropna()
    return s.iloc[-1] if len(s) else None


# ------------------------- cleaning --------------------------
def clean_overall(df_overall: pd.DataFrame) -> pd.DataFrame:
    """Numeric columns averaged per generation (across sessions, if several)."""
    df = _to_numeric(df_overall.copy(), OVERALL_NUMERIC)
    if "generation" not in df.columns:
        return df
    keep = [c for c in OVERALL_NUMERIC if c in df.columns and c != "generation"]
    return df.groupby("generation", as_index=False)[keep].mean().sort_values("generation")


def clean_species(df_species: pd.DataFrame | None) -> pd.DataFrame:
    if df_species is None or len(df_species) == 0:
        return pd.DataFrame()
    df = _to_numeric(df_species.copy(), SPECIES_NUMERIC)
    keep = [c for c in SPECIES_NUMERIC if c in df.columns and c != "generation"]
    keys = [k for k in ("species", "generation") if k in df.columns]
    return df.groupby(keys, as_index=False)[keep].mean().sort_values(keys)


# ------------------------- plotting --------------------------
def plot_overall(df: pd.DataFrame, outdir: str, tag: str | None) -> str:
    """Trends figure: counts, fitness, traits. Expects `clean_overall` output."""
    ensure_dir(outdir)
    fig, ax = plt.subplots(3, 1, figsize=(10, 11), sharex=True)
    gen = df["generation"]

    # (1) counts
    ax[0].plot(gen, df["n"], label="Total N", color="black", linewidth=2.25)
    if "predators" in df.columns:
        ax[0].plot(gen, df["predators"], label="Predators", color="tab:red")
    if "prey" in df.columns:
        ax[0].plot(gen, df["prey"], label="Prey", color="tab:green")
    if "alive_end" in df.columns:
        ax[0].plot(gen, df["alive_end"], label="Alive at end", color="tab:gray", linestyle="--")
    ax[0].set_ylabel("Count")
    ax[0].legend(loc="best", ncols=2)
    ax[0].grid(alpha=0.25)

    # (2) fitness + kills
    if "avg_fitness" in df.columns:
        ax[1].plot(gen, df["avg_fitness"], label="Avg fitness")
    if "fitness_max" in df.columns:
        ax[1].plot(gen, df["fitness_max"], label="Max fitness")
    ax[1].set_ylabel("Fitness")
    ax[1].legend(loc="upper left")
    ax[1].grid(alpha=0.25)
    if "total_kills" in df.columns:
        kx = ax[1].twinx()
        kx.plot(gen, df["total_kills"], color="tab:red", alpha=0.6, label="Kills")
        kx.set_ylabel("Kills")
        kx.legend(loc="upper right")

    # (3) traits
    for col in TRAIT_COLS:
        if col in df.columns:
            ax[2].plot(gen, df[col], label=col.replace("avg_", "").capitalize())
    ax[2].set_xlabel("Generation")
    ax[2].set_ylabel("Trait value")
    ax[2].legend(loc="best")
    ax[2].grid(alpha=0.25)

    fig.tight_layout()
    png = os.path.join(outdir, f"overall_trends_{timestamp(tag)}.png")
    fig.savefig(png, dpi=160)
    plt.close(fig)
    print(f"[OK] Saved {png}")
    return png


def plot_species(df_species: pd.DataFrame, outdir: str, tag: str | None):
    """One 2-row figure per species: fitness, traits. Expects `clean_species` output."""
    if df_species is None or len(df_species) == 0:
        print("[INFO] No species rows; skipping per-species plots.")
        return []
    if "species" not in df_species.columns:
        print("[WARN] No species column; skipping species plots.")
        return []

    ensure_dir(outdir)
    written = []
    for name, sub in df_species.groupby("species"):
        sub = sub.sort_values("generation")
        fig, ax = plt.subplots(2, 1, figsize=(10, 8), sharex=True)

        ax[0].plot(sub["generation"], sub["avg_fitness"], label="Avg fitness")
        if "max_fitness" in sub.columns:
            ax[0].plot(sub["generation"], sub["max_fitness"], label="Max fitness")
        ax[0].set_ylabel("Fitness")
        ax[0].legend(loc="best")
        ax[0].grid(alpha=0.25)

        for col in TRAIT_COLS:
            if col in sub.columns:
                ax[1].plot(sub["generation"], sub[col], label=col.replace("avg_", "").capitalize())
        ax[1].set_xlabel("Generation")
        ax[1].set_ylabel("Trait value")
        ax[1].legend(loc="best")
        ax[1].grid(alpha=0.25)

        fig.suptitle(f"Species: {name}")
        fig.tight_layout()
        png = os.path.join(outdir, f"species_{name}_trends_{timestamp(tag)}.png")
        fig.savefig(png, dpi=160)
        plt.close(fig)
        print(f"[OK] Saved {png}")
        written.append(png)
    return written


# ------------------------- exports ---------------------------
def export_csv(df: pd.DataFrame, outdir: str, base: str, tag: str | None) -> str:
    ensure_dir(outdir)
    path = os.path.join(outdir, f"{base}_{timestamp(tag)}.csv")
    df.to_csv(path, index=False)
    print(f"[OK] Wrote {path}")
    return path


# ------------------------- main ------------------------------
def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--overall", type=str, default="runs/ui_generations.csv",
                    help="Path to overall per-generation CSV written by the UI")
    ap.add_argument("--species", type=str, default="runs/ui_species_generations.csv",
                    help="Path to per-species CSV (pass '' to disable)")
    ap.add_argument("--outdir", type=str, default="reports",
                    help="Output directory for plots and exported CSVs")
    ap.add_argument("--tag", type=str, default="",
                    help="Optional label to append to filenames (e.g., 'lowfood')")
    ap.add_argument("--session", type=str, default="",
                    help="Session ID to analyze; use 'latest' to pick the most recent session automatically.")
    args = ap.parse_args()
    tag = args.tag or None

    df_overall, df_species = load_csvs(args.overall, args.species or None)

    if args.session:
        if "session_id" not in df_overall.columns:
            print("[WARN] --session provided but overall CSV has no session_id; ignoring.")
        else:
            sid = latest_session_id(df_overall) if args.session == "latest" else args.session
            if sid:
                df_overall = df_overall[df_overall["session_id"] == sid]
                if df_species is not None and "session_id" in df_species.columns:
                    df_species = df_species[df_species["session_id"] == sid]
                print(f"[OK] Filtering analysis to session_id={sid}")
            else:
                print("[WARN] Could not resolve latest session_id; analyzing all data.")

    print(f"[INFO] Overall rows after filter: {len(df_overall)}")
    if len(df_overall) == 0:
        print("[WARN] Nothing to analyze.")
        return

    overall = clean_overall(df_overall)
    export_csv(overall, args.outdir, base="overall_summary", tag=tag)
    plot_overall(overall, args.outdir, tag)

    species = clean_species(df_species)
    if len(species) > 0:
        export_csv(species, args.outdir, base="species_summary", tag=tag)
        plot_species(species, args.outdir, tag)
    else:
        print("[INFO] No per-species rows to plot (after optional --session filter); skipping species plots.")

    print(f"\nDone. Outputs are in: {args.outdir}")

if __name__ == "__main__":
    main()

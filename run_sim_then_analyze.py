#!/usr/bin/env python3
"""
One-shot runner:
  1) Run the simulation (headless by default, or the UI with --ui; blocks until done)
  2) Analyze only the latest session from the generation logs

Usage:
  python run_sim_then_analyze.py --generations 30 --outdir reports --tag demo
"""
import argparse
import subprocess
import sys
import os
import csv

def get_latest_session_id(overall_path: str) -> str | None:
    if not os.path.exists(overall_path):
        return None
    last_sid = None
    with open(overall_path, newline="") as f:
        for row in csv.DictReader(f):
            sid = row.get("session_id")
            if sid:
                last_sid = sid
    return last_sid

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--overall", default="runs/ui_generations.csv")
    ap.add_argument("--species", default="runs/ui_species_generations.csv")
    ap.add_argument("--outdir", default="reports")
    ap.add_argument("--tag", default="")
    ap.add_argument("--generations", type=int, default=20)
    ap.add_argument("--seed", type=int, default=42)
    ap.add_argument("--ui", action="store_true", help="run the live UI instead of a headless batch")
    args = ap.parse_args()

    if args.ui:
        sim_cmd = [sys.executable, "-m", "neuro_evo.main", "--ui", "--seed", str(args.seed)]
    else:
        # --session-log writes through the UI's CSV writer so rows carry a session id
        sim_cmd = [sys.executable, "-m", "neuro_evo.main",
                   "--generations", str(args.generations), "--seed", str(args.seed),
                   "--session-log", "--session-overall", args.overall,
                   "--session-species", args.species]
    print("[launcher] Starting:", " ".join(sim_cmd))
    ret = subprocess.call(sim_cmd)
    if ret != 0:
        print(f"[launcher] simulation exited with code {ret}", file=sys.stderr)

    sid = get_latest_session_id(args.overall)
    if not sid:
        print("[launcher] No session_id found in overall CSV; maybe no generation completed yet?")
        sys.exit(0)

    ana_cmd = [
        sys.executable, "analyze_ui_csv.py",
        "--overall", args.overall,
        "--species", args.species,
        "--outdir", args.outdir,
        "--tag", args.tag,
        "--session", sid
    ]
    print("[launcher] Analyzing session:", sid)
    print("[launcher] Running:", " ".join(ana_cmd))
    sys.exit(subprocess.call(ana_cmd))

if __name__ == "__main__":
    main()

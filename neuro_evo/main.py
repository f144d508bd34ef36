# neuro_evo/main.py
from __future__ import annotations
import argparse
from dataclasses import replace

from .sim.config import SIM, WORLD
from .sim.errors import ConfigurationError
from .sim.live import LiveSim
from .sim.evolution_log import EvolutionLog
from .sim.metrics import append_csv
from .ui.csv_writer import GenerationCsvLogger

def run_headless(generations: int, seed: int, pop: int, food: int, csv_path: str | None,
                 speed: int = SIM.speed, session_logger: GenerationCsvLogger | None = None) -> LiveSim:
    cfg = replace(WORLD, population_size=pop, food_count=food)
    live = LiveSim(cfg, seed=seed, logger=EvolutionLog())
    live.set_speed(speed)

    while live.generation <= generations:
        if not live.update():
            continue
        summary = live.last_summary
        print(
            f"Gen {summary['generation']:3d} | N={summary['n']:3d} "
            f"pred={summary['predators']:3d} prey={summary['prey']:3d} "
            f"alive={summary['alive']:3d} kills={summary['total_kills']:3d} "
            f"avg_fit={summary['avg_fitness']:.1f} max_fit={summary['max_fitness']:.1f} "
            f"size={summary['avg_size']:.2f} aggr={summary['avg_aggression']:.2f} vision={summary['avg_vision']:.2f}"
        )
        if csv_path:
            append_csv(csv_path, summary)
        if session_logger is not None:
            session_logger.append_generation(
                generation=summary["generation"],
                pop=live.last_population,
                food_count=int(live.config.food_count),
                generation_length=int(live.config.generation_length),
                notes="headless",
            )
    return live

def run():
    parser = argparse.ArgumentParser(description="Neuro-evolution predator/prey simulation")
    parser.add_argument("--generations", type=int, default=SIM.generations)
    parser.add_argument("--seed", type=int, default=SIM.seed)
    parser.add_argument("--pop", type=int, default=WORLD.population_size)
    parser.add_argument("--food", type=int, default=WORLD.food_count)
    parser.add_argument("--csv", type=str, default=SIM.track_csv)
    parser.add_argument("--speed", type=int, default=SIM.speed, help="ticks per update call (1-10)")
    parser.add_argument("--ui", action="store_true", help="launch real-time UI")
    parser.add_argument("--session-log", action="store_true",
                        help="also write UI-style session CSVs (for analyze_ui_csv.py)")
    parser.add_argument("--session-overall", type=str, default="runs/ui_generations.csv")
    parser.add_argument("--session-species", type=str, default="runs/ui_species_generations.csv")
    args = parser.parse_args()

    if args.ui:
        from .ui.app import run_ui  # pygame only needed here
        run_ui(seed=args.seed, food_count=args.food)
        return

    session_logger = None
    if args.session_log:
        session_logger = GenerationCsvLogger(overall_path=args.session_overall,
                                             species_path=args.session_species)
        print(f"[sim] session {session_logger.session_id}")

    try:
        run_headless(args.generations, args.seed, args.pop, args.food, args.csv,
                     args.speed, session_logger)
    except ConfigurationError as e:
        parser.error(str(e))

if __name__ == "__main__":
    run()

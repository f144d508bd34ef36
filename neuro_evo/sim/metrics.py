# neuro_evo/sim/metrics.py
from __future__ import annotations
from typing import List, Dict
import os
import csv

from .models import Creature
from .traits import TRAIT_NAMES
from .genetics import population_stats

def summarize_generation(generation: int, population: List[Creature]) -> Dict[str, float]:
    n = len(population)
    alive = [c for c in population if c.alive]
    st = population_stats(population)
    row = dict(
        generation=generation,
        n=n,
        alive=len(alive),
        predators=st["predator_count"],
        prey=st["prey_count"],
        alive_predators=sum(1 for c in alive if c.is_predator),
        alive_prey=sum(1 for c in alive if not c.is_predator),
        avg_fitness=st["avg"],
        max_fitness=st["max"],
        min_fitness=st["min"],
        total_kills=st["total_kills"],
        food_eaten=sum(c.food_eaten for c in population),
    )
    for name in TRAIT_NAMES:
        row[f"avg_{name}"] = sum(getattr(c.traits, name) for c in population) / max(n, 1)
    return row

def append_csv(path: str, row: Dict[str, float]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    write_header = not os.path.exists(path)
    with open(path, "a", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(row.keys()))
        if write_header:
            w.writeheader()
        w.writerow(row)

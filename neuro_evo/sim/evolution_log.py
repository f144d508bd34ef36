# neuro_evo/sim/evolution_log.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import itertools

from .models import Creature

@dataclass
class LogEntry:
    seq: int
    kind: str  # "elite" | "birth" | "death" | "kill" | "generation"
    data: Dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

class EvolutionLog:
    """
    In-memory sink for evolutionary events.

    Keeps the newest `max_entries` events (newest first) and the last
    `max_summaries` generation summaries. The simulation only calls the log_*
    methods and never reads their results.
    """
    def __init__(self, max_entries: int = 100, max_summaries: int = 50):
        self.max_entries = max_entries
        self.max_summaries = max_summaries
        self.entries: List[LogEntry] = []
        self.generation_summaries: List[Dict[str, Any]] = []
        self._seq = itertools.count(1)

    def log(self, kind: str, **data: Any) -> LogEntry:
        entry = LogEntry(seq=next(self._seq), kind=kind, data=data)
        self.entries.insert(0, entry)
        del self.entries[self.max_entries:]
        return entry

    # ---- sink interface ----
    def log_elite(self, creature: Creature, generation: int, rank: int) -> LogEntry:
        return self.log("elite",
                        creature_id=creature.id, generation=generation, rank=rank,
                        fitness=creature.fitness, food_eaten=creature.food_eaten,
                        traits=creature.traits.as_dict(), is_predator=creature.is_predator,
                        reason=f"Top {rank} by fitness ({creature.fitness:.1f})")

    def log_birth(self, child: Creature, parent1: Creature, parent2: Creature, generation: int) -> LogEntry:
        return self.log("birth",
                        child_id=child.id, parent1_id=parent1.id, parent2_id=parent2.id,
                        generation=generation,
                        parent1_fitness=parent1.fitness, parent2_fitness=parent2.fitness,
                        child_traits=child.traits.as_dict(), is_predator=child.is_predator)

    def log_death(self, creature: Creature, cause: str = "starved") -> LogEntry:
        return self.log("death",
                        creature_id=creature.id, cause=cause, age=creature.age,
                        fitness=creature.fitness, food_eaten=creature.food_eaten,
                        is_predator=creature.is_predator)

    def log_kill(self, predator: Creature, prey: Creature) -> LogEntry:
        return self.log("kill",
                        predator_id=predator.id, prey_id=prey.id,
                        predator_fitness=predator.fitness, prey_fitness=prey.fitness)

    def log_generation(self, generation: int, stats: Dict[str, Any]) -> LogEntry:
        summary = dict(
            generation=generation,
            avg_fitness=stats.get("avg_fitness", 0.0),
            max_fitness=stats.get("max_fitness", 0.0),
            predator_count=stats.get("predators", 0),
            prey_count=stats.get("prey", 0),
            kill_count=stats.get("total_kills", 0),
            total_deaths=stats.get("deaths", 0),
        )
        self.generation_summaries.append(summary)
        del self.generation_summaries[:-self.max_summaries]
        return self.log("generation", **summary)

    # ---- queries ----
    def get_entries(self, kind: Optional[str] = None, limit: int = 20) -> List[LogEntry]:
        picked = [e for e in self.entries if kind is None or e.kind == kind]
        return picked[:limit]

    def survivor_summary(self) -> Optional[Dict[str, Any]]:
        """Elites and offspring produced right after the latest generation summary."""
        gen_entry = next((e for e in self.entries if e.kind == "generation"), None)
        if gen_entry is None:
            return None
        next_gen = gen_entry["generation"] + 1
        elites = sorted((e for e in self.entries if e.kind == "elite" and e["generation"] == next_gen),
                        key=lambda e: e["rank"])
        births = [e for e in self.entries if e.kind == "birth" and e["generation"] == next_gen]

        trait_averages: Dict[str, float] = {}
        if elites:
            for key in elites[0]["traits"]:
                trait_averages[key] = sum(e["traits"][key] for e in elites) / len(elites)

        return dict(
            generation=gen_entry["generation"],
            elite_count=len(elites),
            offspring_count=len(births),
            elites=[dict(rank=e["rank"], fitness=e["fitness"], is_predator=e["is_predator"],
                         traits=e["traits"]) for e in elites],
            avg_fitness=gen_entry["avg_fitness"],
            max_fitness=gen_entry["max_fitness"],
            trait_averages=trait_averages,
        )

    def formatted_entries(self, limit: int = 15) -> List[str]:
        lines = []
        for e in self.entries[:limit]:
            if e.kind == "elite":
                lines.append(f"#{e['rank']} elite survived (fitness {e['fitness']:.1f})")
            elif e.kind == "birth":
                lines.append(f"new {'predator' if e['is_predator'] else 'herbivore'} born")
            elif e.kind == "death":
                what = "was hunted" if e["cause"] == "hunted" else "starved"
                lines.append(f"creature {e['creature_id']} {what} (age {e['age']})")
            elif e.kind == "kill":
                lines.append(f"predator {e['predator_id']} hunted prey {e['prey_id']}")
            elif e.kind == "generation":
                lines.append(f"gen {e['generation']}: avg {e['avg_fitness']:.1f} | max {e['max_fitness']:.1f}")
        return lines

    def clear(self) -> None:
        self.entries = []

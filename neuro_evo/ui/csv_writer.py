# neuro_evo/ui/csv_writer.py
from __future__ import annotations
import csv
import os
import uuid
from typing import Iterable, Dict, List, Optional
from ..sim.models import Creature


class GenerationCsvLogger:
    """
    Append generation-level stats to CSV files *when a generation flips*.
    - overall_path:  runs/ui_generations.csv
    - species_path:  runs/ui_species_generations.csv  (optional)
    Each run gets its own session_id so you can combine logs safely later.

    Usage from UI loop:
        logger = GenerationCsvLogger()
        ...
        if live.update():
            logger.append_generation(generation=live.generation - 1,
                                     pop=live.last_population,
                                     food_count=int(live.config.food_count),
                                     generation_length=int(live.config.generation_length))
    """
    def __init__(self,
                 overall_path: str = "runs/ui_generations.csv",
                 species_path: str = "runs/ui_species_generations.csv",
                 enable_species: bool = True):
        self.overall_path = overall_path
        self.species_path = species_path
        self.enable_species = enable_species
        self.session_id = uuid.uuid4().hex[:8]

        if self.overall_path:
            os.makedirs(os.path.dirname(self.overall_path) or ".", exist_ok=True)
        if self.enable_species and self.species_path:
            os.makedirs(os.path.dirname(self.species_path) or ".", exist_ok=True)

        self._overall_header = [
            "session_id","generation","n","alive_end","predators","prey",
            "total_kills","food_eaten",
            "avg_fitness","fitness_min","fitness_q25","fitness_median","fitness_q75","fitness_max",
            "avg_size","avg_metabolism","avg_aggression","avg_vision",
            "food_count","generation_length","notes"
        ]
        if self.overall_path and not os.path.exists(self.overall_path):
            with open(self.overall_path, "w", newline="") as f:
                csv.DictWriter(f, fieldnames=self._overall_header).writeheader()

        self._species_header = [
            "session_id","generation","species",
            "n","alive_end","kills","food_eaten","avg_fitness","max_fitness",
            "avg_size","avg_metabolism","avg_aggression","avg_vision"
        ]
        if self.enable_species and self.species_path and not os.path.exists(self.species_path):
            with open(self.species_path, "w", newline="") as f:
                csv.DictWriter(f, fieldnames=self._species_header).writeheader()

    # ---------------- internal helpers ----------------
    @staticmethod
    def _avg(xs: List[float]) -> float:
        return (sum(xs) / len(xs)) if xs else float("nan")

    @staticmethod
    def _quantiles(xs: List[float]) -> Dict[str, float]:
        """Nearest-rank min/q25/median/q75/max of fitness."""
        if not xs:
            return dict(
                fitness_min=float("nan"),
                fitness_q25=float("nan"),
                fitness_median=float("nan"),
                fitness_q75=float("nan"),
                fitness_max=float("nan"),
            )
        q = sorted(xs)
        n = len(q)
        def at(p: float) -> float:
            i = int(round(p * (n - 1)))
            return q[max(0, min(n - 1, i))]
        return dict(
            fitness_min=q[0],
            fitness_q25=at(0.25),
            fitness_median=at(0.50),
            fitness_q75=at(0.75),
            fitness_max=q[-1],
        )

    def _trait_avgs(self, members: List[Creature]) -> Dict[str, float]:
        return dict(
            avg_size=self._avg([c.traits.size for c in members]),
            avg_metabolism=self._avg([c.traits.metabolism for c in members]),
            avg_aggression=self._avg([c.traits.aggression for c in members]),
            avg_vision=self._avg([c.traits.vision for c in members]),
        )

    def _overall_row(self, generation: int, pop: Iterable[Creature], food_count: int,
                     generation_length: int, notes: Optional[str]) -> Dict:
        pop = list(pop)
        fit = [c.fitness for c in pop]
        predators = sum(1 for c in pop if c.is_predator)
        row = dict(
            session_id=self.session_id,
            generation=generation,
            n=len(pop),
            alive_end=sum(1 for c in pop if c.alive),
            predators=predators,
            prey=len(pop) - predators,
            total_kills=sum(c.kills for c in pop),
            food_eaten=sum(c.food_eaten for c in pop),
            avg_fitness=self._avg(fit),
            **self._quantiles(fit),
            **self._trait_avgs(pop),
            food_count=int(food_count),
            generation_length=int(generation_length),
            notes=(notes or ""),
        )
        return row

    def _species_rows(self, generation: int, pop: Iterable[Creature]) -> Iterable[Dict]:
        pop = list(pop)
        for label, is_pred in (("predator", True), ("prey", False)):
            members = [c for c in pop if c.is_predator == is_pred]
            if not members:
                continue
            yield dict(
                session_id=self.session_id, generation=generation, species=label,
                n=len(members),
                alive_end=sum(1 for c in members if c.alive),
                kills=sum(c.kills for c in members),
                food_eaten=sum(c.food_eaten for c in members),
                avg_fitness=self._avg([c.fitness for c in members]),
                max_fitness=max(c.fitness for c in members),
                **self._trait_avgs(members),
            )

    # ---------------- public API ----------------
    def append_generation(self, generation: int, pop: Iterable[Creature], food_count: int,
                          generation_length: int, notes: Optional[str] = None):
        """Append one row (overall) and up to two rows (per species, if enabled)."""
        pop = list(pop)
        if self.overall_path:
            with open(self.overall_path, "a", newline="") as f:
                w = csv.DictWriter(f, fieldnames=self._overall_header)
                w.writerow(self._overall_row(generation, pop, food_count, generation_length, notes))

        if self.enable_species and self.species_path:
            # header may be missing if species logging was switched on mid-run
            if not os.path.exists(self.species_path):
                os.makedirs(os.path.dirname(self.species_path) or ".", exist_ok=True)
                with open(self.species_path, "w", newline="") as f:
                    csv.DictWriter(f, fieldnames=self._species_header).writeheader()
            with open(self.species_path, "a", newline="") as f:
                w = csv.DictWriter(f, fieldnames=self._species_header)
                for r in self._species_rows(generation, pop):
                    w.writerow(r)

# neuro_evo/sim/live.py
from __future__ import annotations
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple
import math

from .models import Creature
from .world import World, plant_quota
from .brain import NeuralNetwork
from .traits import Traits, generate_traits
from .behaviors import TickContext
from .engine import update_creature
from .genetics import GeneticAlgorithm
from .metrics import summarize_generation
from .config import WORLD, BEHAV, ECO, SIM, WorldConfig, EcosystemConfig, validate_config
from .rng import RNG

class LiveSim:
    """
    Tick-stepped driver around one arena and one population.

    `update()` is the only entry point the front end needs each frame; it runs
    up to `speed` ticks, turns over the generation when the tick budget is spent
    or everyone is dead, and rebalances food once per call.
    """
    def __init__(self, config: WorldConfig | None = None, seed: int | None = None,
                 logger: Any = None, ga: GeneticAlgorithm | None = None,
                 eco: EcosystemConfig = ECO):
        if seed is not None:
            RNG.seed(seed)
        self.ga = ga if ga is not None else GeneticAlgorithm()
        self.eco = eco
        self.logger = logger
        self.paused = False
        self.speed = 1
        self.reset_to_config(config if config is not None else WORLD)

    # ---------------- setup ----------------
    def reset_to_config(self, config: WorldConfig) -> None:
        validate_config(config, self.ga.cfg)
        self.config = replace(config)
        self.world = World(self.config.width, self.config.height)
        self.world.spawn_obstacles(int(self.config.obstacle_count))

        self.generation = 1
        self.tick = 0
        self.deaths = 0
        self._next_id = 1
        self.history: List[Dict[str, Any]] = []
        self.last_summary: Optional[Dict[str, Any]] = None
        self.last_population: List[Creature] = []

        n = int(self.config.population_size)
        n_pred = int(round(n * self.config.predator_ratio))
        flags = [True] * n_pred + [False] * (n - n_pred)
        RNG.shuffle(flags)
        self.population: List[Creature] = [self._create_creature(f) for f in flags]
        self.world.spawn_food(self.current_plant_quota(), int(self.config.meat_count))

    def _claim_id(self) -> int:
        cid = self._next_id
        self._next_id += 1
        return cid

    def _create_creature(self, is_predator: bool, traits: Traits | None = None) -> Creature:
        """Factory used for seeding and by the GA."""
        if traits is None:
            traits = generate_traits(is_predator)
        c = Creature(id=self._claim_id(), is_predator=is_predator, traits=traits, brain=NeuralNetwork())
        c.energy = c.max_energy * BEHAV.start_energy_frac
        c.x, c.y = self.world.random_free_point(c.radius)
        c.heading = RNG.uniform(0.0, 2 * math.pi)
        return c

    # ---------------- ecosystem ----------------
    def alive_creatures(self) -> List[Creature]:
        return [c for c in self.population if c.alive]

    def species_ratios(self) -> Tuple[Optional[float], Optional[float]]:
        """(herbivore ratio, predator ratio) among the living; None if nobody lives."""
        alive = self.alive_creatures()
        if not alive:
            return None, None
        prey = sum(1 for c in alive if not c.is_predator)
        return prey / len(alive), (len(alive) - prey) / len(alive)

    def current_plant_quota(self) -> int:
        return plant_quota(int(self.config.food_count), self.species_ratios()[0], self.eco)

    def apply_population_penalty(self) -> None:
        herb_ratio, pred_ratio = self.species_ratios()
        if herb_ratio is None:
            return
        if herb_ratio > self.eco.herbivore_overpop_threshold:
            for c in self.population:
                if not c.is_predator:
                    c.fitness *= (1.0 - self.eco.herbivore_penalty)
        if pred_ratio > self.eco.predator_overpop_threshold:
            for c in self.population:
                if c.is_predator:
                    c.fitness *= (1.0 - self.eco.predator_penalty)

    # ---------------- deaths ----------------
    def _on_kill(self, killer: Creature, victim: Creature) -> None:
        self.world.spawn_meat(victim.x, victim.y, hunted=True)
        self.deaths += 1
        if self.logger is not None:
            self.logger.log_kill(killer, victim)
            self.logger.log_death(victim, "hunted")

    def _record_deaths(self, spawn_meat: bool = True) -> None:
        for c in self.population:
            if c.alive or c.death_cause is not None:
                continue
            c.death_cause = "starved"
            self.deaths += 1
            if spawn_meat:
                self.world.spawn_meat(c.x, c.y, hunted=False)
            if self.logger is not None:
                self.logger.log_death(c, "starved")

    # ---------------- stepping ----------------
    def _step_once(self) -> bool:
        """One tick. Returns True if it ended the generation."""
        self.tick += 1
        self.world.decay_food()

        ctx = TickContext(creatures=self.population, food=self.world.food,
                          obstacles=self.world.obstacles,
                          width=self.world.width, height=self.world.height)
        for me in self.population:
            if not me.alive:
                continue
            for victim in update_creature(me, ctx):
                self._on_kill(me, victim)

        alive = sum(1 for c in self.population if c.alive)
        if self.tick >= int(self.config.generation_length) or alive == 0:
            self.next_generation()
            return True
        return False

    def update(self) -> bool:
        """Advance up to `speed` ticks. Returns True if a new generation started."""
        if self.paused:
            return False
        flipped = False
        for _ in range(self.speed):
            if self._step_once():
                flipped = True
                break
        self._record_deaths(spawn_meat=True)
        self.world.top_up(self.current_plant_quota(), int(self.config.meat_count))
        return flipped

    def next_generation(self) -> None:
        self._record_deaths(spawn_meat=False)

        # surviving is worth whatever energy is left
        for c in self.population:
            if c.alive:
                c.fitness += c.energy
        self.apply_population_penalty()

        summary = summarize_generation(self.generation, self.population)
        summary["deaths"] = self.deaths
        self.last_summary = summary
        self.history.append(summary)
        del self.history[:-SIM.history_len]
        if self.logger is not None:
            self.logger.log_generation(self.generation, summary)

        # keep the finished generation around for CSV writers
        self.last_population = self.population
        self.population = self.ga.evolve(self.population, self._create_creature,
                                         self.logger, generation=self.generation + 1)

        self.tick = 0
        self.deaths = 0
        # factory already gave every newcomer a random free spot and heading
        self.world.spawn_food(self.current_plant_quota(), int(self.config.meat_count))
        self.generation += 1

    # ---------------- controls ----------------
    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        return self.paused

    def set_speed(self, n: int) -> int:
        self.speed = max(1, min(10, int(n)))
        return self.speed

    def resize(self, width: float, height: float) -> None:
        self.world.resize(width, height)
        self.config.width = width
        self.config.height = height

    # ---------------- read-only views ----------------
    def stats(self) -> Dict[str, Any]:
        pop = self.population
        alive = self.alive_creatures()
        return dict(
            generation=self.generation,
            tick=self.tick,
            alive=len(alive),
            predators=sum(1 for c in alive if c.is_predator),
            prey=sum(1 for c in alive if not c.is_predator),
            avg_fitness=sum(c.fitness for c in pop) / max(len(pop), 1),
            max_fitness=max((c.fitness for c in pop), default=0.0),
            avg_energy=sum(c.energy for c in alive) / max(len(alive), 1),
            total_kills=sum(c.kills for c in pop),
            food_eaten=sum(c.food_eaten for c in pop),
            plant_quota=self.current_plant_quota(),
        )

    def food_positions(self):
        return [(f.x, f.y) for f in self.world.food if not f.consumed]

# neuro_evo/sim/genetics.py
from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from .models import Creature
from .traits import Traits, crossover_traits, mutate_traits
from .config import GA, GAConfig
from .rng import RNG

CreatureFactory = Callable[[bool, Traits], Creature]


def crossover_weights(w1: np.ndarray, w2: np.ndarray) -> np.ndarray:
    """Uniform crossover: each weight from either parent with p=0.5."""
    mask = RNG.np().random(w1.shape) < 0.5
    return np.where(mask, w1, w2)


def mutate_weights(weights: np.ndarray, rate: float, strength: float) -> np.ndarray:
    hit = RNG.np().random(weights.shape) < rate
    noise = RNG.np().normal(0.0, 1.0, weights.shape) * strength
    return weights + np.where(hit, noise, 0.0)


def population_stats(population: List[Creature]) -> Dict[str, float]:
    if not population:
        return dict(avg=0.0, max=0.0, min=0.0, predator_count=0, prey_count=0, total_kills=0)
    fit = [c.fitness for c in population]
    predators = sum(1 for c in population if c.is_predator)
    return dict(
        avg=sum(fit) / len(fit),
        max=max(fit),
        min=min(fit),
        predator_count=predators,
        prey_count=len(population) - predators,
        total_kills=sum(c.kills for c in population),
    )


class GeneticAlgorithm:
    """
    Builds the next generation from a finished one.

      1. species-protected elitism: top K predators and top K prey copied as-is
      2. floor rescue: a species below `min_species_count` gets heavily mutated
         copies of its next-best members
      3. tournament reproduction fills the rest (blend traits, coin-flip weights)

    The returned list always has the same length as the input.
    """
    def __init__(self, cfg: GAConfig = GA):
        self.cfg = cfg

    # ---- selection ----
    def tournament_select(self, ranked: List[Creature]) -> Optional[Creature]:
        """Best of `tournament_size` uniform draws (with replacement)."""
        if not ranked:
            return None
        best = None
        for _ in range(max(1, self.cfg.tournament_size)):
            cand = ranked[RNG.randrange(len(ranked))]
            if best is None or cand.fitness > best.fitness:
                best = cand
        return best

    @staticmethod
    def rank(creatures: List[Creature]) -> List[Creature]:
        return sorted(creatures, key=lambda c: c.fitness, reverse=True)

    # ---- steps ----
    def _clone_elite(self, parent: Creature, factory: CreatureFactory) -> Creature:
        elite = factory(parent.is_predator, parent.traits)
        elite.brain.set_weights(parent.brain.get_weights())
        elite.is_elite = True
        return elite

    def _rescue_mutant(self, template: Creature, factory: CreatureFactory) -> Creature:
        cfg = self.cfg
        traits = mutate_traits(template.traits,
                               cfg.trait_mutation_rate * 2,
                               cfg.trait_mutation_strength * 2)
        mutant = factory(template.is_predator, traits)
        mult = cfg.adaptive_mutation_multiplier
        mutant.brain.set_weights(mutate_weights(template.brain.get_weights(),
                                                cfg.mutation_rate * mult,
                                                cfg.mutation_strength * mult))
        return mutant

    def _offspring(self, p1: Creature, p2: Creature, factory: CreatureFactory) -> Creature:
        cfg = self.cfg
        traits = mutate_traits(crossover_traits(p1.traits, p2.traits),
                               cfg.trait_mutation_rate, cfg.trait_mutation_strength)
        is_predator = p1.is_predator if RNG.random() < 0.5 else p2.is_predator
        if RNG.random() < cfg.species_flip_prob:
            is_predator = not is_predator
        child = factory(is_predator, traits)
        weights = crossover_weights(p1.brain.get_weights(), p2.brain.get_weights())
        child.brain.set_weights(mutate_weights(weights, cfg.mutation_rate, cfg.mutation_strength))
        return child

    def evolve(self, population: List[Creature], factory: CreatureFactory,
               logger: Any = None, generation: int = 0) -> List[Creature]:
        pop_size = len(population)
        new_gen: List[Creature] = []
        if pop_size == 0:
            return new_gen

        predators = self.rank([c for c in population if c.is_predator])
        prey = self.rank([c for c in population if not c.is_predator])
        k = self.cfg.species_elite_count
        print(f"[evolve] gen {generation}: {len(predators)} predators, {len(prey)} prey")

        # STEP 1: species-based elitism
        for parent in predators[:k] + prey[:k]:
            if len(new_gen) >= pop_size:
                break
            new_gen.append(self._clone_elite(parent, factory))
            if logger is not None:
                logger.log_elite(parent, generation, len(new_gen))

        # STEP 2: minimum species floor with adaptive mutation
        for is_pred, ranked in ((True, predators), (False, prey)):
            have = sum(1 for c in new_gen if c.is_predator == is_pred)
            needed = self.cfg.min_species_count - have
            if needed <= 0 or not ranked:
                continue
            label = "predators" if is_pred else "prey"
            print(f"[evolve] {label} struggling, adding {needed} adaptive mutants")
            # next-best after the elites; wrap to the whole ranking when they run out
            templates = ranked[k:] or ranked
            for i in range(needed):
                if len(new_gen) >= pop_size:
                    break
                template = templates[i % len(templates)]
                mutant = self._rescue_mutant(template, factory)
                new_gen.append(mutant)
                if logger is not None:
                    logger.log_birth(mutant, template, template, generation)

        # STEP 3: tournament reproduction for the remaining slots
        ranked_all = self.rank(population)
        while len(new_gen) < pop_size:
            p1 = self.tournament_select(ranked_all)
            p2 = self.tournament_select(ranked_all)
            child = self._offspring(p1, p2, factory)
            new_gen.append(child)
            if logger is not None:
                logger.log_birth(child, p1, p2, generation)

        n_pred = sum(1 for c in new_gen if c.is_predator)
        print(f"[evolve] next gen: {n_pred} predators, {len(new_gen) - n_pred} prey")
        return new_gen

# neuro_evo/sim/world.py
from __future__ import annotations
from typing import List, Optional, Tuple
import math

from .models import Food, Obstacle, PLANT, MEAT
from .rng import RNG
from .config import WORLD, FOOD, ECO, EcosystemConfig


def plant_quota(base_count: int, herbivore_ratio: Optional[float], eco: EcosystemConfig = ECO) -> int:
    """
    Plants to keep on the map: base * clamp(1.5 - ratio * scaling, 0.6, 1.5).
    More herbivore dominance -> fewer plants, never below 60% of base.
    `herbivore_ratio=None` (nobody alive) keeps the base count.
    """
    if herbivore_ratio is None:
        return int(base_count)
    mult = min(max(eco.quota_max - herbivore_ratio * eco.quota_scaling, eco.quota_min), eco.quota_max)
    # half-up rounding, then lifted to the floor so it never rounds below quota_min
    quota = int(math.floor(base_count * mult + 0.5))
    floor = int(math.ceil(round(base_count * eco.quota_min, 9)))
    return max(quota, floor)


class World:
    """Arena state: bounds, obstacles and the food list."""
    def __init__(self, width: float = WORLD.width, height: float = WORLD.height):
        self.width = width
        self.height = height
        self.food: List[Food] = []
        self.obstacles: List[Obstacle] = []
        self._food_id = 0

    def _next_food_id(self) -> int:
        self._food_id += 1
        return self._food_id

    # --- placement ---
    def random_free_point(self, margin: float = 0.0) -> Tuple[float, float]:
        """Uniform point outside every obstacle (best effort)."""
        x = y = 0.0
        for _ in range(max(1, FOOD.placement_attempts)):
            x = RNG.uniform(0.0, self.width)
            y = RNG.uniform(0.0, self.height)
            if not any(ob.contains(x, y, margin) for ob in self.obstacles):
                break
        return x, y

    def spawn_obstacles(self, n: int) -> None:
        self.obstacles = []
        for _ in range(n):
            r = RNG.uniform(FOOD.obstacle_radius_min, FOOD.obstacle_radius_max)
            x = RNG.uniform(r, max(r, self.width - r))
            y = RNG.uniform(r, max(r, self.height - r))
            self.obstacles.append(Obstacle(x=x, y=y, radius=r))

    def add_plant(self) -> Food:
        x, y = self.random_free_point()
        f = Food(x=x, y=y, id=self._next_food_id(),
                 energy=RNG.uniform(FOOD.plant_energy_min, FOOD.plant_energy_max),
                 kind=PLANT)
        self.food.append(f)
        return f

    def spawn_meat(self, x: float, y: float, hunted: bool = False) -> Food:
        """Carcass at (x, y): hunted kills keep longer than starvation remains."""
        f = Food(x=x, y=y, id=self._next_food_id(),
                 energy=FOOD.hunted_meat_energy if hunted else FOOD.starved_meat_energy,
                 kind=MEAT, hunted=hunted,
                 decay=FOOD.hunted_lifetime if hunted else FOOD.starved_lifetime)
        self.food.append(f)
        return f

    def add_random_meat(self) -> Food:
        x, y = self.random_free_point()
        return self.spawn_meat(x, y, hunted=False)

    def spawn_food(self, n_plants: int, n_meat: int) -> None:
        self.food = []
        for _ in range(n_plants):
            self.add_plant()
        for _ in range(n_meat):
            self.add_random_meat()

    # --- per tick / per call upkeep ---
    def decay_food(self) -> int:
        """Advance meat countdowns; returns how many spoiled this tick."""
        spoiled = 0
        for f in self.food:
            if f.kind != MEAT or f.consumed or f.decay is None:
                continue
            f.decay -= 1
            if f.decay <= 0:
                f.consumed = True
                spoiled += 1
        return spoiled

    def prune_consumed(self) -> None:
        self.food = [f for f in self.food if not f.consumed]

    def count(self, kind: str) -> int:
        return sum(1 for f in self.food if f.kind == kind and not f.consumed)

    def top_up(self, n_plants: int, n_meat: int) -> None:
        self.prune_consumed()
        for _ in range(n_plants - self.count(PLANT)):
            self.add_plant()
        for _ in range(n_meat - self.count(MEAT)):
            self.add_random_meat()

    def resize(self, width: float, height: float) -> None:
        # bounds only; nothing already placed is rescaled
        self.width = width
        self.height = height

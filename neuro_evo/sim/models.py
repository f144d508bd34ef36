# neuro_evo/sim/models.py
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .brain import NeuralNetwork
from .traits import Traits, DerivedStats, derive_stats

Vec = Tuple[float, float]

PLANT = "plant"
MEAT = "meat"

@dataclass
class Food:
    x: float
    y: float
    id: int
    energy: float = 10.0
    kind: str = PLANT
    hunted: bool = False
    # ticks left before meat spoils; plants never decay
    decay: Optional[int] = None
    consumed: bool = False

    @property
    def radius(self) -> float:
        return 6.0 + self.energy / 8.0 if self.kind == MEAT else 5.0 + self.energy / 5.0

@dataclass(frozen=True)
class Obstacle:
    x: float
    y: float
    radius: float

    def contains(self, px: float, py: float, margin: float = 0.0) -> bool:
        return ((px - self.x) ** 2 + (py - self.y) ** 2) ** 0.5 < self.radius + margin

@dataclass(eq=False)
class Creature:
    id: int
    is_predator: bool
    traits: Traits
    brain: NeuralNetwork
    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0
    speed: float = 0.0
    energy: float = 0.0
    fitness: float = 0.0
    food_eaten: int = 0
    distance_traveled: float = 0.0
    age: int = 0
    kills: int = 0
    attack_cooldown: float = 0.0
    is_elite: bool = False
    death_cause: Optional[str] = None  # "starved" | "hunted"

    # last sense readings (front, right, back, left), read by the UI
    food_sensors: List[float] = field(default_factory=lambda: [0.0] * 4)
    creature_sensors: List[float] = field(default_factory=lambda: [0.0] * 4)

    stats: DerivedStats = field(init=False, repr=False)

    def __post_init__(self):
        self.stats = derive_stats(self.traits)

    @property
    def alive(self) -> bool:
        return self.energy > 0

    @property
    def max_energy(self) -> float:
        return self.stats.max_energy

    @property
    def max_speed(self) -> float:
        return self.stats.max_speed

    @property
    def radius(self) -> float:
        return self.stats.radius

    @property
    def sensor_range(self) -> float:
        return self.stats.sensor_range

    @property
    def attack_power(self) -> float:
        return self.stats.attack_power

    @property
    def attack_cooldown_max(self) -> float:
        return self.stats.attack_cooldown

    def pos(self) -> Vec:
        return (self.x, self.y)

    def eats(self, food: Food) -> bool:
        return food.kind == (MEAT if self.is_predator else PLANT)

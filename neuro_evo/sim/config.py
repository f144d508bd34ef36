# neuro_evo/sim/config.py
import math
from dataclasses import dataclass
from typing import Tuple

from .errors import ConfigurationError

# ------------------------------------------------------------
# WORLD / POPULATION SETTINGS (what reset_to_config accepts)
# ------------------------------------------------------------
@dataclass(frozen=False)  # mutable so UI can tweak counts at runtime
class WorldConfig:
    width: float = 1200.0
    height: float = 800.0
    population_size: int = 40
    # base plant count; the live quota is scaled by ecosystem balancing
    food_count: int = 60
    meat_count: int = 5
    obstacle_count: int = 6
    # ticks per generation
    generation_length: int = 800
    predator_ratio: float = 0.2

# ------------------------------------------------------------
# BRAIN ARCHITECTURE
# ------------------------------------------------------------
@dataclass(frozen=True)
class BrainConfig:
    # 4 food sensors, 4 creature sensors, energy, speed, sin, cos
    input_size: int = 12
    hidden_layers: Tuple[int, ...] = (16, 12)
    # thrust, turn, boost, attack
    output_size: int = 4
    bias_init_scale: float = 0.5

# ------------------------------------------------------------
# TRAIT RANGES
# ------------------------------------------------------------
@dataclass(frozen=True)
class TraitConfig:
    min_size: float = 0.6
    max_size: float = 1.4
    min_metabolism: float = 0.5
    max_metabolism: float = 1.5
    min_aggression: float = 0.0
    max_aggression: float = 1.0
    min_vision: float = 0.5
    max_vision: float = 1.5
    # aggression sub-ranges used when seeding a species
    predator_aggression: Tuple[float, float] = (0.6, 1.0)
    prey_aggression: Tuple[float, float] = (0.0, 0.4)

# ------------------------------------------------------------
# BEHAVIOR TUNING (sense / act / physics)
# ------------------------------------------------------------
@dataclass(frozen=True)
class BehaviorConfig:
    thrust_scale: float = 0.5
    turn_scale: float = 0.15
    reverse_speed_frac: float = 0.5
    boost_threshold: float = 0.5
    boost_multiplier: float = 1.3
    boost_cost: float = 0.3           # x metabolism
    attack_threshold: float = 0.5
    auto_attack_margin: float = 20.0
    attack_range_margin: float = 15.0
    friction: float = 0.98
    sensor_half_angle: float = math.pi / 4
    survival_fitness: float = 0.01
    start_energy_frac: float = 0.8

# ------------------------------------------------------------
# COMBAT REWARDS
# ------------------------------------------------------------
@dataclass(frozen=True)
class CombatConfig:
    kill_bonus: float = 150.0
    victim_fitness_share: float = 0.5
    streak_bonus: float = 20.0        # x kills before this one
    energy_gain_frac: float = 0.8     # of victim max energy

# ------------------------------------------------------------
# FOOD / OBSTACLES
# ------------------------------------------------------------
@dataclass(frozen=True)
class FoodConfig:
    plant_energy_min: float = 5.0
    plant_energy_max: float = 20.0
    hunted_meat_energy: float = 40.0
    starved_meat_energy: float = 25.0
    hunted_lifetime: int = 800
    starved_lifetime: int = 300
    obstacle_radius_min: float = 20.0
    obstacle_radius_max: float = 45.0
    placement_attempts: int = 20

# ------------------------------------------------------------
# ECOSYSTEM BALANCING
# ------------------------------------------------------------
@dataclass(frozen=True)
class EcosystemConfig:
    quota_scaling: float = 1.0
    quota_min: float = 0.6
    quota_max: float = 1.5
    herbivore_overpop_threshold: float = 0.85
    herbivore_penalty: float = 0.3
    predator_overpop_threshold: float = 0.5
    predator_penalty: float = 0.3

# ------------------------------------------------------------
# GENETIC ALGORITHM
# ------------------------------------------------------------
@dataclass(frozen=True)
class GAConfig:
    mutation_rate: float = 0.1
    mutation_strength: float = 0.3
    tournament_size: int = 5
    trait_mutation_rate: float = 0.15
    trait_mutation_strength: float = 0.2
    # species diversity protection
    min_species_count: int = 5
    species_elite_count: int = 2
    adaptive_mutation_multiplier: float = 3.0
    species_flip_prob: float = 0.05

# ------------------------------------------------------------
# HEADLESS SETTINGS
# ------------------------------------------------------------
@dataclass(frozen=False)
class SimConfig:
    seed: int = 42
    generations: int = 50
    speed: int = 10
    track_csv: str | None = "runs/generations.csv"
    history_len: int = 50


def validate_config(world: WorldConfig, ga: GAConfig) -> None:
    """Reject settings that would make a generation impossible to run."""
    if world.population_size <= 0:
        raise ConfigurationError(f"population_size must be > 0 (got {world.population_size})")
    if world.width <= 0 or world.height <= 0:
        raise ConfigurationError(f"arena must have positive size (got {world.width}x{world.height})")
    if world.generation_length <= 0:
        raise ConfigurationError(f"generation_length must be > 0 (got {world.generation_length})")
    for name in ("food_count", "meat_count", "obstacle_count"):
        if getattr(world, name) < 0:
            raise ConfigurationError(f"{name} must be >= 0 (got {getattr(world, name)})")
    if not 0.0 <= world.predator_ratio <= 1.0:
        raise ConfigurationError(f"predator_ratio must be in [0, 1] (got {world.predator_ratio})")
    if ga.tournament_size < 1 or ga.tournament_size > world.population_size:
        raise ConfigurationError(
            f"tournament_size {ga.tournament_size} must be in [1, population_size={world.population_size}]"
        )
    # elites are taken per species
    if ga.species_elite_count < 0 or 2 * ga.species_elite_count > world.population_size:
        raise ConfigurationError(
            f"species_elite_count {ga.species_elite_count} x 2 species exceeds population_size {world.population_size}"
        )

# ------------------------------------------------------------
# EXPORT SINGLETONS
# ------------------------------------------------------------
WORLD = WorldConfig()
BRAIN = BrainConfig()
TRAITS = TraitConfig()
BEHAV = BehaviorConfig()
COMBAT = CombatConfig()
FOOD = FoodConfig()
ECO = EcosystemConfig()
GA = GAConfig()
SIM = SimConfig()

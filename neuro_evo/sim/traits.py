# neuro_evo/sim/traits.py
from __future__ import annotations
from dataclasses import dataclass, asdict, replace
from typing import Dict, Tuple

from .config import TRAITS
from .rng import RNG

# fixed schema; every per-trait loop iterates this
TRAIT_NAMES: Tuple[str, ...] = ("size", "metabolism", "aggression", "vision")


def trait_range(name: str) -> Tuple[float, float]:
    return getattr(TRAITS, f"min_{name}"), getattr(TRAITS, f"max_{name}")


@dataclass(frozen=True)
class Traits:
    size: float = 1.0
    metabolism: float = 1.0
    aggression: float = 0.3
    vision: float = 1.0

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class DerivedStats:
    max_energy: float
    max_speed: float
    base_energy_cost: float
    move_energy_cost: float
    sensor_range: float
    radius: float
    attack_power: float
    attack_cooldown: float


def _clamp(v: float, lo: float, hi: float) -> float:
    return min(max(v, lo), hi)


def generate_traits(is_predator: bool = False) -> Traits:
    """Uniform draw per trait; aggression comes from the species sub-range."""
    values = {}
    for name in TRAIT_NAMES:
        lo, hi = trait_range(name)
        if name == "aggression":
            lo, hi = TRAITS.predator_aggression if is_predator else TRAITS.prey_aggression
        values[name] = RNG.uniform(lo, hi)
    return Traits(**values)


def crossover_traits(a: Traits, b: Traits) -> Traits:
    values = {}
    for name in TRAIT_NAMES:
        blend = RNG.random()
        values[name] = getattr(a, name) * blend + getattr(b, name) * (1.0 - blend)
    return Traits(**values)


def mutate_traits(traits: Traits, rate: float, strength: float) -> Traits:
    values = {}
    for name in TRAIT_NAMES:
        v = getattr(traits, name)
        if RNG.random() < rate:
            v = v + RNG.gauss(0.0, 1.0) * strength
        lo, hi = trait_range(name)
        values[name] = _clamp(v, lo, hi)
    return Traits(**values)


def clamp_traits(traits: Traits) -> Traits:
    """Pull out-of-range values (e.g. from an old snapshot) back into range."""
    return replace(traits, **{n: _clamp(getattr(traits, n), *trait_range(n)) for n in TRAIT_NAMES})


def derive_stats(t: Traits) -> DerivedStats:
    return DerivedStats(
        # bigger bodies store more energy but move slower
        max_energy=100.0 + (t.size - 1.0) * 80.0,
        max_speed=4.0 * (1.2 - t.size * 0.3) * t.metabolism,
        base_energy_cost=0.05 * t.metabolism * t.size,
        move_energy_cost=0.02 * t.metabolism,
        sensor_range=150.0 * t.vision,
        radius=12.0 * t.size,
        attack_power=30.0 * t.aggression * t.size,
        attack_cooldown=60.0 / t.metabolism,
    )

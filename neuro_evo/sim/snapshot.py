# neuro_evo/sim/snapshot.py
"""
Plain-data persistence: everything needed to resume a run, as nested
dicts/lists/numbers/strings/bools. No file format is imposed; callers can hand
the result to json, pickle or anything else.
"""
from __future__ import annotations
from dataclasses import asdict
from typing import Any, Dict

from .models import Creature, Food, Obstacle
from .brain import NeuralNetwork
from .traits import Traits, TRAIT_NAMES, clamp_traits
from .world import World
from .config import WorldConfig, GAConfig, EcosystemConfig
from .rng import RNG
from .genetics import GeneticAlgorithm
from .live import LiveSim

FORMAT_VERSION = 2


def creature_to_dict(c: Creature) -> Dict[str, Any]:
    return {
        "id": c.id,
        "is_predator": c.is_predator,
        "traits": c.traits.as_dict(),
        "brain": c.brain.to_dict(),
        "x": c.x, "y": c.y, "heading": c.heading, "speed": c.speed,
        "energy": c.energy,
        "fitness": c.fitness,
        "food_eaten": c.food_eaten,
        "distance_traveled": c.distance_traveled,
        "age": c.age,
        "kills": c.kills,
        "attack_cooldown": c.attack_cooldown,
        "is_elite": c.is_elite,
        "death_cause": c.death_cause,
        "food_sensors": list(c.food_sensors),
        "creature_sensors": list(c.creature_sensors),
    }


def creature_from_dict(data: Dict[str, Any]) -> Creature:
    # out-of-range traits from older runs are clamped, missing ones take defaults
    traits = clamp_traits(Traits(**{k: float(v) for k, v in data["traits"].items() if k in TRAIT_NAMES}))
    c = Creature(
        id=int(data["id"]),
        is_predator=bool(data["is_predator"]),
        traits=traits,
        brain=NeuralNetwork.from_dict(data["brain"]),
        x=float(data["x"]), y=float(data["y"]),
        heading=float(data["heading"]), speed=float(data["speed"]),
        energy=float(data["energy"]),
        fitness=float(data["fitness"]),
        food_eaten=int(data.get("food_eaten", 0)),
        distance_traveled=float(data.get("distance_traveled", 0.0)),
        age=int(data.get("age", 0)),
        kills=int(data.get("kills", 0)),
        attack_cooldown=float(data.get("attack_cooldown", 0.0)),
        is_elite=bool(data.get("is_elite", False)),
        death_cause=data.get("death_cause"),
    )
    c.food_sensors = list(data.get("food_sensors", c.food_sensors))
    c.creature_sensors = list(data.get("creature_sensors", c.creature_sensors))
    return c


def food_to_dict(f: Food) -> Dict[str, Any]:
    return asdict(f)


def food_from_dict(data: Dict[str, Any]) -> Food:
    return Food(**data)


def world_to_dict(world: World) -> Dict[str, Any]:
    return {
        "width": world.width,
        "height": world.height,
        "food": [food_to_dict(f) for f in world.food],
        "obstacles": [asdict(ob) for ob in world.obstacles],
        "next_food_id": world._food_id,
    }


def world_from_dict(data: Dict[str, Any]) -> World:
    world = World(data["width"], data["height"])
    world.food = [food_from_dict(f) for f in data["food"]]
    world.obstacles = [Obstacle(**ob) for ob in data["obstacles"]]
    world._food_id = int(data["next_food_id"])
    return world


def sim_to_dict(live: LiveSim) -> Dict[str, Any]:
    """Whole LiveSim state, settings included. The logger is not part of it."""
    return {
        "version": FORMAT_VERSION,
        "config": asdict(live.config),
        "ga": asdict(live.ga.cfg),
        "eco": asdict(live.eco),
        "generation": live.generation,
        "tick": live.tick,
        "deaths": live.deaths,
        "speed": live.speed,
        "paused": live.paused,
        "next_id": live._next_id,
        "population": [creature_to_dict(c) for c in live.population],
        "world": world_to_dict(live.world),
        "history": [dict(h) for h in live.history],
        "last_summary": dict(live.last_summary) if live.last_summary is not None else None,
        "rng": RNG.get_state(),
    }


def sim_from_dict(data: Dict[str, Any], logger: Any = None, ga: Any = None) -> LiveSim:
    """
    Rebuild a LiveSim from `sim_to_dict` output. The global RNG is restored too,
    so stepping the result replays exactly what the saved run would have done.
    A `ga` passed in wins over the saved GA settings.
    """
    config = WorldConfig(**data["config"])
    if ga is None:
        ga = GeneticAlgorithm(GAConfig(**data.get("ga", {})))
    eco = EcosystemConfig(**data.get("eco", {}))
    live = LiveSim(config=config, logger=logger, ga=ga, eco=eco)
    live.generation = int(data["generation"])
    live.tick = int(data["tick"])
    live.deaths = int(data.get("deaths", 0))
    live.speed = int(data.get("speed", 1))
    live.paused = bool(data.get("paused", False))
    live._next_id = int(data["next_id"])
    live.population = [creature_from_dict(c) for c in data["population"]]
    live.world = world_from_dict(data["world"])
    live.history = [dict(h) for h in data.get("history", [])]
    live.last_summary = data.get("last_summary")
    # last: building the LiveSim above consumed random draws
    RNG.set_state(data["rng"])
    return live

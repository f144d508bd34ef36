import json

import numpy as np

from neuro_evo.sim.config import WorldConfig, GAConfig, EcosystemConfig
from neuro_evo.sim.genetics import GeneticAlgorithm
from neuro_evo.sim.live import LiveSim
from neuro_evo.sim.snapshot import (sim_to_dict, sim_from_dict, creature_to_dict, creature_from_dict,
                                    food_to_dict, food_from_dict)
from neuro_evo.sim.models import Food, MEAT
from neuro_evo.sim.traits import Traits


def _trace(live, n):
    out = []
    for _ in range(n):
        live.update()
        out.append((live.generation, live.tick,
                    [(c.id, c.x, c.y, c.energy, c.fitness) for c in live.population],
                    [(f.id, f.x, f.y, f.consumed) for f in live.world.food]))
    return out


def test_snapshot_is_plain_data():
    live = LiveSim(WorldConfig(population_size=10, food_count=10, generation_length=30), seed=21)
    live.update()
    snap = sim_to_dict(live)
    assert json.loads(json.dumps(snap))["generation"] == 1


def test_restored_sim_replays_identically():
    live = LiveSim(WorldConfig(population_size=10, food_count=10, generation_length=30), seed=22)
    for _ in range(12):
        live.update()
    snap = json.loads(json.dumps(sim_to_dict(live)))

    # crosses a generation boundary
    expected = _trace(live, 40)
    restored = sim_from_dict(snap)
    assert _trace(restored, 40) == expected


def test_restored_counters_and_controls():
    live = LiveSim(WorldConfig(population_size=10, food_count=10, generation_length=5), seed=23)
    live.set_speed(3)
    live.update()
    live.update()
    live.toggle_pause()
    back = sim_from_dict(sim_to_dict(live))
    assert back.generation == live.generation
    assert back.tick == live.tick
    assert back.speed == 3
    assert back.paused is True
    assert back._next_id == live._next_id
    assert back.history == live.history
    assert back.config == live.config


def test_small_population_with_custom_ga_restores():
    cfg = WorldConfig(population_size=2, food_count=0, meat_count=0, obstacle_count=0,
                      generation_length=100, predator_ratio=0.5)
    ga = GeneticAlgorithm(GAConfig(tournament_size=1, species_elite_count=1))
    live = LiveSim(cfg, seed=24, ga=ga)
    live.update()
    snap = json.loads(json.dumps(sim_to_dict(live)))

    expected = _trace(live, 5)
    back = sim_from_dict(snap)
    assert back.ga.cfg == ga.cfg
    assert len(back.population) == 2
    assert _trace(back, 5) == expected


def test_ecosystem_settings_survive_round_trip():
    live = LiveSim(WorldConfig(population_size=10, food_count=10, predator_ratio=0.0), seed=25,
                   eco=EcosystemConfig(quota_scaling=0.0))
    back = sim_from_dict(json.loads(json.dumps(sim_to_dict(live))))
    assert back.eco == live.eco
    assert back.current_plant_quota() == live.current_plant_quota() == 15


def test_creature_round_trip(factory):
    c = factory(True, Traits(size=1.2, aggression=0.9))
    c.kills, c.fitness, c.death_cause, c.attack_cooldown = 2, 55.5, "starved", 12.0
    back = creature_from_dict(creature_to_dict(c))
    assert back.traits == c.traits
    assert (back.kills, back.fitness, back.death_cause, back.attack_cooldown) == (2, 55.5, "starved", 12.0)
    assert np.array_equal(back.brain.get_weights(), c.brain.get_weights())
    assert back.max_energy == c.max_energy


def test_out_of_range_traits_are_clamped_on_load(factory):
    data = creature_to_dict(factory(False, Traits()))
    data["traits"]["size"] = 9.0
    data["traits"]["vision"] = 0.0
    back = creature_from_dict(data)
    assert back.traits.size == 1.4
    assert back.traits.vision == 0.5


def test_food_round_trip():
    f = Food(x=1.0, y=2.0, id=9, energy=40.0, kind=MEAT, hunted=True, decay=123)
    assert food_from_dict(food_to_dict(f)) == f

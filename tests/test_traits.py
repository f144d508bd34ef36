import pytest

from neuro_evo.sim.traits import (TRAIT_NAMES, Traits, trait_range, generate_traits, crossover_traits,
                                  mutate_traits, clamp_traits, derive_stats)


def _in_range(t: Traits) -> bool:
    return all(trait_range(n)[0] <= getattr(t, n) <= trait_range(n)[1] for n in TRAIT_NAMES)


def test_generated_traits_respect_species_aggression():
    for _ in range(50):
        pred = generate_traits(is_predator=True)
        prey = generate_traits(is_predator=False)
        assert 0.6 <= pred.aggression <= 1.0
        assert 0.0 <= prey.aggression <= 0.4
        assert _in_range(pred) and _in_range(prey)


def test_heavy_mutation_stays_in_range():
    t = generate_traits()
    for _ in range(100):
        t = mutate_traits(t, rate=1.0, strength=5.0)
        assert _in_range(t)


def test_zero_rate_mutation_keeps_values():
    t = Traits(size=1.1, metabolism=0.9, aggression=0.2, vision=1.3)
    assert mutate_traits(t, rate=0.0, strength=1.0) == t


def test_crossover_blends_between_parents():
    a = Traits(size=0.6, metabolism=0.5, aggression=0.0, vision=0.5)
    b = Traits(size=1.4, metabolism=1.5, aggression=1.0, vision=1.5)
    child = crossover_traits(a, b)
    for n in TRAIT_NAMES:
        assert getattr(a, n) <= getattr(child, n) <= getattr(b, n)


def test_clamp_pulls_values_back():
    t = clamp_traits(Traits(size=5.0, metabolism=1.0, aggression=-2.0, vision=-1.0))
    assert t.size == 1.4
    assert t.aggression == 0.0
    assert t.vision == 0.5
    assert t.metabolism == 1.0


def test_derived_stats_defaults():
    s = derive_stats(Traits())
    assert s.max_energy == pytest.approx(100.0)
    assert s.max_speed == pytest.approx(3.6)
    assert s.base_energy_cost == pytest.approx(0.05)
    assert s.move_energy_cost == pytest.approx(0.02)
    assert s.sensor_range == pytest.approx(150.0)
    assert s.radius == pytest.approx(12.0)
    assert s.attack_power == pytest.approx(9.0)
    assert s.attack_cooldown == pytest.approx(60.0)


def test_bigger_bodies_store_more_and_move_slower():
    small = derive_stats(Traits(size=0.6))
    big = derive_stats(Traits(size=1.4))
    assert big.max_energy > small.max_energy
    assert big.max_speed < small.max_speed
    assert big.radius > small.radius

import pytest

from neuro_evo.sim.behaviors import TickContext
from neuro_evo.sim.engine import update_creature, wrap_position
from neuro_evo.sim.models import Food, Obstacle, PLANT


def _ctx(creatures, food=(), obstacles=()):
    return TickContext(creatures=list(creatures), food=list(food), obstacles=list(obstacles),
                       width=1200.0, height=800.0)


def test_wrap_position():
    assert wrap_position(-5.0, 810.0, 1200.0, 800.0) == (1195.0, 10.0)
    assert wrap_position(1205.0, -1.0, 1200.0, 800.0) == (5.0, 799.0)
    assert wrap_position(600.0, 400.0, 1200.0, 800.0) == (600.0, 400.0)


def test_idle_tick_costs_base_energy_and_pays_survival(make_creature):
    me = make_creature(energy=50.0)
    assert update_creature(me, _ctx([me])) == []
    assert me.energy == pytest.approx(50.0 - 0.05)
    assert me.fitness == pytest.approx(0.01)
    assert me.age == 1


def test_moving_costs_more(make_creature):
    me = make_creature(energy=50.0)
    me.speed = 2.0
    update_creature(me, _ctx([me]))
    # friction leaves 1.96 which is both the step taken and the movement cost basis
    assert me.x == pytest.approx(101.96)
    assert me.distance_traveled == pytest.approx(1.96)
    assert me.energy == pytest.approx(50.0 - 0.05 - 1.96 * 0.02)


def test_prey_eats_reachable_plant(make_creature):
    me = make_creature(energy=50.0)
    plant = Food(x=105.0, y=100.0, id=1, energy=10.0, kind=PLANT)
    update_creature(me, _ctx([me], [plant]))
    assert plant.consumed
    assert me.food_eaten == 1
    assert me.energy == pytest.approx(50.0 - 0.05 + 10.0)
    assert me.fitness == pytest.approx(10.0 + 0.01)


def test_eating_caps_at_max_energy(make_creature):
    me = make_creature(energy=99.0)
    plant = Food(x=100.0, y=100.0, id=1, energy=20.0, kind=PLANT)
    update_creature(me, _ctx([me], [plant]))
    assert me.energy == pytest.approx(100.0)


def test_predator_does_not_eat_plants(make_creature):
    me = make_creature(is_predator=True, energy=50.0)
    plant = Food(x=100.0, y=100.0, id=1, energy=10.0, kind=PLANT)
    update_creature(me, _ctx([me], [plant]))
    assert not plant.consumed
    assert me.food_eaten == 0


def test_starvation_is_terminal(make_creature):
    me = make_creature(energy=0.01)
    update_creature(me, _ctx([me]))
    assert not me.alive
    assert me.fitness == 0.0

    age = me.age
    assert update_creature(me, _ctx([me])) == []
    assert me.age == age


def test_obstacle_blocks_motion(make_creature):
    me = make_creature(x=100.0, y=100.0, heading=0.0)
    me.speed = 3.0
    rock = Obstacle(x=120.0, y=100.0, radius=10.0)
    update_creature(me, _ctx([me], obstacles=[rock]))
    assert (me.x, me.y) == (100.0, 100.0)
    assert me.speed == 0.0
    assert me.distance_traveled == 0.0


def test_motion_wraps_at_edges(make_creature):
    me = make_creature(x=1199.0, y=100.0, heading=0.0)
    me.speed = 3.0
    update_creature(me, _ctx([me]))
    assert me.x == pytest.approx(1199.0 + 2.94 - 1200.0)
    assert me.distance_traveled == pytest.approx(2.94)


def test_cooldown_ticks_down(make_creature):
    me = make_creature(is_predator=True)
    me.attack_cooldown = 3
    update_creature(me, _ctx([me]))
    assert me.attack_cooldown == 2

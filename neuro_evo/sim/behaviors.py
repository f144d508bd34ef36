# neuro_evo/sim/behaviors.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
import math

from .models import Creature, Food, Obstacle
from .config import BEHAV, COMBAT

# front, right, back, left (relative to heading)
SENSOR_DIRECTIONS = (0.0, math.pi / 2, math.pi, -math.pi / 2)

@dataclass(frozen=True)
class TickContext:
    """What a creature may see during one tick; handed in by the scheduler."""
    creatures: Sequence[Creature]
    food: Sequence[Food]
    obstacles: Sequence[Obstacle] = ()
    width: float = 0.0
    height: float = 0.0

@dataclass
class SenseResult:
    food: List[float] = field(default_factory=lambda: [0.0] * 4)
    creatures: List[float] = field(default_factory=lambda: [0.0] * 4)
    # nearest living creature in range (any direction); only valid this tick
    nearest: Optional[Creature] = None

# ---------------- helpers ----------------
def _wrap_angle(a: float) -> float:
    while a > math.pi:
        a -= 2 * math.pi
    while a < -math.pi:
        a += 2 * math.pi
    return a

def _dist(ax: float, ay: float, bx: float, by: float) -> float:
    return math.hypot(bx - ax, by - ay)

def _in_cone(dx: float, dy: float, sensor_angle: float) -> bool:
    diff = _wrap_angle(math.atan2(dy, dx) - sensor_angle)
    return abs(diff) < BEHAV.sensor_half_angle

# ---------------- sense ----------------
def sense(me: Creature, ctx: TickContext) -> SenseResult:
    """
    Four cone sensors for food and for creatures.

    Reading = 1 - d / sensor_range for the closest qualifying object inside the
    cone, 0 when nothing is there. Predators only see meat, prey only plants.
    """
    out = SenseResult()
    rng = me.sensor_range
    if rng <= 0:
        me.food_sensors, me.creature_sensors = out.food, out.creatures
        return out

    foods = []
    for f in ctx.food:
        if f.consumed or not me.eats(f):
            continue
        d = _dist(me.x, me.y, f.x, f.y)
        if d <= rng:
            foods.append((f.x - me.x, f.y - me.y, d))

    others = []
    nearest_d = math.inf
    for o in ctx.creatures:
        if o is me or not o.alive:
            continue
        d = _dist(me.x, me.y, o.x, o.y)
        if d > rng:
            continue
        if d < nearest_d:
            nearest_d = d
            out.nearest = o
        others.append((o.x - me.x, o.y - me.y, d))

    for i, offset in enumerate(SENSOR_DIRECTIONS):
        sensor_angle = me.heading + offset
        closest_food = rng
        for dx, dy, d in foods:
            if d < closest_food and _in_cone(dx, dy, sensor_angle):
                closest_food = d
        closest_other = rng
        for dx, dy, d in others:
            if d < closest_other and _in_cone(dx, dy, sensor_angle):
                closest_other = d
        out.food[i] = 1.0 - closest_food / rng
        out.creatures[i] = 1.0 - closest_other / rng

    me.food_sensors = list(out.food)
    me.creature_sensors = list(out.creatures)
    return out

# ---------------- think ----------------
def brain_inputs(me: Creature, seen: SenseResult) -> List[float]:
    energy = me.energy / me.max_energy if me.max_energy > 0 else 0.0
    speed = me.speed / me.max_speed if me.max_speed > 0 else 0.0
    return [
        *seen.food,
        *seen.creatures,
        energy,
        speed,
        math.sin(me.heading),
        math.cos(me.heading),
    ]

def think(me: Creature, seen: SenseResult) -> List[float]:
    """Returns [thrust, turn, boost, attack], each in [-1, 1]."""
    return me.brain.forward(brain_inputs(me, seen))

# ---------------- combat ----------------
def try_attack(me: Creature, target: Optional[Creature]) -> bool:
    """
    Bite `target` if it is living prey in reach and our cooldown has elapsed.
    Returns True when the bite killed it.
    """
    if not me.is_predator or me.attack_cooldown > 0:
        return False
    if target is None or target.is_predator or not target.alive:
        return False
    reach = me.radius + target.radius + BEHAV.attack_range_margin
    if _dist(me.x, me.y, target.x, target.y) >= reach:
        return False

    target.energy -= me.attack_power
    me.attack_cooldown = me.attack_cooldown_max
    if target.energy > 0:
        return False

    me.energy = min(me.max_energy, me.energy + target.max_energy * COMBAT.energy_gain_frac)
    me.fitness += (COMBAT.kill_bonus
                   + target.fitness * COMBAT.victim_fitness_share
                   + me.kills * COMBAT.streak_bonus)
    me.kills += 1
    target.death_cause = "hunted"
    return True

# ---------------- act ----------------
def act(me: Creature, outputs: Sequence[float], seen: SenseResult) -> Optional[Creature]:
    """Apply brain outputs. Returns the victim if an attack killed one."""
    thrust, turn, boost, attack = outputs[0], outputs[1], outputs[2], outputs[3]

    me.speed += thrust * BEHAV.thrust_scale
    me.speed = max(-me.max_speed * BEHAV.reverse_speed_frac, min(me.max_speed, me.speed))

    me.heading += turn * BEHAV.turn_scale

    if boost > BEHAV.boost_threshold:
        me.speed *= BEHAV.boost_multiplier
        me.energy -= BEHAV.boost_cost * me.traits.metabolism

    victim = None
    target = seen.nearest
    if (me.is_predator and me.attack_cooldown <= 0 and target is not None
            and not target.is_predator and target.alive):
        close = _dist(me.x, me.y, target.x, target.y) < me.radius + target.radius + BEHAV.auto_attack_margin
        if close or attack > BEHAV.attack_threshold:
            if try_attack(me, target):
                victim = target

    me.speed *= BEHAV.friction
    return victim

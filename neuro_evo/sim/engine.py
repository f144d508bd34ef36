# neuro_evo/sim/engine.py
from __future__ import annotations
from typing import List, Tuple
import math

from .models import Creature
from .behaviors import TickContext, sense, think, act
from .config import BEHAV

def wrap_position(x: float, y: float, width: float, height: float) -> Tuple[float, float]:
    if x < 0:
        x += width
    elif x > width:
        x -= width
    if y < 0:
        y += height
    elif y > height:
        y -= height
    return x, y

def _apply_motion(me: Creature, ctx: TickContext) -> None:
    px, py = me.x, me.y
    nx = px + math.cos(me.heading) * me.speed
    ny = py + math.sin(me.heading) * me.speed
    if ctx.width > 0 and ctx.height > 0:
        nx, ny = wrap_position(nx, ny, ctx.width, ctx.height)

    # obstacles just block: stay put and lose momentum
    for ob in ctx.obstacles:
        if ob.contains(nx, ny, margin=me.radius):
            me.speed = 0.0
            return

    # wrapped or not, one step covers |speed|
    me.distance_traveled += abs(me.speed)
    me.x, me.y = nx, ny

def _apply_energy(me: Creature) -> None:
    me.energy -= me.stats.base_energy_cost + abs(me.speed) * me.stats.move_energy_cost

def _consume_food_if_reached(me: Creature, ctx: TickContext) -> None:
    for f in ctx.food:
        if f.consumed or not me.eats(f):
            continue
        if math.hypot(f.x - me.x, f.y - me.y) < me.radius + f.radius:
            me.energy = min(me.max_energy, me.energy + f.energy)
            me.food_eaten += 1
            me.fitness += f.energy
            f.consumed = True

def update_creature(me: Creature, ctx: TickContext) -> List[Creature]:
    """
    One tick of sense -> think -> act -> physics -> eat for a living creature.

    Returns the creatures killed by `me` this tick (at most one); the caller owns
    the follow-up (meat, logging).
    """
    if not me.alive:
        return []

    me.age += 1
    if me.attack_cooldown > 0:
        me.attack_cooldown -= 1

    seen = sense(me, ctx)
    outputs = think(me, seen)
    victim = act(me, outputs, seen)
    killed = [victim] if victim is not None else []
    if not me.alive:
        # boost burned the last of it
        return killed

    _apply_motion(me, ctx)
    _apply_energy(me)
    if not me.alive:
        return killed

    _consume_food_if_reached(me, ctx)
    me.fitness += BEHAV.survival_fitness
    return killed

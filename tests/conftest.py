import itertools

import pytest

from neuro_evo.sim.rng import RNG
from neuro_evo.sim.brain import NeuralNetwork
from neuro_evo.sim.models import Creature
from neuro_evo.sim.traits import Traits


@pytest.fixture(autouse=True)
def seeded():
    RNG.seed(1234)


@pytest.fixture
def make_creature():
    """Creature with a silent (all-zero) brain unless `brain` is given."""
    ids = itertools.count(1)

    def make(is_predator=False, traits=None, x=100.0, y=100.0, heading=0.0,
             energy=50.0, fitness=0.0, brain=None):
        if brain is None:
            brain = NeuralNetwork(randomize=False)
        c = Creature(id=next(ids), is_predator=is_predator, traits=traits or Traits(), brain=brain,
                     x=x, y=y, heading=heading, energy=energy, fitness=fitness)
        return c

    return make


@pytest.fixture
def factory():
    """GA factory: fresh creature with random weights for given species/traits."""
    ids = itertools.count(1000)

    def make(is_predator, traits):
        return Creature(id=next(ids), is_predator=is_predator, traits=traits, brain=NeuralNetwork(),
                        energy=50.0)

    return make

